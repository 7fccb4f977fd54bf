"""
base.py – Shared result containers and the per-module reduce loop.

Every calculator module exposes the same two functions:

    calculate_entry(entry, factors=None) -> <Module>Result
    calculate_all(entries, factors=None) -> ModuleResults

``calculate_all`` is a thin wrapper around ``run_module`` below, which
recomputes every entry from scratch (no cached results), skips entries that
raise ``CalculationError`` (logged and recorded in ``errors``) and hands the
successful ``(entry, result)`` pairs to the module's aggregation function.
No data means ``totals is None``.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Generic, Sequence, TypeVar

from pydantic import BaseModel

from pear_calc.constants import MODULE_DISPLAY_NAMES, REGIONAL_LABEL_COUNTRIES
from pear_calc.emission_factors import EmissionFactorTable, get_factor_table
from pear_calc.exceptions import CalculationError

logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", bound=BaseModel)
ResultT = TypeVar("ResultT")
TotalsT = TypeVar("TotalsT")


# ─────────────────────────────────────────────────────────────────────────────
# Result containers
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CalculationMetadata:
    """Provenance echoed with every module result."""
    calculated_at: datetime
    emission_factors_version: str
    source: str


@dataclass(frozen=True)
class EntryError:
    """One entry that could not be calculated."""
    entry_id: str
    error_type: str
    error_code: str
    message: str

    @classmethod
    def from_exception(cls, entry_id: str, exc: CalculationError) -> "EntryError":
        return cls(
            entry_id=entry_id,
            error_type=type(exc).__name__,
            error_code=exc.error_code,
            message=exc.message,
        )


@dataclass
class ModuleResults(Generic[EntryT, ResultT, TotalsT]):
    """Everything one ``calculate_all`` call produces for a module."""
    module: str
    entries: list[EntryT]
    results: list[ResultT]
    totals: TotalsT | None
    metadata: CalculationMetadata
    errors: list[EntryError] = field(default_factory=list)

    @property
    def total_co2e(self) -> float:
        """Module total in kg CO₂e; 0.0 when there is no data."""
        if self.totals is None:
            return 0.0
        return self.totals.total_co2e  # type: ignore[attr-defined]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict[str, Any]:
        """camelCase, JSON-ready form; breakdown map keys are left verbatim."""
        return {
            "module": self.module,
            "entries": [e.model_dump(mode="json", by_alias=True) for e in self.entries],
            "results": [to_wire(r) for r in self.results],
            "totals": to_wire(self.totals),
            "metadata": to_wire(self.metadata),
            "errors": [to_wire(e) for e in self.errors],
        }


# ─────────────────────────────────────────────────────────────────────────────
# Serialisation helpers
# ─────────────────────────────────────────────────────────────────────────────

def wire_key(name: str) -> str:
    """``total_co2e`` → ``totalCO2e``, ``electricity_kwh`` → ``electricityKWh``."""
    head, *rest = name.split("_")
    key = head + "".join(part[:1].upper() + part[1:] for part in rest)
    return key.replace("Co2e", "CO2e").replace("Kwh", "KWh")


def to_wire(value: Any) -> Any:
    """Recursively turn result dataclasses into camelCase JSON-ready dicts."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            wire_key(f.name): to_wire(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, dict):
        return {k: to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


# ─────────────────────────────────────────────────────────────────────────────
# Aggregation helpers
# ─────────────────────────────────────────────────────────────────────────────

def add_to(breakdown: dict[str, float], key: str, amount: float) -> None:
    """Accumulate *amount* into ``breakdown[key]``."""
    breakdown[key] = breakdown.get(key, 0.0) + amount


def region_label(country: str, state_province: str | None) -> str:
    """``"United States - CA"`` for US/Canada entries with a state, else the country."""
    if state_province and country in REGIONAL_LABEL_COUNTRIES:
        return f"{country} - {state_province}"
    return country


def resolve_factors(factors: EmissionFactorTable | None) -> EmissionFactorTable:
    return factors if factors is not None else get_factor_table()


def build_metadata(source: str, factors: EmissionFactorTable) -> CalculationMetadata:
    return CalculationMetadata(
        calculated_at=datetime.now(timezone.utc),
        emission_factors_version=factors.version,
        source=source,
    )


def run_module(
    module: str,
    entries: Sequence[EntryT],
    calculate_entry: Callable[[EntryT, EmissionFactorTable], ResultT],
    aggregate: Callable[[list[tuple[EntryT, ResultT]]], TotalsT],
    factors: EmissionFactorTable,
    source: str,
) -> ModuleResults[EntryT, ResultT, TotalsT]:
    """
    Calculate every entry of one module and aggregate the survivors.

    A ``CalculationError`` on one entry is logged at ERROR and recorded in
    ``errors``; the remaining entries still calculate.  Any other exception
    propagates.
    """
    pairs: list[tuple[EntryT, ResultT]] = []
    errors: list[EntryError] = []
    label = MODULE_DISPLAY_NAMES.get(module, module)

    for entry in entries:
        try:
            result = calculate_entry(entry, factors)
        except CalculationError as exc:
            if exc.entry_id is None:
                exc.entry_id = entry.id
            logger.error("%s id=%s skipped: %s", label, entry.id, exc)
            errors.append(EntryError.from_exception(entry.id, exc))
            continue
        pairs.append((entry, result))

    totals = aggregate(pairs) if pairs else None
    if totals is not None:
        logger.debug(
            "%s | %d entries, %d skipped, total %.2f kg CO₂e",
            label, len(pairs), len(errors), totals.total_co2e,  # type: ignore[attr-defined]
        )

    return ModuleResults(
        module=module,
        entries=list(entries),
        results=[result for _, result in pairs],
        totals=totals,
        metadata=build_metadata(source, factors),
        errors=errors,
    )
