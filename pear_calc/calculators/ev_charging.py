"""
ev_charging.py – Electricity drawn at EV charging stations (Scope 2).

Formula: kWh × country grid factor.  Unknown countries use the United
States factor; state/province only labels the region.  Miles driven is
tracked but never affects emissions.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from pear_calc.calculators.base import (
    ModuleResults,
    add_to,
    region_label,
    resolve_factors,
    run_module,
)
from pear_calc.constants import MODULE_EV_CHARGING
from pear_calc.emission_factors import EmissionFactorTable, get_electricity_factor
from pear_calc.schemas import EVChargingEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EVChargingResult:
    entry_id: str
    co2e: float
    electricity_kwh: float
    emission_factor: float
    region: str
    calculation_method: str


@dataclass
class EVChargingTotals:
    total_co2e: float
    total_electricity_kwh: float
    total_miles_driven: float
    by_country: dict[str, float] = field(default_factory=dict)

    @property
    def total_quantity(self) -> float:
        return self.total_electricity_kwh


def calculate_entry(
    entry: EVChargingEntry, factors: EmissionFactorTable | None = None
) -> EVChargingResult:
    factors = resolve_factors(factors)
    factor = get_electricity_factor(entry.country, factors)
    co2e = entry.electricity_usage_kwh * factor.value
    logger.debug(
        "EV charging id=%s | %.2f kWh × %.4f = %.2f kg CO₂e",
        entry.id, entry.electricity_usage_kwh, factor.value, co2e,
    )
    return EVChargingResult(
        entry_id=entry.id,
        co2e=co2e,
        electricity_kwh=entry.electricity_usage_kwh,
        emission_factor=factor.value,
        region=region_label(entry.country, entry.state_province),
        calculation_method=f"{entry.electricity_usage_kwh:g} kWh × {factor.value:g} kg CO₂e/kWh",
    )


def aggregate(pairs: list[tuple[EVChargingEntry, EVChargingResult]]) -> EVChargingTotals:
    by_country: dict[str, float] = {}
    for entry, result in pairs:
        add_to(by_country, entry.country, result.co2e)

    return EVChargingTotals(
        total_co2e=sum(r.co2e for _, r in pairs),
        total_electricity_kwh=sum(r.electricity_kwh for _, r in pairs),
        total_miles_driven=sum(e.miles_driven or 0.0 for e, _ in pairs),
        by_country=by_country,
    )


def calculate_all(
    entries: Sequence[EVChargingEntry], factors: EmissionFactorTable | None = None
) -> ModuleResults:
    factors = resolve_factors(factors)
    return run_module(
        MODULE_EV_CHARGING, entries, calculate_entry, aggregate, factors,
        factors.electricity_source,
    )
