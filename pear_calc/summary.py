"""
summary.py – Production-level roll-up and GHG scope split.

Scope assignment (operational control)
──────────────────────────────────────
 Scope  Source
 ─────────────────────────────────────────────────────────────────────
   1    Utilities heating (natural gas, fuel oil) + Fuel module
   2    Utilities electricity + EV charging
   3    Hotels + Commercial travel + Charter flights + Transport

Usage
──────
    from pear_calc.schemas import ProductionWorkbook
    from pear_calc.summary import calculate_production

    summary = calculate_production(ProductionWorkbook.model_validate(raw))
    print(summary.scopes.total_co2e)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pear_calc.calculators import CALCULATORS, EntryError, ModuleResults
from pear_calc.calculators.base import resolve_factors, to_wire
from pear_calc.constants import (
    ALL_MODULES,
    MODULE_CHARTER_FLIGHTS,
    MODULE_COMMERCIAL_TRAVEL,
    MODULE_DISPLAY_NAMES,
    MODULE_EV_CHARGING,
    MODULE_FUEL,
    MODULE_HOTELS,
    MODULE_TRANSPORT,
    MODULE_UTILITIES,
    SCOPE_DESCRIPTIONS,
)
from pear_calc.conversions import kg_to_metric_tons
from pear_calc.emission_factors import EmissionFactorTable
from pear_calc.pear_metrics import (
    DrinkingWaterTotals,
    WasteTotals,
    calculate_drinking_water_totals,
    calculate_waste_totals,
)
from pear_calc.schemas import ProductionWorkbook

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Result dataclasses
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ScopeBreakdown:
    """kg CO₂e per GHG scope."""
    scope1: float = 0.0
    scope2: float = 0.0
    scope3: float = 0.0

    @property
    def total_co2e(self) -> float:
        return self.scope1 + self.scope2 + self.scope3


@dataclass
class ModuleScopeRow:
    module_name: str
    scope1: float
    scope2: float
    scope3: float
    total: float


@dataclass(frozen=True)
class ScopeClassification:
    primary_scope: int
    description: str


@dataclass
class ProductionSummary:
    """Everything ``calculate_production`` returns."""
    production_name: str | None
    modules: dict[str, ModuleResults]
    scopes: ScopeBreakdown
    module_scopes: list[ModuleScopeRow] = field(default_factory=list)
    drinking_water: DrinkingWaterTotals | None = None
    waste: WasteTotals | None = None
    errors: dict[str, list[EntryError]] = field(default_factory=dict)

    @property
    def total_co2e(self) -> float:
        return self.scopes.total_co2e

    @property
    def total_metric_tons(self) -> float:
        return kg_to_metric_tons(self.total_co2e)

    @property
    def has_errors(self) -> bool:
        return any(self.errors.values())

    def to_dict(self) -> dict[str, Any]:
        scopes = to_wire(self.scopes)
        scopes["totalCO2e"] = self.scopes.total_co2e
        return {
            "productionName": self.production_name,
            "totalCO2e": self.total_co2e,
            "totalMetricTons": self.total_metric_tons,
            "scopes": scopes,
            "moduleScopes": [to_wire(row) for row in self.module_scopes],
            "modules": {name: res.to_dict() for name, res in self.modules.items()},
            "drinkingWater": to_wire(self.drinking_water),
            "waste": to_wire(self.waste),
            "errors": {name: [to_wire(e) for e in errs] for name, errs in self.errors.items()},
        }


# ─────────────────────────────────────────────────────────────────────────────
# Scope classification
# ─────────────────────────────────────────────────────────────────────────────

_MODULE_SCOPES: dict[str, ScopeClassification] = {
    MODULE_UTILITIES: ScopeClassification(
        1, "Electricity (Scope 2), Natural Gas & Fuel Oil (Scope 1)"
    ),
    MODULE_FUEL: ScopeClassification(
        1, "Scope 1: Direct fuel combustion in generators and production vehicles"
    ),
    MODULE_EV_CHARGING: ScopeClassification(
        2, "Scope 2: Grid electricity for vehicle charging"
    ),
    MODULE_HOTELS: ScopeClassification(
        3, "Scope 3: Crew accommodation (business travel)"
    ),
    MODULE_COMMERCIAL_TRAVEL: ScopeClassification(
        3, "Scope 3: Business travel (flights, crew-owned vehicles)"
    ),
    MODULE_CHARTER_FLIGHTS: ScopeClassification(
        3, "Scope 3: Charter services (when not operationally controlled)"
    ),
    MODULE_TRANSPORT: ScopeClassification(
        3, "Scope 3: Road, air and rail travel"
    ),
}

_DEFAULT_SCOPE = ScopeClassification(3, "Scope 3: Other indirect emissions")


def get_scope_description(scope: int) -> str:
    """Return the documentation text for GHG scope 1, 2 or 3."""
    if scope not in SCOPE_DESCRIPTIONS:
        raise ValueError(f"Unknown GHG scope: {scope!r}")
    return SCOPE_DESCRIPTIONS[scope]


def get_module_scope_classification(module: str) -> ScopeClassification:
    """Primary scope of a module; unknown modules are Scope 3."""
    return _MODULE_SCOPES.get(module, _DEFAULT_SCOPE)


def _scope_split(module: str, results: ModuleResults) -> tuple[float, float, float]:
    """Return ``(scope1, scope2, scope3)`` kg CO₂e for one module's results."""
    if results.totals is None:
        return 0.0, 0.0, 0.0
    if module == MODULE_UTILITIES:
        return results.totals.heat_co2e, results.totals.electricity_co2e, 0.0
    scope = get_module_scope_classification(module).primary_scope
    total = results.total_co2e
    return (
        total if scope == 1 else 0.0,
        total if scope == 2 else 0.0,
        total if scope == 3 else 0.0,
    )


def calculate_scope_breakdown(modules: dict[str, ModuleResults]) -> ScopeBreakdown:
    scopes = ScopeBreakdown()
    for module, results in modules.items():
        s1, s2, s3 = _scope_split(module, results)
        scopes.scope1 += s1
        scopes.scope2 += s2
        scopes.scope3 += s3
    return scopes


def get_module_scope_breakdowns(modules: dict[str, ModuleResults]) -> list[ModuleScopeRow]:
    """One row per module with emissions; modules totalling zero are omitted."""
    rows: list[ModuleScopeRow] = []
    for module, results in modules.items():
        total = results.total_co2e
        if total <= 0:
            continue
        s1, s2, s3 = _scope_split(module, results)
        rows.append(ModuleScopeRow(
            module_name=MODULE_DISPLAY_NAMES.get(module, module),
            scope1=s1,
            scope2=s2,
            scope3=s3,
            total=total,
        ))
    return rows


# ─────────────────────────────────────────────────────────────────────────────
# Production roll-up
# ─────────────────────────────────────────────────────────────────────────────

def calculate_production(
    workbook: ProductionWorkbook, factors: EmissionFactorTable | None = None
) -> ProductionSummary:
    """Run every module over *workbook* and split the total by GHG scope."""
    factors = resolve_factors(factors)

    modules: dict[str, ModuleResults] = {}
    for module in ALL_MODULES:
        modules[module] = CALCULATORS[module](getattr(workbook, module), factors)

    scopes = calculate_scope_breakdown(modules)
    summary = ProductionSummary(
        production_name=workbook.production_name,
        modules=modules,
        scopes=scopes,
        module_scopes=get_module_scope_breakdowns(modules),
        drinking_water=calculate_drinking_water_totals(workbook.drinking_water),
        waste=calculate_waste_totals(workbook.waste),
        errors={m: r.errors for m, r in modules.items() if r.errors},
    )

    logger.info(
        "Production %s | Scope 1: %.2f  Scope 2: %.2f  Scope 3: %.2f  Total: %.2f kg CO₂e",
        workbook.production_name or "(unnamed)",
        scopes.scope1, scopes.scope2, scopes.scope3, scopes.total_co2e,
    )
    return summary
