"""
fuel.py – Equipment and vehicle fuel combustion (Scope 1).

Gallons are derived by the selected calculation method, then multiplied by
the fuel's per-gallon factor:

 amount   fuel amount + unit → gallons (fuel-aware ratios)
 mileage  miles ÷ MPG for the equipment type (20 MPG when not listed)
 cost     total cost ÷ average price per gallon (price must be > 0)

Natural gas entered by amount is the exception: its factor is per cubic
foot, so cubic feet / ccf / cubic meters are multiplied directly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from pear_calc.calculators.base import ModuleResults, add_to, resolve_factors, run_module
from pear_calc.constants import (
    EQUIPMENT_CATEGORY_EQUIPMENT,
    EQUIPMENT_CATEGORY_VEHICLE,
    FUEL_METHOD_AMOUNT,
    FUEL_METHOD_COST,
    FUEL_METHOD_MILEAGE,
    MODULE_FUEL,
    NATURAL_GAS_FUEL_TYPE,
)
from pear_calc.conversions import fuel_to_gallons, normalise_unit
from pear_calc.emission_factors import (
    EmissionFactor,
    EmissionFactorTable,
    get_equipment_category,
    get_equipment_mpg,
    get_fuel_factor,
)
from pear_calc.exceptions import InvalidDivisor, MissingRequiredField, UnknownFuelType
from pear_calc.schemas import FuelEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FuelResult:
    entry_id: str
    co2e: float
    fuel_gallons: float
    emission_factor: float
    emission_factor_unit: str
    equipment_category: str
    calculation_method: str


@dataclass
class FuelTotals:
    total_co2e: float
    total_fuel_gallons: float
    by_equipment_category: dict[str, float] = field(default_factory=dict)
    by_fuel_type: dict[str, float] = field(default_factory=dict)

    @property
    def total_quantity(self) -> float:
        return self.total_fuel_gallons


# ─────────────────────────────────────────────────────────────────────────────
# Gallon derivation per method
# ─────────────────────────────────────────────────────────────────────────────

def gallons_from_amount(entry: FuelEntry, factors: EmissionFactorTable) -> tuple[float, str]:
    if entry.fuel_amount is None or not entry.fuel_unit:
        raise MissingRequiredField(
            "fuelAmount",
            "Fuel amount and unit are required for the amount method",
            entry_id=entry.id,
        )
    gallons = fuel_to_gallons(entry.fuel_amount, entry.fuel_unit, entry.fuel_type, factors)
    return gallons, f"Direct amount: {entry.fuel_amount:g} {entry.fuel_unit}"


def gallons_from_mileage(entry: FuelEntry, factors: EmissionFactorTable) -> tuple[float, str]:
    if entry.miles_driven is None:
        raise MissingRequiredField(
            "milesDriven", "Miles driven is required for the mileage method", entry_id=entry.id
        )
    mpg = get_equipment_mpg(entry.equipment_type, factors)
    if entry.equipment_type not in factors.vehicle_fuel_efficiency:
        logger.debug("Fuel id=%s | no MPG for %r, using %g", entry.id, entry.equipment_type, mpg)
    return entry.miles_driven / mpg, f"Mileage: {entry.miles_driven:g} miles @ {mpg:g} MPG"


def gallons_from_cost(entry: FuelEntry, factors: EmissionFactorTable) -> tuple[float, str]:
    if entry.total_cost is None:
        raise MissingRequiredField(
            "totalCost", "Total cost is required for the cost method", entry_id=entry.id
        )
    price = entry.average_price_per_gallon
    if price is None:
        raise MissingRequiredField(
            "averagePricePerGallon",
            "Average price per gallon is required for the cost method",
            entry_id=entry.id,
        )
    if price <= 0:
        raise InvalidDivisor(
            "Average price per gallon must be greater than 0",
            entry_id=entry.id,
            context={"average_price_per_gallon": price},
        )
    return entry.total_cost / price, f"Cost: ${entry.total_cost:g} @ ${price:g}/gal"


_GALLON_METHODS = {
    FUEL_METHOD_AMOUNT: gallons_from_amount,
    FUEL_METHOD_MILEAGE: gallons_from_mileage,
    FUEL_METHOD_COST: gallons_from_cost,
}


def _natural_gas_co2e(
    entry: FuelEntry, gallons: float, factor: EmissionFactor, factors: EmissionFactorTable
) -> float:
    """Natural gas by amount: apply the per-cubic-foot factor to volume directly."""
    unit = normalise_unit(entry.fuel_unit)
    amount = entry.fuel_amount or 0.0
    cf = factors.conversion_factors
    if unit == "cubic_feet":
        return amount * factor.value
    if unit == "ccf":
        return amount * cf["CCF_TO_CUBIC_FEET"] * factor.value
    if unit == "cubic_meters":
        return amount * cf["CUBIC_METERS_TO_CUBIC_FEET"] * factor.value
    return gallons * factor.value


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def calculate_entry(entry: FuelEntry, factors: EmissionFactorTable | None = None) -> FuelResult:
    factors = resolve_factors(factors)
    factor = get_fuel_factor(entry.fuel_type, factors)
    if factor is None:
        raise UnknownFuelType(
            f"No emission factor found for fuel type: {entry.fuel_type}",
            entry_id=entry.id,
            context={"fuel_type": entry.fuel_type, "known": sorted(factors.fuel)},
        )

    gallons, method = _GALLON_METHODS[entry.calculation_method](entry, factors)

    if entry.fuel_type == NATURAL_GAS_FUEL_TYPE and entry.calculation_method == FUEL_METHOD_AMOUNT:
        co2e = _natural_gas_co2e(entry, gallons, factor, factors)
    else:
        co2e = gallons * factor.value

    logger.debug(
        "Fuel id=%s | %s %.2f gal × %.4f = %.2f kg CO₂e",
        entry.id, entry.fuel_type, gallons, factor.value, co2e,
    )
    return FuelResult(
        entry_id=entry.id,
        co2e=co2e,
        fuel_gallons=gallons,
        emission_factor=factor.value,
        emission_factor_unit=factor.unit,
        equipment_category=get_equipment_category(entry.equipment_type, factors),
        calculation_method=method,
    )


def aggregate(pairs: list[tuple[FuelEntry, FuelResult]]) -> FuelTotals:
    by_category = {EQUIPMENT_CATEGORY_VEHICLE: 0.0, EQUIPMENT_CATEGORY_EQUIPMENT: 0.0}
    by_fuel: dict[str, float] = {}
    for entry, result in pairs:
        add_to(by_category, result.equipment_category, result.co2e)
        add_to(by_fuel, entry.fuel_type, result.co2e)

    return FuelTotals(
        total_co2e=sum(r.co2e for _, r in pairs),
        total_fuel_gallons=sum(r.fuel_gallons for _, r in pairs),
        by_equipment_category=by_category,
        by_fuel_type=by_fuel,
    )


def calculate_all(
    entries: Sequence[FuelEntry], factors: EmissionFactorTable | None = None
) -> ModuleResults:
    factors = resolve_factors(factors)
    return run_module(MODULE_FUEL, entries, calculate_entry, aggregate, factors, factors.source)
