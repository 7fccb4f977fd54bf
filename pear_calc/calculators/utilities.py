"""
utilities.py – Facility electricity (Scope 2) and heating (Scope 1).

Electricity  kWh × grid factor (United States)
             kWh = metered usage, or CBECS kWh/ft² × ft² × days/365
Heating      natural gas: ft³ → m³ × natural-gas factor (kg CO₂e/m³)
             fuel oil:    gal → L  × fuel-oil factor    (kg CO₂e/L)
             heat fuel "None" or "Inc. in Elec." contributes nothing, the
             latter because its load is already in the electricity figure.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from pear_calc.calculators.base import ModuleResults, add_to, resolve_factors, run_module
from pear_calc.constants import (
    DAYS_PER_YEAR,
    HEAT_FUEL_FUEL_OIL,
    HEAT_FUEL_INCLUDED,
    HEAT_FUEL_NATURAL_GAS,
    HEAT_FUEL_NONE,
    METHOD_AREA,
    METHOD_NONE,
    METHOD_USAGE,
    MODULE_UTILITIES,
    UTILITIES_ELECTRICITY_COUNTRY,
)
from pear_calc.conversions import fuel_oil_to_gallons, natural_gas_to_cubic_feet, to_square_feet
from pear_calc.emission_factors import (
    BuildingIntensity,
    EmissionFactorTable,
    get_building_intensity,
    get_electricity_factor,
)
from pear_calc.exceptions import MissingRequiredField
from pear_calc.schemas import UtilitiesEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UtilitiesResult:
    entry_id: str
    co2e: float
    electricity_emissions: float
    heat_emissions: float
    electricity_kwh: float
    natural_gas_cubic_feet: float
    fuel_oil_gallons: float
    heat_fuel_converted: float | None
    electricity_emission_factor: float
    heat_emission_factor: float | None
    calculation_method: str


@dataclass
class UtilitiesTotals:
    total_co2e: float
    electricity_co2e: float
    heat_co2e: float
    total_electricity_kwh: float
    by_building_type: dict[str, float] = field(default_factory=dict)
    by_heat_fuel: dict[str, float] = field(default_factory=dict)

    @property
    def total_quantity(self) -> float:
        return self.total_electricity_kwh


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _occupied_square_feet(entry: UtilitiesEntry, factors: EmissionFactorTable) -> float:
    """Floor area in ft² scaled by the fraction of the year occupied."""
    if entry.area is None:
        raise MissingRequiredField(
            "area", "Area is required for area-based estimates", entry_id=entry.id
        )
    days = entry.days_occupied or DAYS_PER_YEAR
    return to_square_feet(entry.area, entry.area_unit, factors) * (days / DAYS_PER_YEAR)


def _intensity(entry: UtilitiesEntry, factors: EmissionFactorTable) -> BuildingIntensity | None:
    intensity = get_building_intensity(entry.building_type, factors)
    if intensity is None:
        logger.warning(
            "Utilities id=%s | no intensity data for building type %r; area estimate is 0",
            entry.id, entry.building_type,
        )
    return intensity


def _electricity_kwh(entry: UtilitiesEntry, factors: EmissionFactorTable) -> float:
    if entry.electricity_method == METHOD_USAGE:
        if entry.electricity_usage is None:
            raise MissingRequiredField(
                "electricityUsage", "Electricity usage (kWh) is required", entry_id=entry.id
            )
        return entry.electricity_usage

    if entry.electricity_method == METHOD_AREA:
        sq_ft = _occupied_square_feet(entry, factors)
        intensity = _intensity(entry, factors)
        if intensity is None:
            return 0.0
        return intensity.electricity_kwh_per_sqft * sq_ft

    return 0.0


def _heating_usage(entry: UtilitiesEntry, factors: EmissionFactorTable) -> tuple[float, float]:
    """Return ``(natural_gas_cubic_feet, fuel_oil_gallons)`` for the selected heat fuel."""
    if entry.heat_fuel not in (HEAT_FUEL_NATURAL_GAS, HEAT_FUEL_FUEL_OIL):
        return 0.0, 0.0
    if entry.heat_method == METHOD_NONE:
        return 0.0, 0.0

    is_gas = entry.heat_fuel == HEAT_FUEL_NATURAL_GAS

    if entry.heat_method == METHOD_USAGE:
        if is_gas:
            if entry.natural_gas_usage is None:
                raise MissingRequiredField(
                    "naturalGasUsage", "Natural gas usage is required", entry_id=entry.id
                )
            return natural_gas_to_cubic_feet(
                entry.natural_gas_usage, entry.natural_gas_unit, factors
            ), 0.0
        if entry.fuel_oil_usage is None:
            raise MissingRequiredField(
                "fuelOilUsage", "Fuel oil usage is required", entry_id=entry.id
            )
        return 0.0, fuel_oil_to_gallons(entry.fuel_oil_usage, entry.fuel_oil_unit, factors)

    # area
    sq_ft = _occupied_square_feet(entry, factors)
    intensity = _intensity(entry, factors)
    if intensity is None:
        return 0.0, 0.0
    if is_gas:
        return intensity.natural_gas_cf_per_sqft * sq_ft, 0.0
    return 0.0, intensity.fuel_oil_gallons_per_sqft * sq_ft


def _describe(entry: UtilitiesEntry) -> str:
    if entry.electricity_method == METHOD_USAGE:
        electricity = "Electricity: Direct usage"
    elif entry.electricity_method == METHOD_AREA:
        electricity = f"Electricity: Area-based ({entry.building_type})"
    else:
        electricity = "Electricity: None"

    if entry.heat_fuel == HEAT_FUEL_INCLUDED:
        heating = "Heating: Included in electricity"
    elif entry.heat_fuel == HEAT_FUEL_NONE or entry.heat_method == METHOD_NONE:
        heating = "Heating: None"
    elif entry.heat_method == METHOD_USAGE:
        heating = f"Heating: Direct usage ({entry.heat_fuel})"
    else:
        heating = f"Heating: Area-based ({entry.building_type}, {entry.heat_fuel})"

    return f"{electricity} | {heating}"


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def calculate_entry(
    entry: UtilitiesEntry, factors: EmissionFactorTable | None = None
) -> UtilitiesResult:
    factors = resolve_factors(factors)
    cf = factors.conversion_factors

    electricity_kwh = _electricity_kwh(entry, factors)
    # Pinned to the United States grid regardless of the entry's country.
    elec_factor = get_electricity_factor(UTILITIES_ELECTRICITY_COUNTRY, factors)
    electricity_emissions = electricity_kwh * elec_factor.value

    gas_cf, oil_gal = _heating_usage(entry, factors)
    heat_emissions = 0.0
    heat_converted = 0.0
    heat_factor: float | None = None
    if entry.heat_fuel == HEAT_FUEL_NATURAL_GAS:
        cubic_meters = gas_cf * cf["CUBIC_FEET_TO_CUBIC_METERS"]
        heat_factor = factors.natural_gas.value
        heat_emissions = cubic_meters * heat_factor
        heat_converted = gas_cf
    elif entry.heat_fuel == HEAT_FUEL_FUEL_OIL:
        liters = oil_gal * cf["GALLONS_TO_LITERS_OIL"]
        heat_factor = factors.fuel_oil.value
        heat_emissions = liters * heat_factor
        heat_converted = oil_gal

    co2e = electricity_emissions + heat_emissions
    logger.debug(
        "Utilities id=%s | %.1f kWh × %.4f + heat %.2f = %.2f kg CO₂e",
        entry.id, electricity_kwh, elec_factor.value, heat_emissions, co2e,
    )
    return UtilitiesResult(
        entry_id=entry.id,
        co2e=co2e,
        electricity_emissions=electricity_emissions,
        heat_emissions=heat_emissions,
        electricity_kwh=electricity_kwh,
        natural_gas_cubic_feet=gas_cf,
        fuel_oil_gallons=oil_gal,
        heat_fuel_converted=heat_converted if heat_converted > 0 else None,
        electricity_emission_factor=elec_factor.value,
        heat_emission_factor=heat_factor,
        calculation_method=_describe(entry),
    )


def aggregate(pairs: list[tuple[UtilitiesEntry, UtilitiesResult]]) -> UtilitiesTotals:
    by_building: dict[str, float] = {}
    by_heat_fuel: dict[str, float] = {}
    for entry, result in pairs:
        add_to(by_building, entry.building_type, result.co2e)
        if result.heat_emissions:
            add_to(by_heat_fuel, entry.heat_fuel, result.heat_emissions)

    return UtilitiesTotals(
        total_co2e=sum(r.co2e for _, r in pairs),
        electricity_co2e=sum(r.electricity_emissions for _, r in pairs),
        heat_co2e=sum(r.heat_emissions for _, r in pairs),
        total_electricity_kwh=sum(r.electricity_kwh for _, r in pairs),
        by_building_type=by_building,
        by_heat_fuel=by_heat_fuel,
    )


def calculate_all(
    entries: Sequence[UtilitiesEntry], factors: EmissionFactorTable | None = None
) -> ModuleResults:
    factors = resolve_factors(factors)
    return run_module(
        MODULE_UTILITIES, entries, calculate_entry, aggregate, factors, factors.source
    )
