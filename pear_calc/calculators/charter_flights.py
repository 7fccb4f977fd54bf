"""
charter_flights.py – Chartered jets and helicopters (Scope 3).

Fuel gallons come from the selected method, using the aircraft profile:

 fuel      direct amount (liters → gallons)
 hours     hours × gallons per hour
 distance  miles ÷ miles per gallon

then CO₂e = gallons × the aircraft's per-gallon factor.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from pear_calc.calculators.base import ModuleResults, add_to, resolve_factors, run_module
from pear_calc.constants import (
    CHARTER_METHOD_FUEL,
    CHARTER_METHOD_HOURS,
    MODULE_CHARTER_FLIGHTS,
)
from pear_calc.conversions import to_gallons, to_miles
from pear_calc.emission_factors import AircraftData, EmissionFactorTable, get_aircraft_data
from pear_calc.exceptions import MissingRequiredField
from pear_calc.schemas import CharterFlightsEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CharterFlightsResult:
    entry_id: str
    co2e: float
    fuel_used_gallons: float
    emission_factor: float
    calculation_method: str
    aircraft_type: str
    distance_miles: float | None = None


@dataclass
class CharterFlightsTotals:
    total_co2e: float
    total_fuel_gallons: float
    total_hours_flown: float
    total_distance_flown: float
    by_aircraft_type: dict[str, float] = field(default_factory=dict)
    by_calculation_method: dict[str, float] = field(default_factory=dict)

    @property
    def total_quantity(self) -> float:
        return self.total_fuel_gallons


def fuel_gallons(
    entry: CharterFlightsEntry, aircraft: AircraftData, factors: EmissionFactorTable
) -> float:
    """Fuel burned in gallons for the entry's calculation method."""
    if entry.calculation_method == CHARTER_METHOD_FUEL:
        if not entry.fuel_amount or not entry.fuel_unit:
            raise MissingRequiredField(
                "fuelAmount",
                "Fuel amount and unit required for fuel calculation method",
                entry_id=entry.id,
            )
        return to_gallons(entry.fuel_amount, entry.fuel_unit, factors)

    if entry.calculation_method == CHARTER_METHOD_HOURS:
        if not entry.hours_flown:
            raise MissingRequiredField(
                "hoursFlown",
                "Hours flown required for hours calculation method",
                entry_id=entry.id,
            )
        return entry.hours_flown * aircraft.gallons_per_hour

    if not entry.distance_flown or not entry.distance_unit:
        raise MissingRequiredField(
            "distanceFlown",
            "Distance and unit required for distance calculation method",
            entry_id=entry.id,
        )
    return to_miles(entry.distance_flown, entry.distance_unit, factors) / aircraft.miles_per_gallon


def _describe(entry: CharterFlightsEntry, aircraft: AircraftData, gallons: float) -> str:
    if entry.calculation_method == CHARTER_METHOD_FUEL:
        return f"Fuel used: {entry.fuel_amount:g} {entry.fuel_unit} = {gallons:.2f} gal"
    if entry.calculation_method == CHARTER_METHOD_HOURS:
        return f"Hours flown: {entry.hours_flown:g} h × {aircraft.gallons_per_hour:g} gal/h"
    return (
        f"Distance flown: {entry.distance_flown:g} {entry.distance_unit} "
        f"÷ {aircraft.miles_per_gallon:g} mpg"
    )


def calculate_entry(
    entry: CharterFlightsEntry, factors: EmissionFactorTable | None = None
) -> CharterFlightsResult:
    factors = resolve_factors(factors)
    aircraft = get_aircraft_data(entry.aircraft_type, factors)
    gallons = fuel_gallons(entry, aircraft, factors)
    co2e = gallons * aircraft.emission_factor_per_gallon
    logger.debug(
        "Charter id=%s | %s %.1f gal × %.3f = %.2f kg CO₂e",
        entry.id, entry.aircraft_type, gallons, aircraft.emission_factor_per_gallon, co2e,
    )
    # Distance is recorded whenever given, whatever the method.
    distance_miles = None
    if entry.distance_flown and entry.distance_unit:
        distance_miles = to_miles(entry.distance_flown, entry.distance_unit, factors)
    return CharterFlightsResult(
        entry_id=entry.id,
        co2e=co2e,
        fuel_used_gallons=gallons,
        emission_factor=aircraft.emission_factor_per_gallon,
        calculation_method=_describe(entry, aircraft, gallons),
        aircraft_type=entry.aircraft_type,
        distance_miles=distance_miles,
    )


def aggregate(
    pairs: list[tuple[CharterFlightsEntry, CharterFlightsResult]],
) -> CharterFlightsTotals:
    by_aircraft: dict[str, float] = {}
    by_method: dict[str, float] = {}
    hours = 0.0
    distance = 0.0
    for entry, result in pairs:
        add_to(by_aircraft, entry.aircraft_type, result.co2e)
        add_to(by_method, entry.calculation_method, result.co2e)
        if entry.hours_flown:
            hours += entry.hours_flown
        if result.distance_miles is not None:
            distance += result.distance_miles

    return CharterFlightsTotals(
        total_co2e=sum(r.co2e for _, r in pairs),
        total_fuel_gallons=sum(r.fuel_used_gallons for _, r in pairs),
        total_hours_flown=hours,
        total_distance_flown=distance,
        by_aircraft_type=by_aircraft,
        by_calculation_method=by_method,
    )


def calculate_all(
    entries: Sequence[CharterFlightsEntry], factors: EmissionFactorTable | None = None
) -> ModuleResults:
    factors = resolve_factors(factors)
    return run_module(
        MODULE_CHARTER_FLIGHTS, entries, calculate_entry, aggregate, factors, factors.source,
    )
