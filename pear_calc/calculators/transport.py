"""
transport.py – Road, air and rail transport emissions.

 Mode   Formula
 ──────────────────────────────────────────────────────────────────────────
 road   fuel_gallons × road_fuel_factor
        (fuel_gallons = direct consumption, else miles ÷ 25 MPG)
 air    miles (×2 if return) × passengers × class_factor
        (class: short < 288 ≤ medium < 688 ≤ long)
 rail   miles × passengers × rail_type_factor
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence, Union

from pear_calc.calculators.base import (
    ModuleResults,
    add_to,
    resolve_factors,
    run_module,
)
from pear_calc.constants import (
    MODE_AIR,
    MODE_RAIL,
    MODE_ROAD,
    MODULE_TRANSPORT,
    ROAD_AVERAGE_MPG,
)
from pear_calc.conversions import to_gallons, to_miles
from pear_calc.emission_factors import (
    EmissionFactorTable,
    get_flight_distance_class,
    get_rail_factor,
    get_road_fuel_factor,
)
from pear_calc.exceptions import MissingRequiredField, UnknownFuelType, UnknownTransportType
from pear_calc.schemas import AirTravelEntry, RailTravelEntry, RoadVehicleEntry

logger = logging.getLogger(__name__)

AnyTransportEntry = Union[RoadVehicleEntry, AirTravelEntry, RailTravelEntry]


@dataclass(frozen=True)
class TransportResult:
    entry_id: str
    mode: str
    co2e: float
    emission_factor: float
    emission_factor_unit: str
    calculation_method: str
    distance_miles: float | None = None
    fuel_gallons: float | None = None
    passenger_miles: float | None = None
    flight_class: str | None = None


@dataclass
class TransportTotals:
    total_co2e: float
    total_distance_miles: float
    total_fuel_gallons: float
    by_mode: dict[str, float] = field(default_factory=dict)
    by_type: dict[str, float] = field(default_factory=dict)

    @property
    def total_quantity(self) -> float:
        return self.total_distance_miles


# ─────────────────────────────────────────────────────────────────────────────
# Per-mode calculators
# ─────────────────────────────────────────────────────────────────────────────

def calculate_road_vehicle(
    entry: RoadVehicleEntry, factors: EmissionFactorTable | None = None
) -> TransportResult:
    """Direct fuel consumption when given (> 0), else distance at 25 MPG."""
    factors = resolve_factors(factors)
    factor = get_road_fuel_factor(entry.fuel_type, factors)
    if factor is None:
        raise UnknownFuelType(
            f"Unknown fuel type: {entry.fuel_type}",
            entry_id=entry.id,
            context={"fuel_type": entry.fuel_type, "known": sorted(factors.road_fuel)},
        )

    distance_miles = (
        to_miles(entry.distance, entry.distance_unit, factors)
        if entry.distance is not None else None
    )

    if entry.fuel_consumption and entry.fuel_consumption > 0:
        fuel_gallons = to_gallons(entry.fuel_consumption, entry.fuel_unit, factors)
        method = (
            f"Fuel consumption method: {entry.fuel_consumption:g} {entry.fuel_unit} "
            f"({fuel_gallons:.2f} gallons) × {factor.value:g} kg CO₂e/gallon"
        )
    else:
        if not distance_miles:
            raise MissingRequiredField(
                "distance",
                "Distance or fuel consumption is required for road vehicles",
                entry_id=entry.id,
            )
        fuel_gallons = distance_miles / ROAD_AVERAGE_MPG
        method = (
            f"Distance method: {entry.distance:g} {entry.distance_unit} "
            f"({distance_miles:.1f} miles) ÷ {ROAD_AVERAGE_MPG} MPG "
            f"× {factor.value:g} kg CO₂e/gallon"
        )

    co2e = fuel_gallons * factor.value
    logger.debug(
        "Road id=%s | %.2f gal × %.4f = %.2f kg CO₂e",
        entry.id, fuel_gallons, factor.value, co2e,
    )
    return TransportResult(
        entry_id=entry.id,
        mode=MODE_ROAD,
        co2e=co2e,
        emission_factor=factor.value,
        emission_factor_unit=factor.unit,
        calculation_method=method,
        distance_miles=distance_miles,
        fuel_gallons=fuel_gallons,
    )


def calculate_air_travel(
    entry: AirTravelEntry, factors: EmissionFactorTable | None = None
) -> TransportResult:
    factors = resolve_factors(factors)
    if not entry.distance or entry.distance <= 0:
        raise MissingRequiredField(
            "distance", "Distance is required for air travel calculations", entry_id=entry.id
        )

    distance_miles = to_miles(entry.distance, entry.distance_unit, factors)
    if entry.return_trip:
        distance_miles *= 2

    flight_class = get_flight_distance_class(distance_miles)
    factor = factors.air[flight_class]
    passenger_miles = distance_miles * entry.passengers
    co2e = passenger_miles * factor.value

    trip = " × 2 (return)" if entry.return_trip else ""
    method = (
        f"{entry.distance:g} {entry.distance_unit}{trip} × {entry.passengers} passengers "
        f"× {factor.value:g} kg CO₂e/pass-mile ({flight_class} flight)"
    )
    logger.debug(
        "Air id=%s | %.1f pass-mi × %.4f (%s) = %.2f kg CO₂e",
        entry.id, passenger_miles, factor.value, flight_class, co2e,
    )
    return TransportResult(
        entry_id=entry.id,
        mode=MODE_AIR,
        co2e=co2e,
        emission_factor=factor.value,
        emission_factor_unit=factor.unit,
        calculation_method=method,
        distance_miles=distance_miles,
        passenger_miles=passenger_miles,
        flight_class=flight_class,
    )


def calculate_rail_travel(
    entry: RailTravelEntry, factors: EmissionFactorTable | None = None
) -> TransportResult:
    factors = resolve_factors(factors)
    factor = get_rail_factor(entry.rail_type, factors)
    if factor is None:
        raise UnknownTransportType(
            f"Unknown rail type: {entry.rail_type}",
            entry_id=entry.id,
            context={"rail_type": entry.rail_type, "known": sorted(factors.rail)},
        )
    if entry.distance is None:
        raise MissingRequiredField(
            "distance", "Distance is required for rail travel calculations", entry_id=entry.id
        )

    distance_miles = to_miles(entry.distance, entry.distance_unit, factors)
    passenger_miles = distance_miles * entry.passengers
    co2e = passenger_miles * factor.value
    logger.debug(
        "Rail id=%s | %.1f pass-mi × %.4f = %.2f kg CO₂e",
        entry.id, passenger_miles, factor.value, co2e,
    )
    return TransportResult(
        entry_id=entry.id,
        mode=MODE_RAIL,
        co2e=co2e,
        emission_factor=factor.value,
        emission_factor_unit=factor.unit,
        calculation_method=(
            f"{entry.distance:g} {entry.distance_unit} × {entry.passengers} passengers "
            f"× {factor.value:g} kg CO₂e/pass-mile"
        ),
        distance_miles=distance_miles,
        passenger_miles=passenger_miles,
    )


_MODE_CALCULATORS = {
    MODE_ROAD: calculate_road_vehicle,
    MODE_AIR: calculate_air_travel,
    MODE_RAIL: calculate_rail_travel,
}


def calculate_entry(
    entry: AnyTransportEntry, factors: EmissionFactorTable | None = None
) -> TransportResult:
    """Dispatch on ``entry.mode``."""
    return _MODE_CALCULATORS[entry.mode](entry, factors)  # type: ignore[arg-type]


# ─────────────────────────────────────────────────────────────────────────────
# Aggregation
# ─────────────────────────────────────────────────────────────────────────────

def _type_key(entry: AnyTransportEntry, result: TransportResult) -> str:
    if isinstance(entry, RoadVehicleEntry):
        return f"{entry.vehicle_type}-{entry.fuel_type}"
    if isinstance(entry, AirTravelEntry):
        return entry.flight_type or result.flight_class or ""
    return entry.rail_type


def aggregate(pairs: list[tuple[AnyTransportEntry, TransportResult]]) -> TransportTotals:
    by_mode = {MODE_ROAD: 0.0, MODE_AIR: 0.0, MODE_RAIL: 0.0}
    by_type: dict[str, float] = {}
    for entry, result in pairs:
        by_mode[result.mode] += result.co2e
        add_to(by_type, _type_key(entry, result), result.co2e)

    return TransportTotals(
        total_co2e=sum(r.co2e for _, r in pairs),
        total_distance_miles=sum(r.distance_miles or 0.0 for _, r in pairs),
        total_fuel_gallons=sum(r.fuel_gallons or 0.0 for _, r in pairs),
        by_mode=by_mode,
        by_type=by_type,
    )


def calculate_all(
    entries: Sequence[AnyTransportEntry], factors: EmissionFactorTable | None = None
) -> ModuleResults:
    factors = resolve_factors(factors)
    return run_module(
        MODULE_TRANSPORT, entries, calculate_entry, aggregate, factors, factors.source
    )
