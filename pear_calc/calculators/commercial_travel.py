"""
commercial_travel.py – Commercial flights, rail and ferry (Scope 3).

Formula: passenger-miles × factor.  Flights pick the short / medium / long
factor by distance (short < 287.7 ≤ medium ≤ 688.5 < long); other transport
types use one fixed factor each.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from pear_calc.calculators.base import ModuleResults, add_to, resolve_factors, run_module
from pear_calc.constants import MODULE_COMMERCIAL_TRAVEL, TRANSPORT_TYPE_FLIGHT
from pear_calc.conversions import to_miles
from pear_calc.emission_factors import (
    EmissionFactorTable,
    get_commercial_travel_factor,
    get_flight_classification,
)
from pear_calc.schemas import CommercialTravelEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommercialTravelResult:
    entry_id: str
    co2e: float
    distance_in_miles: float
    emission_factor: float
    transport_type: str
    calculation_method: str
    flight_classification: str | None = None


@dataclass
class CommercialTravelTotals:
    total_co2e: float
    total_passenger_miles: float
    by_transport_type: dict[str, float] = field(default_factory=dict)
    by_flight_classification: dict[str, float] | None = None

    @property
    def total_quantity(self) -> float:
        return self.total_passenger_miles


def calculate_entry(
    entry: CommercialTravelEntry, factors: EmissionFactorTable | None = None
) -> CommercialTravelResult:
    factors = resolve_factors(factors)
    miles = to_miles(entry.passenger_distance, entry.distance_unit, factors)
    factor = get_commercial_travel_factor(entry.transport_type, miles, factors)

    classification = (
        get_flight_classification(miles)
        if entry.transport_type == TRANSPORT_TYPE_FLIGHT else None
    )
    co2e = miles * factor.value
    label = f"{entry.transport_type} ({classification})" if classification else entry.transport_type
    logger.debug(
        "Commercial travel id=%s | %s %.1f pass-mi × %.4f = %.2f kg CO₂e",
        entry.id, entry.transport_type, miles, factor.value, co2e,
    )
    return CommercialTravelResult(
        entry_id=entry.id,
        co2e=co2e,
        distance_in_miles=miles,
        emission_factor=factor.value,
        transport_type=entry.transport_type,
        calculation_method=f"{label}: {miles:.1f} passenger-miles × {factor.value:g} kg CO₂e/mi",
        flight_classification=classification,
    )


def aggregate(
    pairs: list[tuple[CommercialTravelEntry, CommercialTravelResult]]
) -> CommercialTravelTotals:
    by_type: dict[str, float] = {}
    by_class: dict[str, float] = {}
    for entry, result in pairs:
        add_to(by_type, entry.transport_type, result.co2e)
        if result.flight_classification:
            add_to(by_class, result.flight_classification, result.co2e)

    return CommercialTravelTotals(
        total_co2e=sum(r.co2e for _, r in pairs),
        total_passenger_miles=sum(r.distance_in_miles for _, r in pairs),
        by_transport_type=by_type,
        by_flight_classification=by_class or None,
    )


def calculate_all(
    entries: Sequence[CommercialTravelEntry], factors: EmissionFactorTable | None = None
) -> ModuleResults:
    factors = resolve_factors(factors)
    return run_module(
        MODULE_COMMERCIAL_TRAVEL, entries, calculate_entry, aggregate, factors, factors.source
    )
