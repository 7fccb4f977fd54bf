"""
hotels.py – Hotel stays and production housing (Scope 3).

Formula: grid factor (kg CO₂e/kWh) × room type kWh/year × nights / 365
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
from pear_calc.constants import DAYS_PER_YEAR, MODULE_HOTELS
from pear_calc.emission_factors import (
    EmissionFactorTable,
    get_electricity_factor,
    get_hotel_energy_consumption,
)
from pear_calc.exceptions import UnknownRoomType
from pear_calc.schemas import HotelsEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HotelsResult:
    entry_id: str
    co2e: float
    emission_factor: float
    kwh_per_year: float
    region: str
    calculation_method: str


@dataclass
class HotelsTotals:
    total_co2e: float
    total_nights: float
    by_room_type: dict[str, float] = field(default_factory=dict)
    by_country: dict[str, float] = field(default_factory=dict)

    @property
    def total_quantity(self) -> float:
        return self.total_nights


def calculate_entry(entry: HotelsEntry, factors: EmissionFactorTable | None = None) -> HotelsResult:
    factors = resolve_factors(factors)
    consumption = get_hotel_energy_consumption(entry.room_type, factors)
    if consumption is None:
        raise UnknownRoomType(
            f"No energy consumption data found for room type: {entry.room_type}",
            entry_id=entry.id,
            context={"room_type": entry.room_type, "known": sorted(factors.hotel_energy)},
        )

    factor = get_electricity_factor(entry.country, factors)
    co2e = factor.value * consumption.kwh_per_year * (entry.total_nights / DAYS_PER_YEAR)
    logger.debug(
        "Hotels id=%s | %.4f × %.1f kWh/yr × %g/365 nights = %.2f kg CO₂e",
        entry.id, factor.value, consumption.kwh_per_year, entry.total_nights, co2e,
    )
    return HotelsResult(
        entry_id=entry.id,
        co2e=co2e,
        emission_factor=factor.value,
        kwh_per_year=consumption.kwh_per_year,
        region=region_label(entry.country, entry.state_province),
        calculation_method=(
            f"{entry.room_type}: {consumption.kwh_per_year:g} kWh/yr × {entry.total_nights:g}/365 nights"
        ),
    )


def aggregate(pairs: list[tuple[HotelsEntry, HotelsResult]]) -> HotelsTotals:
    by_room: dict[str, float] = {}
    by_country: dict[str, float] = {}
    for entry, result in pairs:
        add_to(by_room, entry.room_type, result.co2e)
        add_to(by_country, entry.country, result.co2e)

    return HotelsTotals(
        total_co2e=sum(r.co2e for _, r in pairs),
        total_nights=sum(e.total_nights for e, _ in pairs),
        by_room_type=by_room,
        by_country=by_country,
    )


def calculate_all(
    entries: Sequence[HotelsEntry], factors: EmissionFactorTable | None = None
) -> ModuleResults:
    factors = resolve_factors(factors)
    return run_module(
        MODULE_HOTELS, entries, calculate_entry, aggregate, factors, factors.electricity_source
    )
