"""
pear_metrics.py – Non-GHG sustainability metrics (drinking water, waste).

Same sum-then-divide aggregation pattern as the emission modules:

 Drinking water   total bottles, total cost, bottles by container type
 Waste            pounds (tons × 2000, cubic yards × 300), landfill /
                  recycled / composted split
 Diversion rate % = (recycled + composted) ÷ total × 100

Empty input returns ``None``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from pear_calc.calculators.base import add_to
from pear_calc.constants import (
    POUNDS_PER_CUBIC_YARD,
    POUNDS_PER_TON,
    WASTE_COMPOST,
    WASTE_TO_LANDFILL,
)
from pear_calc.schemas import DrinkingWaterEntry, WasteEntry

logger = logging.getLogger(__name__)


@dataclass
class DrinkingWaterTotals:
    total_cost: float
    total_bottles: float
    by_container_type: dict[str, float] = field(default_factory=dict)


@dataclass
class WasteTotals:
    total_pounds: float
    landfill_pounds: float
    recycled_pounds: float
    composted_pounds: float
    diversion_rate: float
    by_waste_type: dict[str, float] = field(default_factory=dict)


def calculate_drinking_water_totals(
    entries: Sequence[DrinkingWaterEntry],
) -> DrinkingWaterTotals | None:
    if not entries:
        return None

    by_container: dict[str, float] = {}
    for entry in entries:
        add_to(by_container, entry.container_type, entry.quantity)

    return DrinkingWaterTotals(
        total_cost=sum(e.total_cost or 0.0 for e in entries),
        total_bottles=sum(e.quantity for e in entries),
        by_container_type=by_container,
    )


def waste_to_pounds(amount: float, unit: str) -> float:
    """Convert a waste amount to pounds; cubic yards use an approximate density."""
    if unit == "tons":
        return amount * POUNDS_PER_TON
    if unit == "cubic yards":
        return amount * POUNDS_PER_CUBIC_YARD
    return amount


def calculate_waste_totals(entries: Sequence[WasteEntry]) -> WasteTotals | None:
    if not entries:
        return None

    by_type: dict[str, float] = {}
    landfill = recycled = composted = 0.0
    for entry in entries:
        pounds = waste_to_pounds(entry.amount, entry.unit)
        add_to(by_type, entry.waste_type, pounds)
        if entry.waste_type == WASTE_TO_LANDFILL:
            landfill += pounds
        elif entry.waste_type == WASTE_COMPOST:
            composted += pounds
        else:
            recycled += pounds

    total = landfill + recycled + composted
    diversion = (recycled + composted) / total * 100 if total > 0 else 0.0
    logger.debug(
        "Waste | %.1f lb total, %.1f lb landfill, diversion %.1f%%", total, landfill, diversion
    )
    return WasteTotals(
        total_pounds=total,
        landfill_pounds=landfill,
        recycled_pounds=recycled,
        composted_pounds=composted,
        diversion_rate=diversion,
        by_waste_type=by_type,
    )
