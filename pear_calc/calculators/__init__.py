"""
Per-module emission calculators.

``CALCULATORS`` maps each module name to its ``calculate_all`` function so
callers (summary, CLI, API) can run a module by name.
"""
from __future__ import annotations

from typing import Callable, Sequence

from pear_calc.calculators import (
    charter_flights,
    commercial_travel,
    ev_charging,
    fuel,
    hotels,
    transport,
    utilities,
)
from pear_calc.calculators.base import CalculationMetadata, EntryError, ModuleResults
from pear_calc.constants import (
    MODULE_CHARTER_FLIGHTS,
    MODULE_COMMERCIAL_TRAVEL,
    MODULE_EV_CHARGING,
    MODULE_FUEL,
    MODULE_HOTELS,
    MODULE_TRANSPORT,
    MODULE_UTILITIES,
)
from pear_calc.emission_factors import EmissionFactorTable

CALCULATORS: dict[str, Callable[..., ModuleResults]] = {
    MODULE_TRANSPORT: transport.calculate_all,
    MODULE_UTILITIES: utilities.calculate_all,
    MODULE_FUEL: fuel.calculate_all,
    MODULE_EV_CHARGING: ev_charging.calculate_all,
    MODULE_HOTELS: hotels.calculate_all,
    MODULE_COMMERCIAL_TRAVEL: commercial_travel.calculate_all,
    MODULE_CHARTER_FLIGHTS: charter_flights.calculate_all,
}


def calculate_module(
    module: str, entries: Sequence, factors: EmissionFactorTable | None = None
) -> ModuleResults:
    """
    Run ``calculate_all`` for *module*.

    Raises
    ------
    KeyError
        If *module* is not a known calculator module.
    """
    return CALCULATORS[module](entries, factors)


__all__ = [
    "CALCULATORS",
    "CalculationMetadata",
    "EntryError",
    "ModuleResults",
    "calculate_module",
]
