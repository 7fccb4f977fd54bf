"""
conversions.py – Unit conversion helpers.

Every conversion multiplies (or, in reverse, divides) by named constants
from the factor table's ``conversion_factors``.  Nothing is rounded here;
rounding is left to presentation.

Each pair is listed in one direction at least; the reverse direction
divides by the same constants.  An unknown unit pair is passed through
unchanged (identity), the same permissive default the calculators rely on
when a value already arrives in the canonical unit.
"""
from __future__ import annotations

import logging

from pear_calc.emission_factors import DEFAULT_FACTORS, EmissionFactorTable

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Unit name normalisation
# ─────────────────────────────────────────────────────────────
_UNIT_ALIASES: dict[str, str] = {
    # distance
    "km": "km", "kms": "km", "kilometer": "km", "kilometers": "km",
    "kilometre": "km", "kilometres": "km",
    "mi": "miles", "mile": "miles", "miles": "miles",
    # volume
    "l": "liters", "liter": "liters", "liters": "liters",
    "litre": "liters", "litres": "liters",
    "gal": "gallons", "gallon": "gallons", "gallons": "gallons", "us_gallon": "gallons",
    # mass
    "kg": "kg", "kgs": "kg", "kilogram": "kg", "kilograms": "kg",
    "t": "metric_tons", "mt": "metric_tons", "tonne": "metric_tons", "tonnes": "metric_tons",
    "metric_ton": "metric_tons", "metric_tons": "metric_tons",
    "lb": "lbs", "lbs": "lbs", "pound": "lbs", "pounds": "lbs",
    # area
    "sq_ft": "square_feet", "sqft": "square_feet", "ft2": "square_feet",
    "square_foot": "square_feet", "square_feet": "square_feet",
    "sq_m": "square_meters", "m2": "square_meters", "square_meter": "square_meters",
    "square_meters": "square_meters", "square_metre": "square_meters",
    "square_metres": "square_meters",
    "sq_yd": "square_yards", "square_yard": "square_yards", "square_yards": "square_yards",
    "acre": "acres", "acres": "acres",
    # natural gas
    "ft3": "cubic_feet", "cf": "cubic_feet", "cubic_foot": "cubic_feet",
    "cubic_feet": "cubic_feet",
    "m3": "cubic_meters", "cubic_meter": "cubic_meters", "cubic_meters": "cubic_meters",
    "cubic_metre": "cubic_meters", "cubic_metres": "cubic_meters",
    "ccf": "ccf", "ccm": "ccm",
    "therm": "therms", "therms": "therms",
    "kwh": "kwh",
    # fuel oil energy content
    "btu": "btu",
    "mj": "megajoules", "megajoule": "megajoules", "megajoules": "megajoules",
    "gj": "gigajoules", "gigajoule": "gigajoules", "gigajoules": "gigajoules",
    # fuel module
    "sterno_can": "sterno_cans", "sterno_cans": "sterno_cans",
}


def normalise_unit(unit: str | None) -> str:
    """Return the canonical spelling of *unit* (``"Kilometers"`` → ``"km"``)."""
    if not unit:
        return ""
    key = unit.strip().lower().replace(" ", "_").replace("-", "_")
    return _UNIT_ALIASES.get(key, key)


# ─────────────────────────────────────────────────────────────
# Conversion table: dimension → (from, to) → constant names to multiply
# ─────────────────────────────────────────────────────────────
_RATIOS: dict[str, dict[tuple[str, str], tuple[str, ...]]] = {
    "distance": {
        ("km", "miles"): ("KM_TO_MILES",),
        ("miles", "km"): ("MILES_TO_KM",),
    },
    "volume": {
        ("liters", "gallons"): ("LITERS_TO_GALLONS",),
        ("gallons", "liters"): ("GALLONS_TO_LITERS",),
    },
    "mass": {
        ("kg", "metric_tons"): ("KG_TO_METRIC_TONS",),
        ("metric_tons", "kg"): ("METRIC_TONS_TO_KG",),
        ("lbs", "kg"): ("LBS_TO_KG",),
    },
    "area": {
        ("square_meters", "square_feet"): ("SQ_METERS_TO_SQ_FEET",),
        ("square_feet", "square_meters"): ("SQ_FEET_TO_SQ_METERS",),
        ("square_yards", "square_feet"): ("SQ_YARDS_TO_SQ_FEET",),
        ("square_feet", "square_yards"): ("SQ_FEET_TO_SQ_YARDS",),
        ("acres", "square_feet"): ("ACRES_TO_SQ_FEET",),
        ("square_feet", "acres"): ("SQ_FEET_TO_ACRES",),
    },
    "natural_gas": {
        ("cubic_meters", "cubic_feet"): ("CUBIC_METERS_TO_CUBIC_FEET",),
        ("cubic_feet", "cubic_meters"): ("CUBIC_FEET_TO_CUBIC_METERS",),
        ("ccf", "cubic_feet"): ("CCF_TO_CUBIC_FEET",),
        ("ccm", "cubic_meters"): ("CCM_TO_CUBIC_METERS",),
        ("ccm", "cubic_feet"): ("CCM_TO_CUBIC_METERS", "CUBIC_METERS_TO_CUBIC_FEET"),
        ("therms", "cubic_feet"): ("THERMS_TO_CUBIC_FEET",),
        ("kwh", "cubic_feet"): ("KWH_TO_CUBIC_FEET_GAS",),
    },
    "fuel_oil": {
        ("liters", "gallons"): ("LITERS_TO_GALLONS_OIL",),
        ("gallons", "liters"): ("GALLONS_TO_LITERS_OIL",),
        ("btu", "gallons"): ("BTU_TO_GALLONS_OIL",),
        ("megajoules", "liters"): ("MEGAJOULES_TO_LITERS_OIL",),
        ("gigajoules", "liters"): ("GIGAJOULES_TO_LITERS_OIL",),
        ("megajoules", "gallons"): ("MEGAJOULES_TO_LITERS_OIL", "LITERS_TO_GALLONS_OIL"),
        ("gigajoules", "gallons"): ("GIGAJOULES_TO_LITERS_OIL", "LITERS_TO_GALLONS_OIL"),
    },
}

DIMENSIONS = tuple(_RATIOS)


def convert(
    value: float,
    from_unit: str | None,
    to_unit: str | None,
    dimension: str,
    table: EmissionFactorTable = DEFAULT_FACTORS,
) -> float:
    """
    Convert *value* from *from_unit* to *to_unit* within *dimension*.

    Dimensions: distance, volume, mass, area, natural_gas, fuel_oil.
    Same-unit and unknown pairs return *value* unchanged.
    """
    src, dst = normalise_unit(from_unit), normalise_unit(to_unit)
    if src == dst:
        return value

    ratios = _RATIOS.get(dimension, {})
    names = ratios.get((src, dst))
    if names is not None:
        return value * _ratio(names, table)

    # Reverse of a listed pair: divide by the forward ratio.
    names = ratios.get((dst, src))
    if names is not None:
        return value / _ratio(names, table)

    logger.debug("No %s conversion %r → %r; value passed through", dimension, from_unit, to_unit)
    return value


def _ratio(names: tuple[str, ...], table: EmissionFactorTable) -> float:
    ratio = 1.0
    for name in names:
        ratio *= table.conversion_factors[name]
    return ratio


# ─────────────────────────────────────────────────────────────
# Shorthand helpers used by the calculators
# ─────────────────────────────────────────────────────────────

def to_miles(value: float, unit: str | None, table: EmissionFactorTable = DEFAULT_FACTORS) -> float:
    """Convert a distance to miles."""
    return convert(value, unit, "miles", "distance", table)


def to_gallons(value: float, unit: str | None, table: EmissionFactorTable = DEFAULT_FACTORS) -> float:
    """Convert a liquid fuel volume to US gallons."""
    return convert(value, unit, "gallons", "volume", table)


def to_square_feet(value: float, unit: str | None, table: EmissionFactorTable = DEFAULT_FACTORS) -> float:
    """Convert a floor area to square feet (the CBECS basis)."""
    return convert(value, unit, "square_feet", "area", table)


def natural_gas_to_cubic_feet(
    value: float, unit: str | None, table: EmissionFactorTable = DEFAULT_FACTORS
) -> float:
    """Convert natural gas (m³, ccf, ccm, therms, kWh) to cubic feet."""
    return convert(value, unit, "cubic_feet", "natural_gas", table)


def fuel_oil_to_gallons(
    value: float, unit: str | None, table: EmissionFactorTable = DEFAULT_FACTORS
) -> float:
    """Convert fuel oil (liters, Btu, MJ, GJ) to gallons."""
    return convert(value, unit, "gallons", "fuel_oil", table)


def kg_to_metric_tons(value: float, table: EmissionFactorTable = DEFAULT_FACTORS) -> float:
    return convert(value, "kg", "metric_tons", "mass", table)


def fuel_to_gallons(
    amount: float,
    unit: str | None,
    fuel_type: str,
    table: EmissionFactorTable = DEFAULT_FACTORS,
) -> float:
    """
    Convert an equipment/vehicle fuel amount to gallons, aware of the fuel.

    Gases and solids use the fuel-module gallon equivalents:
      * natural gas cubic feet → 0.0112 gal, other gases 0.00751 gal/ft³
      * propane / LPG 0.51 gal/kg, butane 0.43 gal/kg, anything else 0.5 gal/kg
      * one sterno can ≈ 0.21 L
    """
    cf = table.conversion_factors
    u = normalise_unit(unit)

    if u == "gallons":
        return amount
    if u == "liters":
        return amount * cf["LITERS_TO_GALLONS"]
    if u == "cubic_feet":
        if fuel_type == "Natural gas":
            return amount * cf["NATURAL_GAS_CUBIC_FEET_TO_GALLONS"]
        return amount * cf["GAS_CUBIC_FEET_TO_GALLONS"]
    if u == "cubic_meters":
        return amount * cf["CUBIC_METERS_TO_CUBIC_FEET"] * cf["GAS_CUBIC_FEET_TO_GALLONS"]
    if u in ("kg", "lbs"):
        kg = amount * cf["LBS_TO_KG"] if u == "lbs" else amount
        if fuel_type in ("Propane", "LPG"):
            return kg * cf["PROPANE_KG_TO_GALLONS"]
        if fuel_type == "Butane":
            return kg * cf["BUTANE_KG_TO_GALLONS"]
        return kg * cf["DEFAULT_KG_TO_GALLONS"]
    if u == "ccf":
        return amount * cf["CCF_TO_CUBIC_FEET"] * cf["NATURAL_GAS_CUBIC_FEET_TO_GALLONS"]
    if u == "ccm":
        return (
            amount * cf["CCM_TO_CUBIC_METERS"] * cf["CUBIC_METERS_TO_CUBIC_FEET"]
            * cf["GAS_CUBIC_FEET_TO_GALLONS"]
        )
    if u == "sterno_cans":
        return amount * cf["STERNO_CAN_LITERS"] * cf["LITERS_TO_GALLONS"]
    return amount
