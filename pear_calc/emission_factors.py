"""
emission_factors.py – Reference data used in every GHG calculation.

All factors are in kg CO₂e per unit unless noted.
Sources: Production Environmental Accounting Report (PEAR) 4.2.9, built on
DEFRA 2023 Greenhouse Gas Reporting Conversion Factors; grid electricity from
IEA 2023 Emission Factors (2021 data); building intensities from CBECS 2018;
hotel/housing consumption from the hotel & casino analysis (2005) and RECS 2015.

The numbers below are audited published figures – keep them verbatim.
Everything lives in one ``EmissionFactorTable`` so that a new year's factors
can be swapped in as data (see ``load_factor_table``) without touching any
calculator.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator

from pydantic import TypeAdapter, ValidationError

from pear_calc.constants import (
    COMMERCIAL_MEDIUM_HAUL_MAX_MILES,
    COMMERCIAL_SHORT_HAUL_MAX_MILES,
    DEFAULT_COUNTRY,
    DEFAULT_EQUIPMENT_MPG,
    EQUIPMENT_CATEGORY_EQUIPMENT,
    FLIGHT_CLASS_AVERAGE,
    FLIGHT_CLASS_LONG,
    FLIGHT_CLASS_MEDIUM,
    FLIGHT_CLASS_SHORT,
    TRANSPORT_MEDIUM_HAUL_MAX_MILES,
    TRANSPORT_SHORT_HAUL_MAX_MILES,
    TRANSPORT_TYPE_FLIGHT,
)
from pear_calc.exceptions import UnknownAircraftType, UnknownTransportType

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Record types
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EmissionFactor:
    """One published emission factor (kg CO₂e per ``unit``)."""
    id: str
    category: str
    subcategory: str
    unit: str
    value: float
    source: str
    year: int
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"Emission factor {self.id!r} must be >= 0, got {self.value}")


@dataclass(frozen=True)
class BuildingIntensity:
    """Annual consumption per square foot for one CBECS building type."""
    building_type: str
    electricity_kwh_per_sqft: float
    natural_gas_cf_per_sqft: float
    fuel_oil_gallons_per_sqft: float


@dataclass(frozen=True)
class HotelEnergyConsumption:
    """Annual electricity consumption of one room / housing type."""
    room_type: str
    kwh_per_year: float
    source: str
    year: int
    square_footage: float | None = None


@dataclass(frozen=True)
class AircraftData:
    """Fuel burn profile of one charter aircraft type."""
    aircraft_type: str
    fuel_type: str
    gallons_per_hour: float
    miles_per_gallon: float
    emission_factor_per_gallon: float


@dataclass(frozen=True)
class EmissionFactorTable:
    """
    Static, versioned snapshot of every table the calculators read.

    Treat as read-only: instances are frozen and the nested dicts are never
    mutated by the engine.
    """
    version: str
    source: str
    electricity_source: str
    last_updated: date
    road_fuel: dict[str, EmissionFactor]
    air: dict[str, EmissionFactor]
    rail: dict[str, EmissionFactor]
    ferry: dict[str, EmissionFactor]
    electricity: dict[str, EmissionFactor]
    natural_gas: EmissionFactor
    fuel_oil: EmissionFactor
    fuel: dict[str, EmissionFactor]
    commercial_travel: dict[str, EmissionFactor]
    building_intensities: dict[str, BuildingIntensity]
    hotel_energy: dict[str, HotelEnergyConsumption]
    aircraft: dict[str, AircraftData]
    equipment_categories: dict[str, str]
    vehicle_fuel_efficiency: dict[str, float]
    conversion_factors: dict[str, float]
    road_fuel_aliases: dict[str, str] = field(default_factory=dict)
    rail_aliases: dict[str, str] = field(default_factory=dict)


# ─────────────────────────────────────────────────────────────
# Table metadata
# ─────────────────────────────────────────────────────────────
FACTORS_VERSION: str = "4.2.9"
FACTORS_SOURCE: str = "DEFRA 2023 Greenhouse Gas Reporting Conversion Factors"
ELECTRICITY_SOURCE: str = "IEA 2023 Emission Factors"


# ─────────────────────────────────────────────────────────────
# Road vehicle fuel (kg CO₂e / gallon)
# ─────────────────────────────────────────────────────────────
ROAD_FUEL_FACTORS: dict[str, EmissionFactor] = {
    "gasoline": EmissionFactor(
        id="gasoline", category="road", subcategory="fuel", unit="gallon",
        value=8.877, source="DEFRA 2023 - Petrol (100% mineral petrol)",
        year=2023, notes="2.345 kg CO2e/liter",
    ),
    "diesel": EmissionFactor(
        id="diesel", category="road", subcategory="fuel", unit="gallon",
        value=10.067, source="DEFRA 2023 - Diesel (100% mineral diesel)",
        year=2023, notes="2.659 kg CO2e/liter",
    ),
    "lpg": EmissionFactor(
        id="lpg", category="road", subcategory="fuel", unit="gallon",
        value=5.894, source="DEFRA 2023 - LPG",
        year=2023, notes="1.557 kg CO2e/liter",
    ),
    # Grid factor lookup by location is not wired for road vehicles
    "electric": EmissionFactor(
        id="electric", category="road", subcategory="fuel", unit="kWh",
        value=0.0, source="DEFRA 2023 - Electricity (location-specific)",
        year=2023, notes="Varies by location - requires grid emission factor lookup",
    ),
    "hybrid": EmissionFactor(
        id="hybrid", category="road", subcategory="fuel", unit="gallon",
        value=8.877 * 0.6,  # 60 % of petrol
        source="DEFRA 2023 - Estimated based on petrol consumption",
        year=2023, notes="Approximate - actual consumption varies by hybrid type",
    ),
}

ROAD_FUEL_ALIASES: dict[str, str] = {
    "petrol": "gasoline",
    "gas": "gasoline",
}


# ─────────────────────────────────────────────────────────────
# Air travel (kg CO₂e / passenger-mile)
# ─────────────────────────────────────────────────────────────
AIR_FACTORS: dict[str, EmissionFactor] = {
    FLIGHT_CLASS_AVERAGE: EmissionFactor(
        id="flight-average", category="air", subcategory="flight",
        unit="passenger-mile", value=0.167,
        source="DEFRA 2023 - International, to/from non-UK (average)",
        year=2023, notes="0.10377 kg CO2e/passenger-km",
    ),
    FLIGHT_CLASS_SHORT: EmissionFactor(
        id="flight-short", category="air", subcategory="flight",
        unit="passenger-mile", value=0.259,
        source="DEFRA 2023 - Domestic Average",
        year=2023, notes="< 288 miles; 0.161 kg CO2e/passenger-km",
    ),
    FLIGHT_CLASS_MEDIUM: EmissionFactor(
        id="flight-medium", category="air", subcategory="flight",
        unit="passenger-mile", value=0.177,
        source="DEFRA 2023 - Short-Haul International Average",
        year=2023, notes="288-688 miles; 0.110 kg CO2e/passenger-km",
    ),
    FLIGHT_CLASS_LONG: EmissionFactor(
        id="flight-long", category="air", subcategory="flight",
        unit="passenger-mile", value=0.248,
        source="DEFRA 2023 - Long-Haul International Average",
        year=2023, notes="> 688 miles; 0.154 kg CO2e/passenger-km",
    ),
}


# ─────────────────────────────────────────────────────────────
# Rail and ferry (kg CO₂e / passenger-mile)
# ─────────────────────────────────────────────────────────────
_LIGHT_RAIL = EmissionFactor(
    id="rail-light", category="rail", subcategory="train",
    unit="passenger-mile", value=0.046,
    source="DEFRA 2023 - Light rail and tram",
    year=2023, notes="0.029 kg CO2e/passenger-km",
)

RAIL_FACTORS: dict[str, EmissionFactor] = {
    "national": EmissionFactor(
        id="rail-national", category="rail", subcategory="train",
        unit="passenger-mile", value=0.057,
        source="DEFRA 2023 - National rail",
        year=2023, notes="0.035 kg CO2e/passenger-km",
    ),
    "international": EmissionFactor(
        id="rail-international", category="rail", subcategory="train",
        unit="passenger-mile", value=0.007,
        source="DEFRA 2023 - International rail",
        year=2023, notes="0.004 kg CO2e/passenger-km",
    ),
    "light_rail": _LIGHT_RAIL,
    # No distinct published underground/metro factor: light rail and tram is reused.
    "underground": EmissionFactor(
        id="rail-underground", category="rail", subcategory="train",
        unit="passenger-mile", value=_LIGHT_RAIL.value,
        source="DEFRA 2023 - Light rail and tram",
        year=2023,
        notes="No distinct underground factor published; light rail and tram factor reused",
    ),
}

RAIL_ALIASES: dict[str, str] = {
    "lightrail": "light_rail",
    "light_rail_and_tram": "light_rail",
    "tram": "light_rail",
    "metro": "underground",
    "subway": "underground",
}

FERRY_FACTORS: dict[str, EmissionFactor] = {
    "average": EmissionFactor(
        id="ferry-average", category="ferry", subcategory="passenger",
        unit="passenger-mile", value=0.181,
        source="DEFRA 2023 - Ferry, Average (all passenger)",
        year=2023, notes="0.113 kg CO2e/passenger-km",
    ),
}


# ─────────────────────────────────────────────────────────────
# Scope 2 – Grid electricity (kg CO₂e / kWh)
# IEA 2023 Emission Factors, 2021 data.
# Fallback: United States.
# ─────────────────────────────────────────────────────────────
ELECTRICITY_FACTORS: dict[str, EmissionFactor] = {
    "United States": EmissionFactor(
        id="electricity-us", category="utilities", subcategory="electricity",
        unit="kWh", value=0.3692, source=ELECTRICITY_SOURCE,
        year=2021, notes="369.2 gCO2e/kWh",
    ),
    "United Kingdom": EmissionFactor(
        id="electricity-uk", category="utilities", subcategory="electricity",
        unit="kWh", value=0.2063, source=ELECTRICITY_SOURCE,
        year=2021, notes="206.3 gCO2e/kWh",
    ),
    "Canada": EmissionFactor(
        id="electricity-ca", category="utilities", subcategory="electricity",
        unit="kWh", value=0.1183, source=ELECTRICITY_SOURCE,
        year=2021, notes="118.3 gCO2e/kWh",
    ),
    "World": EmissionFactor(
        id="electricity-world", category="utilities", subcategory="electricity",
        unit="kWh", value=0.4663, source=ELECTRICITY_SOURCE,
        year=2021, notes="466.3 gCO2e/kWh - global average",
    ),
}


# ─────────────────────────────────────────────────────────────
# Scope 1 – Building heating fuels
# ─────────────────────────────────────────────────────────────
NATURAL_GAS_FACTOR = EmissionFactor(
    id="natural-gas", category="utilities", subcategory="heating",
    unit="cubic meter", value=2.0384,
    source="DEFRA 2023 - Natural gas",
    year=2023, notes="0.057721 kg CO2e/cubic foot",
)

FUEL_OIL_FACTOR = EmissionFactor(
    id="fuel-oil", category="utilities", subcategory="heating",
    unit="liter", value=3.1749,
    source="DEFRA 2023 - Fuel oil",
    year=2023, notes="12.0184 kg CO2e/gallon",
)


# ─────────────────────────────────────────────────────────────
# Scope 1 – Equipment & vehicle fuel (kg CO₂e / gallon unless noted)
# ─────────────────────────────────────────────────────────────
def _fuel(id_: str, subcategory: str, value: float, source: str,
          notes: str, unit: str = "gallon", year: int = 2023) -> EmissionFactor:
    return EmissionFactor(
        id=id_, category="fuel", subcategory=subcategory, unit=unit,
        value=value, source=source, year=year, notes=notes,
    )


FUEL_FACTORS: dict[str, EmissionFactor] = {
    "Gasoline": _fuel("fuel-gasoline", "liquid", 8.8769,
                      "DEFRA 2023 - Petrol (100% mineral petrol)", "2.345 kg CO2e/liter"),
    "Diesel Fuel": _fuel("fuel-diesel", "liquid", 10.0668,
                         "DEFRA 2023 - Diesel (100% mineral diesel)", "2.659 kg CO2e/liter"),
    "Diesel (Red)": _fuel("fuel-diesel-red", "liquid", 10.4304,
                          "DEFRA 2023 - Gas oil", "2.755 kg CO2e/liter"),
    "Propane": _fuel("fuel-propane", "gas", 5.8944,
                     "DEFRA 2023 - LPG", "1.557 kg CO2e/liter"),
    "Butane": _fuel("fuel-butane", "gas", 6.6068,
                    "DEFRA 2023 - Butane", "1.745 kg CO2e/liter"),
    "LPG": _fuel("fuel-lpg", "gas", 5.8944,
                 "DEFRA 2023 - LPG", "1.557 kg CO2e/liter"),
    "CNG": _fuel("fuel-cng", "gas", 1.6976,
                 "DEFRA 2023 - CNG", "0.448 kg CO2e/liter"),
    "LNG": _fuel("fuel-lng", "gas", 4.4226,
                 "DEFRA 2023 - LNG", "1.168 kg CO2e/liter"),
    # Denominated per cubic foot, not per gallon
    "Natural gas": _fuel("fuel-natural-gas", "gas", 0.0577,
                         "DEFRA 2023 - Natural gas", "2.038 kg CO2e/cubic meter",
                         unit="cubic foot"),
    "Jet Fuel": _fuel("fuel-jet", "liquid", 9.6251,
                      "DEFRA 2023 - Aviation turbine fuel", "2.543 kg CO2e/liter"),
    "Aviation Gasoline": _fuel("fuel-aviation-gas", "liquid", 8.8244,
                               "DEFRA 2023 - Aviation spirit", "2.331 kg CO2e/liter"),
    "Kerosene": _fuel("fuel-kerosene", "liquid", 9.6155,
                      "DEFRA 2023 - Burning oil", "2.540 kg CO2e/liter"),
    "Fuel Oil": _fuel("fuel-oil-equipment", "liquid", 12.0184,
                      "DEFRA 2023 - Fuel oil", "3.175 kg CO2e/liter"),
    "RFO (Ships)": _fuel("fuel-rfo", "liquid", 10.4908,
                         "DEFRA 2023 - Marine gas oil", "2.771 kg CO2e/liter"),
    "Ethanol (E100)": _fuel("fuel-ethanol", "liquid", 3.5750,
                            "DEFRA 2023 - Other petroleum gas", "0.944 kg CO2e/liter"),
    "E85": _fuel("fuel-e85", "liquid", 4.3703,
                 "DEFRA 2023 - 85% Ethanol + 15% Gasoline", "Calculated blend"),
    "Hydrogen": _fuel("fuel-hydrogen", "gas", 0.0,
                      "DEFRA 2023", "Zero emissions"),
    "Acetylene": _fuel("fuel-acetylene", "gas", 0.0147,
                       "Climate Registry 2022", "Converted from cubic feet", year=2022),
}


# ─────────────────────────────────────────────────────────────
# Scope 3 – Commercial travel (kg CO₂e / passenger-mile)
# Flights are classified by distance; see get_commercial_travel_factor().
# ─────────────────────────────────────────────────────────────
COMMERCIAL_TRAVEL_FACTORS: dict[str, EmissionFactor] = {
    "National rail": RAIL_FACTORS["national"],
    "International rail": RAIL_FACTORS["international"],
    "Light rail and tram": RAIL_FACTORS["light_rail"],
    "Ferry": FERRY_FACTORS["average"],
}


# ─────────────────────────────────────────────────────────────
# CBECS 2018 building energy intensity (per sq ft per year)
# ─────────────────────────────────────────────────────────────
CBECS_INTENSITIES: dict[str, BuildingIntensity] = {
    b.building_type: b
    for b in (
        BuildingIntensity("Education", 9.4, 30.8, 0.0787),
        BuildingIntensity("Studio", 29.1, 29.2, 0.044),    # 'Other' category values
        BuildingIntensity("Warehouse", 5.8, 18.6, 0.0),
        BuildingIntensity("Retail", 13.7, 23.3, 0.0587),
        BuildingIntensity("Hotel/Motel", 14.4, 37.0, 0.0209),
        BuildingIntensity("Restaurant", 43.8, 147.6, 0.0),
        BuildingIntensity("Healthcare", 23.8, 59.1, 0.0242),
        BuildingIntensity("Office", 13.6, 21.3, 0.0155),
        BuildingIntensity("Other", 29.1, 29.2, 0.044),
    )
}


# ─────────────────────────────────────────────────────────────
# Hotel / housing electricity consumption (kWh per year)
# ─────────────────────────────────────────────────────────────
HOTEL_ENERGY_CONSUMPTION: dict[str, HotelEnergyConsumption] = {
    h.room_type: h
    for h in (
        HotelEnergyConsumption("Economy Hotel", 5515.85,
                               "hotel_casino_analysis.pdf, Table 16 & 17", 2005, 535),
        HotelEnergyConsumption("Midscale Hotel", 10869.92,
                               "hotel_casino_analysis.pdf, Table 16 & 18", 2005, 656),
        HotelEnergyConsumption("Upscale Hotel", 12596.32,
                               "hotel_casino_analysis.pdf, Table 16 & 19", 2005, 842),
        HotelEnergyConsumption("Luxury Hotel", 16452.9,
                               "hotel_casino_analysis.pdf, Table 16 & 20", 2005, 905),
        HotelEnergyConsumption("Average House", 10720,
                               "Residential Energy Consumption Survey (RECS) 2015", 2015),
        HotelEnergyConsumption("Apartment/Condo", 6040,
                               "Residential Energy Consumption Survey (RECS) 2015", 2015),
        HotelEnergyConsumption("Large House", 14210,
                               "Residential Energy Consumption Survey (RECS) 2015", 2015),
    )
}


# ─────────────────────────────────────────────────────────────
# Charter & helicopter aircraft (ComTravel sheet, PEAR 4.2.9)
# ─────────────────────────────────────────────────────────────
JET_FUEL_EF_PER_GALLON: float = 9.625
AVGAS_EF_PER_GALLON: float = 8.824

CHARTER_AIRCRAFT_DATA: dict[str, AircraftData] = {
    a.aircraft_type: a
    for a in (
        AircraftData("Chartered Commercial Jet", "jet fuel", 950, 0.4, JET_FUEL_EF_PER_GALLON),
        AircraftData("Large Private Jet", "jet fuel", 440, 1.3, JET_FUEL_EF_PER_GALLON),
        AircraftData("Small Private Jet", "jet fuel", 220, 4.0, JET_FUEL_EF_PER_GALLON),
        AircraftData("Helicopter", "aviation gasoline", 50, 1.7, AVGAS_EF_PER_GALLON),
    )
}


# ─────────────────────────────────────────────────────────────
# Fuel module: equipment categories and average fuel economy (MPG)
# ─────────────────────────────────────────────────────────────
EQUIPMENT_CATEGORIES: dict[str, str] = {
    "Cars": "Vehicle",
    "Motorcycles": "Vehicle",
    "Buses": "Vehicle",
    "Vans, Pickups, SUVs": "Vehicle",
    "Trucks (<18 wheel)": "Vehicle",
    "Fueler Truck": "Vehicle",
    "18 Wheelers": "Vehicle",
    "All Vehicles": "Vehicle",
    "Hybrid SUVs": "Vehicle",
    "Hybrid Cars": "Vehicle",
    "Boat": "Equipment",
    "Generator": "Equipment",
    "Trailer": "Equipment",
    "Cooking Equipment": "Equipment",
    "Lift": "Equipment",
    "Heater": "Equipment",
    "Other": "Equipment",
}

VEHICLE_FUEL_EFFICIENCY: dict[str, float] = {
    "Cars": 25,
    "Motorcycles": 45,
    "Buses": 6,
    "Vans, Pickups, SUVs": 18,
    "Trucks (<18 wheel)": 10,
    "Fueler Truck": 8,
    "18 Wheelers": 6,
    "All Vehicles": 20,
    "Hybrid SUVs": 30,
    "Hybrid Cars": 45,
}


# ─────────────────────────────────────────────────────────────
# Unit conversion constants (multiplicative scalars)
# ─────────────────────────────────────────────────────────────
CONVERSION_FACTORS: dict[str, float] = {
    # Distance
    "KM_TO_MILES": 0.621371,
    "MILES_TO_KM": 1.60934,
    # Volume
    "LITERS_TO_GALLONS": 0.264172,
    "GALLONS_TO_LITERS": 3.78541,
    # Mass
    "KG_TO_METRIC_TONS": 0.001,
    "METRIC_TONS_TO_KG": 1000,
    "LBS_TO_KG": 0.453592,
    # Area
    "SQ_METERS_TO_SQ_FEET": 10.7639,
    "SQ_FEET_TO_SQ_METERS": 0.092903,
    "SQ_YARDS_TO_SQ_FEET": 9,
    "SQ_FEET_TO_SQ_YARDS": 0.111111,
    "ACRES_TO_SQ_FEET": 43560,
    "SQ_FEET_TO_ACRES": 0.0000229568,
    # Natural gas
    "CUBIC_METERS_TO_CUBIC_FEET": 35.3147,
    "CUBIC_FEET_TO_CUBIC_METERS": 0.0283168,
    "CCF_TO_CUBIC_FEET": 100,          # 1 ccf = 100 cubic feet
    "CCM_TO_CUBIC_METERS": 100,        # 1 ccm = 100 cubic meters
    "THERMS_TO_CUBIC_FEET": 96.7,      # 1 therm ≈ 96.7 ft³ of natural gas
    "KWH_TO_CUBIC_FEET_GAS": 3.412,    # approximate
    # Fuel oil
    "LITERS_TO_GALLONS_OIL": 0.264172,
    "GALLONS_TO_LITERS_OIL": 3.78541,
    "BTU_TO_GALLONS_OIL": 0.00000719,
    "MEGAJOULES_TO_LITERS_OIL": 0.0263,
    "GIGAJOULES_TO_LITERS_OIL": 26.3,
    # Fuel module gallon equivalents
    "NATURAL_GAS_CUBIC_FEET_TO_GALLONS": 0.0112,  # 1000 ft³ ≈ 11.2 gal gasoline equivalent
    "GAS_CUBIC_FEET_TO_GALLONS": 0.00751,
    "PROPANE_KG_TO_GALLONS": 0.51,
    "BUTANE_KG_TO_GALLONS": 0.43,
    "DEFAULT_KG_TO_GALLONS": 0.5,
    "STERNO_CAN_LITERS": 0.21,                    # 7 oz can
}


DEFAULT_FACTORS = EmissionFactorTable(
    version=FACTORS_VERSION,
    source=FACTORS_SOURCE,
    electricity_source=ELECTRICITY_SOURCE,
    last_updated=date(2023, 1, 1),
    road_fuel=ROAD_FUEL_FACTORS,
    air=AIR_FACTORS,
    rail=RAIL_FACTORS,
    ferry=FERRY_FACTORS,
    electricity=ELECTRICITY_FACTORS,
    natural_gas=NATURAL_GAS_FACTOR,
    fuel_oil=FUEL_OIL_FACTOR,
    fuel=FUEL_FACTORS,
    commercial_travel=COMMERCIAL_TRAVEL_FACTORS,
    building_intensities=CBECS_INTENSITIES,
    hotel_energy=HOTEL_ENERGY_CONSUMPTION,
    aircraft=CHARTER_AIRCRAFT_DATA,
    equipment_categories=EQUIPMENT_CATEGORIES,
    vehicle_fuel_efficiency=VEHICLE_FUEL_EFFICIENCY,
    conversion_factors=CONVERSION_FACTORS,
    road_fuel_aliases=ROAD_FUEL_ALIASES,
    rail_aliases=RAIL_ALIASES,
)


# ─────────────────────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────────────────────

def _normalise_key(value: str) -> str:
    return value.strip().lower().replace(" ", "_").replace("-", "_")


def get_road_fuel_factor(
    fuel_type: str, table: EmissionFactorTable = DEFAULT_FACTORS
) -> EmissionFactor | None:
    """Return the road-vehicle factor for *fuel_type* (``petrol`` → gasoline)."""
    key = _normalise_key(fuel_type)
    key = table.road_fuel_aliases.get(key, key)
    return table.road_fuel.get(key)


def get_rail_factor(
    rail_type: str, table: EmissionFactorTable = DEFAULT_FACTORS
) -> EmissionFactor | None:
    """Return the passenger-mile factor for a rail type (``light-rail``, ``lightRail`` …)."""
    key = _normalise_key(rail_type)
    key = table.rail_aliases.get(key, key)
    return table.rail.get(key)


def get_flight_distance_class(distance_miles: float) -> str:
    """Transport-module flight class: short < 288 ≤ medium < 688 ≤ long."""
    if distance_miles < TRANSPORT_SHORT_HAUL_MAX_MILES:
        return FLIGHT_CLASS_SHORT
    if distance_miles < TRANSPORT_MEDIUM_HAUL_MAX_MILES:
        return FLIGHT_CLASS_MEDIUM
    return FLIGHT_CLASS_LONG


def get_flight_classification(distance_miles: float) -> str:
    """Commercial-travel flight class: Short < 287.7 ≤ Medium ≤ 688.5 < Long."""
    if distance_miles < COMMERCIAL_SHORT_HAUL_MAX_MILES:
        return "Short"
    if distance_miles <= COMMERCIAL_MEDIUM_HAUL_MAX_MILES:
        return "Medium"
    return "Long"


def get_electricity_factor(
    country: str | None = DEFAULT_COUNTRY, table: EmissionFactorTable = DEFAULT_FACTORS
) -> EmissionFactor:
    """
    Return the grid electricity factor (kg CO₂e/kWh) for *country*.
    Falls back to the United States when the country is not in the table.
    """
    factor = table.electricity.get(country or DEFAULT_COUNTRY)
    if factor is not None:
        return factor
    logger.debug("No electricity factor for %r – using %s", country, DEFAULT_COUNTRY)
    return table.electricity[DEFAULT_COUNTRY]


def get_building_intensity(
    building_type: str, table: EmissionFactorTable = DEFAULT_FACTORS
) -> BuildingIntensity | None:
    return table.building_intensities.get(building_type)


def get_fuel_factor(
    fuel_type: str, table: EmissionFactorTable = DEFAULT_FACTORS
) -> EmissionFactor | None:
    return table.fuel.get(fuel_type)


def get_hotel_energy_consumption(
    room_type: str, table: EmissionFactorTable = DEFAULT_FACTORS
) -> HotelEnergyConsumption | None:
    return table.hotel_energy.get(room_type)


def get_equipment_category(
    equipment_type: str, table: EmissionFactorTable = DEFAULT_FACTORS
) -> str:
    """Return 'Vehicle' or 'Equipment'; unknown types count as equipment."""
    return table.equipment_categories.get(equipment_type, EQUIPMENT_CATEGORY_EQUIPMENT)


def get_equipment_mpg(
    equipment_type: str, table: EmissionFactorTable = DEFAULT_FACTORS
) -> float:
    """Average fuel economy for *equipment_type*, 20 MPG when not listed."""
    mpg = table.vehicle_fuel_efficiency.get(equipment_type)
    if not mpg:
        logger.debug("No MPG for %r – using %s", equipment_type, DEFAULT_EQUIPMENT_MPG)
        return DEFAULT_EQUIPMENT_MPG
    return mpg


def get_aircraft_data(
    aircraft_type: str, table: EmissionFactorTable = DEFAULT_FACTORS
) -> AircraftData:
    """Return the charter aircraft profile or raise UnknownAircraftType."""
    data = table.aircraft.get(aircraft_type)
    if data is None:
        raise UnknownAircraftType(
            f"Unknown aircraft type: {aircraft_type}",
            context={"aircraft_type": aircraft_type, "known": sorted(table.aircraft)},
        )
    return data


def get_commercial_travel_factor(
    transport_type: str,
    distance_miles: float | None = None,
    table: EmissionFactorTable = DEFAULT_FACTORS,
) -> EmissionFactor:
    """
    Return the commercial travel factor for *transport_type*.

    Flights are classified by distance (287.7 / 688.5 mile thresholds) and
    use the average factor when no distance is given.
    """
    if transport_type == TRANSPORT_TYPE_FLIGHT:
        if distance_miles is None:
            return table.air[FLIGHT_CLASS_AVERAGE]
        return table.air[get_flight_classification(distance_miles).lower()]

    factor = table.commercial_travel.get(transport_type)
    if factor is None:
        raise UnknownTransportType(
            f"Unknown transport type: {transport_type}",
            context={
                "transport_type": transport_type,
                "known": [TRANSPORT_TYPE_FLIGHT, *sorted(table.commercial_travel)],
            },
        )
    return factor


def iter_factors(table: EmissionFactorTable = DEFAULT_FACTORS) -> Iterator[EmissionFactor]:
    """Yield every EmissionFactor in *table* (duplicates by reference included)."""
    for group in (
        table.road_fuel, table.air, table.rail, table.ferry,
        table.electricity, table.fuel, table.commercial_travel,
    ):
        yield from group.values()
    yield table.natural_gas
    yield table.fuel_oil


def get_emission_factor(
    factor_id: str, table: EmissionFactorTable = DEFAULT_FACTORS
) -> EmissionFactor | None:
    """Find a factor by its ``id`` (e.g. ``"flight-short"``)."""
    for factor in iter_factors(table):
        if factor.id == factor_id:
            return factor
    return None


# ─────────────────────────────────────────────────────────────
# Loading / dumping a factor table
# ─────────────────────────────────────────────────────────────
_TABLE_ADAPTER = TypeAdapter(EmissionFactorTable)


def dump_factor_table(table: EmissionFactorTable = DEFAULT_FACTORS) -> dict[str, Any]:
    """Return the JSON-serialisable form of *table*."""
    return _TABLE_ADAPTER.dump_python(table, mode="json")


def load_factor_table(path: str | Path) -> EmissionFactorTable:
    """
    Read and validate a JSON factor table written by ``dump_factor_table``.

    Raises
    ------
    EnvironmentError
        If the file cannot be read or does not describe a valid table.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
        table = _TABLE_ADAPTER.validate_python(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise EnvironmentError(f"Invalid emission factor table {path}: {exc}") from exc

    negative = [f.id for f in iter_factors(table) if f.value < 0]
    if negative:
        raise EnvironmentError(
            f"Invalid emission factor table {path}: negative factors {negative}"
        )
    logger.info("Loaded emission factor table %s (version %s)", path, table.version)
    return table


@lru_cache(maxsize=1)
def get_factor_table() -> EmissionFactorTable:
    """
    Return the active factor table: the file named by ``PEAR_FACTORS_FILE``
    when set, otherwise the built-in table.  Loaded once per process.
    """
    from pear_calc.config import get_config

    cfg = get_config()
    if cfg.factors_file:
        return load_factor_table(cfg.factors_file)
    return DEFAULT_FACTORS
