"""
schemas.py – Pydantic models for every entry the calculators accept.

Entries arrive from the browser form layer already validated for form-level
rules, so these models only pin down shape and types.  Field names are
snake_case in Python and camelCase on the wire (``fuelType``,
``calculationMethod`` …); both spellings are accepted on input.

All date fields use ISO 8601 (YYYY-MM-DD) strings.  Categorical keys that
index the factor table (fuel type, room type, aircraft type …) are plain
strings – the calculators check them against the active table so that a new
table can add categories without a code change.
"""
from __future__ import annotations

import re
from typing import Annotated, Any, Literal, Optional, Union

from dateutil import parser as dateutil_parser
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from pear_calc.constants import (
    DEFAULT_COUNTRY,
    DEFAULT_VEHICLE_TYPE,
    HEAT_FUEL_ALIASES,
    HEAT_FUEL_NONE,
    MODULE_CHARTER_FLIGHTS,
    MODULE_COMMERCIAL_TRAVEL,
    MODULE_EV_CHARGING,
    MODULE_FUEL,
    MODULE_HOTELS,
    MODULE_TRANSPORT,
    MODULE_UTILITIES,
)


def to_iso_date(value: Any) -> Any:
    """
    Normalise a date-like value to ``YYYY-MM-DD``.

    Accepts ISO strings, ``MM/DD/YYYY``, ``DD-Mon-YYYY`` and the like.
    Values that do not parse are returned unchanged; dates are not
    validated here.
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    if re.fullmatch(r"\d{4}-\d{2}-\d{2}", value):
        return value
    try:
        return dateutil_parser.parse(value, dayfirst=False).strftime("%Y-%m-%d")
    except (ValueError, OverflowError):
        return value


class EntryModel(BaseModel):
    """Shared configuration and identity fields for all entries."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    id: str = Field(..., description="Entry identifier, unique within its module")
    date: Optional[str] = Field(None, description="Activity date YYYY-MM-DD")

    @field_validator("date", mode="before")
    @classmethod
    def _iso_date(cls, value: Any) -> Any:
        return to_iso_date(value)


# ─────────────────────────────────────────────────────────────
# Transport (road / air / rail)
# ─────────────────────────────────────────────────────────────

class RoadVehicleEntry(EntryModel):
    """A road vehicle trip, measured by fuel used or distance driven."""

    mode: Literal["road"] = "road"
    vehicle_type: str = Field(DEFAULT_VEHICLE_TYPE, description="Vehicle label used in breakdowns")
    fuel_type: str = Field(..., description="petrol | diesel | electric | hybrid | lpg")
    distance: Optional[float] = Field(None, description="Distance travelled")
    distance_unit: str = Field("miles", description="miles | km")
    fuel_consumption: Optional[float] = Field(None, description="Fuel used, when known")
    fuel_unit: str = Field("gallons", description="gallons | liters")
    passengers: Optional[int] = Field(None, description="Occupants (informational)")


class AirTravelEntry(EntryModel):
    """A commercial flight leg flown by one or more passengers."""

    mode: Literal["air"] = "air"
    distance: Optional[float] = Field(None, description="One-way flight distance")
    distance_unit: str = Field("miles", description="miles | km")
    passengers: int = Field(1, description="Number of passengers")
    return_trip: bool = Field(False, description="Counts the distance twice when true")
    flight_type: Optional[str] = Field(None, description="Optional label used in breakdowns")


class RailTravelEntry(EntryModel):
    """A rail journey."""

    mode: Literal["rail"] = "rail"
    rail_type: str = Field(..., description="national | international | light-rail | underground")
    distance: Optional[float] = Field(None, description="Journey distance")
    distance_unit: str = Field("miles", description="miles | km")
    passengers: int = Field(1, description="Number of passengers")


TransportEntry = Annotated[
    Union[RoadVehicleEntry, AirTravelEntry, RailTravelEntry],
    Field(discriminator="mode"),
]


# ─────────────────────────────────────────────────────────────
# Utilities (electricity + heating)
# ─────────────────────────────────────────────────────────────

class UtilitiesEntry(EntryModel):
    """Electricity and heating for one production location."""

    description: Optional[str] = None
    location_name: str = Field("", description="Office, stage, or location name")
    country: Optional[str] = Field(None, description="Recorded; not yet used for the grid factor")
    state_province: Optional[str] = None

    building_type: str = Field("Other", description="CBECS building type")
    area: Optional[float] = Field(None, description="Floor area")
    area_unit: str = Field("square feet", description="square feet | square meters | square yards | acres")
    days_occupied: Optional[float] = Field(None, description="Days used; defaults to a full year")

    electricity_method: Literal["usage", "area", "none"] = "none"
    electricity_usage: Optional[float] = Field(None, description="Metered kWh")

    heat_fuel: str = Field(HEAT_FUEL_NONE, description="Natural Gas | Fuel Oil | None | Inc. in Elec.")
    heat_method: Literal["usage", "area", "none"] = "none"
    natural_gas_usage: Optional[float] = None
    natural_gas_unit: Optional[str] = Field(
        None, description="cubic feet | cubic meters | ccf | ccm | therms | kWh"
    )
    fuel_oil_usage: Optional[float] = None
    fuel_oil_unit: Optional[str] = Field(
        None, description="gallons | liters | Btu | Megajoules | Gigajoules"
    )

    @field_validator("heat_fuel")
    @classmethod
    def _canonical_heat_fuel(cls, value: str) -> str:
        return HEAT_FUEL_ALIASES.get(value.strip().lower(), value)


# ─────────────────────────────────────────────────────────────
# Fuel (equipment & vehicles)
# ─────────────────────────────────────────────────────────────

class FuelEntry(EntryModel):
    """Fuel burned by production equipment or vehicles."""

    end_date: Optional[str] = None
    equipment_type: str = Field(..., description="Cars, Generator, 18 Wheelers …")
    fuel_type: str = Field(..., description="Gasoline, Diesel Fuel, Propane …")
    reason_for_use: Optional[str] = None

    calculation_method: Literal["amount", "mileage", "cost"]

    fuel_amount: Optional[float] = None
    fuel_unit: Optional[str] = Field(
        None,
        description="gallons | liters | cubic feet | cubic meters | kg | lbs | ccf | ccm | sterno cans",
    )
    miles_driven: Optional[float] = None
    total_cost: Optional[float] = Field(None, description="Total spend, $US")
    average_price_per_gallon: Optional[float] = Field(None, description="$US per gallon")

    @field_validator("end_date", mode="before")
    @classmethod
    def _iso_end_date(cls, value: Any) -> Any:
        return to_iso_date(value)


# ─────────────────────────────────────────────────────────────
# EV charging
# ─────────────────────────────────────────────────────────────

class EVChargingEntry(EntryModel):
    """Electricity drawn at EV charging stations."""

    description: Optional[str] = None
    country: str = DEFAULT_COUNTRY
    state_province: Optional[str] = None
    zip_code: Optional[str] = None
    address: Optional[str] = None
    electricity_usage_kwh: float = Field(..., alias="electricityUsageKWh")
    miles_driven: Optional[float] = Field(None, description="Tracking only")


# ─────────────────────────────────────────────────────────────
# Hotels & housing
# ─────────────────────────────────────────────────────────────

class HotelsEntry(EntryModel):
    """Room nights (rooms × nights) or housing nights."""

    room_type: str = Field(..., description="Economy Hotel, Average House …")
    city: Optional[str] = None
    country: str = DEFAULT_COUNTRY
    state_province: Optional[str] = None
    total_nights: float


# ─────────────────────────────────────────────────────────────
# Commercial travel
# ─────────────────────────────────────────────────────────────

class CommercialTravelEntry(EntryModel):
    """Passenger distance on a commercial flight, train or ferry."""

    departure_city: Optional[str] = None
    arrival_city: Optional[str] = None
    transport_type: str = Field(
        ..., description="Flight | National rail | International rail | Light rail and tram | Ferry"
    )
    passenger_distance: float = Field(..., description="Distance × passengers")
    distance_unit: str = Field("miles", description="miles | kilometers")
    description: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Charter & helicopter flights
# ─────────────────────────────────────────────────────────────

class CharterFlightsEntry(EntryModel):
    """A chartered jet or helicopter flight."""

    aircraft_type: str = Field(..., description="Chartered Commercial Jet | … | Helicopter")
    model: Optional[str] = None
    calculation_method: Literal["fuel", "hours", "distance"]
    fuel_amount: Optional[float] = None
    fuel_unit: Optional[str] = Field(None, description="gallons | liters")
    hours_flown: Optional[float] = None
    distance_flown: Optional[float] = None
    distance_unit: Optional[str] = Field(None, description="miles | kilometers")
    description: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# PEAR metrics
# ─────────────────────────────────────────────────────────────

class DrinkingWaterEntry(EntryModel):
    container_type: str
    quantity: float
    total_cost: Optional[float] = None
    comments: Optional[str] = None


class WasteEntry(EntryModel):
    waste_type: str = Field(..., description="Waste to Landfill, Mixed Recycling, Compost …")
    amount: float
    unit: Literal["pounds", "tons", "cubic yards"] = "pounds"
    location: Optional[str] = None
    data_source: Optional[str] = None
    comments: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Whole-production workbook
# ─────────────────────────────────────────────────────────────

class ProductionWorkbook(BaseModel):
    """Every module's entries for one production."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="ignore")

    production_name: Optional[str] = None
    transport: list[TransportEntry] = Field(default_factory=list)
    utilities: list[UtilitiesEntry] = Field(default_factory=list)
    fuel: list[FuelEntry] = Field(default_factory=list)
    ev_charging: list[EVChargingEntry] = Field(default_factory=list)
    hotels: list[HotelsEntry] = Field(default_factory=list)
    commercial_travel: list[CommercialTravelEntry] = Field(default_factory=list)
    charter_flights: list[CharterFlightsEntry] = Field(default_factory=list)
    drinking_water: list[DrinkingWaterEntry] = Field(default_factory=list)
    waste: list[WasteEntry] = Field(default_factory=list)


# ─────────────────────────────────────────────────────────────
# Module helpers
# ─────────────────────────────────────────────────────────────

MODULE_ENTRY_TYPES: dict[str, object] = {
    MODULE_TRANSPORT: TransportEntry,
    MODULE_UTILITIES: UtilitiesEntry,
    MODULE_FUEL: FuelEntry,
    MODULE_EV_CHARGING: EVChargingEntry,
    MODULE_HOTELS: HotelsEntry,
    MODULE_COMMERCIAL_TRAVEL: CommercialTravelEntry,
    MODULE_CHARTER_FLIGHTS: CharterFlightsEntry,
}

_ENTRY_LIST_ADAPTERS = {
    module: TypeAdapter(list[entry_type])  # type: ignore[valid-type]
    for module, entry_type in MODULE_ENTRY_TYPES.items()
}


def parse_entries(module: str, raw_entries: list[dict]) -> list[BaseModel]:
    """
    Validate raw dicts into the entry models of *module*.

    Raises
    ------
    KeyError
        If *module* is not a calculator module.
    pydantic.ValidationError
        If an entry has the wrong shape.
    """
    return _ENTRY_LIST_ADAPTERS[module].validate_python(raw_entries)
