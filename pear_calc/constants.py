"""
constants.py – Shared labels, method names, and thresholds.
"""

# ── Module labels ─────────────────────────────────────────────
MODULE_TRANSPORT = "transport"
MODULE_UTILITIES = "utilities"
MODULE_FUEL = "fuel"
MODULE_EV_CHARGING = "ev_charging"
MODULE_HOTELS = "hotels"
MODULE_COMMERCIAL_TRAVEL = "commercial_travel"
MODULE_CHARTER_FLIGHTS = "charter_flights"

ALL_MODULES = [
    MODULE_TRANSPORT,
    MODULE_UTILITIES,
    MODULE_FUEL,
    MODULE_EV_CHARGING,
    MODULE_HOTELS,
    MODULE_COMMERCIAL_TRAVEL,
    MODULE_CHARTER_FLIGHTS,
]

# Human-readable names used in the scope breakdown and CLI output
MODULE_DISPLAY_NAMES = {
    MODULE_TRANSPORT: "Transport",
    MODULE_UTILITIES: "Utilities",
    MODULE_FUEL: "Fuel",
    MODULE_EV_CHARGING: "EV Charging",
    MODULE_HOTELS: "Hotels & Housing",
    MODULE_COMMERCIAL_TRAVEL: "Commercial Travel",
    MODULE_CHARTER_FLIGHTS: "Charter Flights",
}

# ── Transport modes ───────────────────────────────────────────
MODE_ROAD = "road"
MODE_AIR = "air"
MODE_RAIL = "rail"

# ── Flight distance thresholds (miles) ────────────────────────
# Transport worksheet: short < 288 <= medium < 688 <= long
TRANSPORT_SHORT_HAUL_MAX_MILES = 288
TRANSPORT_MEDIUM_HAUL_MAX_MILES = 688
# Commercial travel worksheet: short < 287.7 <= medium <= 688.5 < long
COMMERCIAL_SHORT_HAUL_MAX_MILES = 287.7
COMMERCIAL_MEDIUM_HAUL_MAX_MILES = 688.5

FLIGHT_CLASS_SHORT = "short"
FLIGHT_CLASS_MEDIUM = "medium"
FLIGHT_CLASS_LONG = "long"
FLIGHT_CLASS_AVERAGE = "average"

# ── Road vehicles ─────────────────────────────────────────────
# Placeholder fuel economy for the distance-based road estimate
ROAD_AVERAGE_MPG = 25
DEFAULT_VEHICLE_TYPE = "Car"

# ── Fuel module ───────────────────────────────────────────────
FUEL_METHOD_AMOUNT = "amount"
FUEL_METHOD_MILEAGE = "mileage"
FUEL_METHOD_COST = "cost"

DEFAULT_EQUIPMENT_MPG = 20
EQUIPMENT_CATEGORY_VEHICLE = "Vehicle"
EQUIPMENT_CATEGORY_EQUIPMENT = "Equipment"
NATURAL_GAS_FUEL_TYPE = "Natural gas"

# ── Utilities ─────────────────────────────────────────────────
METHOD_USAGE = "usage"
METHOD_AREA = "area"
METHOD_NONE = "none"

HEAT_FUEL_NATURAL_GAS = "Natural Gas"
HEAT_FUEL_FUEL_OIL = "Fuel Oil"
HEAT_FUEL_NONE = "None"
HEAT_FUEL_INCLUDED = "Inc. in Elec."

HEAT_FUEL_ALIASES = {
    "natural gas": HEAT_FUEL_NATURAL_GAS,
    "fuel oil": HEAT_FUEL_FUEL_OIL,
    "none": HEAT_FUEL_NONE,
    "inc. in elec.": HEAT_FUEL_INCLUDED,
    "included in electricity": HEAT_FUEL_INCLUDED,
    "included-in-electricity": HEAT_FUEL_INCLUDED,
}

DAYS_PER_YEAR = 365
# Utilities electricity is looked up for this country regardless of entry location
UTILITIES_ELECTRICITY_COUNTRY = "United States"
DEFAULT_COUNTRY = "United States"
REGIONAL_LABEL_COUNTRIES = {"United States", "Canada"}

# ── Charter flights ───────────────────────────────────────────
CHARTER_METHOD_FUEL = "fuel"
CHARTER_METHOD_HOURS = "hours"
CHARTER_METHOD_DISTANCE = "distance"

# ── Commercial travel ─────────────────────────────────────────
TRANSPORT_TYPE_FLIGHT = "Flight"

# ── GHG scopes ────────────────────────────────────────────────
SCOPE_DESCRIPTIONS = {
    1: (
        "Direct emissions from owned or controlled sources (fuel combustion "
        "in generators, production vehicles, facility heating)"
    ),
    2: (
        "Indirect emissions from purchased electricity (grid electricity at "
        "facilities, EV charging)"
    ),
    3: "All other indirect emissions (hotels, commercial travel, charter flights)",
}

# ── PEAR metrics ──────────────────────────────────────────────
WASTE_TO_LANDFILL = "Waste to Landfill"
WASTE_COMPOST = "Compost"
POUNDS_PER_TON = 2000
# Approximate; varies by material
POUNDS_PER_CUBIC_YARD = 300

# ── Output ────────────────────────────────────────────────────
OUT_RESULTS = "results.json"
OUT_FACTORS = "emission_factors.json"
