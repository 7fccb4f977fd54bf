"""
Unit tests for pear_calc/emission_factors.py

Lookups run against the built-in table.  Load/dump tests write JSON into
pytest's tmp_path; get_factor_table is patched at the config boundary and
its process cache is cleared around each test that touches it.
"""
import dataclasses
import json
from datetime import date
from unittest.mock import patch

import pytest

from pear_calc.config import Config
from pear_calc.emission_factors import (
    DEFAULT_FACTORS,
    EmissionFactor,
    dump_factor_table,
    get_aircraft_data,
    get_building_intensity,
    get_commercial_travel_factor,
    get_electricity_factor,
    get_emission_factor,
    get_equipment_category,
    get_equipment_mpg,
    get_factor_table,
    get_flight_classification,
    get_flight_distance_class,
    get_fuel_factor,
    get_hotel_energy_consumption,
    get_rail_factor,
    get_road_fuel_factor,
    iter_factors,
    load_factor_table,
)
from pear_calc.exceptions import UnknownAircraftType, UnknownTransportType


@pytest.fixture
def fresh_factor_cache():
    get_factor_table.cache_clear()
    yield
    get_factor_table.cache_clear()


def write_table(path, table=DEFAULT_FACTORS):
    path.write_text(json.dumps(dump_factor_table(table)), encoding="utf-8")
    return path


# ─────────────────────────────────────────────────────────────────────────────
# 1. Table contents
# ─────────────────────────────────────────────────────────────────────────────

class TestDefaultTable:

    def test_version_and_sources(self):
        assert DEFAULT_FACTORS.version == "4.2.9"
        assert "DEFRA 2023" in DEFAULT_FACTORS.source
        assert "IEA" in DEFAULT_FACTORS.electricity_source
        assert DEFAULT_FACTORS.last_updated == date(2023, 1, 1)

    def test_every_factor_is_non_negative(self):
        assert all(f.value >= 0 for f in iter_factors())

    def test_negative_factor_is_rejected(self):
        with pytest.raises(ValueError):
            EmissionFactor(
                id="bad", category="fuel", subcategory="liquid",
                unit="gallon", value=-1.0, source="test", year=2023,
            )

    def test_get_emission_factor_by_id(self):
        assert get_emission_factor("flight-short").value == 0.259
        assert get_emission_factor("no-such-factor") is None


# ─────────────────────────────────────────────────────────────────────────────
# 2. Transport lookups
# ─────────────────────────────────────────────────────────────────────────────

class TestRoadFuelFactor:

    def test_petrol_is_an_alias_for_gasoline(self):
        assert get_road_fuel_factor("petrol").value == 8.877
        assert get_road_fuel_factor("Petrol") is get_road_fuel_factor("gasoline")

    def test_hybrid_is_sixty_percent_of_petrol(self):
        assert get_road_fuel_factor("hybrid").value == pytest.approx(8.877 * 0.6)

    def test_unknown_fuel_returns_none(self):
        assert get_road_fuel_factor("unobtanium") is None


class TestRailFactor:

    def test_hyphenated_light_rail(self):
        assert get_rail_factor("light-rail").value == 0.046

    def test_underground_reuses_light_rail_value(self):
        assert get_rail_factor("underground").value == get_rail_factor("light-rail").value

    def test_aliases(self):
        assert get_rail_factor("metro").id == "rail-underground"
        assert get_rail_factor("tram").id == "rail-light"

    def test_unknown_rail_returns_none(self):
        assert get_rail_factor("maglev") is None


class TestFlightDistanceClass:

    @pytest.mark.parametrize("miles, expected", [
        (100, "short"),
        (287.9, "short"),
        (288, "medium"),
        (687.9, "medium"),
        (688, "long"),
        (5000, "long"),
    ])
    def test_transport_thresholds(self, miles, expected):
        assert get_flight_distance_class(miles) == expected


class TestFlightClassification:

    @pytest.mark.parametrize("miles, expected", [
        (287.6, "Short"),
        (287.7, "Medium"),
        (688.5, "Medium"),
        (688.6, "Long"),
    ])
    def test_commercial_thresholds(self, miles, expected):
        assert get_flight_classification(miles) == expected


# ─────────────────────────────────────────────────────────────────────────────
# 3. Electricity, buildings, hotels, equipment, aircraft
# ─────────────────────────────────────────────────────────────────────────────

class TestElectricityFactor:

    def test_known_countries(self):
        assert get_electricity_factor("United States").value == 0.3692
        assert get_electricity_factor("Canada").value == 0.1183
        assert get_electricity_factor("United Kingdom").value == 0.2063

    def test_unknown_country_falls_back_to_united_states(self):
        assert get_electricity_factor("Atlantis").value == 0.3692

    def test_none_uses_united_states(self):
        assert get_electricity_factor(None).id == "electricity-us"


class TestOtherLookups:

    def test_building_intensity(self):
        office = get_building_intensity("Office")
        assert office.electricity_kwh_per_sqft == 13.6
        assert get_building_intensity("Castle") is None

    def test_fuel_factor_is_case_sensitive(self):
        assert get_fuel_factor("Gasoline").value == 8.8769
        assert get_fuel_factor("gasoline") is None

    def test_hotel_energy(self):
        assert get_hotel_energy_consumption("Economy Hotel").kwh_per_year == 5515.85
        assert get_hotel_energy_consumption("Igloo") is None

    def test_equipment_category_defaults_to_equipment(self):
        assert get_equipment_category("Cars") == "Vehicle"
        assert get_equipment_category("Spaceship") == "Equipment"

    def test_equipment_mpg_defaults_to_twenty(self):
        assert get_equipment_mpg("Buses") == 6
        assert get_equipment_mpg("Spaceship") == 20

    def test_aircraft_data(self):
        heli = get_aircraft_data("Helicopter")
        assert heli.gallons_per_hour == 50
        assert heli.emission_factor_per_gallon == 8.824

    def test_unknown_aircraft_raises(self):
        with pytest.raises(UnknownAircraftType) as exc_info:
            get_aircraft_data("Zeppelin")
        assert exc_info.value.context["aircraft_type"] == "Zeppelin"


class TestCommercialTravelFactor:

    def test_flight_without_distance_uses_average(self):
        assert get_commercial_travel_factor("Flight").value == 0.167

    @pytest.mark.parametrize("miles, expected", [
        (100, 0.259),
        (500, 0.177),
        (1000, 0.248),
    ])
    def test_flight_by_distance(self, miles, expected):
        assert get_commercial_travel_factor("Flight", miles).value == expected

    def test_fixed_factor_types(self):
        assert get_commercial_travel_factor("Ferry").value == 0.181
        assert get_commercial_travel_factor("National rail").value == 0.057

    def test_unknown_type_raises(self):
        with pytest.raises(UnknownTransportType):
            get_commercial_travel_factor("Rocket", 100)


# ─────────────────────────────────────────────────────────────────────────────
# 4. Loading / dumping tables
# ─────────────────────────────────────────────────────────────────────────────

class TestLoadFactorTable:

    def test_dumped_table_loads_back_equal(self, tmp_path):
        path = write_table(tmp_path / "factors.json")
        assert load_factor_table(path) == DEFAULT_FACTORS

    def test_replacement_values_are_used(self, tmp_path):
        fuel = dict(DEFAULT_FACTORS.fuel)
        fuel["Gasoline"] = dataclasses.replace(fuel["Gasoline"], value=10.0)
        table = dataclasses.replace(DEFAULT_FACTORS, version="2024.1", fuel=fuel)

        loaded = load_factor_table(write_table(tmp_path / "factors.json", table))

        assert loaded.version == "2024.1"
        assert get_fuel_factor("Gasoline", loaded).value == 10.0

    def test_negative_value_in_file_raises(self, tmp_path):
        raw = dump_factor_table()
        raw["natural_gas"]["value"] = -2.0
        path = tmp_path / "factors.json"
        path.write_text(json.dumps(raw), encoding="utf-8")

        with pytest.raises(EnvironmentError):
            load_factor_table(path)

    def test_malformed_json_raises(self, tmp_path):
        path = tmp_path / "factors.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(EnvironmentError):
            load_factor_table(path)

    def test_missing_section_raises(self, tmp_path):
        raw = dump_factor_table()
        del raw["aircraft"]
        path = tmp_path / "factors.json"
        path.write_text(json.dumps(raw), encoding="utf-8")
        with pytest.raises(EnvironmentError):
            load_factor_table(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(EnvironmentError):
            load_factor_table(tmp_path / "absent.json")


class TestGetFactorTable:

    def test_defaults_to_built_in_table(self, fresh_factor_cache):
        with patch("pear_calc.config.get_config", return_value=Config()):
            assert get_factor_table() is DEFAULT_FACTORS

    def test_reads_configured_file(self, tmp_path, fresh_factor_cache):
        table = dataclasses.replace(DEFAULT_FACTORS, version="2099.0")
        path = write_table(tmp_path / "factors.json", table)

        with patch("pear_calc.config.get_config", return_value=Config(factors_file=str(path))):
            assert get_factor_table().version == "2099.0"

    def test_result_is_cached(self, fresh_factor_cache):
        with patch("pear_calc.config.get_config", return_value=Config()) as mock_cfg:
            get_factor_table()
            get_factor_table()
        mock_cfg.assert_called_once()
