"""
Unit tests for pear_calc/calculators/transport.py

Road:  gallons × road fuel factor (distance ÷ 25 MPG when no fuel given)
Air:   miles (×2 for a return trip) × passengers × class factor
Rail:  miles × passengers × rail type factor
"""
import pytest

from pear_calc.calculators import transport
from pear_calc.emission_factors import DEFAULT_FACTORS
from pear_calc.exceptions import MissingRequiredField, UnknownFuelType, UnknownTransportType
from pear_calc.schemas import AirTravelEntry, RailTravelEntry, RoadVehicleEntry, parse_entries


# ─────────────────────────────────────────────────────────────────────────────
# 1. Road vehicles
# ─────────────────────────────────────────────────────────────────────────────

class TestCalculateRoadVehicle:

    def test_petrol_distance_method(self):
        # 100 mi ÷ 25 MPG = 4 gal × 8.877 = 35.508 kg CO₂e
        entry = RoadVehicleEntry(id="r1", fuel_type="petrol", distance=100)
        result = transport.calculate_road_vehicle(entry, DEFAULT_FACTORS)

        assert result.co2e == pytest.approx(35.51, abs=0.01)
        assert result.fuel_gallons == pytest.approx(4.0)
        assert result.distance_miles == 100
        assert result.mode == "road"
        assert "Distance method" in result.calculation_method

    def test_direct_fuel_consumption_wins_over_distance(self):
        # 10 L → 2.64172 gal × 10.067
        entry = RoadVehicleEntry(
            id="r2", fuel_type="diesel", distance=400,
            fuel_consumption=10, fuel_unit="liters",
        )
        result = transport.calculate_road_vehicle(entry, DEFAULT_FACTORS)

        assert result.co2e == pytest.approx(10 * 0.264172 * 10.067)
        assert "Fuel consumption method" in result.calculation_method

    def test_kilometres_are_converted(self):
        entry = RoadVehicleEntry(id="r3", fuel_type="gasoline", distance=100, distance_unit="km")
        result = transport.calculate_road_vehicle(entry, DEFAULT_FACTORS)
        assert result.co2e == pytest.approx(62.1371 / 25 * 8.877)

    def test_electric_is_zero(self):
        entry = RoadVehicleEntry(id="r4", fuel_type="electric", distance=120)
        assert transport.calculate_road_vehicle(entry, DEFAULT_FACTORS).co2e == 0

    def test_unknown_fuel_raises(self):
        entry = RoadVehicleEntry(id="r5", fuel_type="coal", distance=10)
        with pytest.raises(UnknownFuelType):
            transport.calculate_road_vehicle(entry, DEFAULT_FACTORS)

    def test_no_distance_and_no_fuel_raises(self):
        entry = RoadVehicleEntry(id="r6", fuel_type="diesel")
        with pytest.raises(MissingRequiredField) as exc_info:
            transport.calculate_road_vehicle(entry, DEFAULT_FACTORS)
        assert exc_info.value.entry_id == "r6"


# ─────────────────────────────────────────────────────────────────────────────
# 2. Air travel
# ─────────────────────────────────────────────────────────────────────────────

class TestCalculateAirTravel:

    def test_medium_haul_round_trip(self):
        # 500 mi × 2 passengers × 0.177 = 177.0
        entry = AirTravelEntry(id="a1", distance=500, passengers=2)
        result = transport.calculate_air_travel(entry, DEFAULT_FACTORS)

        assert result.co2e == pytest.approx(177.0)
        assert result.flight_class == "medium"
        assert result.passenger_miles == pytest.approx(1000)

    def test_return_trip_doubles_within_same_class(self):
        one_way = AirTravelEntry(id="a2", distance=100)
        both_ways = AirTravelEntry(id="a3", distance=100, return_trip=True)

        single = transport.calculate_air_travel(one_way, DEFAULT_FACTORS)
        double = transport.calculate_air_travel(both_ways, DEFAULT_FACTORS)

        assert double.co2e == 2 * single.co2e
        assert double.flight_class == single.flight_class == "short"

    def test_class_uses_round_trip_distance(self):
        # 200 mi each way → 400 mi → medium
        entry = AirTravelEntry(id="a4", distance=200, return_trip=True)
        result = transport.calculate_air_travel(entry, DEFAULT_FACTORS)
        assert result.flight_class == "medium"
        assert result.co2e == pytest.approx(400 * 0.177)

    def test_long_haul(self):
        entry = AirTravelEntry(id="a5", distance=2000, distance_unit="km")
        result = transport.calculate_air_travel(entry, DEFAULT_FACTORS)
        assert result.flight_class == "long"
        assert result.co2e == pytest.approx(2000 * 0.621371 * 0.248)

    @pytest.mark.parametrize("distance", [None, 0, -10])
    def test_missing_or_non_positive_distance_raises(self, distance):
        entry = AirTravelEntry(id="a6", distance=distance)
        with pytest.raises(MissingRequiredField):
            transport.calculate_air_travel(entry, DEFAULT_FACTORS)


# ─────────────────────────────────────────────────────────────────────────────
# 3. Rail travel
# ─────────────────────────────────────────────────────────────────────────────

class TestCalculateRailTravel:

    def test_national_rail(self):
        # 100 mi × 2 × 0.057 = 11.4
        entry = RailTravelEntry(id="t1", rail_type="national", distance=100, passengers=2)
        assert transport.calculate_rail_travel(entry, DEFAULT_FACTORS).co2e == pytest.approx(11.4)

    def test_underground_uses_light_rail_factor(self):
        entry = RailTravelEntry(id="t2", rail_type="underground", distance=10)
        result = transport.calculate_rail_travel(entry, DEFAULT_FACTORS)
        assert result.emission_factor == 0.046

    def test_unknown_rail_type_raises(self):
        entry = RailTravelEntry(id="t3", rail_type="maglev", distance=10)
        with pytest.raises(UnknownTransportType):
            transport.calculate_rail_travel(entry, DEFAULT_FACTORS)

    def test_missing_distance_raises(self):
        entry = RailTravelEntry(id="t4", rail_type="national")
        with pytest.raises(MissingRequiredField):
            transport.calculate_rail_travel(entry, DEFAULT_FACTORS)


# ─────────────────────────────────────────────────────────────────────────────
# 4. calculate_all  (dispatch + aggregation)
# ─────────────────────────────────────────────────────────────────────────────

class TestCalculateAll:

    def _entries(self):
        return parse_entries("transport", [
            {"id": "r1", "mode": "road", "fuelType": "petrol", "distance": 100},
            {"id": "a1", "mode": "air", "distance": 500, "passengers": 2},
            {"id": "t1", "mode": "rail", "railType": "national", "distance": 100, "passengers": 2},
        ])

    def test_totals_by_mode_and_type(self):
        results = transport.calculate_all(self._entries(), DEFAULT_FACTORS)
        totals = results.totals

        assert totals.by_mode["road"] == pytest.approx(35.508)
        assert totals.by_mode["air"] == pytest.approx(177.0)
        assert totals.by_mode["rail"] == pytest.approx(11.4)
        assert set(totals.by_type) == {"Car-petrol", "medium", "national"}
        assert totals.total_co2e == pytest.approx(35.508 + 177.0 + 11.4)
        assert totals.total_distance_miles == pytest.approx(100 + 500 + 100)
        assert totals.total_fuel_gallons == pytest.approx(4.0)

    def test_flight_type_label_is_used_when_given(self):
        entries = parse_entries("transport", [
            {"id": "a1", "mode": "air", "distance": 500, "flightType": "Crew flights"},
        ])
        totals = transport.calculate_all(entries, DEFAULT_FACTORS).totals
        assert totals.by_type == {"Crew flights": pytest.approx(88.5)}

    def test_metadata_cites_table(self):
        metadata = transport.calculate_all(self._entries(), DEFAULT_FACTORS).metadata
        assert metadata.emission_factors_version == "4.2.9"
        assert metadata.source == DEFAULT_FACTORS.source

    def test_empty_input_has_no_totals(self):
        results = transport.calculate_all([], DEFAULT_FACTORS)
        assert results.totals is None
        assert results.results == []
        assert results.total_co2e == 0.0

    def test_bad_entry_is_skipped(self):
        entries = self._entries() + parse_entries("transport", [
            {"id": "bad", "mode": "road", "fuelType": "coal", "distance": 10},
        ])
        results = transport.calculate_all(entries, DEFAULT_FACTORS)

        assert len(results.results) == 3
        assert [e.entry_id for e in results.errors] == ["bad"]
        assert results.errors[0].error_code == "PEAR_CALC_001"
        assert results.total_co2e == pytest.approx(35.508 + 177.0 + 11.4)

    def test_recalculation_is_idempotent(self):
        entries = self._entries()
        first = transport.calculate_all(entries, DEFAULT_FACTORS)
        second = transport.calculate_all(entries, DEFAULT_FACTORS)
        assert first.totals == second.totals
        assert first.results == second.results
