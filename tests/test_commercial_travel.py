"""
Unit tests for pear_calc/calculators/commercial_travel.py

Formula: passenger-miles × factor; flights classified at 287.7 / 688.5 miles.
"""
import pytest

from pear_calc.calculators import commercial_travel
from pear_calc.emission_factors import DEFAULT_FACTORS
from pear_calc.exceptions import UnknownTransportType
from pear_calc.schemas import CommercialTravelEntry


class TestCalculateEntry:

    def test_medium_flight(self):
        # 500 pass-mi × 0.177 = 88.5
        entry = CommercialTravelEntry(id="m1", transport_type="Flight", passenger_distance=500)
        result = commercial_travel.calculate_entry(entry, DEFAULT_FACTORS)

        assert result.co2e == pytest.approx(88.5)
        assert result.flight_classification == "Medium"
        assert result.calculation_method == "Flight (Medium): 500.0 passenger-miles × 0.177 kg CO₂e/mi"

    def test_lower_threshold_is_medium(self):
        entry = CommercialTravelEntry(id="m2", transport_type="Flight", passenger_distance=287.7)
        result = commercial_travel.calculate_entry(entry, DEFAULT_FACTORS)
        assert result.flight_classification == "Medium"
        assert result.emission_factor == 0.177

    def test_kilometers_are_converted_before_classifying(self):
        # 1000 km = 621.371 mi → Medium
        entry = CommercialTravelEntry(
            id="m3", transport_type="Flight", passenger_distance=1000, distance_unit="kilometers",
        )
        result = commercial_travel.calculate_entry(entry, DEFAULT_FACTORS)

        assert result.distance_in_miles == pytest.approx(621.371)
        assert result.co2e == pytest.approx(621.371 * 0.177)

    def test_ferry_has_no_flight_class(self):
        entry = CommercialTravelEntry(id="m4", transport_type="Ferry", passenger_distance=100)
        result = commercial_travel.calculate_entry(entry, DEFAULT_FACTORS)

        assert result.co2e == pytest.approx(18.1)
        assert result.flight_classification is None
        assert result.calculation_method == "Ferry: 100.0 passenger-miles × 0.181 kg CO₂e/mi"

    def test_unknown_type_raises(self):
        entry = CommercialTravelEntry(id="m5", transport_type="Rocket", passenger_distance=100)
        with pytest.raises(UnknownTransportType):
            commercial_travel.calculate_entry(entry, DEFAULT_FACTORS)


class TestCalculateAll:

    def test_flight_breakdown_only_when_flights_present(self):
        entries = [CommercialTravelEntry(id="m1", transport_type="National rail", passenger_distance=100)]
        totals = commercial_travel.calculate_all(entries, DEFAULT_FACTORS).totals

        assert totals.by_flight_classification is None
        assert totals.by_transport_type == {"National rail": pytest.approx(5.7)}

    def test_totals(self):
        entries = [
            CommercialTravelEntry(id="m1", transport_type="Flight", passenger_distance=100),
            CommercialTravelEntry(id="m2", transport_type="Flight", passenger_distance=1000),
            CommercialTravelEntry(id="m3", transport_type="Ferry", passenger_distance=100),
        ]
        totals = commercial_travel.calculate_all(entries, DEFAULT_FACTORS).totals

        assert totals.total_passenger_miles == pytest.approx(1200)
        assert totals.by_flight_classification == {
            "Short": pytest.approx(25.9),
            "Long": pytest.approx(248.0),
        }
        assert totals.total_co2e == pytest.approx(25.9 + 248.0 + 18.1)
