"""
Unit tests for pear_calc/calculators/hotels.py

Formula: grid factor × room type kWh/year × nights / 365
"""
import pytest

from pear_calc.calculators import hotels
from pear_calc.emission_factors import DEFAULT_FACTORS
from pear_calc.exceptions import UnknownRoomType
from pear_calc.schemas import HotelsEntry


class TestCalculateEntry:

    def test_full_year_economy_hotel(self):
        entry = HotelsEntry(id="h1", room_type="Economy Hotel", total_nights=365)
        result = hotels.calculate_entry(entry, DEFAULT_FACTORS)

        assert result.co2e == pytest.approx(0.3692 * 5515.85)
        assert result.kwh_per_year == 5515.85
        assert result.calculation_method == "Economy Hotel: 5515.85 kWh/yr × 365/365 nights"

    def test_nights_scale_linearly(self):
        entry = HotelsEntry(id="h2", room_type="Economy Hotel", total_nights=73)
        result = hotels.calculate_entry(entry, DEFAULT_FACTORS)
        assert result.co2e == pytest.approx(0.3692 * 5515.85 * 0.2)

    def test_uk_housing_uses_uk_grid(self):
        entry = HotelsEntry(
            id="h3", room_type="Apartment/Condo", country="United Kingdom", total_nights=365,
        )
        result = hotels.calculate_entry(entry, DEFAULT_FACTORS)
        assert result.co2e == pytest.approx(0.2063 * 6040)
        assert result.region == "United Kingdom"

    def test_unknown_room_type_raises(self):
        entry = HotelsEntry(id="h4", room_type="Igloo", total_nights=3)
        with pytest.raises(UnknownRoomType):
            hotels.calculate_entry(entry, DEFAULT_FACTORS)


class TestCalculateAll:

    def test_totals(self):
        entries = [
            HotelsEntry(id="h1", room_type="Economy Hotel", total_nights=365),
            HotelsEntry(id="h2", room_type="Luxury Hotel", total_nights=10, country="Canada"),
        ]
        results = hotels.calculate_all(entries, DEFAULT_FACTORS)
        totals = results.totals

        assert totals.total_nights == 375
        assert set(totals.by_room_type) == {"Economy Hotel", "Luxury Hotel"}
        assert totals.by_country["Canada"] == pytest.approx(0.1183 * 16452.9 * 10 / 365)
        assert results.metadata.source == DEFAULT_FACTORS.electricity_source

    def test_unknown_room_is_reported(self):
        entries = [
            HotelsEntry(id="h1", room_type="Economy Hotel", total_nights=1),
            HotelsEntry(id="h2", room_type="Igloo", total_nights=1),
        ]
        results = hotels.calculate_all(entries, DEFAULT_FACTORS)
        assert results.errors[0].error_code == "PEAR_CALC_004"
        assert len(results.results) == 1
