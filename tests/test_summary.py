"""
Unit tests for pear_calc/summary.py

Scope 1  utilities heating + fuel
Scope 2  utilities electricity + EV charging
Scope 3  hotels + commercial travel + charter flights + transport
"""
import pytest

from pear_calc.emission_factors import DEFAULT_FACTORS
from pear_calc.schemas import ProductionWorkbook
from pear_calc.summary import (
    ScopeBreakdown,
    calculate_production,
    get_module_scope_classification,
    get_scope_description,
)

HEAT = 1000 * 0.0283168 * 2.0384
DIESEL = 10 * 10.0668
ELECTRICITY = 5000 * 0.3692
EV = 1000 * 0.3692
HOTEL = 0.3692 * 5515.85
ROAD = 35.508


def make_workbook(**extra):
    raw = {
        "productionName": "Pilot",
        "transport": [{"id": "t1", "mode": "road", "fuelType": "petrol", "distance": 100}],
        "utilities": [{
            "id": "u1", "electricityMethod": "usage", "electricityUsage": 5000,
            "heatFuel": "Natural Gas", "heatMethod": "usage",
            "naturalGasUsage": 1000, "naturalGasUnit": "cubic feet",
        }],
        "fuel": [{
            "id": "f1", "equipmentType": "Generator", "fuelType": "Diesel Fuel",
            "calculationMethod": "amount", "fuelAmount": 10, "fuelUnit": "gallons",
        }],
        "evCharging": [{"id": "e1", "electricityUsageKWh": 1000}],
        "hotels": [{"id": "h1", "roomType": "Economy Hotel", "totalNights": 365}],
    }
    raw.update(extra)
    return ProductionWorkbook.model_validate(raw)


# ─────────────────────────────────────────────────────────────────────────────
# 1. Scope descriptions and module classification
# ─────────────────────────────────────────────────────────────────────────────

class TestGetScopeDescription:

    def test_known_scopes(self):
        assert get_scope_description(1).startswith("Direct emissions")
        assert "purchased electricity" in get_scope_description(2)
        assert "indirect" in get_scope_description(3)

    def test_unknown_scope_raises(self):
        with pytest.raises(ValueError):
            get_scope_description(4)


class TestGetModuleScopeClassification:

    @pytest.mark.parametrize("module, scope", [
        ("utilities", 1),
        ("fuel", 1),
        ("ev_charging", 2),
        ("hotels", 3),
        ("commercial_travel", 3),
        ("charter_flights", 3),
        ("transport", 3),
    ])
    def test_primary_scopes(self, module, scope):
        assert get_module_scope_classification(module).primary_scope == scope

    def test_unknown_module_defaults_to_scope_3(self):
        assert get_module_scope_classification("catering").primary_scope == 3


# ─────────────────────────────────────────────────────────────────────────────
# 2. calculate_production
# ─────────────────────────────────────────────────────────────────────────────

class TestCalculateProduction:

    def test_scope_split(self):
        summary = calculate_production(make_workbook(), DEFAULT_FACTORS)

        assert summary.scopes.scope1 == pytest.approx(HEAT + DIESEL)
        assert summary.scopes.scope2 == pytest.approx(ELECTRICITY + EV)
        assert summary.scopes.scope3 == pytest.approx(HOTEL + ROAD)
        assert summary.total_co2e == pytest.approx(HEAT + DIESEL + ELECTRICITY + EV + HOTEL + ROAD)
        assert summary.total_metric_tons == pytest.approx(summary.total_co2e / 1000)

    def test_scopes_sum_to_module_totals(self):
        summary = calculate_production(make_workbook(), DEFAULT_FACTORS)
        module_total = sum(r.total_co2e for r in summary.modules.values())
        assert summary.scopes.total_co2e == pytest.approx(module_total)

    def test_module_rows_skip_empty_modules(self):
        summary = calculate_production(make_workbook(), DEFAULT_FACTORS)
        names = [row.module_name for row in summary.module_scopes]

        assert names == ["Transport", "Utilities", "Fuel", "EV Charging", "Hotels & Housing"]
        utilities_row = summary.module_scopes[1]
        assert utilities_row.scope1 == pytest.approx(HEAT)
        assert utilities_row.scope2 == pytest.approx(ELECTRICITY)
        assert utilities_row.total == pytest.approx(HEAT + ELECTRICITY)

    def test_empty_workbook(self):
        summary = calculate_production(ProductionWorkbook(), DEFAULT_FACTORS)

        assert summary.scopes == ScopeBreakdown()
        assert summary.module_scopes == []
        assert summary.drinking_water is None
        assert summary.waste is None
        assert not summary.has_errors

    def test_errors_are_grouped_by_module(self):
        workbook = make_workbook(hotels=[{"id": "h9", "roomType": "Igloo", "totalNights": 2}])
        summary = calculate_production(workbook, DEFAULT_FACTORS)

        assert summary.has_errors
        assert list(summary.errors) == ["hotels"]
        assert summary.errors["hotels"][0].entry_id == "h9"
        assert summary.scopes.scope3 == pytest.approx(ROAD)

    def test_pear_metrics_are_included(self):
        workbook = make_workbook(
            drinkingWater=[{"id": "w1", "containerType": "Bottle", "quantity": 50}],
            waste=[{"id": "x1", "wasteType": "Compost", "amount": 1, "unit": "tons"}],
        )
        summary = calculate_production(workbook, DEFAULT_FACTORS)

        assert summary.drinking_water.total_bottles == 50
        assert summary.waste.composted_pounds == 2000

    def test_to_dict(self):
        payload = calculate_production(make_workbook(), DEFAULT_FACTORS).to_dict()

        assert payload["productionName"] == "Pilot"
        assert payload["scopes"]["scope2"] == pytest.approx(ELECTRICITY + EV)
        assert payload["scopes"]["totalCO2e"] == pytest.approx(payload["totalCO2e"])
        assert payload["moduleScopes"][0]["moduleName"] == "Transport"
        assert set(payload["modules"]) == {
            "transport", "utilities", "fuel", "ev_charging",
            "hotels", "commercial_travel", "charter_flights",
        }
        assert payload["modules"]["charter_flights"]["totals"] is None
        assert payload["errors"] == {}
