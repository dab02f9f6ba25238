"""
Tests for pricing strategy analysis.
"""

import pytest

from finmodel.calculations.errors import InvalidInput
from finmodel.calculations.pricing import (
    PricingInput,
    analyze_break_even,
    analyze_pricing,
    estimate_volume,
    suggest_price_points,
)


@pytest.fixture
def widget():
    return PricingInput(cost_per_unit=100, target_margin=30, competitor_prices=[120, 140, 160])


class TestPricingAnalysis:
    """Test the full analysis against hand-worked figures."""

    def test_cost_structure(self, widget):
        result = analyze_pricing(widget)

        assert abs(result.minimum_viable_price - 130) < 1e-9
        assert result.average_market_price == 140
        assert abs(result.fixed_cost_per_unit - 40) < 1e-9
        assert abs(result.variable_cost_per_unit - 60) < 1e-9

    def test_price_points(self, widget):
        result = analyze_pricing(widget)
        prices = [s.price for s in result.scenarios]

        assert len(prices) == 5
        for actual, expected in zip(prices, [117, 130, 126, 140, 154]):
            assert abs(actual - expected) < 1e-9

    def test_scenario_at_market_price(self, widget):
        at_market = analyze_pricing(widget).scenarios[3]

        assert at_market.volume == 10000
        assert abs(at_market.revenue - 1400000) < 1e-6
        assert abs(at_market.total_costs - 600040) < 1e-6
        assert abs(at_market.profit - 799960) < 1e-6
        assert abs(at_market.target_profit - 420000) < 1e-6
        assert at_market.meets_target is True
        assert abs(at_market.profit_margin - 799960 / 1400000 * 100) < 1e-9

    def test_higher_price_sells_fewer_units(self, widget):
        scenarios = analyze_pricing(widget).scenarios
        assert scenarios[4].volume < scenarios[3].volume < scenarios[2].volume

    def test_break_even(self, widget):
        analysis = analyze_pricing(widget).break_even

        assert abs(analysis.minimum_price - 66) < 1e-9
        assert abs(analysis.maximum_price - 182) < 1e-9
        assert abs(analysis.optimal_price - 78) < 1e-9
        assert abs(analysis.break_even_point - 40 / 18) < 1e-9
        low, high = analysis.optimal_price_range
        assert abs(low - 70.2) < 1e-9
        assert abs(high - 85.8) < 1e-9

    def test_no_competitors(self):
        result = analyze_pricing(PricingInput(cost_per_unit=100, target_margin=30))

        assert result.average_market_price is None
        assert len(result.scenarios) == 2
        assert all(s.volume == 10000 for s in result.scenarios)
        assert result.break_even.maximum_price is None
        assert result.suggested_prices["premium"] is None

    def test_zero_margin_has_no_break_even_point(self):
        result = analyze_pricing(PricingInput(cost_per_unit=100, target_margin=0))
        assert result.break_even.break_even_point is None

    @pytest.mark.parametrize(
        "changes",
        [
            {"cost_per_unit": 0},
            {"cost_per_unit": float("nan")},
            {"target_margin": -5},
            {"competitor_prices": [100, 0]},
            {"competitor_prices": [float("inf")]},
        ],
    )
    def test_rejects_bad_input(self, changes):
        fields = {"cost_per_unit": 100, "target_margin": 30, "competitor_prices": [120]}
        fields.update(changes)
        with pytest.raises(InvalidInput):
            analyze_pricing(PricingInput(**fields))

    def test_to_dict(self, widget):
        data = analyze_pricing(widget).to_dict()
        assert abs(data["break_even"]["optimal_price_range"][0] - 70.2) < 1e-9
        assert data["scenarios"][0]["meets_target"] in (True, False)

    def test_repeat_calls_are_identical(self, widget):
        assert analyze_pricing(widget) == analyze_pricing(widget)


class TestDemandCurve:
    """Test segment-based volume estimates."""

    def test_elasticity(self):
        # Luxury: 10000 units, elasticity 0.5; four times the price halves volume
        assert estimate_volume(400, 100, "luxury") == 500

    def test_unknown_segment_uses_default(self):
        assert estimate_volume(200, 100, "boutique") == 5000

    def test_non_positive_price(self):
        with pytest.raises(InvalidInput):
            estimate_volume(0, 100, "premium")


class TestSuggestions:
    """Test named price suggestions."""

    def test_floor_at_minimum_viable_price(self):
        suggestions = suggest_price_points(130, [120, 140, 160])

        assert suggestions["cost_plus"] == 130
        assert suggestions["market_average"] == 140
        assert suggestions["economy"] == 130
        assert suggestions["penetration"] == 130
        assert abs(suggestions["premium"] - 184) < 1e-9

    def test_market_above_cost(self):
        suggestions = suggest_price_points(50, [100, 100])

        assert abs(suggestions["economy"] - 85) < 1e-9
        assert abs(suggestions["penetration"] - 90) < 1e-9

    def test_break_even_band_without_market(self):
        analysis = analyze_break_even(40, 60, 30, None)
        assert abs(analysis.optimal_price_range[1] - 85.8) < 1e-9
        assert analysis.market_sensitivity == 1.2

    def test_segment_name_is_case_insensitive(self):
        assert estimate_volume(400, 100, "Luxury") == 500
        assert analyze_break_even(40, 60, 30, 140, "PREMIUM").market_sensitivity == 0.8
