"""
Tests for business valuation calculations.
"""

import math

import pytest

from finmodel.calculations.errors import DivergentGrowth, InvalidInput
from finmodel.calculations.valuation import (
    FinancialMetrics,
    ValuationSettings,
    calculate_asset_based_value,
    calculate_dcf,
    compute_valuations,
    discount_factors,
)


@pytest.fixture
def metrics():
    return FinancialMetrics(
        revenue=500000,
        net_income=50000,
        assets=300000,
        liabilities=100000,
        cash_flow=60000,
        growth_rate=5,
    )


class TestComputeValuations:
    """Test all four valuation methods together."""

    def test_reference_business(self, metrics):
        result = compute_valuations(metrics)

        assert result.asset_based == 200000
        assert result.market == 1000000
        assert result.earnings == 750000
        assert math.isfinite(result.dcf)
        assert result.dcf > 0

    def test_range(self, metrics):
        result = compute_valuations(metrics)

        assert result.minimum == 200000
        assert result.maximum == result.dcf
        expected_average = (200000 + 1000000 + 750000 + result.dcf) / 4
        assert abs(result.average - expected_average) < 1e-6

    def test_custom_settings(self, metrics):
        settings = ValuationSettings(revenue_multiple=3.0, pe_ratio=10.0, discount_rate=0.12)
        result = compute_valuations(metrics, settings)

        assert result.market == 1500000
        assert result.earnings == 500000
        assert result.settings.discount_rate == 0.12

    def test_negative_net_assets(self, metrics):
        metrics.liabilities = 450000
        assert compute_valuations(metrics).asset_based == -150000

    def test_growth_at_discount_rate(self, metrics):
        metrics.growth_rate = 10
        with pytest.raises(DivergentGrowth) as exc_info:
            compute_valuations(metrics)
        assert exc_info.value.code == "divergent_growth"

    def test_non_finite_metric(self, metrics):
        metrics.revenue = float("nan")
        with pytest.raises(InvalidInput):
            compute_valuations(metrics)

    def test_to_dict(self, metrics):
        data = compute_valuations(metrics).to_dict()

        assert set(data) >= {"asset_based", "market", "earnings", "dcf", "range"}
        assert data["range"]["min"] == 200000
        assert len(data["dcf_breakdown"]["projected_cash_flows"]) == 5
        assert data["settings"]["projection_years"] == 5


class TestDCF:
    """Test discounted cash flow valuation."""

    def test_matches_growing_perpetuity(self):
        """Explicit years plus terminal value equal CF * (1 + g) / (r - g)."""
        breakdown = calculate_dcf(60000, 5, discount_rate=0.10, years=5)
        assert abs(breakdown.enterprise_value - 1260000) < 1e-3

    def test_breakdown_components(self):
        breakdown = calculate_dcf(100000, 0, discount_rate=0.10, years=3)

        assert breakdown.projected_cash_flows == [100000, 100000, 100000]
        assert abs(breakdown.discounted_cash_flows[0] - 90909.0909091) < 1e-4
        assert abs(breakdown.terminal_value - 1000000) < 1e-6
        total = sum(breakdown.discounted_cash_flows) + breakdown.discounted_terminal_value
        assert abs(breakdown.enterprise_value - total) < 1e-6

    def test_horizon_does_not_change_value(self):
        short = calculate_dcf(60000, 5, years=1)
        long = calculate_dcf(60000, 5, years=20)
        assert abs(short.enterprise_value - long.enterprise_value) < 1e-3

    def test_negative_growth(self):
        breakdown = calculate_dcf(60000, -5, discount_rate=0.10)
        assert abs(breakdown.enterprise_value - 60000 * 0.95 / 0.15) < 1e-3

    def test_growth_above_discount_rate(self):
        with pytest.raises(DivergentGrowth):
            calculate_dcf(60000, 15, discount_rate=0.10)

    def test_invalid_horizon(self):
        with pytest.raises(InvalidInput):
            calculate_dcf(60000, 5, years=0)

    def test_discount_factors(self):
        factors = discount_factors(0.10, 2)
        assert abs(factors[0] - 1 / 1.1) < 1e-12
        assert abs(factors[1] - 1 / 1.21) < 1e-12


def test_asset_based_value():
    assert calculate_asset_based_value(300000, 100000) == 200000


def test_dcf_increases_with_cash_flow():
    values = [calculate_dcf(cf, 3).enterprise_value for cf in (1000, 2000, 50000, 60000)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


def test_repeat_valuation_is_identical(metrics):
    assert compute_valuations(metrics).to_dict() == compute_valuations(metrics).to_dict()


def test_non_finite_setting(metrics):
    with pytest.raises(InvalidInput):
        compute_valuations(metrics, ValuationSettings(discount_rate=float("nan")))
