"""
Tests for financial ratio calculations.
"""

import pytest

from finmodel.calculations.errors import InvalidInput, UnknownRatio, ZeroDenominator
from finmodel.calculations.ratios import (
    RATIOS,
    RatioCategory,
    RatioUnit,
    calculate_ratio,
    calculate_ratios,
)


@pytest.fixture
def statements():
    return {
        "current_assets": 200000,
        "current_liabilities": 100000,
        "inventory": 50000,
        "revenue": 500000,
        "cost_of_goods_sold": 300000,
        "net_income": 50000,
        "total_assets": 400000,
        "shareholder_equity": 250000,
        "average_inventory": 60000,
        "net_credit_sales": 450000,
        "average_accounts_receivable": 75000,
        "total_debt": 150000,
        "total_equity": 250000,
        "ebit": 80000,
        "interest_expense": 10000,
        "operating_cash_flow": 70000,
        "ebitda": 100000,
        "market_price": 40,
        "earnings_per_share": 2.5,
        "book_value_per_share": 16,
        "operating_income": 75000,
        "average_assets": 380000,
    }


class TestSingleRatio:
    """Test individual ratio formulas."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("current_ratio", 2.0),
            ("quick_ratio", 1.5),
            ("working_capital", 100000),
            ("gross_profit_margin", 40.0),
            ("net_profit_margin", 10.0),
            ("return_on_assets", 12.5),
            ("return_on_equity", 20.0),
            ("inventory_turnover", 5.0),
            ("receivables_turnover", 6.0),
            ("debt_to_equity", 60.0),
            ("interest_coverage", 8.0),
            ("operating_cash_flow_ratio", 0.7),
            ("ebitda_margin", 20.0),
            ("price_earnings", 16.0),
            ("price_to_book", 2.5),
            ("operating_margin", 15.0),
        ],
    )
    def test_formula(self, statements, name, expected):
        assert abs(calculate_ratio(name, statements).value - expected) < 1e-9

    def test_asset_turnover_in_times(self, statements):
        result = calculate_ratio("asset_turnover", statements)
        assert abs(result.value - 500000 / 380000) < 1e-12
        assert result.unit == RatioUnit.TIMES

    def test_negative_earnings_allowed(self, statements):
        statements["net_income"] = -25000
        assert abs(calculate_ratio("net_profit_margin", statements).value + 5) < 1e-9

    def test_negative_balance_rejected(self, statements):
        statements["current_liabilities"] = -1
        with pytest.raises(InvalidInput):
            calculate_ratio("current_ratio", statements)

    def test_working_capital_can_be_negative(self):
        result = calculate_ratio("working_capital", {"current_assets": 10, "current_liabilities": 30})
        assert result.value == -20

    @pytest.mark.parametrize("name", sorted(n for n, r in RATIOS.items() if r.denominator))
    def test_zero_denominator(self, statements, name):
        statements[RATIOS[name].denominator] = 0
        with pytest.raises(ZeroDenominator) as exc_info:
            calculate_ratio(name, statements)
        assert exc_info.value.code == "zero_denominator"

    def test_missing_input(self):
        with pytest.raises(InvalidInput) as exc_info:
            calculate_ratio("quick_ratio", {"current_assets": 100, "current_liabilities": 50})
        assert "inventory" in exc_info.value.message

    def test_non_finite_input(self, statements):
        statements["revenue"] = float("nan")
        with pytest.raises(InvalidInput):
            calculate_ratio("gross_profit_margin", statements)

    def test_unknown_name(self, statements):
        with pytest.raises(UnknownRatio):
            calculate_ratio("magic_ratio", statements)

    def test_to_dict(self, statements):
        data = calculate_ratio("current_ratio", statements).to_dict()
        assert data == {
            "name": "current_ratio",
            "title": "Current Ratio",
            "category": "liquidity",
            "unit": "ratio",
            "value": 2.0,
        }


class TestRatioSets:
    """Test calculating many ratios at once."""

    def test_all_available(self, statements):
        results = calculate_ratios(statements)
        assert [r.name for r in results] == list(RATIOS)

    def test_skips_ratios_without_inputs(self):
        results = calculate_ratios({"revenue": 1000, "cost_of_goods_sold": 600, "net_income": 100})
        assert [r.name for r in results] == ["gross_profit_margin", "net_profit_margin"]

    def test_category_filter(self, statements):
        results = calculate_ratios(statements, category=RatioCategory.LEVERAGE)
        assert [r.name for r in results] == ["debt_to_equity", "interest_coverage"]

    def test_category_by_value(self, statements):
        results = calculate_ratios(statements, category="marketValue")
        assert {r.category for r in results} == {RatioCategory.MARKET_VALUE}

    def test_named_ratios_must_be_computable(self):
        with pytest.raises(InvalidInput):
            calculate_ratios({"revenue": 1000}, names=["net_profit_margin"])

    def test_zero_denominator_in_available_set(self, statements):
        statements["revenue"] = 0
        with pytest.raises(ZeroDenominator):
            calculate_ratios(statements, category=RatioCategory.CASH_FLOW)

    def test_repeat_calls_are_identical(self, statements):
        assert calculate_ratios(statements) == calculate_ratios(statements)
