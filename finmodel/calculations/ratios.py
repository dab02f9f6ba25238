"""
Financial Ratio Calculations

Standard ratios grouped the way the calculator presents them:

1. liquidity     - current ratio, quick ratio, working capital
2. profitability - gross margin, net margin, return on assets and equity
3. efficiency    - inventory and receivables turnover
4. leverage      - debt to equity, interest coverage
5. cash flow     - operating cash flow ratio, EBITDA margin
6. market value  - price/earnings, price/book
7. operating     - operating margin, asset turnover

Every ratio with a denominator rejects a zero denominator instead of
returning infinity or NaN.
"""

import logging
import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from finmodel.calculations.errors import InvalidInput, UnknownRatio, ZeroDenominator

logger = logging.getLogger(__name__)


class RatioCategory(str, Enum):
    LIQUIDITY = "liquidity"
    PROFITABILITY = "profitability"
    EFFICIENCY = "efficiency"
    LEVERAGE = "leverage"
    CASH_FLOW = "cashflow"
    MARKET_VALUE = "marketValue"
    OPERATING = "operating"


class RatioUnit(str, Enum):
    RATIO = "ratio"
    PERCENT = "percent"
    TIMES = "times"
    CURRENCY = "currency"


# Earnings-type inputs may be negative; balances and volumes may not
SIGNED_INPUTS = frozenset(
    {"net_income", "ebit", "ebitda", "operating_income", "operating_cash_flow", "shareholder_equity", "total_equity"}
)


@dataclass(frozen=True)
class RatioDefinition:
    name: str
    title: str
    category: RatioCategory
    unit: RatioUnit
    inputs: Tuple[str, ...]
    denominator: Optional[str]
    formula: Callable[[Mapping[str, float]], float]


@dataclass
class RatioResult:
    name: str
    title: str
    category: RatioCategory
    unit: RatioUnit
    value: float

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["category"] = self.category.value
        data["unit"] = self.unit.value
        return data


def _ratio(name, title, category, unit, inputs, denominator, formula) -> RatioDefinition:
    return RatioDefinition(name, title, category, unit, tuple(inputs), denominator, formula)


_L, _P, _E = RatioCategory.LIQUIDITY, RatioCategory.PROFITABILITY, RatioCategory.EFFICIENCY
_LV, _C = RatioCategory.LEVERAGE, RatioCategory.CASH_FLOW
_M, _O = RatioCategory.MARKET_VALUE, RatioCategory.OPERATING

RATIOS: Dict[str, RatioDefinition] = {
    r.name: r
    for r in (
        _ratio("current_ratio", "Current Ratio", _L, RatioUnit.RATIO,
               ("current_assets", "current_liabilities"), "current_liabilities",
               lambda v: v["current_assets"] / v["current_liabilities"]),
        _ratio("quick_ratio", "Quick Ratio (Acid-Test)", _L, RatioUnit.RATIO,
               ("current_assets", "inventory", "current_liabilities"), "current_liabilities",
               lambda v: (v["current_assets"] - v["inventory"]) / v["current_liabilities"]),
        _ratio("working_capital", "Working Capital", _L, RatioUnit.CURRENCY,
               ("current_assets", "current_liabilities"), None,
               lambda v: v["current_assets"] - v["current_liabilities"]),
        _ratio("gross_profit_margin", "Gross Profit Margin", _P, RatioUnit.PERCENT,
               ("revenue", "cost_of_goods_sold"), "revenue",
               lambda v: (v["revenue"] - v["cost_of_goods_sold"]) / v["revenue"] * 100),
        _ratio("net_profit_margin", "Net Profit Margin", _P, RatioUnit.PERCENT,
               ("net_income", "revenue"), "revenue",
               lambda v: v["net_income"] / v["revenue"] * 100),
        _ratio("return_on_assets", "Return on Assets (ROA)", _P, RatioUnit.PERCENT,
               ("net_income", "total_assets"), "total_assets",
               lambda v: v["net_income"] / v["total_assets"] * 100),
        _ratio("return_on_equity", "Return on Equity (ROE)", _P, RatioUnit.PERCENT,
               ("net_income", "shareholder_equity"), "shareholder_equity",
               lambda v: v["net_income"] / v["shareholder_equity"] * 100),
        _ratio("inventory_turnover", "Inventory Turnover", _E, RatioUnit.TIMES,
               ("cost_of_goods_sold", "average_inventory"), "average_inventory",
               lambda v: v["cost_of_goods_sold"] / v["average_inventory"]),
        _ratio("receivables_turnover", "Accounts Receivable Turnover", _E, RatioUnit.TIMES,
               ("net_credit_sales", "average_accounts_receivable"), "average_accounts_receivable",
               lambda v: v["net_credit_sales"] / v["average_accounts_receivable"]),
        _ratio("debt_to_equity", "Debt to Equity", _LV, RatioUnit.PERCENT,
               ("total_debt", "total_equity"), "total_equity",
               lambda v: v["total_debt"] / v["total_equity"] * 100),
        _ratio("interest_coverage", "Interest Coverage", _LV, RatioUnit.TIMES,
               ("ebit", "interest_expense"), "interest_expense",
               lambda v: v["ebit"] / v["interest_expense"]),
        _ratio("operating_cash_flow_ratio", "Operating Cash Flow Ratio", _C, RatioUnit.RATIO,
               ("operating_cash_flow", "current_liabilities"), "current_liabilities",
               lambda v: v["operating_cash_flow"] / v["current_liabilities"]),
        _ratio("ebitda_margin", "EBITDA Margin", _C, RatioUnit.PERCENT,
               ("ebitda", "revenue"), "revenue",
               lambda v: v["ebitda"] / v["revenue"] * 100),
        _ratio("price_earnings", "Price-Earnings (P/E)", _M, RatioUnit.RATIO,
               ("market_price", "earnings_per_share"), "earnings_per_share",
               lambda v: v["market_price"] / v["earnings_per_share"]),
        _ratio("price_to_book", "Price-to-Book", _M, RatioUnit.RATIO,
               ("market_price", "book_value_per_share"), "book_value_per_share",
               lambda v: v["market_price"] / v["book_value_per_share"]),
        _ratio("operating_margin", "Operating Margin", _O, RatioUnit.PERCENT,
               ("operating_income", "revenue"), "revenue",
               lambda v: v["operating_income"] / v["revenue"] * 100),
        _ratio("asset_turnover", "Asset Turnover", _O, RatioUnit.TIMES,
               ("revenue", "average_assets"), "average_assets",
               lambda v: v["revenue"] / v["average_assets"]),
    )
}


def _check_value(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput(f"{name} must be a number")
    if not math.isfinite(value):
        raise InvalidInput(f"{name} must be a finite number")
    if value < 0 and name not in SIGNED_INPUTS:
        raise InvalidInput(f"{name} must not be negative")
    return float(value)


def calculate_ratio(name: str, values: Mapping[str, float]) -> RatioResult:
    """
    Calculate one named ratio.

    Args:
        name: Key in RATIOS (e.g. 'current_ratio')
        values: Input name -> amount; extra keys are ignored

    Raises:
        UnknownRatio: If the name is not a known ratio
        InvalidInput: If an input is missing, non-finite or wrongly negative
        ZeroDenominator: If the ratio's denominator is zero
    """
    definition = RATIOS.get(name)
    if definition is None:
        raise UnknownRatio(f"No ratio named {name!r}")

    missing = [field for field in definition.inputs if values.get(field) is None]
    if missing:
        raise InvalidInput(f"{definition.title} needs {', '.join(missing)}")

    checked = {field: _check_value(field, values[field]) for field in definition.inputs}
    if definition.denominator and checked[definition.denominator] == 0:
        raise ZeroDenominator(f"{definition.title}: {definition.denominator} cannot be zero")

    return RatioResult(
        name=definition.name,
        title=definition.title,
        category=definition.category,
        unit=definition.unit,
        value=definition.formula(checked),
    )


def calculate_ratios(
    values: Mapping[str, float],
    names: Optional[Iterable[str]] = None,
    category: Optional[RatioCategory] = None,
) -> List[RatioResult]:
    """
    Calculate several ratios from one set of figures.

    With explicit ``names`` every named ratio must be computable. Without
    them, every ratio (optionally limited to ``category``) whose inputs are
    all present is calculated and the rest are skipped.
    """
    if names is not None:
        return [calculate_ratio(name, values) for name in names]

    if category is not None:
        category = RatioCategory(category)

    results = []
    for definition in RATIOS.values():
        if category is not None and definition.category != category:
            continue
        if any(values.get(field) is None for field in definition.inputs):
            continue
        results.append(calculate_ratio(definition.name, values))

    logger.debug("Calculated %s of %s ratios", len(results), len(RATIOS))
    return results
