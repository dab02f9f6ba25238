"""
Business Valuation Calculations

Produces four independent value estimates for a business:

1. Asset-based      - net assets (assets minus liabilities)
2. Market multiple  - revenue times an industry revenue multiple
3. Earnings multiple - net income times a P/E ratio
4. DCF              - discounted projected cash flows plus terminal value

No single estimate is chosen; the result reports the range across methods.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np

from finmodel.calculations.errors import DivergentGrowth, InvalidInput

logger = logging.getLogger(__name__)

DEFAULT_REVENUE_MULTIPLE = 2.0
DEFAULT_PE_RATIO = 15.0
DEFAULT_DISCOUNT_RATE = 0.10
DEFAULT_PROJECTION_YEARS = 5


@dataclass
class FinancialMetrics:
    """Annual figures for the business being valued."""

    revenue: float
    net_income: float
    assets: float
    liabilities: float
    cash_flow: float
    growth_rate: float  # Annual cash flow growth as percent (e.g., 5 for 5%)


@dataclass(frozen=True)
class ValuationSettings:
    """Method parameters. Defaults are the industry averages used by the calculator."""

    revenue_multiple: float = DEFAULT_REVENUE_MULTIPLE
    pe_ratio: float = DEFAULT_PE_RATIO
    discount_rate: float = DEFAULT_DISCOUNT_RATE  # Decimal (e.g., 0.10 for 10%)
    projection_years: int = DEFAULT_PROJECTION_YEARS


@dataclass
class DCFBreakdown:
    """Components of the discounted cash flow estimate."""

    projected_cash_flows: List[float]
    discounted_cash_flows: List[float]
    terminal_value: float
    discounted_terminal_value: float
    enterprise_value: float


@dataclass
class ValuationResult:
    asset_based: float
    market: float
    earnings: float
    dcf: float
    dcf_breakdown: DCFBreakdown
    settings: ValuationSettings = field(default_factory=ValuationSettings)

    @property
    def estimates(self) -> Dict[str, float]:
        return {
            "asset_based": self.asset_based,
            "market": self.market,
            "earnings": self.earnings,
            "dcf": self.dcf,
        }

    @property
    def minimum(self) -> float:
        return min(self.estimates.values())

    @property
    def maximum(self) -> float:
        return max(self.estimates.values())

    @property
    def average(self) -> float:
        return sum(self.estimates.values()) / len(self.estimates)

    def to_dict(self) -> Dict:
        return {
            **self.estimates,
            "range": {"min": self.minimum, "max": self.maximum, "average": self.average},
            "dcf_breakdown": {
                "projected_cash_flows": list(self.dcf_breakdown.projected_cash_flows),
                "discounted_cash_flows": list(self.dcf_breakdown.discounted_cash_flows),
                "terminal_value": self.dcf_breakdown.terminal_value,
                "discounted_terminal_value": self.dcf_breakdown.discounted_terminal_value,
                "enterprise_value": self.dcf_breakdown.enterprise_value,
            },
            "settings": {
                "revenue_multiple": self.settings.revenue_multiple,
                "pe_ratio": self.settings.pe_ratio,
                "discount_rate": self.settings.discount_rate,
                "projection_years": self.settings.projection_years,
            },
        }


def calculate_asset_based_value(assets: float, liabilities: float) -> float:
    """Net asset value. Negative when liabilities exceed assets."""
    return assets - liabilities


def calculate_market_value(revenue: float, revenue_multiple: float) -> float:
    return revenue * revenue_multiple


def calculate_earnings_value(net_income: float, pe_ratio: float) -> float:
    return net_income * pe_ratio


def discount_factors(discount_rate: float, years: int) -> np.ndarray:
    """Return [1/(1+r)^1, ..., 1/(1+r)^years]."""
    periods = np.arange(1, years + 1)
    return 1.0 / np.power(1.0 + discount_rate, periods)


def calculate_dcf(
    cash_flow: float,
    growth_rate: float,
    discount_rate: float = DEFAULT_DISCOUNT_RATE,
    years: int = DEFAULT_PROJECTION_YEARS,
) -> DCFBreakdown:
    """
    Discounted cash flow value with a perpetuity-growth terminal value.

    Year y cash flow is cash_flow * (1 + g)^y, discounted by (1 + r)^y.
    Terminal value is cash_flow * (1 + g)^(years + 1) / (r - g), discounted
    by (1 + r)^years.

    Args:
        cash_flow: Current annual cash flow
        growth_rate: Annual growth as percent (e.g., 5 for 5%)
        discount_rate: Discount rate as decimal (e.g., 0.10 for 10%)
        years: Explicit projection horizon

    Raises:
        DivergentGrowth: If growth_rate / 100 >= discount_rate
    """
    if years < 1:
        raise InvalidInput("DCF projection horizon must be at least 1 year")
    if discount_rate <= -1:
        raise InvalidInput("Discount rate must be greater than -100%")

    growth = growth_rate / 100
    if growth <= -1:
        raise InvalidInput("Growth rate must be greater than -100%")
    if growth >= discount_rate:
        raise DivergentGrowth(
            f"Growth rate ({growth_rate}%) must be below the discount rate "
            f"({discount_rate * 100:g}%) for the terminal value to converge"
        )

    periods = np.arange(1, years + 1)
    projected = cash_flow * np.power(1.0 + growth, periods)
    discounted = projected * discount_factors(discount_rate, years)

    terminal_value = cash_flow * (1.0 + growth) ** (years + 1) / (discount_rate - growth)
    discounted_terminal = terminal_value / (1.0 + discount_rate) ** years

    enterprise_value = float(discounted.sum()) + discounted_terminal

    return DCFBreakdown(
        projected_cash_flows=[float(cf) for cf in projected],
        discounted_cash_flows=[float(cf) for cf in discounted],
        terminal_value=float(terminal_value),
        discounted_terminal_value=float(discounted_terminal),
        enterprise_value=float(enterprise_value),
    )


def compute_valuations(
    metrics: FinancialMetrics, settings: ValuationSettings = ValuationSettings()
) -> ValuationResult:
    """
    Value the business with all four methods.

    Raises:
        DivergentGrowth: If the growth rate is not below the discount rate
        InvalidInput: If any metric is not a finite number
    """
    for name in ("revenue", "net_income", "assets", "liabilities", "cash_flow", "growth_rate"):
        if not math.isfinite(getattr(metrics, name)):
            raise InvalidInput(f"{name} must be a finite number")
    for name in ("revenue_multiple", "pe_ratio", "discount_rate"):
        if not math.isfinite(getattr(settings, name)):
            raise InvalidInput(f"{name} must be a finite number")

    logger.debug(
        "Valuing revenue=%s cash_flow=%s growth=%s%% at r=%s over %s years",
        metrics.revenue,
        metrics.cash_flow,
        metrics.growth_rate,
        settings.discount_rate,
        settings.projection_years,
    )

    dcf = calculate_dcf(
        metrics.cash_flow,
        metrics.growth_rate,
        discount_rate=settings.discount_rate,
        years=settings.projection_years,
    )

    return ValuationResult(
        asset_based=calculate_asset_based_value(metrics.assets, metrics.liabilities),
        market=calculate_market_value(metrics.revenue, settings.revenue_multiple),
        earnings=calculate_earnings_value(metrics.net_income, settings.pe_ratio),
        dcf=dcf.enterprise_value,
        dcf_breakdown=dcf,
        settings=settings,
    )
