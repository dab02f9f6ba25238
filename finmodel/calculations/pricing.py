"""
Pricing Strategy Analysis

Compares a cost-plus price against competitor prices for a market segment:

- minimum viable price: unit cost marked up by the target margin
- cost structure split into fixed (40%) and variable (60%) per-unit cost
- break-even price band and the unit volume needed at the optimal price
- volume, cost and profit at five candidate price points, using a
  constant-elasticity demand curve sized by the segment
"""

import logging
import math
from dataclasses import dataclass, asdict, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from finmodel.calculations.errors import InvalidInput

logger = logging.getLogger(__name__)

FIXED_COST_SHARE = 0.4
VARIABLE_COST_SHARE = 0.6
BASE_MARKET_SHARE = 0.1

# segment -> (addressable units, price elasticity)
MARKET_SEGMENTS: Dict[str, tuple] = {
    "luxury": (10000, 0.5),
    "premium": (50000, 0.8),
    "mid-range": (100000, 1.2),
    "economy": (200000, 1.5),
    "budget": (300000, 2.0),
}
DEFAULT_SEGMENT = (100000, 1.0)


@dataclass
class PricingInput:
    cost_per_unit: float
    target_margin: float  # Markup over cost in percent (e.g., 30 for 30%)
    competitor_prices: List[float] = field(default_factory=list)
    market_segment: str = "mid-range"


@dataclass
class BreakEvenAnalysis:
    minimum_price: float
    maximum_price: Optional[float]
    optimal_price: float
    break_even_point: Optional[float]  # Units at the optimal price
    optimal_price_range: List[float]
    market_sensitivity: float  # Price elasticity of the segment


@dataclass
class PricePointScenario:
    price: float
    volume: int
    revenue: float
    variable_costs: float
    total_costs: float
    profit: float
    target_profit: float
    profit_margin: Optional[float]  # Percent of revenue
    meets_target: bool


@dataclass
class PricingAnalysis:
    minimum_viable_price: float
    average_market_price: Optional[float]
    fixed_cost_per_unit: float
    variable_cost_per_unit: float
    break_even: BreakEvenAnalysis
    scenarios: List[PricePointScenario]
    suggested_prices: Dict[str, Optional[float]]

    def to_dict(self) -> Dict:
        return asdict(self)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check(inputs: PricingInput) -> None:
    if not math.isfinite(inputs.cost_per_unit) or inputs.cost_per_unit <= 0:
        raise InvalidInput("cost_per_unit must be a positive number")
    if not math.isfinite(inputs.target_margin) or inputs.target_margin < 0:
        raise InvalidInput("target_margin must be a non-negative number")
    for price in inputs.competitor_prices:
        if not math.isfinite(price) or price <= 0:
            raise InvalidInput("competitor prices must be positive numbers")


def segment_profile(segment: str) -> tuple:
    """Market size and elasticity for a segment; unknown segments get the default."""
    profile = MARKET_SEGMENTS.get(segment.lower())
    if profile is None:
        logger.debug("Unknown market segment %r, using default profile", segment)
        return DEFAULT_SEGMENT
    return profile


def calculate_minimum_viable_price(cost_per_unit: float, target_margin: float) -> float:
    return cost_per_unit * (1 + target_margin / 100)


def estimate_volume(price: float, average_market_price: Optional[float], segment: str) -> int:
    """
    Units sold at a price, from a constant-elasticity demand curve.

    Volume is 10% of the segment's market at the average market price and
    scales with (price / average) ** -elasticity. Without a market price
    the base volume is returned.
    """
    if price <= 0:
        raise InvalidInput("price must be positive to estimate volume")
    market_size, elasticity = segment_profile(segment)
    base_volume = market_size * BASE_MARKET_SHARE
    if not average_market_price:
        return _round_half_up(base_volume)
    return _round_half_up(base_volume * float(np.power(price / average_market_price, -elasticity)))


def analyze_break_even(
    fixed_cost: float,
    variable_cost: float,
    target_margin: float,
    average_market_price: Optional[float],
    segment: str = "mid-range",
) -> BreakEvenAnalysis:
    minimum_price = variable_cost * 1.1
    maximum_price = average_market_price * 1.3 if average_market_price else None
    optimal_price = variable_cost * (1 + target_margin / 100)

    unit_margin = optimal_price - variable_cost
    break_even_point = fixed_cost / unit_margin if unit_margin > 0 else None

    low = max(minimum_price, optimal_price * 0.9)
    high = optimal_price * 1.1
    if maximum_price is not None:
        high = min(maximum_price, high)

    return BreakEvenAnalysis(
        minimum_price=minimum_price,
        maximum_price=maximum_price,
        optimal_price=optimal_price,
        break_even_point=break_even_point,
        optimal_price_range=[low, high],
        market_sensitivity=segment_profile(segment)[1],
    )


def price_point_scenario(
    price: float,
    fixed_cost: float,
    variable_cost: float,
    target_margin: float,
    average_market_price: Optional[float],
    segment: str,
) -> PricePointScenario:
    volume = estimate_volume(price, average_market_price, segment)
    revenue = price * volume
    variable_costs = variable_cost * volume
    total_costs = fixed_cost + variable_costs
    profit = revenue - total_costs
    target_profit = revenue * target_margin / 100
    return PricePointScenario(
        price=price,
        volume=volume,
        revenue=revenue,
        variable_costs=variable_costs,
        total_costs=total_costs,
        profit=profit,
        target_profit=target_profit,
        profit_margin=profit / revenue * 100 if revenue else None,
        meets_target=profit >= target_profit,
    )


def suggest_price_points(
    minimum_viable_price: float, competitor_prices: Sequence[float]
) -> Dict[str, Optional[float]]:
    """Named price suggestions. Market-based ones are None without competitor data."""
    if not competitor_prices:
        return {
            "cost_plus": minimum_viable_price,
            "market_average": None,
            "premium": None,
            "economy": minimum_viable_price,
            "penetration": minimum_viable_price,
        }

    average = float(np.mean(competitor_prices))
    return {
        "cost_plus": minimum_viable_price,
        "market_average": average,
        "premium": float(max(competitor_prices)) * 1.15,
        "economy": max(minimum_viable_price, average * 0.85),
        "penetration": max(minimum_viable_price, average * 0.9),
    }


def analyze_pricing(inputs: PricingInput) -> PricingAnalysis:
    """
    Run the full pricing analysis.

    Raises:
        InvalidInput: If cost is not positive, the margin is negative, or a
            competitor price is not a positive number
    """
    _check(inputs)

    prices = list(inputs.competitor_prices)
    minimum_viable_price = calculate_minimum_viable_price(inputs.cost_per_unit, inputs.target_margin)
    average_market_price = float(np.mean(prices)) if prices else None
    fixed_cost = inputs.cost_per_unit * FIXED_COST_SHARE
    variable_cost = inputs.cost_per_unit * VARIABLE_COST_SHARE

    candidates = [minimum_viable_price * 0.9, minimum_viable_price]
    if average_market_price is not None:
        candidates += [average_market_price * 0.9, average_market_price, average_market_price * 1.1]

    scenarios = [
        price_point_scenario(
            price, fixed_cost, variable_cost, inputs.target_margin,
            average_market_price, inputs.market_segment,
        )
        for price in candidates
    ]

    logger.debug(
        "Pricing analysis for %s: %s price points, %s competitors",
        inputs.market_segment, len(scenarios), len(prices),
    )

    return PricingAnalysis(
        minimum_viable_price=minimum_viable_price,
        average_market_price=average_market_price,
        fixed_cost_per_unit=fixed_cost,
        variable_cost_per_unit=variable_cost,
        break_even=analyze_break_even(
            fixed_cost, variable_cost, inputs.target_margin, average_market_price, inputs.market_segment
        ),
        scenarios=scenarios,
        suggested_prices=suggest_price_points(minimum_viable_price, prices),
    )
