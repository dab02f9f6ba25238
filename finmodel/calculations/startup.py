"""
Startup Cost Estimation

Totals the costs of opening a business and sizes a cash reserve.
"""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional

from finmodel.calculations.errors import InvalidInput, InvalidStartupCost

DEFAULT_RESERVE_MONTHS = 6


class CostCategory(str, Enum):
    ONE_TIME = "oneTime"
    MONTHLY = "monthly"
    INVENTORY = "inventory"


@dataclass
class StartupCost:
    name: str
    amount: float
    category: CostCategory = CostCategory.ONE_TIME
    description: Optional[str] = None


@dataclass
class StartupCostSummary:
    one_time_total: float
    monthly_total: float
    inventory_total: float
    total_startup_cost: float  # One-time plus inventory
    monthly_operating_cost: float
    reserve_months: int
    recommended_cash_reserve: float
    total_initial_capital: float

    def to_dict(self) -> Dict:
        return asdict(self)


def _check_cost(cost: StartupCost, index: int) -> CostCategory:
    if not cost.name or not cost.name.strip():
        raise InvalidStartupCost(f"Cost #{index + 1} needs a name")
    if isinstance(cost.amount, bool) or not isinstance(cost.amount, (int, float)):
        raise InvalidStartupCost(f"Cost {cost.name!r} amount must be a number")
    if not math.isfinite(cost.amount) or cost.amount <= 0:
        raise InvalidStartupCost(f"Cost {cost.name!r} amount must be greater than 0")
    try:
        return CostCategory(cost.category)
    except ValueError:
        raise InvalidStartupCost(f"Cost {cost.name!r} has unknown category {cost.category!r}") from None


def estimate_startup_costs(
    costs: List[StartupCost], reserve_months: int = DEFAULT_RESERVE_MONTHS
) -> StartupCostSummary:
    """
    Summarize startup costs by category.

    Args:
        costs: Individual cost lines
        reserve_months: Months of operating cost to hold as a cash reserve

    Returns:
        StartupCostSummary with totals, reserve and initial capital needed

    Raises:
        InvalidStartupCost: On a blank name, non-positive amount or unknown category
    """
    if reserve_months < 0:
        raise InvalidInput("reserve_months must not be negative")

    totals = {category: 0.0 for category in CostCategory}
    for index, cost in enumerate(costs):
        totals[_check_cost(cost, index)] += cost.amount

    one_time = totals[CostCategory.ONE_TIME]
    monthly = totals[CostCategory.MONTHLY]
    inventory = totals[CostCategory.INVENTORY]

    total_startup_cost = one_time + inventory
    reserve = monthly * reserve_months

    return StartupCostSummary(
        one_time_total=one_time,
        monthly_total=monthly,
        inventory_total=inventory,
        total_startup_cost=total_startup_cost,
        monthly_operating_cost=monthly,
        reserve_months=reserve_months,
        recommended_cash_reserve=reserve,
        total_initial_capital=total_startup_cost + reserve,
    )
