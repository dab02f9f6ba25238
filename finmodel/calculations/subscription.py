"""
Subscription Revenue Projection

Month-by-month customer growth, revenue and profit for a subscription
business. Each month new customers are won at the growth rate, only the
retained share of them is kept, and acquisition cost is paid for every
customer won.
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Dict, List

from finmodel.calculations.errors import InvalidInput

logger = logging.getLogger(__name__)

DEFAULT_MONTHS = 12


@dataclass
class SubscriptionInput:
    monthly_subscription_price: float
    customer_acquisition_cost: float
    customer_retention_rate: float  # Percent of new customers kept
    monthly_platform_costs: float
    monthly_per_client_costs: float
    initial_customer_base: float
    monthly_growth_rate: float  # Percent of current base won each month


@dataclass
class SubscriptionMonth:
    month: int
    customers: int
    new_customers: int
    revenue: float
    acquisition_costs: float
    platform_costs: float
    per_client_costs: float
    net_profit: float
    cumulative_revenue: float
    cumulative_profit: float


@dataclass
class SubscriptionProjection:
    months: List[SubscriptionMonth]
    total_revenue: float
    total_profit: float
    ending_customers: int

    def to_dict(self) -> Dict:
        return asdict(self)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check(inputs: SubscriptionInput, months: int) -> None:
    for name, value in asdict(inputs).items():
        if not math.isfinite(value) or value < 0:
            raise InvalidInput(f"{name} must be a non-negative number")
    if inputs.customer_retention_rate > 100:
        raise InvalidInput("customer_retention_rate cannot exceed 100")
    if isinstance(months, bool) or not isinstance(months, int) or months < 1:
        raise InvalidInput("months must be a positive whole number")


def project_subscription_revenue(
    inputs: SubscriptionInput, months: int = DEFAULT_MONTHS
) -> SubscriptionProjection:
    """
    Project customers, revenue and profit for a number of months.

    Customer counts are whole numbers (rounded half up); money values are
    left unrounded.

    Raises:
        InvalidInput: If any input is negative or non-finite, retention is
            above 100, or months is not a positive whole number
    """
    _check(inputs, months)

    growth = inputs.monthly_growth_rate / 100
    retention = inputs.customer_retention_rate / 100
    customers = _round_half_up(inputs.initial_customer_base)

    rows: List[SubscriptionMonth] = []
    cumulative_revenue = 0.0
    cumulative_profit = 0.0
    for month in range(1, months + 1):
        won = _round_half_up(customers * growth)
        kept = _round_half_up(customers * growth * retention)
        customers += kept

        revenue = customers * inputs.monthly_subscription_price
        acquisition_costs = won * inputs.customer_acquisition_cost
        per_client_costs = customers * inputs.monthly_per_client_costs
        net_profit = revenue - acquisition_costs - inputs.monthly_platform_costs - per_client_costs

        cumulative_revenue += revenue
        cumulative_profit += net_profit
        rows.append(
            SubscriptionMonth(
                month=month,
                customers=customers,
                new_customers=kept,
                revenue=revenue,
                acquisition_costs=acquisition_costs,
                platform_costs=inputs.monthly_platform_costs,
                per_client_costs=per_client_costs,
                net_profit=net_profit,
                cumulative_revenue=cumulative_revenue,
                cumulative_profit=cumulative_profit,
            )
        )

    logger.debug("Projected %s subscription months, ending with %s customers", months, customers)

    return SubscriptionProjection(
        months=rows,
        total_revenue=cumulative_revenue,
        total_profit=cumulative_profit,
        ending_customers=customers,
    )
