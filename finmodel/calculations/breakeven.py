"""
Break-Even Calculations

Computes the sales volume (or price) at which revenue covers fixed and
variable costs, under four caller intents:

1. standard     - units needed to cover fixed costs
2. findPrice    - price needed to break even at a target volume
3. findUnits    - same formula as standard, kept separate for reporting
4. profitTarget - units needed to reach a profit amount or profit percentage

No rounding is applied; display rounding belongs to the caller.
"""

import logging
import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional

from finmodel.calculations.errors import InvalidInput, MissingTarget, NonPositiveMargin

logger = logging.getLogger(__name__)


class BreakEvenMode(str, Enum):
    STANDARD = "standard"
    FIND_PRICE = "findPrice"
    FIND_UNITS = "findUnits"
    PROFIT_TARGET = "profitTarget"


@dataclass
class BreakEvenInput:
    """Cost structure and mode for a break-even request."""

    fixed_costs: float
    variable_cost_per_unit: float
    selling_price_per_unit: float
    mode: BreakEvenMode = BreakEvenMode.STANDARD
    target_units: Optional[float] = None
    target_profit: Optional[float] = None  # Absolute profit amount
    target_profit_percentage: Optional[float] = None  # Profit as % of revenue (e.g., 20 for 20%)

    @property
    def contribution_margin(self) -> float:
        return self.selling_price_per_unit - self.variable_cost_per_unit


@dataclass
class BreakEvenResult:
    """Outputs of a break-even run. Fields not produced by the mode stay None."""

    mode: BreakEvenMode
    contribution_margin: float
    contribution_margin_ratio: Optional[float] = None
    break_even_units: Optional[float] = None
    total_revenue_at_break_even: Optional[float] = None
    required_price: Optional[float] = None
    target_profit_amount: Optional[float] = None
    units_for_profit: Optional[float] = None
    total_revenue_for_profit: Optional[float] = None
    realized_profit_percentage: Optional[float] = None

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data


def _check_non_negative(inputs: BreakEvenInput) -> None:
    for field in ("fixed_costs", "variable_cost_per_unit", "selling_price_per_unit"):
        value = getattr(inputs, field)
        if not math.isfinite(value) or value < 0:
            raise InvalidInput(f"{field} must be a non-negative number")

    # Targets are optional, but NaN slips past every comparison
    for field in ("target_units", "target_profit", "target_profit_percentage"):
        value = getattr(inputs, field)
        if value is not None and not math.isfinite(value):
            raise InvalidInput(f"{field} must be a finite number")


def _require_margin(inputs: BreakEvenInput) -> float:
    margin = inputs.contribution_margin
    if margin <= 0:
        raise NonPositiveMargin(
            "Contribution margin must be positive. "
            "Selling price must exceed variable cost per unit."
        )
    return margin


def _margin_ratio(inputs: BreakEvenInput) -> Optional[float]:
    if inputs.selling_price_per_unit <= 0:
        return None
    return inputs.contribution_margin / inputs.selling_price_per_unit


def calculate_break_even_units(fixed_costs: float, contribution_margin: float) -> float:
    """Units at which total contribution equals fixed costs."""
    return fixed_costs / contribution_margin


def calculate_required_price(
    fixed_costs: float, variable_cost_per_unit: float, target_units: float
) -> float:
    """Price per unit that breaks even when exactly target_units are sold."""
    return fixed_costs / target_units + variable_cost_per_unit


def profit_amount_from_percentage(fixed_costs: float, percentage: float) -> float:
    """
    Convert a target profit percentage into a profit amount.

    Solves fixed/(1 - p) - fixed, the fixed point of profit% = profit/revenue
    used by the calculator UI.

    Args:
        fixed_costs: Fixed costs for the period
        percentage: Target profit as percent (e.g., 20 for 20%)
    """
    fraction = percentage / 100
    return fixed_costs / (1 - fraction) - fixed_costs


def _profit_target_amount(inputs: BreakEvenInput) -> float:
    has_amount = inputs.target_profit is not None
    has_percentage = inputs.target_profit_percentage is not None

    if has_amount == has_percentage:
        raise MissingTarget(
            "Profit target mode needs exactly one of target_profit "
            "or target_profit_percentage"
        )

    if has_amount:
        if inputs.target_profit < 0:
            raise InvalidInput("target_profit must not be negative")
        return inputs.target_profit

    percentage = inputs.target_profit_percentage
    if not 0 <= percentage < 100:
        raise InvalidInput("target_profit_percentage must be at least 0 and below 100")
    return profit_amount_from_percentage(inputs.fixed_costs, percentage)


def compute_break_even(inputs: BreakEvenInput) -> BreakEvenResult:
    """
    Run the break-even calculation for the input's mode.

    Args:
        inputs: Cost structure, mode and optional targets

    Returns:
        BreakEvenResult with the mode-specific fields filled in

    Raises:
        NonPositiveMargin: Mode divides by the margin and price <= variable cost
        MissingTarget: findPrice without target_units > 0, or profitTarget
            without exactly one profit target
    """
    _check_non_negative(inputs)
    mode = BreakEvenMode(inputs.mode)
    logger.debug(
        "Break-even %s: fixed=%s variable=%s price=%s",
        mode.value,
        inputs.fixed_costs,
        inputs.variable_cost_per_unit,
        inputs.selling_price_per_unit,
    )

    result = BreakEvenResult(
        mode=mode,
        contribution_margin=inputs.contribution_margin,
        contribution_margin_ratio=_margin_ratio(inputs),
    )

    if mode == BreakEvenMode.FIND_PRICE:
        if inputs.target_units is None or inputs.target_units <= 0:
            raise MissingTarget("findPrice mode needs target_units greater than 0")
        result.required_price = calculate_required_price(
            inputs.fixed_costs, inputs.variable_cost_per_unit, inputs.target_units
        )
        result.break_even_units = inputs.target_units
        result.total_revenue_at_break_even = inputs.target_units * result.required_price
        return result

    margin = _require_margin(inputs)
    units = calculate_break_even_units(inputs.fixed_costs, margin)
    result.break_even_units = units
    result.total_revenue_at_break_even = units * inputs.selling_price_per_unit

    if mode == BreakEvenMode.PROFIT_TARGET:
        profit = _profit_target_amount(inputs)
        units_for_profit = (inputs.fixed_costs + profit) / margin
        revenue = units_for_profit * inputs.selling_price_per_unit

        result.target_profit_amount = profit
        result.units_for_profit = units_for_profit
        result.total_revenue_for_profit = revenue
        result.realized_profit_percentage = profit / revenue * 100 if revenue > 0 else None

    return result


def cost_volume_profit_schedule(inputs: BreakEvenInput, steps: int = 10) -> List[Dict]:
    """
    Tabulate revenue, cost and profit from zero to twice the break-even volume.

    Args:
        inputs: Cost structure (mode is ignored)
        steps: Number of intervals in the table

    Returns:
        List of rows with units, revenue, total_cost and profit
    """
    if steps < 1:
        raise InvalidInput("steps must be at least 1")
    _check_non_negative(inputs)
    margin = _require_margin(inputs)

    max_units = math.ceil(calculate_break_even_units(inputs.fixed_costs, margin) * 2)
    step = max(1, math.ceil(max_units / steps))

    schedule = []
    for units in range(0, max_units + 1, step):
        revenue = units * inputs.selling_price_per_unit
        total_cost = inputs.fixed_costs + units * inputs.variable_cost_per_unit
        schedule.append(
            {
                "units": units,
                "revenue": revenue,
                "total_cost": total_cost,
                "profit": revenue - total_cost,
            }
        )

    return schedule
