"""
Scenario Analysis

Combines named business scenarios (base, optimistic, pessimistic, ...) into
probability-weighted expectations.

Probabilities are percentages. compute_expected() uses them exactly as given
and reports their total; keeping the set at 100 is the job of the optional
rebalance_probabilities() helper.
"""

import logging
import math
from dataclasses import dataclass, field, replace, asdict
from typing import Dict, List, Optional

from finmodel.calculations.errors import (
    EmptyScenarioSet,
    InvalidInput,
    InvalidProbability,
    UnknownScenario,
)

logger = logging.getLogger(__name__)

METRIC_FIELDS = (
    "revenue",
    "costs",
    "market_share",
    "customer_growth",
    "operating_expenses",
    "profit_margin",
)


@dataclass
class ScenarioMetrics:
    revenue: float = 0.0
    costs: float = 0.0
    market_share: float = 0.0
    customer_growth: float = 0.0
    operating_expenses: float = 0.0
    profit_margin: float = 0.0

    @property
    def profit(self) -> float:
        return self.revenue - self.costs - self.operating_expenses


@dataclass
class Scenario:
    id: str
    name: str
    metrics: ScenarioMetrics
    probability: float  # Percent (0-100)
    description: str = ""


@dataclass
class MetricRange:
    min: float
    max: float


@dataclass
class ExpectedOutcome:
    """Probability-weighted totals and unweighted ranges across scenarios."""

    expected_revenue: float
    expected_profit: float
    market_share_range: MetricRange
    customer_growth_range: MetricRange
    probability_total: float
    scenario_profits: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ScenarioAdjustment:
    """Multipliers applied to a base-case metric to derive the other cases."""

    optimistic_multiplier: float = 1.0
    pessimistic_multiplier: float = 1.0


def _metric_range(values: List[float]) -> MetricRange:
    return MetricRange(min=min(values), max=max(values))


def compute_expected(scenarios: List[Scenario]) -> ExpectedOutcome:
    """
    Probability-weighted revenue and profit across scenarios.

    expected_revenue = sum(revenue * p / 100)
    expected_profit  = sum((revenue - costs - operating_expenses) * p / 100)

    Market share and customer growth ranges are plain min/max over the set.

    Raises:
        EmptyScenarioSet: If no scenarios are given
        InvalidInput: If a metric or probability is not a finite number
    """
    if not scenarios:
        raise EmptyScenarioSet("At least one scenario is required")

    for scenario in scenarios:
        values = [getattr(scenario.metrics, name) for name in METRIC_FIELDS]
        if not all(math.isfinite(v) for v in values + [scenario.probability]):
            raise InvalidInput(f"Scenario {scenario.id!r} has a non-finite value")

    probability_total = sum(s.probability for s in scenarios)
    if not math.isclose(probability_total, 100.0, abs_tol=1e-9):
        logger.debug("Scenario probabilities sum to %s, not 100", probability_total)

    return ExpectedOutcome(
        expected_revenue=sum(s.metrics.revenue * (s.probability / 100) for s in scenarios),
        expected_profit=sum(s.metrics.profit * (s.probability / 100) for s in scenarios),
        market_share_range=_metric_range([s.metrics.market_share for s in scenarios]),
        customer_growth_range=_metric_range([s.metrics.customer_growth for s in scenarios]),
        probability_total=probability_total,
        scenario_profits={s.id: s.metrics.profit for s in scenarios},
    )


def _largest_remainder(shares: List[float], total_units: int) -> List[int]:
    """
    Round non-negative shares to integers that add up to total_units.

    Every share is floored, then the leftover units go one each to the shares
    with the largest fractional parts (ties broken by position).
    """
    floors = [math.floor(share) for share in shares]
    leftover = total_units - sum(floors)
    order = sorted(
        range(len(shares)),
        key=lambda i: (-(shares[i] - floors[i]), i),
    )
    for i in order[:leftover]:
        floors[i] += 1
    return floors


def rebalance_probabilities(
    scenarios: List[Scenario],
    changed_id: str,
    new_value: float,
    decimals: int = 2,
) -> List[Scenario]:
    """
    Set one scenario's probability and spread the remainder over the others.

    The remainder (100 - new_value) is split in proportion to the other
    scenarios' current probabilities, or equally when they are all zero.
    Shares are rounded to ``decimals`` places with the largest-remainder rule,
    so the returned set always sums to exactly 100 at that precision and
    repeated edits do not drift.

    Args:
        scenarios: Current scenario set (not modified)
        changed_id: Id of the scenario the user edited
        new_value: Its new probability (0-100)
        decimals: Decimal places kept in the rounded probabilities

    Returns:
        New list of Scenario objects in input order

    Raises:
        UnknownScenario: If changed_id is not in the set
        InvalidProbability: If new_value is outside 0-100
    """
    if decimals < 0:
        raise InvalidInput("decimals must not be negative")
    if not math.isfinite(new_value) or not 0 <= new_value <= 100:
        raise InvalidProbability("Probability must be between 0 and 100")
    if not any(s.id == changed_id for s in scenarios):
        raise UnknownScenario(f"No scenario with id {changed_id!r}")

    scale = 10 ** decimals
    total_units = 100 * scale
    changed_units = min(round(new_value * scale), total_units)
    others = [s for s in scenarios if s.id != changed_id]

    if not others:
        # A lone scenario carries the whole distribution
        return [replace(scenarios[0], probability=100.0)]

    remainder_units = total_units - changed_units
    weights = [max(0.0, s.probability) for s in others]
    weight_total = sum(weights)
    if weight_total > 0:
        shares = [remainder_units * w / weight_total for w in weights]
    else:
        shares = [remainder_units / len(others)] * len(others)

    other_units = dict(zip((s.id for s in others), _largest_remainder(shares, remainder_units)))

    rebalanced = []
    for scenario in scenarios:
        units = changed_units if scenario.id == changed_id else other_units[scenario.id]
        rebalanced.append(replace(scenario, probability=units / scale))
    return rebalanced


def derive_scenarios(
    base: Scenario,
    adjustments: Dict[str, ScenarioAdjustment],
    probabilities: Optional[Dict[str, float]] = None,
) -> List[Scenario]:
    """
    Build optimistic and pessimistic cases from a base case.

    Each metric named in ``adjustments`` is multiplied by its optimistic or
    pessimistic multiplier; metrics without an adjustment are copied.

    Args:
        base: The base-case scenario
        adjustments: Metric name -> ScenarioAdjustment
        probabilities: Optional id -> probability for the three cases
            (defaults to base 60, optimistic 20, pessimistic 20)

    Returns:
        [base, optimistic, pessimistic]
    """
    unknown = set(adjustments) - set(METRIC_FIELDS)
    if unknown:
        raise InvalidInput(f"Unknown scenario metrics: {', '.join(sorted(unknown))}")

    probabilities = probabilities or {"base": 60.0, "optimistic": 20.0, "pessimistic": 20.0}

    def adjusted(attr: str, case_id: str, name: str) -> Scenario:
        values = {}
        for metric in METRIC_FIELDS:
            adjustment = adjustments.get(metric)
            multiplier = getattr(adjustment, attr) if adjustment else 1.0
            values[metric] = getattr(base.metrics, metric) * multiplier
        return Scenario(
            id=case_id,
            name=name,
            metrics=ScenarioMetrics(**values),
            probability=probabilities.get(case_id, 0.0),
        )

    return [
        replace(base, probability=probabilities.get("base", base.probability)),
        adjusted("optimistic_multiplier", "optimistic", "Optimistic"),
        adjusted("pessimistic_multiplier", "pessimistic", "Pessimistic"),
    ]
