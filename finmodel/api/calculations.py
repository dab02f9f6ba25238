"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results.
They hold no state and add no calculation logic of their own.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from finmodel.config import Settings, get_settings
from finmodel.calculations import (
    breakeven,
    cashflow,
    pricing,
    ratios,
    scenario,
    startup,
    subscription,
    validation,
    valuation,
)
from finmodel.calculations.errors import CalculationError

logger = logging.getLogger(__name__)

router = APIRouter()


def _bad_request(error: CalculationError) -> HTTPException:
    logger.warning("Rejected calculation: %s (%s)", error.message, error.code)
    return HTTPException(status_code=400, detail=error.to_dict())


# =============================================================================
# BREAK-EVEN
# =============================================================================


class BreakEvenRequest(BaseModel):
    """Input for break-even calculation."""

    fixed_costs: float
    variable_cost_per_unit: float
    selling_price_per_unit: float
    mode: breakeven.BreakEvenMode = breakeven.BreakEvenMode.STANDARD
    target_units: Optional[float] = None
    target_profit: Optional[float] = None
    target_profit_percentage: Optional[float] = None

    def to_input(self) -> breakeven.BreakEvenInput:
        return breakeven.BreakEvenInput(**self.model_dump())


@router.post("/break-even")
async def calculate_break_even(inputs: BreakEvenRequest):
    """Calculate break-even units, price or profit-target volume."""
    try:
        return breakeven.compute_break_even(inputs.to_input()).to_dict()
    except CalculationError as e:
        raise _bad_request(e)


@router.post("/break-even/schedule")
async def calculate_break_even_schedule(inputs: BreakEvenRequest, steps: int = 10):
    """Tabulate revenue, cost and profit around the break-even point."""
    try:
        return {"schedule": breakeven.cost_volume_profit_schedule(inputs.to_input(), steps=steps)}
    except CalculationError as e:
        raise _bad_request(e)


# =============================================================================
# VALUATION
# =============================================================================


class ValuationRequest(BaseModel):
    """Input for business valuation. Method parameters default to settings."""

    revenue: float
    net_income: float
    assets: float
    liabilities: float
    cash_flow: float
    growth_rate: float = Field(..., description="Annual growth as percent (e.g., 5 for 5%)")

    revenue_multiple: Optional[float] = None
    pe_ratio: Optional[float] = None
    discount_rate: Optional[float] = Field(None, description="Decimal (e.g., 0.10 for 10%)")
    projection_years: Optional[int] = None


def _valuation_settings(inputs: ValuationRequest, settings: Settings) -> valuation.ValuationSettings:
    def pick(value, default):
        return default if value is None else value

    return valuation.ValuationSettings(
        revenue_multiple=pick(inputs.revenue_multiple, settings.revenue_multiple),
        pe_ratio=pick(inputs.pe_ratio, settings.pe_ratio),
        discount_rate=pick(inputs.discount_rate, settings.discount_rate),
        projection_years=pick(inputs.projection_years, settings.dcf_projection_years),
    )


@router.post("/valuation")
async def calculate_valuation(inputs: ValuationRequest, settings: Settings = Depends(get_settings)):
    """Value a business with asset, market, earnings and DCF methods."""
    metrics = valuation.FinancialMetrics(
        revenue=inputs.revenue,
        net_income=inputs.net_income,
        assets=inputs.assets,
        liabilities=inputs.liabilities,
        cash_flow=inputs.cash_flow,
        growth_rate=inputs.growth_rate,
    )
    try:
        result = valuation.compute_valuations(metrics, _valuation_settings(inputs, settings))
    except CalculationError as e:
        raise _bad_request(e)
    return result.to_dict()


# =============================================================================
# CASH FLOW
# =============================================================================


class CashFlowRequest(BaseModel):
    """Cash flow document plus projection options."""

    data: Dict[str, Any]
    periods: Optional[int] = None
    start_date: Optional[date] = None


@router.post("/cashflow")
async def calculate_cashflow(inputs: CashFlowRequest, settings: Settings = Depends(get_settings)):
    """Project monthly and annual cash flows."""
    periods = inputs.periods
    if periods is None:
        periods = settings.default_projection_months
    try:
        data = cashflow.CashFlowData.from_dict(inputs.data)
        if data.growth_parameters.new_customer_growth_rate is None:
            data.growth_parameters.new_customer_growth_rate = settings.new_customer_growth_rate
        result = cashflow.project_cash_flows(data, periods=periods, start_date=inputs.start_date)
    except CalculationError as e:
        raise _bad_request(e)
    return result.to_dict()


# =============================================================================
# SCENARIOS
# =============================================================================


class ScenarioMetricsInput(BaseModel):
    revenue: float = 0.0
    costs: float = 0.0
    market_share: float = 0.0
    customer_growth: float = 0.0
    operating_expenses: float = 0.0
    profit_margin: float = 0.0


class ScenarioInput(BaseModel):
    id: str
    name: str
    description: str = ""
    metrics: ScenarioMetricsInput
    probability: float

    def to_scenario(self) -> scenario.Scenario:
        return scenario.Scenario(
            id=self.id,
            name=self.name,
            description=self.description,
            metrics=scenario.ScenarioMetrics(**self.metrics.model_dump()),
            probability=self.probability,
        )


class ScenarioSetInput(BaseModel):
    scenarios: List[ScenarioInput]


class RebalanceInput(ScenarioSetInput):
    changed_id: str
    new_value: float
    decimals: int = 2


@router.post("/scenarios/expected")
async def calculate_expected_outcome(inputs: ScenarioSetInput):
    """Probability-weighted revenue and profit across scenarios."""
    try:
        result = scenario.compute_expected([s.to_scenario() for s in inputs.scenarios])
    except CalculationError as e:
        raise _bad_request(e)
    return result.to_dict()


@router.post("/scenarios/rebalance")
async def rebalance_scenarios(inputs: RebalanceInput):
    """Change one probability and rescale the others to keep a total of 100."""
    try:
        rebalanced = scenario.rebalance_probabilities(
            [s.to_scenario() for s in inputs.scenarios],
            inputs.changed_id,
            inputs.new_value,
            decimals=inputs.decimals,
        )
    except CalculationError as e:
        raise _bad_request(e)
    return {"scenarios": [{"id": s.id, "probability": s.probability} for s in rebalanced]}


# =============================================================================
# STARTUP COSTS
# =============================================================================


class StartupCostInput(BaseModel):
    name: str
    amount: float
    category: str = "oneTime"
    description: Optional[str] = None


class StartupCostRequest(BaseModel):
    costs: List[StartupCostInput]
    reserve_months: Optional[int] = None


@router.post("/startup-costs")
async def calculate_startup_costs(inputs: StartupCostRequest, settings: Settings = Depends(get_settings)):
    """Total startup costs and recommended cash reserve."""
    costs = [startup.StartupCost(**cost.model_dump()) for cost in inputs.costs]
    reserve_months = inputs.reserve_months
    if reserve_months is None:
        reserve_months = settings.cash_reserve_months
    try:
        return startup.estimate_startup_costs(costs, reserve_months=reserve_months).to_dict()
    except CalculationError as e:
        raise _bad_request(e)


# =============================================================================
# FINANCIAL RATIOS
# =============================================================================


class RatioRequest(BaseModel):
    """Financial statement figures plus which ratios to compute."""

    values: Dict[str, float]
    names: Optional[List[str]] = None
    category: Optional[ratios.RatioCategory] = None


@router.post("/ratios")
async def calculate_financial_ratios(inputs: RatioRequest):
    """Compute named ratios, or every ratio the figures allow."""
    try:
        results = ratios.calculate_ratios(inputs.values, names=inputs.names, category=inputs.category)
    except CalculationError as e:
        raise _bad_request(e)
    return {"ratios": [result.to_dict() for result in results]}


# =============================================================================
# PRICING STRATEGY
# =============================================================================


class PricingRequest(BaseModel):
    cost_per_unit: float
    target_margin: float = Field(..., description="Markup over cost as percent (e.g., 30 for 30%)")
    competitor_prices: List[float] = []
    market_segment: str = "mid-range"


@router.post("/pricing")
async def calculate_pricing(inputs: PricingRequest):
    """Price points, break-even band and suggestions for a product."""
    try:
        return pricing.analyze_pricing(pricing.PricingInput(**inputs.model_dump())).to_dict()
    except CalculationError as e:
        raise _bad_request(e)


# =============================================================================
# SUBSCRIPTION REVENUE
# =============================================================================


class SubscriptionRequest(BaseModel):
    monthly_subscription_price: float
    customer_acquisition_cost: float
    customer_retention_rate: float
    monthly_platform_costs: float
    monthly_per_client_costs: float
    initial_customer_base: float
    monthly_growth_rate: float
    months: int = subscription.DEFAULT_MONTHS


@router.post("/subscription")
async def calculate_subscription(inputs: SubscriptionRequest):
    """Month-by-month subscription customers, revenue and profit."""
    fields = inputs.model_dump(exclude={"months"})
    try:
        result = subscription.project_subscription_revenue(
            subscription.SubscriptionInput(**fields), months=inputs.months
        )
    except CalculationError as e:
        raise _bad_request(e)
    return result.to_dict()


# =============================================================================
# FORM VALIDATION
# =============================================================================


class ValidateRequest(BaseModel):
    """Raw form fields and the rule set name to check each against."""

    fields: Dict[str, Any]
    rules: Dict[str, str]


@router.post("/validate")
async def validate_fields(inputs: ValidateRequest):
    """Validate raw form values, reporting every failing field at once."""
    unknown = sorted(set(inputs.rules.values()) - set(validation.RULE_SETS))
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown rule set: {', '.join(unknown)}")

    rules = {name: validation.RULE_SETS[rule] for name, rule in inputs.rules.items()}
    results = validation.validate_form(inputs.fields, rules)
    errors = validation.collect_errors(results)

    return {
        "valid": not errors,
        "values": {name: result.value for name, result in results.items() if result.ok},
        "errors": [error.to_dict() for error in errors],
    }
