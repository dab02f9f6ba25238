"""
Cash Flow Calculations

Generates monthly cash flow projections for a small business from its
revenue streams and expense categories.

Revenue streams: product sales (with monthly seasonality), service income,
subscriptions (with churn and new-customer growth), licensing royalties and
other income. Expenses: fixed, variable and financial obligations recur each
month; one-time expenses only count toward the lifetime total.

Projections are sequential because subscriber counts carry over from one
month to the next, so every call recomputes from period 0.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field, asdict
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from finmodel.calculations.errors import InvalidInput, MalformedCashFlowData

logger = logging.getLogger(__name__)

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Share of the previous month's subscribers added as new customers each month
DEFAULT_NEW_CUSTOMER_GROWTH_RATE = 0.20

DEFAULT_PROJECTION_MONTHS = 60


class RevenueGrowthModel(str, Enum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    SEASONAL = "seasonal"


class ExpenseGrowthModel(str, Enum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    FIXED = "fixed"


def month_key(month: Any) -> Optional[str]:
    """Normalize a month given as a name or 1-12 number to its full name."""
    if isinstance(month, bool):
        return None
    if isinstance(month, int):
        return MONTHS[month - 1] if 1 <= month <= 12 else None
    if isinstance(month, str):
        text = month.strip()
        if text.isdigit():
            return month_key(int(text))
        for name in MONTHS:
            if name.lower() == text.lower() or name[:3].lower() == text.lower():
                return name
    return None


# =============================================================================
# REVENUE STREAMS
# =============================================================================


@dataclass
class ProductSales:
    units_sold: float
    price_per_unit: float
    production_cost_per_unit: float = 0.0
    seasonality: Dict[str, float] = field(default_factory=dict)  # Month name -> multiplier

    def seasonal_factor(self, month: str) -> float:
        return self.seasonality.get(month, 1.0)


@dataclass
class ServiceIncome:
    rate_or_price: float
    expected_volume_per_month: float
    service_type: str = ""


@dataclass
class SubscriptionRevenue:
    monthly_fee: float
    subscribers: float
    churn_rate: float  # Fraction lost per month (0-1)
    pricing_tier: str = ""


@dataclass
class LicensingRoyalties:
    royalty_rate: float
    expected_volume: float
    agreement_name: str = ""


@dataclass
class OtherRevenue:
    affiliate_income: float = 0.0
    advertising_revenue: float = 0.0
    grants_and_donations: float = 0.0

    def total(self) -> float:
        return self.affiliate_income + self.advertising_revenue + self.grants_and_donations


# =============================================================================
# EXPENSE CATEGORIES
# =============================================================================


@dataclass
class CustomExpense:
    name: str
    amount: float
    description: Optional[str] = None


@dataclass
class ExpenseCategory:
    """Named monthly amounts plus any user-defined custom lines."""

    NAMED_FIELDS: ClassVar[Tuple[str, ...]] = ()

    custom: List[CustomExpense] = field(default_factory=list)

    def total(self) -> float:
        named = sum(getattr(self, name) for name in self.NAMED_FIELDS)
        return named + sum(expense.amount for expense in self.custom)


@dataclass
class FixedExpenses(ExpenseCategory):
    NAMED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "rent", "salaries", "insurance", "utilities", "software_subscriptions",
    )

    rent: float = 0.0
    salaries: float = 0.0
    insurance: float = 0.0
    utilities: float = 0.0
    software_subscriptions: float = 0.0


@dataclass
class VariableExpenses(ExpenseCategory):
    NAMED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "cogs", "marketing", "sales_commissions", "supplies",
    )

    cogs: float = 0.0
    marketing: float = 0.0
    sales_commissions: float = 0.0
    supplies: float = 0.0


@dataclass
class OneTimeExpenses(ExpenseCategory):
    NAMED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "startup_costs", "capital_expenditures", "legal_and_licensing",
    )

    startup_costs: float = 0.0
    capital_expenditures: float = 0.0
    legal_and_licensing: float = 0.0


@dataclass
class FinancialObligations(ExpenseCategory):
    NAMED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "loan_repayments", "interest_payments", "taxes",
    )

    loan_repayments: float = 0.0
    interest_payments: float = 0.0
    taxes: float = 0.0


@dataclass
class GrowthParameters:
    """
    Growth assumptions applied from the second projection year onward.

    Growth rates are annual percentages (e.g., 10 for 10%). Receivable and
    payable days, tax rate and inventory turnover are carried for downstream
    consumers; the projection itself does not use them.
    """

    revenue_growth_rate: float = 0.0
    expense_growth_rate: float = 0.0
    accounts_receivable_days: float = 0.0
    accounts_payable_days: float = 0.0
    corporate_tax_rate: float = 0.0
    revenue_growth_model: RevenueGrowthModel = RevenueGrowthModel.EXPONENTIAL
    expense_growth_model: ExpenseGrowthModel = ExpenseGrowthModel.EXPONENTIAL
    inventory_turnover_days: Optional[float] = None
    new_customer_growth_rate: Optional[float] = None
    seasonal_factors: Dict[str, float] = field(default_factory=dict)

    def acquisition_rate(self) -> float:
        if self.new_customer_growth_rate is None:
            return DEFAULT_NEW_CUSTOMER_GROWTH_RATE
        return self.new_customer_growth_rate


@dataclass
class CashFlowData:
    """Complete input document for a cash flow projection."""

    product_sales: List[ProductSales] = field(default_factory=list)
    service_income: List[ServiceIncome] = field(default_factory=list)
    subscription_revenue: List[SubscriptionRevenue] = field(default_factory=list)
    licensing_royalties: List[LicensingRoyalties] = field(default_factory=list)
    other_revenue: OtherRevenue = field(default_factory=OtherRevenue)
    fixed_expenses: FixedExpenses = field(default_factory=FixedExpenses)
    variable_expenses: VariableExpenses = field(default_factory=VariableExpenses)
    one_time_expenses: OneTimeExpenses = field(default_factory=OneTimeExpenses)
    financial_obligations: FinancialObligations = field(default_factory=FinancialObligations)
    growth_parameters: GrowthParameters = field(default_factory=GrowthParameters)

    def recurring_monthly_expenses(self) -> float:
        """Base (year 1) monthly expenses, excluding one-time items."""
        return (
            self.fixed_expenses.total()
            + self.variable_expenses.total()
            + self.financial_obligations.total()
        )

    @classmethod
    def from_dict(cls, raw: Any) -> "CashFlowData":
        """
        Build and check a CashFlowData from a JSON-style document.

        Keys may be snake_case or the camelCase used by the calculator UI.
        Missing stream lists and sections default to empty; present values
        of the wrong type are rejected.

        Raises:
            MalformedCashFlowData: On the first invalid value, with its path
        """
        return _parse_cash_flow_data(raw)


# =============================================================================
# PARSING
# =============================================================================


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _lookup(raw: Mapping, name: str, default: Any = None) -> Any:
    if name in raw:
        return raw[name]
    return raw.get(_camel(name), default)


def _number(value: Any, path: str, minimum: Optional[float] = 0.0, maximum: Optional[float] = None) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedCashFlowData(f"expected a number, got {type(value).__name__}", path)
    if not math.isfinite(value):
        raise MalformedCashFlowData("expected a finite number", path)
    if minimum is not None and value < minimum:
        raise MalformedCashFlowData(f"must be at least {minimum:g}", path)
    if maximum is not None and value > maximum:
        raise MalformedCashFlowData(f"must not exceed {maximum:g}", path)
    return float(value)


def _field(raw: Mapping, name: str, path: str, **bounds) -> float:
    value = _lookup(raw, name, 0.0)
    return _number(value, f"{path}.{name}", **bounds)


def _text(raw: Mapping, name: str, path: str) -> str:
    value = _lookup(raw, name, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedCashFlowData("expected a string", f"{path}.{name}")
    return value


def _mapping(value: Any, path: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise MalformedCashFlowData(f"expected an object, got {type(value).__name__}", path)
    return value


def _section(raw: Mapping, name: str) -> Mapping:
    value = _lookup(raw, name)
    if value is None:
        return {}
    return _mapping(value, name)


def _items(raw: Mapping, name: str, path: str) -> List[Mapping]:
    value = _lookup(raw, name, [])
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedCashFlowData(f"expected a list, got {type(value).__name__}", f"{path}.{name}")
    return [_mapping(item, f"{path}.{name}[{i}]") for i, item in enumerate(value)]


def _factor_table(value: Any, path: str) -> Dict[str, float]:
    if value is None:
        return {}
    table = {}
    for key, factor in _mapping(value, path).items():
        month = month_key(key)
        if month is None:
            raise MalformedCashFlowData(f"unknown month {key!r}", path)
        table[month] = _number(factor, f"{path}.{key}")
    return table


def _custom_expenses(raw: Mapping, path: str) -> List[CustomExpense]:
    expenses = []
    for i, item in enumerate(_items(raw, "custom", path)):
        item_path = f"{path}.custom[{i}]"
        if "amount" not in item:
            raise MalformedCashFlowData("missing amount", item_path)
        expenses.append(
            CustomExpense(
                name=_text(item, "name", item_path),
                amount=_number(item["amount"], f"{item_path}.amount"),
                description=_lookup(item, "description") or None,
            )
        )
    return expenses


def _expense_category(raw: Mapping, name: str, category: type):
    path = name
    section = _section(raw, name)
    values = {field_name: _field(section, field_name, path) for field_name in category.NAMED_FIELDS}
    return category(custom=_custom_expenses(section, path), **values)


def _enum(value: Any, enum_type: type, default, path: str):
    if value is None:
        return default
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise MalformedCashFlowData(f"must be one of {allowed}", path) from None


def _growth_parameters(raw: Mapping) -> GrowthParameters:
    path = "growth_parameters"
    section = _section(raw, "growth_parameters")

    new_customer_rate = _lookup(section, "new_customer_growth_rate")
    if new_customer_rate is not None:
        new_customer_rate = _number(new_customer_rate, f"{path}.new_customer_growth_rate")

    inventory_days = _lookup(section, "inventory_turnover_days")
    if inventory_days is not None:
        inventory_days = _number(inventory_days, f"{path}.inventory_turnover_days")

    return GrowthParameters(
        revenue_growth_rate=_field(section, "revenue_growth_rate", path, minimum=-100.0),
        expense_growth_rate=_field(section, "expense_growth_rate", path, minimum=-100.0),
        accounts_receivable_days=_field(section, "accounts_receivable_days", path),
        accounts_payable_days=_field(section, "accounts_payable_days", path),
        corporate_tax_rate=_field(section, "corporate_tax_rate", path),
        revenue_growth_model=_enum(
            _lookup(section, "revenue_growth_model"),
            RevenueGrowthModel,
            RevenueGrowthModel.EXPONENTIAL,
            f"{path}.revenue_growth_model",
        ),
        expense_growth_model=_enum(
            _lookup(section, "expense_growth_model"),
            ExpenseGrowthModel,
            ExpenseGrowthModel.EXPONENTIAL,
            f"{path}.expense_growth_model",
        ),
        inventory_turnover_days=inventory_days,
        new_customer_growth_rate=new_customer_rate,
        seasonal_factors=_factor_table(_lookup(section, "seasonal_factors"), f"{path}.seasonal_factors"),
    )


def _parse_cash_flow_data(raw: Any) -> CashFlowData:
    raw = _mapping(raw, "data")

    products = [
        ProductSales(
            units_sold=_field(item, "units_sold", f"product_sales[{i}]"),
            price_per_unit=_field(item, "price_per_unit", f"product_sales[{i}]"),
            production_cost_per_unit=_field(item, "production_cost_per_unit", f"product_sales[{i}]"),
            seasonality=_factor_table(_lookup(item, "seasonality"), f"product_sales[{i}].seasonality"),
        )
        for i, item in enumerate(_items(raw, "product_sales", "data"))
    ]

    services = [
        ServiceIncome(
            rate_or_price=_field(item, "rate_or_price", f"service_income[{i}]"),
            expected_volume_per_month=_field(item, "expected_volume_per_month", f"service_income[{i}]"),
            service_type=_text(item, "service_type", f"service_income[{i}]"),
        )
        for i, item in enumerate(_items(raw, "service_income", "data"))
    ]

    subscriptions = [
        SubscriptionRevenue(
            monthly_fee=_field(item, "monthly_fee", f"subscription_revenue[{i}]"),
            subscribers=_field(item, "subscribers", f"subscription_revenue[{i}]"),
            churn_rate=_field(item, "churn_rate", f"subscription_revenue[{i}]", maximum=1.0),
            pricing_tier=_text(item, "pricing_tier", f"subscription_revenue[{i}]"),
        )
        for i, item in enumerate(_items(raw, "subscription_revenue", "data"))
    ]

    licensing = [
        LicensingRoyalties(
            royalty_rate=_field(item, "royalty_rate", f"licensing_royalties[{i}]"),
            expected_volume=_field(item, "expected_volume", f"licensing_royalties[{i}]"),
            agreement_name=_text(item, "agreement_name", f"licensing_royalties[{i}]"),
        )
        for i, item in enumerate(_items(raw, "licensing_royalties", "data"))
    ]

    other_section = _section(raw, "other_revenue")
    other = OtherRevenue(
        affiliate_income=_field(other_section, "affiliate_income", "other_revenue"),
        advertising_revenue=_field(other_section, "advertising_revenue", "other_revenue"),
        grants_and_donations=_field(other_section, "grants_and_donations", "other_revenue"),
    )

    return CashFlowData(
        product_sales=products,
        service_income=services,
        subscription_revenue=subscriptions,
        licensing_royalties=licensing,
        other_revenue=other,
        fixed_expenses=_expense_category(raw, "fixed_expenses", FixedExpenses),
        variable_expenses=_expense_category(raw, "variable_expenses", VariableExpenses),
        one_time_expenses=_expense_category(raw, "one_time_expenses", OneTimeExpenses),
        financial_obligations=_expense_category(raw, "financial_obligations", FinancialObligations),
        growth_parameters=_growth_parameters(raw),
    )


def check_cash_flow_data(data: CashFlowData) -> CashFlowData:
    """
    Check a CashFlowData built in code rather than parsed from a document.

    Returns:
        A normalized copy (month aliases such as "Jan" or 1 become full
        month names); the argument is left unchanged

    Raises:
        MalformedCashFlowData: On the first invalid value
    """
    return _parse_cash_flow_data(asdict(data))


# =============================================================================
# PROJECTION
# =============================================================================


@dataclass
class CashFlowProjection:
    """One projected month."""

    period: int  # 0-based month index
    month: str  # e.g. "January 1" (month name and projection year)
    year: int
    revenue: float
    expenses: float
    net_cash_flow: float
    cumulative_cash_flow: float
    revenue_breakdown: Dict[str, float] = field(default_factory=dict)
    active_subscribers: float = 0.0
    date: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ProjectionMetadata:
    """How a projection was computed, so consumers can reproduce it."""

    periods: int
    revenue_growth_model: str
    expense_growth_model: str
    revenue_growth_rate: float
    expense_growth_rate: float
    new_customer_growth_rate: float
    base_monthly_expenses: float
    recurring_expenses_total: float
    one_time_expenses_total: float
    lifetime_expenses_total: float
    start_date: Optional[str] = None


@dataclass
class ProjectionResult:
    projections: List[CashFlowProjection]
    metadata: ProjectionMetadata

    def annual(self) -> List[Dict]:
        return annualize_cash_flows(self.projections)

    def summary(self) -> Dict[str, Optional[float]]:
        return summarize_cash_flows(self.projections)

    def to_dict(self) -> Dict:
        return {
            "monthly": [p.to_dict() for p in self.projections],
            "annual": self.annual(),
            "summary": self.summary(),
            "metadata": asdict(self.metadata),
        }


def generate_monthly_dates(start_date: date, num_months: int) -> List[date]:
    """Generate one date per projected month."""
    return [start_date + relativedelta(months=i) for i in range(num_months)]


def calculate_growth_factor(model: str, annual_rate: float, year_index: int) -> float:
    """
    Growth multiplier for a projection year.

    Args:
        model: 'linear', 'exponential', 'seasonal' or 'fixed'
        annual_rate: Annual growth as percent (e.g., 10 for 10%)
        year_index: 0-based projection year; year 0 is always 1.0

    Raises:
        InvalidInput: If a linear decline takes the factor below zero
    """
    rate = annual_rate / 100
    if model == ExpenseGrowthModel.FIXED.value:
        return 1.0
    if model == RevenueGrowthModel.LINEAR.value:
        factor = 1 + rate * year_index
        if factor < 0:
            raise InvalidInput(
                f"Linear growth of {annual_rate:g}% per year falls below zero "
                f"in projection year {year_index + 1}"
            )
        return factor
    # Exponential and seasonal both compound annually
    return (1 + rate) ** year_index


def calculate_product_revenue(products: List[ProductSales], month: str) -> float:
    return sum(p.units_sold * p.price_per_unit * p.seasonal_factor(month) for p in products)


def calculate_service_revenue(services: List[ServiceIncome]) -> float:
    return sum(s.rate_or_price * s.expected_volume_per_month for s in services)


def calculate_subscription_revenue(
    subscriptions: List[SubscriptionRevenue], subscriber_counts: List[float]
) -> float:
    """Revenue from the month's active subscribers, net of the month's churn."""
    return sum(
        sub.monthly_fee * count * (1 - sub.churn_rate)
        for sub, count in zip(subscriptions, subscriber_counts)
    )


def calculate_licensing_revenue(licensing: List[LicensingRoyalties]) -> float:
    return sum(lic.royalty_rate * lic.expected_volume for lic in licensing)


def next_subscriber_counts(
    subscriptions: List[SubscriptionRevenue], counts: List[float], acquisition_rate: float
) -> List[float]:
    """Carry subscriber counts forward one month: lose churn, gain new customers."""
    return [
        count * (1 - sub.churn_rate + acquisition_rate)
        for sub, count in zip(subscriptions, counts)
    ]


def project_cash_flows(
    data: CashFlowData,
    periods: int = DEFAULT_PROJECTION_MONTHS,
    start_date: Optional[date] = None,
) -> ProjectionResult:
    """
    Project monthly revenue, expenses and cumulative cash flow.

    Year 1 uses the base figures. From year 2 onward revenue and expenses are
    multiplied by their growth factor for the year; the seasonal revenue
    model also applies growth_parameters.seasonal_factors for the month.

    Args:
        data: Checked cash flow input (see CashFlowData.from_dict)
        periods: Number of months to project
        start_date: Optional first month, used to date each period

    Returns:
        ProjectionResult with one CashFlowProjection per month and metadata

    Raises:
        InvalidInput: If periods < 1
    """
    if isinstance(periods, bool) or not isinstance(periods, int) or periods < 1:
        raise InvalidInput("periods must be a positive whole number")

    growth = data.growth_parameters
    revenue_model = RevenueGrowthModel(growth.revenue_growth_model)
    expense_model = ExpenseGrowthModel(growth.expense_growth_model)
    acquisition_rate = growth.acquisition_rate()
    base_expenses = data.recurring_monthly_expenses()

    logger.debug(
        "Projecting %s months: revenue model=%s expense model=%s acquisition=%s",
        periods,
        revenue_model.value,
        expense_model.value,
        acquisition_rate,
    )

    dates = generate_monthly_dates(start_date, periods) if start_date else None
    subscriber_counts = [sub.subscribers for sub in data.subscription_revenue]
    other_income = data.other_revenue.total()

    projections = []
    cumulative = 0.0
    recurring_total = 0.0

    for period in range(periods):
        if period > 0:
            subscriber_counts = next_subscriber_counts(
                data.subscription_revenue, subscriber_counts, acquisition_rate
            )

        year_index = period // 12
        month = MONTHS[(dates[period].month - 1) if dates else period % 12]

        revenue_factor = calculate_growth_factor(
            revenue_model.value, growth.revenue_growth_rate, year_index
        )
        if revenue_model == RevenueGrowthModel.SEASONAL:
            revenue_factor *= growth.seasonal_factors.get(month, 1.0)
        expense_factor = calculate_growth_factor(
            expense_model.value, growth.expense_growth_rate, year_index
        )

        breakdown = {
            "product_sales": calculate_product_revenue(data.product_sales, month) * revenue_factor,
            "service_income": calculate_service_revenue(data.service_income) * revenue_factor,
            "subscription_revenue": calculate_subscription_revenue(
                data.subscription_revenue, subscriber_counts
            ) * revenue_factor,
            "licensing_royalties": calculate_licensing_revenue(data.licensing_royalties) * revenue_factor,
            "other_revenue": other_income * revenue_factor,
        }

        revenue = sum(breakdown.values())
        expenses = base_expenses * expense_factor
        net_cash_flow = revenue - expenses
        cumulative += net_cash_flow
        recurring_total += expenses

        projections.append(
            CashFlowProjection(
                period=period,
                month=f"{month} {year_index + 1}",
                year=year_index + 1,
                revenue=revenue,
                expenses=expenses,
                net_cash_flow=net_cash_flow,
                cumulative_cash_flow=cumulative,
                revenue_breakdown=breakdown,
                active_subscribers=sum(subscriber_counts),
                date=dates[period].isoformat() if dates else None,
            )
        )

    one_time_total = data.one_time_expenses.total()
    metadata = ProjectionMetadata(
        periods=periods,
        revenue_growth_model=revenue_model.value,
        expense_growth_model=expense_model.value,
        revenue_growth_rate=growth.revenue_growth_rate,
        expense_growth_rate=growth.expense_growth_rate,
        new_customer_growth_rate=acquisition_rate,
        base_monthly_expenses=base_expenses,
        recurring_expenses_total=recurring_total,
        one_time_expenses_total=one_time_total,
        lifetime_expenses_total=recurring_total + one_time_total,
        start_date=start_date.isoformat() if start_date else None,
    )

    return ProjectionResult(projections=projections, metadata=metadata)


def project(raw: Any, periods: int = DEFAULT_PROJECTION_MONTHS, start_date: Optional[date] = None) -> ProjectionResult:
    """
    Parse a cash flow document and project it.

    The whole document is checked before any month is computed.

    Raises:
        MalformedCashFlowData: If the document is malformed
        InvalidInput: If periods < 1
    """
    if isinstance(raw, CashFlowData):
        data = check_cash_flow_data(raw)
    else:
        data = CashFlowData.from_dict(raw)
    return project_cash_flows(data, periods=periods, start_date=start_date)


# =============================================================================
# AGGREGATION
# =============================================================================


def annualize_cash_flows(projections: List[CashFlowProjection]) -> List[Dict]:
    """
    Convert monthly projections to annual totals.
    """
    annual_data = []
    current = None

    for p in projections:
        if current is None or p.year != current["year"]:
            current = {
                "year": p.year,
                "months": 0,
                "revenue": 0.0,
                "expenses": 0.0,
                "net_cash_flow": 0.0,
                "ending_cumulative_cash_flow": 0.0,
            }
            annual_data.append(current)

        current["months"] += 1
        current["revenue"] += p.revenue
        current["expenses"] += p.expenses
        current["net_cash_flow"] += p.net_cash_flow
        current["ending_cumulative_cash_flow"] = p.cumulative_cash_flow

    return annual_data


def summarize_cash_flows(projections: List[CashFlowProjection]) -> Dict[str, Optional[float]]:
    """
    Headline metrics over a projection.

    Ratios whose denominator is zero are reported as None.
    """
    total_revenue = sum(p.revenue for p in projections)
    total_expenses = sum(p.expenses for p in projections)
    net_cash_flow = total_revenue - total_expenses
    count = len(projections)

    return {
        "total_revenue": total_revenue,
        "total_expenses": total_expenses,
        "net_cash_flow": net_cash_flow,
        "average_monthly_revenue": total_revenue / count if count else None,
        "average_monthly_expenses": total_expenses / count if count else None,
        "revenue_to_expense_ratio": total_revenue / total_expenses if total_expenses else None,
        "cash_flow_margin": net_cash_flow / total_revenue * 100 if total_revenue else None,
    }
