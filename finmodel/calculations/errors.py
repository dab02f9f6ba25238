"""
Calculation Errors

Typed failures raised by the calculators. Each carries a stable ``code`` so
callers can map the reason to a user-facing message without parsing text.
"""


class CalculationError(ValueError):
    """Base class for every calculator precondition failure."""

    code = "calculation_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class NonPositiveMargin(CalculationError):
    """Selling price does not exceed variable cost per unit."""

    code = "non_positive_margin"


class MissingTarget(CalculationError):
    """A mode needs a target value the input does not provide."""

    code = "missing_target"


class DivergentGrowth(CalculationError):
    """Terminal growth rate is at or above the discount rate."""

    code = "divergent_growth"


class MalformedCashFlowData(CalculationError):
    """Cash flow input has the wrong shape or a non-numeric amount."""

    code = "malformed_cash_flow_data"

    def __init__(self, message: str, path: str = ""):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "path": self.path}


class EmptyScenarioSet(CalculationError):
    code = "empty_scenario_set"


class UnknownScenario(CalculationError):
    code = "unknown_scenario"


class InvalidProbability(CalculationError):
    code = "invalid_probability"


class InvalidStartupCost(CalculationError):
    code = "invalid_startup_cost"


class InvalidInput(CalculationError):
    """A numeric input is negative, non-finite or otherwise unusable."""

    code = "invalid_input"


class ZeroDenominator(CalculationError):
    """A ratio's denominator input is zero."""

    code = "zero_denominator"


class UnknownRatio(CalculationError):
    code = "unknown_ratio"
