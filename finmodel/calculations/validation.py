"""
Input Validation

Normalizes raw form values (strings or numbers) into floats and checks them
against a field rule. Validation never raises for bad input: every call
returns a tagged ValidationResult so a caller can collect all field errors
before rejecting a request.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Pattern


class ValidationErrorKind(str, Enum):
    """Why a field was rejected."""

    REQUIRED = "Required"
    OUT_OF_RANGE = "OutOfRange"
    INVALID_FORMAT = "InvalidFormat"


@dataclass
class ValidationError:
    """A single rejected field."""

    field: str
    kind: ValidationErrorKind
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "kind": self.kind.value, "message": self.message}


@dataclass
class ValidationResult:
    """Outcome of validating one field: a parsed value or an error."""

    field: str
    value: Optional[float] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FieldRule:
    """
    Constraints for one numeric field.

    Attributes:
        required: Reject empty values
        pattern: Regex the raw text must fully match
        min_value: Inclusive lower bound
        max_value: Inclusive upper bound
        integer: Value must be a whole number
    """

    required: bool = True
    pattern: Optional[Pattern] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    integer: bool = False


CURRENCY = FieldRule(min_value=0, pattern=re.compile(r"^\d*\.?\d{0,2}$"))
PERCENTAGE = FieldRule(min_value=0, max_value=100, pattern=re.compile(r"^\d*\.?\d*$"))
NON_NEGATIVE_INTEGER = FieldRule(min_value=0, pattern=re.compile(r"^\d+$"), integer=True)
REAL = FieldRule(pattern=re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$"))

RULE_SETS: Dict[str, FieldRule] = {
    "currency": CURRENCY,
    "percentage": PERCENTAGE,
    "integer": NON_NEGATIVE_INTEGER,
    "real": REAL,
}


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _fail(name: str, kind: ValidationErrorKind, message: str) -> ValidationResult:
    return ValidationResult(field=name, error=ValidationError(name, kind, message))


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _as_text(value: Any) -> str:
    """Render a native number the way a user would have typed it."""
    if isinstance(value, int):
        return str(value)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def validate(name: str, value: Any, rule: FieldRule) -> ValidationResult:
    """
    Validate a single raw field value.

    Checks run in a fixed order: required, numeric parse, min, max, pattern,
    integer. The first failing check decides the error.

    Args:
        name: Field name, echoed back in any error
        value: Raw value (str, int, float or None)
        rule: Constraints to apply

    Returns:
        ValidationResult with the parsed float, or with an error tagged
        Required, InvalidFormat or OutOfRange
    """
    if _is_empty(value):
        if rule.required:
            return _fail(name, ValidationErrorKind.REQUIRED, "This field is required")
        return ValidationResult(field=name)

    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return _fail(name, ValidationErrorKind.INVALID_FORMAT, "Invalid format")

    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except ValueError:
        return _fail(name, ValidationErrorKind.INVALID_FORMAT, "Must be a valid number")

    if not math.isfinite(number):
        return _fail(name, ValidationErrorKind.INVALID_FORMAT, "Must be a valid number")

    if rule.min_value is not None and number < rule.min_value:
        return _fail(
            name,
            ValidationErrorKind.OUT_OF_RANGE,
            f"Value must be at least {_format_bound(rule.min_value)}",
        )

    if rule.max_value is not None and number > rule.max_value:
        return _fail(
            name,
            ValidationErrorKind.OUT_OF_RANGE,
            f"Value must not exceed {_format_bound(rule.max_value)}",
        )

    text = value.strip() if isinstance(value, str) else _as_text(value)
    if rule.pattern is not None and not rule.pattern.fullmatch(text):
        return _fail(name, ValidationErrorKind.INVALID_FORMAT, "Invalid format")

    if rule.integer and not number.is_integer():
        return _fail(name, ValidationErrorKind.INVALID_FORMAT, "Must be a whole number")

    return ValidationResult(field=name, value=number)


def validate_form(data: Dict[str, Any], rules: Dict[str, FieldRule]) -> Dict[str, ValidationResult]:
    """
    Validate every field that has a rule.

    Fields absent from ``data`` are validated as empty so required fields are
    reported rather than skipped.
    """
    return {name: validate(name, data.get(name), rule) for name, rule in rules.items()}


def collect_errors(results: Dict[str, ValidationResult]) -> List[ValidationError]:
    """Return the errors from a validate_form() run, in field order."""
    return [result.error for result in results.values() if result.error is not None]
