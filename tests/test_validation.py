"""
Tests for form input validation.
"""

import pytest

from finmodel.calculations.validation import (
    CURRENCY,
    NON_NEGATIVE_INTEGER,
    PERCENTAGE,
    REAL,
    FieldRule,
    ValidationErrorKind,
    collect_errors,
    validate,
    validate_form,
)


class TestValidateField:
    """Test single-field validation."""

    def test_valid_currency_string(self):
        result = validate("price", "19.99", CURRENCY)
        assert result.ok
        assert result.value == 19.99

    def test_currency_native_number(self):
        result = validate("price", 250, CURRENCY)
        assert result.ok
        assert result.value == 250.0

    def test_currency_rejects_three_decimals(self):
        result = validate("price", "19.999", CURRENCY)
        assert not result.ok
        assert result.error.kind == ValidationErrorKind.INVALID_FORMAT

    def test_currency_rejects_negative(self):
        """Negative amounts are out of range, not a format problem."""
        result = validate("price", "-5", CURRENCY)
        assert result.error.kind == ValidationErrorKind.OUT_OF_RANGE
        assert result.error.message == "Value must be at least 0"

    def test_required_empty(self):
        for empty in (None, "", "   "):
            result = validate("fixed_costs", empty, CURRENCY)
            assert result.error.kind == ValidationErrorKind.REQUIRED
            assert result.error.field == "fixed_costs"

    def test_optional_empty_is_valid(self):
        rule = FieldRule(required=False, min_value=0)
        result = validate("target_units", "", rule)
        assert result.ok
        assert result.value is None

    def test_non_numeric_string(self):
        result = validate("revenue", "abc", REAL)
        assert result.error.kind == ValidationErrorKind.INVALID_FORMAT

    def test_non_finite_rejected(self):
        for raw in ("nan", "inf", float("inf")):
            result = validate("revenue", raw, REAL)
            assert result.error.kind == ValidationErrorKind.INVALID_FORMAT

    def test_boolean_rejected(self):
        result = validate("units", True, NON_NEGATIVE_INTEGER)
        assert result.error.kind == ValidationErrorKind.INVALID_FORMAT

    def test_percentage_bounds(self):
        assert validate("growth", "100", PERCENTAGE).ok
        assert validate("growth", "0", PERCENTAGE).ok

        result = validate("growth", "100.5", PERCENTAGE)
        assert result.error.kind == ValidationErrorKind.OUT_OF_RANGE
        assert result.error.message == "Value must not exceed 100"

    def test_integer_rule(self):
        assert validate("units", "42", NON_NEGATIVE_INTEGER).value == 42.0
        assert validate("units", 7.0, NON_NEGATIVE_INTEGER).ok

        result = validate("units", "4.5", NON_NEGATIVE_INTEGER)
        assert result.error.kind == ValidationErrorKind.INVALID_FORMAT

    def test_real_accepts_signed_values(self):
        assert validate("net_income", "-1500.25", REAL).value == -1500.25
        assert validate("net_income", -3, REAL).value == -3.0
        assert validate("net_income", "1e3", REAL).value == 1000.0


class TestValidateForm:
    """Test multi-field validation."""

    def test_collects_every_error(self):
        """All failing fields are reported, not just the first."""
        rules = {
            "fixed_costs": CURRENCY,
            "growth_rate": PERCENTAGE,
            "units": NON_NEGATIVE_INTEGER,
        }
        results = validate_form({"fixed_costs": "abc", "growth_rate": "150"}, rules)
        errors = collect_errors(results)

        assert [e.field for e in errors] == ["fixed_costs", "growth_rate", "units"]
        assert [e.kind for e in errors] == [
            ValidationErrorKind.INVALID_FORMAT,
            ValidationErrorKind.OUT_OF_RANGE,
            ValidationErrorKind.REQUIRED,
        ]

    def test_valid_form(self):
        results = validate_form(
            {"fixed_costs": "10000", "growth_rate": 5},
            {"fixed_costs": CURRENCY, "growth_rate": PERCENTAGE},
        )
        assert collect_errors(results) == []
        assert results["fixed_costs"].value == 10000.0
        assert results["growth_rate"].value == 5.0

    def test_error_serializes(self):
        error = validate("price", "x", CURRENCY).error
        assert error.to_dict() == {
            "field": "price",
            "kind": "InvalidFormat",
            "message": "Must be a valid number",
        }


@pytest.mark.parametrize("raw", ["0", "0.5", ".5", "12.", "1000000.00"])
def test_currency_accepts_common_inputs(raw):
    assert validate("amount", raw, CURRENCY).ok
