"""
Financial Modeling Engine

Pure calculation modules behind the business finance calculators.
Every function is deterministic and keeps no state between calls.
"""

from finmodel.calculations import (
    breakeven,
    cashflow,
    errors,
    pricing,
    ratios,
    scenario,
    startup,
    subscription,
    validation,
    valuation,
)

__all__ = [
    "breakeven",
    "cashflow",
    "errors",
    "pricing",
    "ratios",
    "scenario",
    "startup",
    "subscription",
    "validation",
    "valuation",
]
