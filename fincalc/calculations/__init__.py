"""
Financial Calculation Engine

Core calculation modules for the personal finance calculators.
All functions are pure: inputs in, structured numeric results out.
"""

from fincalc.calculations import (
    amortization,
    prepayment,
    growth,
    withdrawal,
    settlement,
    categorization,
)
from fincalc.calculations.errors import InvalidInput

__all__ = [
    "amortization",
    "prepayment",
    "growth",
    "withdrawal",
    "settlement",
    "categorization",
    "InvalidInput",
]
