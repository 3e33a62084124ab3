"""
Input Errors

Shared error type and argument checks for the calculation engine.
"""

import math
from typing import Callable, Optional


class InvalidInput(ValueError):
    """
    Raised when a calculation receives a parameter it cannot work with.

    Attributes:
        parameter: Name of the offending parameter
        constraint: Short description of the violated constraint (e.g. "> 0")
    """

    def __init__(self, parameter: str, constraint: str, message: Optional[str] = None):
        self.parameter = parameter
        self.constraint = constraint
        self.message = message or f"{parameter} must be {constraint}"
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "parameter": self.parameter,
            "constraint": self.constraint,
            "message": self.message,
        }


def require_finite(name: str, value: float) -> float:
    """Reject NaN, infinities and non-numeric values."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput(name, "a number")
    if not math.isfinite(value):
        raise InvalidInput(name, "finite")
    return float(value)


def require_computable(name: str, compute: Callable[[], float]) -> float:
    """
    Evaluate ``compute()`` and require a finite result.

    Float ``**`` raises OverflowError rather than returning inf, while
    multiplication overflows silently to inf; both are reported as
    InvalidInput on ``name``.
    """
    try:
        value = compute()
    except OverflowError:
        value = math.inf
    return require_finite_result(name, value)


def require_finite_result(name: str, value: float) -> float:
    """Reject a computed value that overflowed to inf or became NaN."""
    if not math.isfinite(value):
        raise InvalidInput(name, "finite", f"{name} is too large to compute")
    return value


def require_positive(name: str, value: float) -> float:
    value = require_finite(name, value)
    if value <= 0:
        raise InvalidInput(name, "> 0")
    return value


def require_non_negative(name: str, value: float) -> float:
    value = require_finite(name, value)
    if value < 0:
        raise InvalidInput(name, ">= 0")
    return value


def require_int_at_least(name: str, value: int, minimum: int = 1) -> int:
    """Accept integers (or integral floats) no smaller than ``minimum``."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(name, "a whole number")
    if value < minimum:
        raise InvalidInput(name, f">= {minimum}")
    return value
