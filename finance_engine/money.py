"""
Monetary Precision Helpers

DESIGN DECISION: Every amount in the engine is a Decimal and every
accumulation is rounded to cents with ROUND_HALF_UP.
Floats never take part in balance arithmetic, so replaying thousands of
transactions cannot drift.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Tolerance used when comparing split totals and settlement balances
TOLERANCE = CENT


def to_decimal(value: Optional[Number]) -> Decimal:
    """Convert any numeric input to Decimal (None becomes zero)."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 stays 0.1
        return Decimal(str(value))
    return Decimal(value)


def round2(value: Optional[Number]) -> Decimal:
    """Round to 2 decimal places (standard half-up, not banker's rounding)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable[Number]) -> Decimal:
    """Sum amounts and round the result to cents."""
    total = ZERO
    for value in values:
        total += to_decimal(value)
    return round2(total)


def add(a: Number, b: Number) -> Decimal:
    return round2(to_decimal(a) + to_decimal(b))


def subtract(a: Number, b: Number) -> Decimal:
    return round2(to_decimal(a) - to_decimal(b))


def multiply(a: Number, b: Number) -> Decimal:
    return round2(to_decimal(a) * to_decimal(b))


def divide(a: Number, b: Number) -> Decimal:
    """Divide and round to cents. Raises ZeroDivisionError on a zero divisor."""
    divisor = to_decimal(b)
    if divisor == ZERO:
        raise ZeroDivisionError("Cannot divide an amount by zero")
    return round2(to_decimal(a) / divisor)


def is_negligible(value: Number) -> bool:
    """True when the amount is within one cent of zero."""
    return abs(to_decimal(value)) < TOLERANCE
