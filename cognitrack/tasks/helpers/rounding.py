"""Rounding that matches the scores already stored by the browser task runner."""
import math
from decimal import ROUND_HALF_UP
from decimal import Decimal


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going towards +infinity.

    This is the browser's Math.round, not Python's round() (which rounds
    halves to even): round_half_up(2.5) == 3, round_half_up(-2.5) == -2.
    """
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def to_fixed(value: float, digits: int = 1) -> str:
    """
    Format *value* with *digits* decimals, ties going away from zero.

    This is the browser's Number.toFixed, which rounds the exact binary
    value: to_fixed(6.25) == "6.3" where f"{6.25:.1f}" gives "6.2", and
    to_fixed(1.005, 2) == "1.00" because 1.005 is stored as 1.00499...
    """
    exponent = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP))
