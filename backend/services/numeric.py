"""Rounding helpers shared by the scorers."""

import math

# Guards against binary representation error (e.g. 14.999999999 for 15.0).
_EPSILON = 1e-9


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def floor_2dp(value: float) -> float:
    """Truncate to two decimals. Never rounds up."""
    return math.floor(value * 100 + _EPSILON) / 100


def round_1dp(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10
