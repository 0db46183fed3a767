"""Numeric guards applied at every formula boundary.

None of these helpers ever return NaN or infinity for non-finite input; they
substitute a fixed value instead so a bad sample cannot leak into state.
"""
import math


def is_finite_number(value) -> bool:
    """True for real, finite numbers (bools excluded)."""
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def clamp(value: float, lo: float, hi: float) -> float:
    """Bound value to [lo, hi]; non-finite input maps to lo."""
    if not is_finite_number(value):
        return lo
    return min(hi, max(lo, value))


def safe_sqrt(value: float) -> float:
    """Square root that returns 0 for non-finite or non-positive input."""
    if not is_finite_number(value) or value <= 0:
        return 0.0
    return math.sqrt(value)


def safe_divide(numerator: float, denominator: float, fallback: float = 0.0) -> float:
    """Return numerator / denominator, or fallback when the division is invalid."""
    if (
        not is_finite_number(numerator)
        or not is_finite_number(denominator)
        or denominator == 0
    ):
        return fallback
    return numerator / denominator


def safe_delta_time(current: float, previous: float) -> float:
    """Elapsed seconds between two timestamps, never negative."""
    if not is_finite_number(current) or not is_finite_number(previous):
        return 0.0
    dt = current - previous
    return float(dt) if dt > 0 else 0.0
