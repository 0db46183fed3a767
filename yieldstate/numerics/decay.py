"""
Continuous-time exponential decay.

    alpha = 1 - exp(-elapsed / time_constant)
    updated = previous + alpha * (incoming - previous)

This is the single smoothing law of the engine. Level, trend, both variances
and liquidity each run their own filter through it with a different time
constant. Alpha depends on elapsed time rather than on a tick count, so a
long gap produces a weight close to 1 and the estimate snaps to the latest
observation.
"""
import math

from .safety import is_finite_number


def decay_weight(elapsed: float, time_constant: float) -> float:
    """
    Weight given to a new observation after ``elapsed`` seconds.

    Returns 0 when no time has passed (or elapsed is invalid) and 1 when the
    time constant is non-positive or non-finite (no smoothing).
    """
    if not is_finite_number(elapsed) or elapsed <= 0:
        return 0.0
    if not is_finite_number(time_constant) or time_constant <= 0:
        return 1.0
    return 1.0 - math.exp(-elapsed / time_constant)


def decay_step(previous: float, incoming: float, elapsed: float, time_constant: float) -> float:
    """
    Advance an exponential moving average by one observation.

    Args:
        previous: Current estimate. Non-finite means "not yet initialized".
        incoming: New observation. Non-finite samples are skipped.
        elapsed: Seconds since the previous observation.
        time_constant: Decay time constant in seconds.

    Returns:
        Updated estimate.
    """
    if not is_finite_number(previous):
        return incoming
    if not is_finite_number(incoming):
        return previous
    if not is_finite_number(elapsed) or elapsed <= 0:
        return previous
    if not is_finite_number(time_constant) or time_constant <= 0:
        return incoming

    alpha = decay_weight(elapsed, time_constant)
    return previous + alpha * (incoming - previous)

