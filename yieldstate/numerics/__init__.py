"""Numerical primitives shared by every estimator."""

from .decay import decay_step, decay_weight
from .safety import clamp, is_finite_number, safe_delta_time, safe_divide, safe_sqrt

__all__ = [
    "decay_step",
    "decay_weight",
    "clamp",
    "is_finite_number",
    "safe_delta_time",
    "safe_divide",
    "safe_sqrt",
]
