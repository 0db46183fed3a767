"""Unit tests for numeric guards."""
import math

from yieldstate.numerics.safety import (
    clamp,
    is_finite_number,
    safe_delta_time,
    safe_divide,
    safe_sqrt,
)


def test_clamp_bounds_and_non_finite():
    assert clamp(0.5, 0.0, 1.0) == 0.5
    assert clamp(2.0, 0.0, 1.0) == 1.0
    assert clamp(-1.0, 0.0, 1.0) == 0.0
    assert clamp(float("nan"), 0.0, 1.0) == 0.0
    assert clamp(float("inf"), 0.0, 1.0) == 0.0


def test_safe_sqrt():
    assert safe_sqrt(9.0) == 3.0
    assert safe_sqrt(0.0) == 0.0
    assert safe_sqrt(-4.0) == 0.0
    assert safe_sqrt(float("nan")) == 0.0
    assert safe_sqrt(float("inf")) == 0.0


def test_safe_divide():
    assert safe_divide(6.0, 3.0) == 2.0
    assert safe_divide(1.0, 0.0) == 0.0
    assert safe_divide(1.0, 0.0, fallback=7.0) == 7.0
    assert safe_divide(float("nan"), 2.0, fallback=-1.0) == -1.0
    assert safe_divide(2.0, float("inf"), fallback=-1.0) == -1.0


def test_safe_delta_time():
    assert safe_delta_time(10, 4) == 6.0
    assert safe_delta_time(4, 10) == 0.0
    assert safe_delta_time(float("nan"), 4) == 0.0


def test_is_finite_number():
    assert is_finite_number(1)
    assert is_finite_number(2.5)
    assert not is_finite_number(True)
    assert not is_finite_number("1.0")
    assert not is_finite_number(None)
    assert not is_finite_number(math.inf)
