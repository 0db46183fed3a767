"""Unit tests for the continuous-time decay primitive."""
import math

import pytest

from yieldstate.numerics.decay import decay_step, decay_weight


def test_bootstrap_from_non_finite_previous():
    assert decay_step(float("nan"), 5.0, 10.0, 60.0) == 5.0
    assert decay_step(float("inf"), 5.0, 10.0, 60.0) == 5.0


def test_non_finite_incoming_is_skipped():
    assert decay_step(3.0, float("nan"), 10.0, 60.0) == 3.0
    assert decay_step(3.0, float("-inf"), 10.0, 60.0) == 3.0


@pytest.mark.parametrize("elapsed", [0.0, -5.0, float("nan"), float("inf")])
def test_no_time_elapsed_returns_previous(elapsed):
    assert decay_step(3.0, 9.0, elapsed, 60.0) == 3.0


@pytest.mark.parametrize("time_constant", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_time_constant_is_instantaneous(time_constant):
    assert decay_step(3.0, 9.0, 10.0, time_constant) == 9.0


def test_one_time_constant_moves_63_percent():
    updated = decay_step(0.0, 10.0, 3600.0, 3600.0)
    assert updated == pytest.approx(10.0 * (1.0 - math.exp(-1.0)))


def test_large_gap_snaps_to_incoming():
    updated = decay_step(8.0, 12.0, 8 * 3600.0, 3600.0)
    assert math.isfinite(updated)
    assert abs(updated - 12.0) < 0.01


def test_repeated_steps_converge_monotonically():
    value = 0.0
    previous = value
    for _ in range(200):
        value = decay_step(value, 1.0, 300.0, 3600.0)
        assert previous <= value <= 1.0
        previous = value
    assert value == pytest.approx(1.0, abs=1e-6)


def test_decay_weight_bounds():
    assert decay_weight(0.0, 60.0) == 0.0
    assert decay_weight(10.0, 0.0) == 1.0
    assert 0.0 < decay_weight(10.0, 60.0) < 1.0


def test_weight_halves_after_tau_ln2():
    assert decay_weight(3600.0 * math.log(2.0), 3600.0) == pytest.approx(0.5)
