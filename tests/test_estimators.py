"""Unit tests for the individual update stages and effective-yield derivation."""
import math

import pytest

from yieldstate.config import (
    INSTABILITY_TIME_CONSTANT,
    INSTABILITY_WEIGHT,
    LEVEL_TIME_CONSTANT,
    LIQUIDITY_REFERENCE,
    LIQUIDITY_TIME_CONSTANT,
    LIQUIDITY_WEIGHT,
    NOISE_TIME_CONSTANT,
    NOISE_WEIGHT,
    TREND_TIME_CONSTANT,
)
from yieldstate.estimators import (
    derive_effective_yield,
    risk_penalties,
    update_level,
    update_liquidity,
    update_variance,
)
from yieldstate.state.market_state import MarketState


def _alpha(elapsed: float, tau: float) -> float:
    return 1.0 - math.exp(-elapsed / tau)


def _state(**overrides) -> MarketState:
    fields = dict(
        market_id="m1",
        asset="USDC",
        last_timestamp=0,
        last_raw_yield=8.0,
        smoothed_yield=8.0,
        avg_liquidity=1e8,
    )
    fields.update(overrides)
    return MarketState(**fields)


def test_level_moves_toward_raw_and_tracks_drift():
    state = _state()
    update_level(state, 12.0, 3600.0)

    expected_level = 8.0 + _alpha(3600.0, LEVEL_TIME_CONSTANT) * 4.0
    assert state.smoothed_yield == pytest.approx(expected_level)
    drift = expected_level - 8.0
    assert state.yield_trend == pytest.approx(_alpha(3600.0, TREND_TIME_CONSTANT) * drift)


def test_level_noop_without_elapsed_time_or_valid_sample():
    state = _state()
    update_level(state, 12.0, 0.0)
    update_level(state, float("nan"), 300.0)

    assert state.smoothed_yield == 8.0
    assert state.yield_trend == 0.0


def test_variance_uses_current_level_and_previous_raw():
    state = _state(smoothed_yield=10.0, last_raw_yield=9.0)
    update_variance(state, 12.0, 7200.0)

    assert state.noise_variance == pytest.approx(_alpha(7200.0, NOISE_TIME_CONSTANT) * 4.0)
    assert state.instability_variance == pytest.approx(_alpha(7200.0, INSTABILITY_TIME_CONSTANT) * 9.0)


def test_variance_skips_bad_sample():
    state = _state(noise_variance=0.5, instability_variance=0.25)
    update_variance(state, float("inf"), 300.0)

    assert state.noise_variance == 0.5
    assert state.instability_variance == 0.25


def test_liquidity_stress_relative_to_reference():
    liquidity = LIQUIDITY_REFERENCE * 2.0
    state = _state(avg_liquidity=liquidity)
    update_liquidity(state, liquidity, LIQUIDITY_TIME_CONSTANT)

    assert state.avg_liquidity == pytest.approx(liquidity)
    assert state.liquidity_stress == pytest.approx(0.5 * _alpha(LIQUIDITY_TIME_CONSTANT, LIQUIDITY_TIME_CONSTANT))


def test_liquidity_stress_is_clamped():
    state = _state(avg_liquidity=1.0, liquidity_stress=0.9)
    update_liquidity(state, 1.0, LIQUIDITY_TIME_CONSTANT * 10)

    assert state.liquidity_stress == 1.0


@pytest.mark.parametrize("liquidity", [0.0, -5.0])
def test_zero_or_negative_liquidity_is_worst_case(liquidity):
    state = _state(avg_liquidity=0.0)
    update_liquidity(state, liquidity, 300.0)

    assert state.liquidity_stress == 1.0


def test_liquidity_skips_non_finite_sample():
    state = _state(liquidity_stress=0.2)
    update_liquidity(state, float("nan"), 300.0)

    assert state.avg_liquidity == 1e8
    assert state.liquidity_stress == 0.2


def test_effective_yield_subtracts_weighted_penalties():
    state = _state(smoothed_yield=10.0, noise_variance=4.0, instability_variance=9.0, liquidity_stress=0.5)

    expected = 10.0 - NOISE_WEIGHT * 2.0 - INSTABILITY_WEIGHT * 3.0 - LIQUIDITY_WEIGHT * 0.5
    assert derive_effective_yield(state) == pytest.approx(expected)
    assert risk_penalties(state).total == pytest.approx(10.0 - expected)


def test_effective_yield_never_exceeds_smoothed():
    state = _state(smoothed_yield=10.0, noise_variance=-1.0, instability_variance=-1.0, liquidity_stress=-0.5)

    assert derive_effective_yield(state) == 10.0


def test_effective_yield_zero_for_non_finite_level():
    assert derive_effective_yield(_state(smoothed_yield=float("nan"))) == 0.0


def test_effective_yield_does_not_mutate_state():
    state = _state(noise_variance=1.0, instability_variance=1.0, liquidity_stress=0.3)
    before = state.to_dict()
    derive_effective_yield(state)

    assert state.to_dict() == before
