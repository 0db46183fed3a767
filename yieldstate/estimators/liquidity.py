"""
Liquidity conditioning.

Smooths the capital base backing the yield and maintains a stress score in
[0, 1]. Raw stress is LIQUIDITY_REFERENCE / avg_liquidity, so it rises as
liquidity falls below the reference floor; it is itself smoothed so a single
tick cannot spike it.
"""
from yieldstate.config import LIQUIDITY_REFERENCE, LIQUIDITY_TIME_CONSTANT
from yieldstate.numerics.decay import decay_step
from yieldstate.numerics.safety import clamp, is_finite_number
from yieldstate.state.market_state import MarketState

MAX_STRESS = 1.0


def update_liquidity(state: MarketState, liquidity: float, elapsed: float) -> None:
    if not is_finite_number(elapsed) or elapsed <= 0:
        return
    if not is_finite_number(liquidity):
        return

    state.avg_liquidity = decay_step(state.avg_liquidity, liquidity, elapsed, LIQUIDITY_TIME_CONSTANT)

    # zero or invalid capital base is the worst case
    if not is_finite_number(state.avg_liquidity) or state.avg_liquidity <= 0:
        state.liquidity_stress = MAX_STRESS
        return

    raw_stress = LIQUIDITY_REFERENCE / state.avg_liquidity
    state.liquidity_stress = clamp(
        decay_step(state.liquidity_stress, raw_stress, elapsed, LIQUIDITY_TIME_CONSTANT),
        0.0,
        MAX_STRESS,
    )
