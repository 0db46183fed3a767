"""
Yield level and trend.

Updates the smoothed yield (mu) and its drift estimate (delta mu per update).
Does not touch variance, liquidity or the committed last-observed markers.
"""
from yieldstate.config import LEVEL_TIME_CONSTANT, TREND_TIME_CONSTANT
from yieldstate.numerics.decay import decay_step
from yieldstate.numerics.safety import is_finite_number
from yieldstate.state.market_state import MarketState


def update_level(state: MarketState, raw_yield: float, elapsed: float) -> None:
    """
    Advance smoothed yield and trend by one observation.

    No-op when no time has elapsed or the raw yield is non-finite.
    """
    if not is_finite_number(elapsed) or elapsed <= 0:
        return
    if not is_finite_number(raw_yield):
        return

    previous_level = state.smoothed_yield
    state.smoothed_yield = decay_step(previous_level, raw_yield, elapsed, LEVEL_TIME_CONSTANT)

    if is_finite_number(previous_level):
        drift = state.smoothed_yield - previous_level
    else:
        # level was bootstrapped this tick, there is no drift to measure
        drift = 0.0
    state.yield_trend = decay_step(state.yield_trend, drift, elapsed, TREND_TIME_CONSTANT)
