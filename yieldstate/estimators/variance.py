"""
Yield variance.

- Noise variance: squared deviation of the raw yield from the smoothed level
  (random fluctuation around mu).
- Instability variance: squared tick-to-tick change of the raw yield
  (unpredictability of the yield itself).

Must run after the level stage and before the last raw yield is committed.
"""
from yieldstate.config import INSTABILITY_TIME_CONSTANT, NOISE_TIME_CONSTANT
from yieldstate.numerics.decay import decay_step
from yieldstate.numerics.safety import is_finite_number
from yieldstate.state.market_state import MarketState


def update_variance(state: MarketState, raw_yield: float, elapsed: float) -> None:
    if not is_finite_number(elapsed) or elapsed <= 0:
        return
    if not is_finite_number(raw_yield):
        return

    residual = raw_yield - state.smoothed_yield
    residual_squared = residual * residual
    state.noise_variance = max(
        0.0,
        decay_step(state.noise_variance, residual_squared, elapsed, NOISE_TIME_CONSTANT),
    )

    tick_delta = raw_yield - state.last_raw_yield
    tick_delta_squared = tick_delta * tick_delta
    state.instability_variance = max(
        0.0,
        decay_step(state.instability_variance, tick_delta_squared, elapsed, INSTABILITY_TIME_CONSTANT),
    )
