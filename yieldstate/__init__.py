"""
yieldstate: streaming yield analytics.

Maintains a per-market running picture of a yield-bearing market (smoothed
yield, trend, noise and instability variance, liquidity stress) and derives a
single risk-adjusted effective yield from it. Every observation updates state
in O(1) time using continuous-time exponential decay.
"""

__version__ = '0.1.0'

# Make key imports available at package level
from yieldstate.config import (
    LEVEL_TIME_CONSTANT,
    TREND_TIME_CONSTANT,
    NOISE_TIME_CONSTANT,
    INSTABILITY_TIME_CONSTANT,
    LIQUIDITY_TIME_CONSTANT,
    LIQUIDITY_REFERENCE,
)
from yieldstate.engine import YieldEngine, update_state
from yieldstate.registry import EngineRegistry
from yieldstate.state import EngineOutput, MarketState, Snapshot

__all__ = [
    '__version__',
    'LEVEL_TIME_CONSTANT',
    'TREND_TIME_CONSTANT',
    'NOISE_TIME_CONSTANT',
    'INSTABILITY_TIME_CONSTANT',
    'LIQUIDITY_TIME_CONSTANT',
    'LIQUIDITY_REFERENCE',
    'YieldEngine',
    'update_state',
    'EngineOutput',
    'EngineRegistry',
    'MarketState',
    'Snapshot',
]
