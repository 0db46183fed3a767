"""
Per-market state records, inputs and outputs of the engine.
"""

from .snapshot import InvalidSnapshotError, Snapshot
from .market_state import MarketState
from .output import EngineOutput, RiskMetrics, YieldMetrics

__all__ = [
    "InvalidSnapshotError",
    "Snapshot",
    "MarketState",
    "EngineOutput",
    "RiskMetrics",
    "YieldMetrics",
]
