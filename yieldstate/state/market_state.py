"""Mutable per-market engine state.

One instance exists per (market_id, asset) pair. It is minimal, serializable
and protocol-agnostic; no update logic lives here.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from .snapshot import InvalidSnapshotError, Snapshot


@dataclass
class MarketState:
    # identity
    market_id: str
    asset: str

    # time tracking
    last_timestamp: Optional[int]
    last_raw_yield: float

    # yield level estimation
    smoothed_yield: float
    yield_trend: float = 0.0

    # yield risk estimation
    noise_variance: float = 0.0
    instability_variance: float = 0.0

    # liquidity conditioning
    avg_liquidity: float = 0.0
    liquidity_stress: float = 0.0

    # elapsed seconds of the update in progress
    delta_time: float = 0.0

    protocol: Optional[str] = None
    chain: Optional[str] = None

    @classmethod
    def create(cls, snapshot: Snapshot) -> "MarketState":
        """Initialize state from the first snapshot of a market."""
        if snapshot is None:
            raise InvalidSnapshotError("Initial snapshot is required")
        if not getattr(snapshot, "market_id", None):
            raise InvalidSnapshotError("Initial snapshot is missing market_id")

        return cls(
            market_id=snapshot.market_id,
            asset=snapshot.asset,
            last_timestamp=snapshot.timestamp,
            last_raw_yield=snapshot.raw_yield,
            smoothed_yield=snapshot.raw_yield,
            avg_liquidity=snapshot.liquidity,
            protocol=snapshot.protocol,
            chain=snapshot.chain,
        )

    def copy(self) -> "MarketState":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
