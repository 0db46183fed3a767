"""Immutable per-update engine output."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from .market_state import MarketState


@dataclass(frozen=True)
class RiskMetrics:
    noise_variance: float
    instability_variance: float
    liquidity_stress: float


@dataclass(frozen=True)
class YieldMetrics:
    smoothed_yield: float
    effective_yield: float
    trend: float
    risk: RiskMetrics


@dataclass(frozen=True)
class EngineOutput:
    """
    Snapshot of a market's state after one update, plus the derived
    effective yield. Produced per update; never stored inside MarketState.
    """

    market_id: str
    asset: str
    timestamp: int
    metrics: YieldMetrics

    @classmethod
    def from_state(cls, state: MarketState, effective_yield: float) -> "EngineOutput":
        return cls(
            market_id=state.market_id,
            asset=state.asset,
            timestamp=state.last_timestamp,
            metrics=YieldMetrics(
                smoothed_yield=float(state.smoothed_yield),
                effective_yield=float(effective_yield),
                trend=float(state.yield_trend),
                risk=RiskMetrics(
                    noise_variance=float(state.noise_variance),
                    instability_variance=float(state.instability_variance),
                    liquidity_stress=float(state.liquidity_stress),
                ),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def feature_names(self) -> List[str]:
        """Ordered feature names matching feature_values order."""
        return [
            "timestamp",
            "smoothed_yield",
            "effective_yield",
            "trend",
            "noise_variance",
            "instability_variance",
            "liquidity_stress",
        ]

    def feature_values(self) -> List[float]:
        """Numeric feature vector (identity excluded)."""
        m = self.metrics
        return [
            float(self.timestamp),
            m.smoothed_yield,
            m.effective_yield,
            m.trend,
            m.risk.noise_variance,
            m.risk.instability_variance,
            m.risk.liquidity_stress,
        ]
