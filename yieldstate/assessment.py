"""Confidence and decision stage composed after an engine update."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from yieldstate.decision import Decision, decide
from yieldstate.estimators.confidence import ConfidenceState, RecoveryPolicy, update_confidence
from yieldstate.config import CONFIDENCE_RECOVERY_POLICY
from yieldstate.state.market_state import MarketState
from yieldstate.state.output import EngineOutput


@dataclass(frozen=True)
class MarketAssessment:
    confidence: float
    sample_count: int
    decision: Decision
    rationale: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["decision"] = self.decision.value
        return data


class ConfidenceTracker:
    """Holds confidence state for one market and labels each output."""

    def __init__(self, policy: RecoveryPolicy = RecoveryPolicy(CONFIDENCE_RECOVERY_POLICY)):
        self.policy = RecoveryPolicy(policy)
        self.state = ConfidenceState()

    def assess(self, market_state: MarketState, output: EngineOutput) -> MarketAssessment:
        update_confidence(self.state, market_state, output.timestamp, policy=self.policy)

        metrics = output.metrics
        result = decide(
            confidence=self.state.confidence,
            effective_yield=metrics.effective_yield,
            instability_variance=metrics.risk.instability_variance,
            liquidity_stress=metrics.risk.liquidity_stress,
            smoothed_yield=metrics.smoothed_yield,
            sample_count=self.state.sample_count,
        )
        return MarketAssessment(
            confidence=self.state.confidence,
            sample_count=self.state.sample_count,
            decision=result.label,
            rationale=result.rationale,
        )
