"""
Confidence score (optional downstream stage).

Confidence reflects yield instability, liquidity fragility and data
staleness. It decays quickly on risk and recovers slowly under stable
conditions. This stage reads MarketState after an engine update and keeps its
own state; the engine never calls it.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from yieldstate.config import (
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    CONFIDENCE_RECOVERY_POLICY,
    CONFIDENCE_RECOVERY_TIME,
    GAP_THRESHOLD,
    INSTABILITY_DECAY,
    LIQUIDITY_DECAY,
    STABLE_INSTABILITY_MAX,
    STABLE_STRESS_MAX,
    TIME_DECAY,
)
from yieldstate.numerics.safety import clamp, is_finite_number
from yieldstate.state.market_state import MarketState

SECONDS_PER_HOUR = 3600.0


class RecoveryPolicy(str, Enum):
    # recovery = elapsed / tau
    LINEAR = "linear"
    # recovery = (1 - confidence) * elapsed / tau
    SATURATING = "saturating"


@dataclass
class ConfidenceState:
    confidence: float = CONFIDENCE_MAX
    sample_count: int = 0
    last_timestamp: Optional[int] = None


def recovery_amount(confidence: float, elapsed: float, policy: RecoveryPolicy) -> float:
    rate = elapsed / CONFIDENCE_RECOVERY_TIME
    if policy == RecoveryPolicy.LINEAR:
        return rate
    return max(0.0, 1.0 - confidence) * rate


def is_stable(state: MarketState) -> bool:
    return (
        state.instability_variance < STABLE_INSTABILITY_MAX
        and state.liquidity_stress < STABLE_STRESS_MAX
    )


def update_confidence(
    conf: ConfidenceState,
    state: MarketState,
    timestamp: int,
    policy: RecoveryPolicy = RecoveryPolicy(CONFIDENCE_RECOVERY_POLICY),
) -> None:
    """
    Advance confidence after the engine has updated ``state``.

    The first observation only records its timestamp. Non-advancing
    timestamps are ignored.
    """
    if conf.last_timestamp is None:
        conf.last_timestamp = timestamp
        conf.sample_count += 1
        return

    elapsed = timestamp - conf.last_timestamp
    if not is_finite_number(elapsed) or elapsed <= 0:
        return

    instability = state.instability_variance if is_finite_number(state.instability_variance) else 0.0
    stress = state.liquidity_stress if is_finite_number(state.liquidity_stress) else 1.0

    # risk penalties accrue per recovery time constant, not per tick
    exposure = elapsed / CONFIDENCE_RECOVERY_TIME
    # staleness only counts once the sampling gap exceeds GAP_THRESHOLD
    staleness_hours = max(0.0, elapsed - GAP_THRESHOLD) / SECONDS_PER_HOUR

    confidence = conf.confidence
    confidence *= math.exp(-INSTABILITY_DECAY * max(0.0, instability) * exposure)
    confidence *= math.exp(-LIQUIDITY_DECAY * max(0.0, stress) * exposure)
    confidence *= math.exp(-TIME_DECAY * staleness_hours)

    if is_stable(state):
        confidence += recovery_amount(confidence, elapsed, policy)

    conf.confidence = clamp(confidence, CONFIDENCE_MIN, CONFIDENCE_MAX)
    conf.sample_count += 1
    conf.last_timestamp = timestamp
