"""Deterministic, explainable STABLE / RISKY / AVOID labeling."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from yieldstate.config import (
    CONFIDENCE_RISKY,
    CONFIDENCE_STABLE,
    INSTABILITY_THRESHOLD,
    LIQUIDITY_STRESS_MAX,
    MIN_WARMUP_SAMPLES,
)
from yieldstate.numerics.safety import is_finite_number, safe_divide


class Decision(str, Enum):
    STABLE = "STABLE"
    RISKY = "RISKY"
    AVOID = "AVOID"


@dataclass(frozen=True)
class DecisionResult:
    label: Decision
    rationale: str


def decide(
    confidence: float,
    effective_yield: float,
    instability_variance: float,
    liquidity_stress: float,
    smoothed_yield: float,
    sample_count: Optional[int] = None,
) -> DecisionResult:
    """
    Label a market using ordered rules; the first rule that fires wins.
    """
    if not is_finite_number(effective_yield):
        return DecisionResult(Decision.AVOID, "Effective yield is not finite")

    if effective_yield <= 0 and confidence < CONFIDENCE_RISKY:
        return DecisionResult(
            Decision.AVOID,
            f"Non-positive effective yield ({effective_yield:.3f}) with low confidence ({confidence:.2f})",
        )

    if liquidity_stress >= LIQUIDITY_STRESS_MAX:
        return DecisionResult(
            Decision.AVOID,
            f"Liquidity stress {liquidity_stress:.3f} >= {LIQUIDITY_STRESS_MAX:.2f}",
        )

    if confidence < CONFIDENCE_RISKY:
        return DecisionResult(Decision.AVOID, f"Confidence {confidence:.2f} below {CONFIDENCE_RISKY:.2f}")

    if sample_count is not None and sample_count < MIN_WARMUP_SAMPLES:
        return DecisionResult(
            Decision.RISKY,
            f"Warming up ({sample_count}/{MIN_WARMUP_SAMPLES} samples)",
        )

    if confidence < CONFIDENCE_STABLE:
        return DecisionResult(Decision.RISKY, f"Confidence {confidence:.2f} below {CONFIDENCE_STABLE:.2f}")

    # zero level means no relative instability can be measured
    normalized_instability = safe_divide(instability_variance, smoothed_yield * smoothed_yield, 0.0)
    if normalized_instability > INSTABILITY_THRESHOLD:
        return DecisionResult(
            Decision.RISKY,
            f"Normalized instability {normalized_instability:.4f} > {INSTABILITY_THRESHOLD:.4f}",
        )

    return DecisionResult(Decision.STABLE, "Confident, liquid and stable yield")
