"""
Effective (risk-adjusted) yield.

Pure interpretation layer over MarketState: no mutation, no smoothing.
"""
import math
from dataclasses import dataclass

from yieldstate.config import INSTABILITY_WEIGHT, LIQUIDITY_WEIGHT, NOISE_WEIGHT
from yieldstate.numerics.safety import is_finite_number, safe_sqrt
from yieldstate.state.market_state import MarketState


@dataclass(frozen=True)
class RiskPenalties:
    noise: float
    instability: float
    liquidity: float

    @property
    def total(self) -> float:
        return self.noise + self.instability + self.liquidity


def risk_penalties(state: MarketState) -> RiskPenalties:
    """Decompose the downward adjustment into its three weighted terms."""
    instability = state.instability_variance if is_finite_number(state.instability_variance) else 0.0
    stress = state.liquidity_stress if is_finite_number(state.liquidity_stress) else 0.0
    return RiskPenalties(
        noise=NOISE_WEIGHT * safe_sqrt(state.noise_variance),
        instability=INSTABILITY_WEIGHT * math.sqrt(max(0.0, instability)),
        liquidity=LIQUIDITY_WEIGHT * max(0.0, stress),
    )


def derive_effective_yield(state: MarketState) -> float:
    """
    Smoothed yield minus noise, instability and liquidity penalties.

    Never exceeds the smoothed yield; returns 0 when the level is not finite.
    """
    mu = state.smoothed_yield
    if not is_finite_number(mu):
        return 0.0

    effective = mu - risk_penalties(state).total
    return min(mu, effective)
