"""Update stages and derivations run by the engine."""

from .level import update_level
from .variance import update_variance
from .liquidity import update_liquidity
from .effective_yield import RiskPenalties, derive_effective_yield, risk_penalties

__all__ = [
    "update_level",
    "update_variance",
    "update_liquidity",
    "RiskPenalties",
    "derive_effective_yield",
    "risk_penalties",
]
