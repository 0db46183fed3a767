"""
Yield analytics engine.

Orchestrates the update stages for one market:

1. elapsed time is computed once and handed to every stage
2. level/trend, variance and liquidity run in that fixed order
3. the last-observed markers are committed
4. effective yield is derived from the updated state

The engine is stateful, processes one market per instance and assumes
snapshots arrive in time order; out-of-order or duplicate timestamps are
absorbed as no-op ticks.
"""
from __future__ import annotations

import logging
from typing import Optional

from yieldstate.estimators.effective_yield import derive_effective_yield
from yieldstate.estimators.level import update_level
from yieldstate.estimators.liquidity import update_liquidity
from yieldstate.estimators.variance import update_variance
from yieldstate.numerics.safety import is_finite_number, safe_delta_time
from yieldstate.state.market_state import MarketState
from yieldstate.state.output import EngineOutput
from yieldstate.state.snapshot import InvalidSnapshotError, Snapshot

logger = logging.getLogger(__name__)


class SnapshotMismatchError(ValueError):
    """Raised when a snapshot is routed to an engine bound to another market."""


def update_state(state: MarketState, snapshot: Optional[Snapshot]) -> EngineOutput:
    """
    Advance ``state`` by one snapshot and return the resulting output.

    Raises:
        SnapshotMismatchError: snapshot is missing or belongs to another market.
            State is left untouched.
    """
    if snapshot is None or snapshot.market_id != state.market_id:
        raise SnapshotMismatchError(
            f"Snapshot does not match engine market {state.market_id!r}: "
            f"got {getattr(snapshot, 'market_id', None)!r}"
        )

    # non-increasing or unknown time yields 0 and makes every stage a no-op
    elapsed = safe_delta_time(snapshot.timestamp, state.last_timestamp)
    state.delta_time = elapsed

    if elapsed <= 0:
        logger.debug(
            "No-op tick for %s/%s: ts=%s last=%s",
            state.market_id,
            state.asset,
            snapshot.timestamp,
            state.last_timestamp,
        )
        return EngineOutput.from_state(state, derive_effective_yield(state))

    yield_ok = is_finite_number(snapshot.raw_yield)
    liquidity_ok = is_finite_number(snapshot.liquidity)
    if not yield_ok or not liquidity_ok:
        logger.warning(
            "Non-finite input for %s/%s at ts=%s (raw_yield=%s liquidity=%s); skipping affected stages",
            state.market_id,
            state.asset,
            snapshot.timestamp,
            snapshot.raw_yield,
            snapshot.liquidity,
        )

    # estimation phase: every stage reads the pre-commit markers
    update_level(state, snapshot.raw_yield, elapsed)
    update_variance(state, snapshot.raw_yield, elapsed)
    update_liquidity(state, snapshot.liquidity, elapsed)

    # commit markers
    if yield_ok:
        state.last_raw_yield = snapshot.raw_yield
    if yield_ok or liquidity_ok:
        state.last_timestamp = snapshot.timestamp

    effective_yield = derive_effective_yield(state)

    logger.debug(
        "Updated %s/%s dt=%.0fs mu=%.4f eff=%.4f noise=%.5f instab=%.5f stress=%.4f",
        state.market_id,
        state.asset,
        elapsed,
        state.smoothed_yield,
        effective_yield,
        state.noise_variance,
        state.instability_variance,
        state.liquidity_stress,
    )

    return EngineOutput.from_state(state, effective_yield)


class YieldEngine:
    """Stateful engine bound to exactly one market for its lifetime."""

    def __init__(self, initial_snapshot: Snapshot):
        if initial_snapshot is None:
            raise InvalidSnapshotError("Initial snapshot is required")
        self.state = MarketState.create(initial_snapshot)
        logger.info(
            "Created engine for %s/%s (raw_yield=%s liquidity=%s)",
            self.state.market_id,
            self.state.asset,
            initial_snapshot.raw_yield,
            initial_snapshot.liquidity,
        )

    @property
    def market_id(self) -> str:
        return self.state.market_id

    @property
    def asset(self) -> str:
        return self.state.asset

    def update(self, snapshot: Snapshot) -> EngineOutput:
        """Process a new snapshot and return the engine output."""
        return update_state(self.state, snapshot)
