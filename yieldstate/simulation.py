"""
Deterministic market scenarios for exercising the engine.

Each generator returns a list of snapshots for a single demo market sampled
every STEP_SECONDS, starting with the bootstrap observation at ``start``.
"""
from typing import Callable, Dict, List, Optional
import logging

import numpy as np

from yieldstate.registry import EngineRegistry, MarketRecord
from yieldstate.state.snapshot import Snapshot

logger = logging.getLogger(__name__)

STEP_SECONDS = 300
DEFAULT_TICKS = 200
DEMO_MARKET = "demo-market"
DEMO_ASSET = "USDC"


def _build(
    yields: np.ndarray,
    liquidity: np.ndarray,
    timestamps: np.ndarray,
    market_id: str = DEMO_MARKET,
    asset: str = DEMO_ASSET,
) -> List[Snapshot]:
    return [
        Snapshot(
            market_id=market_id,
            asset=asset,
            raw_yield=float(y),
            liquidity=float(l),
            timestamp=int(t),
            protocol="Demo",
            chain="DemoChain",
        )
        for y, l, t in zip(yields, liquidity, timestamps)
    ]


def _timestamps(n_ticks: int, start: int) -> np.ndarray:
    return start + np.arange(n_ticks + 1, dtype=np.int64) * STEP_SECONDS


def incentive_spike(n_ticks: int = DEFAULT_TICKS, start: int = 0) -> List[Snapshot]:
    """Yield ramps up from 8%, plateaus at 20%, then normalizes around 8%."""
    i = np.arange(n_ticks + 1)
    yields = np.where(i < 30, 8.0 + 0.3 * i, np.where(i < 60, 20.0, 8.0 + np.sin(i / 5.0)))
    liquidity = np.full(n_ticks + 1, 110_000_000.0)
    liquidity[0] = 100_000_000.0
    return _build(yields, liquidity, _timestamps(n_ticks, start))


def liquidity_rug(n_ticks: int = DEFAULT_TICKS, start: int = 0, rug_at: int = 80) -> List[Snapshot]:
    """Steady 8% yield while liquidity collapses from 150M to 5M at ``rug_at``."""
    i = np.arange(n_ticks + 1)
    yields = np.full(n_ticks + 1, 8.0)
    liquidity = np.where(i < rug_at, 150_000_000.0, 5_000_000.0)
    return _build(yields, liquidity, _timestamps(n_ticks, start))


def high_noise(n_ticks: int = DEFAULT_TICKS, start: int = 0) -> List[Snapshot]:
    """Yield oscillating +/- 3 points around 8%."""
    i = np.arange(n_ticks + 1)
    yields = 8.0 + np.sin(i) * 3.0
    yields[0] = 8.0
    liquidity = np.full(n_ticks + 1, 100_000_000.0)
    return _build(yields, liquidity, _timestamps(n_ticks, start))


def data_gap(
    n_ticks: int = DEFAULT_TICKS,
    start: int = 0,
    gap_at: int = 120,
    gap_seconds: int = 8 * 3600,
) -> List[Snapshot]:
    """Flat market with a single sampling gap of ``gap_seconds`` at ``gap_at``."""
    i = np.arange(n_ticks + 1)
    yields = np.full(n_ticks + 1, 8.0)
    liquidity = np.full(n_ticks + 1, 100_000_000.0)
    timestamps = _timestamps(n_ticks, start) + np.where(i >= gap_at, gap_seconds, 0)
    return _build(yields, liquidity, timestamps)


SCENARIOS: Dict[str, Callable[..., List[Snapshot]]] = {
    "incentive_spike": incentive_spike,
    "liquidity_rug": liquidity_rug,
    "high_noise": high_noise,
    "data_gap": data_gap,
}


def run_scenario(
    name: str,
    registry: Optional[EngineRegistry] = None,
    n_ticks: int = DEFAULT_TICKS,
) -> List[MarketRecord]:
    """Feed a named scenario through a registry and return every record."""
    if name not in SCENARIOS:
        raise ValueError(f"Unknown scenario {name!r}; choose from {', '.join(sorted(SCENARIOS))}")

    registry = registry if registry is not None else EngineRegistry()
    snapshots = SCENARIOS[name](n_ticks=n_ticks)
    logger.info("Running scenario %s (%d snapshots)", name, len(snapshots))
    return registry.process_many(snapshots)
