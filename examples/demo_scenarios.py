#!/usr/bin/env python3
"""
yieldstate Demo: Synthetic Market Scenarios

This script feeds every built-in scenario through its own engine registry:
1. Incentive spike (ramp, plateau, normalization)
2. Liquidity rug
3. High noise
4. Sampling gap

For each scenario it prints checkpoints of the smoothed and effective yield
along with the risk metrics and decision labels.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from yieldstate.registry import EngineRegistry
from yieldstate.replay import records_to_frame
from yieldstate.simulation import SCENARIOS, run_scenario

import logging

logger = logging.getLogger(__name__)

CHECKPOINTS = (0, 25, 50, 75, 100, 150, 200)


def demo_scenario(name: str):
    logger.info("-" * 80)
    logger.info(f"Scenario: {name}")
    logger.info("-" * 80)

    registry = EngineRegistry(track_confidence=True)
    records = run_scenario(name, registry=registry)
    frame = records_to_frame(records)

    columns = [
        "timestamp",
        "smoothed_yield",
        "effective_yield",
        "instability_variance",
        "liquidity_stress",
        "confidence",
        "decision",
    ]
    rows = frame.iloc[[i for i in CHECKPOINTS if i < len(frame)]][columns]
    for line in rows.to_string(index=False, float_format=lambda v: f"{v:.3f}").splitlines():
        logger.info(line)

    final = records[-1]
    logger.info(f"Final decision: {final.assessment.decision.value} ({final.assessment.rationale})")


def main():
    logger.info("=" * 80)
    logger.info("yieldstate Scenario Demo")
    logger.info("=" * 80)

    for name in SCENARIOS:
        demo_scenario(name)

    logger.info("\n" + "=" * 80)
    logger.info("Demo complete")
    logger.info("=" * 80)


if __name__ == "__main__":
    main()
