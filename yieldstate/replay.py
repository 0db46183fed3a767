"""CLI entrypoint to replay snapshots through an engine registry."""
import argparse
import logging
from typing import Iterable, List, Optional

import pandas as pd

from yieldstate.config import setup_logging
from yieldstate.registry import EngineRegistry, MarketRecord
from yieldstate.simulation import DEFAULT_TICKS, SCENARIOS
from yieldstate.state.snapshot import InvalidSnapshotError, Snapshot

logger = logging.getLogger(__name__)


def load_snapshots(path: str) -> List[Snapshot]:
    """
    Read snapshots from a CSV file.

    Rows are normalized through Snapshot.from_dict; rows without a market id
    or timestamp are skipped with a warning.
    """
    df = pd.read_csv(path)
    df = df.astype(object).where(pd.notna(df), None)

    snapshots: List[Snapshot] = []
    for index, row in enumerate(df.to_dict(orient="records")):
        try:
            snapshots.append(Snapshot.from_dict(row))
        except InvalidSnapshotError as exc:
            logger.warning("Skipping row %d of %s: %s", index, path, exc)
    logger.info("Loaded %d snapshots from %s", len(snapshots), path)
    return snapshots


def records_to_frame(records: Iterable[MarketRecord]) -> pd.DataFrame:
    """Flatten records into one row per update."""
    rows = []
    for record in records:
        output = record.output
        row = {"market_id": output.market_id, "asset": output.asset}
        row.update(zip(output.feature_names(), output.feature_values()))
        row["timestamp"] = output.timestamp
        if record.assessment is not None:
            row["confidence"] = record.assessment.confidence
            row["decision"] = record.assessment.decision.value
        rows.append(row)
    return pd.DataFrame(rows)


def _log_checkpoint(index: int, record: MarketRecord) -> None:
    metrics = record.output.metrics
    logger.info(
        "[%s/%s t=%d] smoothed=%.2f%% effective=%.2f%% trend=%.4f noise=%.3f instability=%.3f stress=%.3f",
        record.output.market_id,
        record.output.asset,
        index,
        metrics.smoothed_yield,
        metrics.effective_yield,
        metrics.trend,
        metrics.risk.noise_variance,
        metrics.risk.instability_variance,
        metrics.risk.liquidity_stress,
    )
    if record.assessment is not None:
        logger.info(
            "    decision=%s confidence=%.3f (%s)",
            record.assessment.decision.value,
            record.assessment.confidence,
            record.assessment.rationale,
        )


def replay(
    snapshots: Iterable[Snapshot],
    registry: EngineRegistry,
    every: int = 50,
) -> List[MarketRecord]:
    records = []
    for index, snapshot in enumerate(snapshots):
        record = registry.process_snapshot(snapshot)
        records.append(record)
        if every > 0 and index % every == 0:
            _log_checkpoint(index, record)
    return records


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Replay market snapshots through the yield engine")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--csv",
        help="CSV file with market_id, asset, raw_yield, liquidity, timestamp columns",
    )
    source.add_argument(
        "--scenario",
        choices=sorted(SCENARIOS),
        help="Built-in synthetic scenario",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=DEFAULT_TICKS,
        help="Number of ticks for a scenario",
    )
    parser.add_argument(
        "--every",
        type=int,
        default=50,
        help="Log a checkpoint every N snapshots (0 disables)",
    )
    parser.add_argument(
        "--confidence",
        action="store_true",
        help="Enable confidence tracking and decision labels",
    )
    parser.add_argument(
        "--output",
        help="Write the record series to this CSV file",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL for this run (DEBUG traces every tick)",
    )
    args = parser.parse_args(argv)

    if args.log_level:
        setup_logging(level=args.log_level)

    try:
        if args.csv:
            snapshots = load_snapshots(args.csv)
        else:
            snapshots = SCENARIOS[args.scenario](n_ticks=args.ticks)
    except (OSError, ValueError) as exc:
        logger.error("Failed to load snapshots: %s", exc)
        return 1

    registry = EngineRegistry(track_confidence=args.confidence)
    records = replay(snapshots, registry, every=args.every)
    logger.info("Replayed %d snapshots across %d markets", len(records), len(registry))

    if args.output:
        records_to_frame(records).to_csv(args.output, index=False)
        logger.info("Wrote %d rows to %s", len(records), args.output)

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
