"""
Keyed fan-out of engines with latest results per market.

One YieldEngine per (market_id, asset), lazily created on the first snapshot
for that key. The registry is an ordinary object owned by the caller; its
lifetime bounds the lifetime of every engine it holds.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from threading import Lock
from typing import Any, Deque, Dict, Iterable, List, Optional, Tuple
import logging

from yieldstate.assessment import ConfidenceTracker, MarketAssessment
from yieldstate.config import HISTORY_SIZE, TRACK_CONFIDENCE
from yieldstate.engine import YieldEngine
from yieldstate.state.output import EngineOutput
from yieldstate.state.snapshot import Snapshot

logger = logging.getLogger(__name__)

MarketKey = Tuple[str, str]


@dataclass(frozen=True)
class MarketRecord:
    output: EngineOutput
    assessment: Optional[MarketAssessment] = None

    @property
    def timestamp(self) -> int:
        return self.output.timestamp

    def to_dict(self) -> Dict[str, Any]:
        data = self.output.to_dict()
        if self.assessment is not None:
            data["assessment"] = self.assessment.to_dict()
        return data


class RecordHistory:
    """
    Bounded series of one market's records, oldest evicted first.

    No-op ticks repeat the previous output timestamp; those records are not
    kept so the series stays strictly increasing in time. Not thread-safe on
    its own: the owning slot's lock guards it.
    """

    def __init__(self, maxlen: int = HISTORY_SIZE):
        self._records: Deque[MarketRecord] = deque(maxlen=maxlen)

    def append(self, record: MarketRecord) -> bool:
        """Append a record; return False if it does not advance time."""
        if self._records and record.timestamp <= self._records[-1].timestamp:
            logger.debug(
                "Not buffering %s/%s at ts=%s (last buffered ts=%s)",
                record.output.market_id,
                record.output.asset,
                record.timestamp,
                self._records[-1].timestamp,
            )
            return False
        self._records.append(record)
        return True

    def history(self, n: Optional[int] = None) -> List[MarketRecord]:
        """Last n records oldest to newest; None returns all of them."""
        if n is None:
            return list(self._records)
        if n <= 0:
            return []
        return list(self._records)[-n:]

    @property
    def maxlen(self) -> int:
        return self._records.maxlen

    def __len__(self) -> int:
        return len(self._records)


class _MarketSlot:
    """Everything the registry keeps for a single key."""

    def __init__(self, engine: YieldEngine, history_size: int, tracker: Optional[ConfidenceTracker]):
        self.engine = engine
        self.tracker = tracker
        self.history = RecordHistory(maxlen=history_size)
        self.latest: Optional[MarketRecord] = None
        self.lock = Lock()


class EngineRegistry:
    """Processes snapshots for many markets and keeps their latest records."""

    def __init__(self, history_size: int = HISTORY_SIZE, track_confidence: bool = TRACK_CONFIDENCE):
        self.history_size = history_size
        self.track_confidence = track_confidence
        self._slots: Dict[MarketKey, _MarketSlot] = {}
        self._lock = Lock()

    # -------------------------
    # Ingestion
    # -------------------------
    def _slot_for(self, snapshot: Snapshot) -> _MarketSlot:
        key = snapshot.key
        with self._lock:
            slot = self._slots.get(key)
            if slot is None:
                tracker = ConfidenceTracker() if self.track_confidence else None
                slot = _MarketSlot(YieldEngine(snapshot), self.history_size, tracker)
                self._slots[key] = slot
                logger.info("Registered engine for %s/%s", snapshot.market_id, snapshot.asset)
            return slot

    def process_snapshot(self, snapshot: Snapshot) -> MarketRecord:
        """Update the engine for the snapshot's key and store the result."""
        slot = self._slot_for(snapshot)

        # updates of one key are serialized; distinct keys never share a lock
        with slot.lock:
            output = slot.engine.update(snapshot)
            assessment = None
            if slot.tracker is not None:
                assessment = slot.tracker.assess(slot.engine.state, output)
            record = MarketRecord(output=output, assessment=assessment)
            slot.latest = record
            slot.history.append(record)

        return record

    def process_many(self, snapshots: Iterable[Snapshot]) -> List[MarketRecord]:
        return [self.process_snapshot(snapshot) for snapshot in snapshots]

    # -------------------------
    # Read-only views
    # -------------------------
    def engine(self, market_id: str, asset: str) -> Optional[YieldEngine]:
        slot = self._slots.get((market_id, asset))
        return slot.engine if slot else None

    def latest(self, market_id: str, asset: str) -> Optional[MarketRecord]:
        slot = self._slots.get((market_id, asset))
        return slot.latest if slot else None

    def history(self, market_id: str, asset: str, n: Optional[int] = None) -> List[MarketRecord]:
        slot = self._slots.get((market_id, asset))
        if slot is None:
            return []
        with slot.lock:
            return slot.history.history(n)

    def keys(self) -> List[MarketKey]:
        with self._lock:
            return sorted(self._slots)

    def markets(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Latest record per market and asset: {market_id: {asset: record}}."""
        view: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for market_id, asset in self.keys():
            record = self.latest(market_id, asset)
            if record is None:
                continue
            view.setdefault(market_id, {})[asset] = record.to_dict()
        return view

    def __contains__(self, key: MarketKey) -> bool:
        return key in self._slots

    def __len__(self) -> int:
        return len(self._slots)
