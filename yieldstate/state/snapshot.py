"""Normalized market snapshot: the only input accepted by the engine."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from yieldstate.config import MAX_ABS_YIELD
from yieldstate.numerics.safety import clamp, is_finite_number


class InvalidSnapshotError(ValueError):
    """Raised when a snapshot is missing or lacks its market identity."""


# Accepted spellings per field, snake_case first.
_FIELD_ALIASES = {
    "market_id": ("market_id", "marketId"),
    "asset": ("asset", "symbol"),
    "raw_yield": ("raw_yield", "rawYield", "rawAPY", "raw_apy"),
    "liquidity": ("liquidity",),
    "timestamp": ("timestamp", "ts"),
    "protocol": ("protocol",),
    "chain": ("chain",),
}


@dataclass(frozen=True)
class Snapshot:
    """
    A single point-in-time observation of one market.

    ``raw_yield`` is an annualized percentage (5.0 means 5%), ``liquidity`` is
    the capital backing the yield in a consistent unit, and ``timestamp`` is in
    epoch seconds, strictly increasing per market.
    """

    market_id: str
    asset: str
    raw_yield: float
    liquidity: float
    timestamp: int

    protocol: Optional[str] = None
    chain: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.market_id, self.asset)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Snapshot":
        """
        Build a snapshot from a producer payload.

        Accepts snake_case or camelCase keys. The raw yield is capped to
        +/- MAX_ABS_YIELD and liquidity is floored at zero; non-finite numbers
        are passed through untouched since the engine absorbs them per tick.
        """
        if data is None:
            raise InvalidSnapshotError("Snapshot payload is required")

        values = {name: _lookup(data, aliases) for name, aliases in _FIELD_ALIASES.items()}

        market_id = values["market_id"]
        if market_id is None or str(market_id).strip() == "":
            raise InvalidSnapshotError("Snapshot is missing market_id")

        raw_yield = _to_float(values["raw_yield"])
        if is_finite_number(raw_yield):
            raw_yield = clamp(raw_yield, -MAX_ABS_YIELD, MAX_ABS_YIELD)

        liquidity = _to_float(values["liquidity"])
        if is_finite_number(liquidity):
            liquidity = max(0.0, liquidity)

        timestamp = values["timestamp"]
        if timestamp is None:
            raise InvalidSnapshotError(f"Snapshot for {market_id} is missing timestamp")

        asset = values["asset"]
        return cls(
            market_id=str(market_id),
            asset=str(asset) if asset is not None else "",
            raw_yield=raw_yield,
            liquidity=liquidity,
            timestamp=_to_timestamp(timestamp),
            protocol=values["protocol"],
            chain=values["chain"],
        )


def _lookup(data: Mapping[str, Any], aliases) -> Any:
    for alias in aliases:
        if alias in data and data[alias] is not None:
            return data[alias]
    return None


def _to_float(value: Any) -> float:
    if value is None:
        return float("nan")
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def _to_timestamp(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidSnapshotError(f"Invalid snapshot timestamp: {value!r}") from exc
