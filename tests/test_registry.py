from threading import Thread

from yieldstate.engine import YieldEngine
from yieldstate.registry import EngineRegistry, MarketRecord, RecordHistory
from yieldstate.simulation import high_noise, incentive_spike, liquidity_rug
from yieldstate.state.snapshot import Snapshot


def _snap(ts: int, market_id: str = "m1", asset: str = "USDC", raw_yield: float = 8.0) -> Snapshot:
    return Snapshot(market_id=market_id, asset=asset, raw_yield=raw_yield, liquidity=1e8, timestamp=ts)


def _records(timestamps) -> list:
    engine = YieldEngine(_snap(0))
    return [MarketRecord(output=engine.update(_snap(ts))) for ts in timestamps]


def test_history_drops_non_advancing_records():
    history = RecordHistory(maxlen=5)
    first, repeat, stale = _records([300, 300, 100])

    assert history.append(first)
    assert not history.append(repeat)
    assert not history.append(stale)
    assert history.history() == [first]
    assert len(history) == 1


def test_history_order_and_eviction():
    history = RecordHistory(maxlen=3)
    for record in _records([300, 600, 900, 1200, 1500]):
        history.append(record)

    assert history.maxlen == 3
    assert [r.timestamp for r in history.history()] == [900, 1200, 1500]
    assert [r.timestamp for r in history.history(2)] == [1200, 1500]
    assert history.history(0) == []


def test_registry_creates_engines_lazily_per_key():
    registry = EngineRegistry()
    assert len(registry) == 0

    registry.process_snapshot(_snap(0))
    engine = registry.engine("m1", "USDC")
    registry.process_snapshot(_snap(300))
    registry.process_snapshot(_snap(0, asset="USDT"))

    assert registry.engine("m1", "USDC") is engine
    assert registry.keys() == [("m1", "USDC"), ("m1", "USDT")]
    assert ("m1", "USDT") in registry
    assert engine.state.last_timestamp == 300


def test_registry_latest_and_history():
    registry = EngineRegistry(history_size=10)
    for i in range(4):
        registry.process_snapshot(_snap(i * 300, raw_yield=8.0 + i))

    # a repeated timestamp updates latest but is not buffered twice
    record = registry.process_snapshot(_snap(900, raw_yield=50.0))

    assert registry.latest("m1", "USDC") is record
    assert [r.timestamp for r in registry.history("m1", "USDC")] == [0, 300, 600, 900]
    assert len(registry.history("m1", "USDC", 2)) == 2


def test_registry_unknown_key():
    registry = EngineRegistry()

    assert registry.latest("nope", "USDC") is None
    assert registry.engine("nope", "USDC") is None
    assert registry.history("nope", "USDC") == []
    assert ("nope", "USDC") not in registry


def test_registry_markets_view():
    registry = EngineRegistry()
    registry.process_many([_snap(0), _snap(0, market_id="m2", asset="DAI")])

    view = registry.markets()
    assert set(view) == {"m1", "m2"}
    assert view["m2"]["DAI"]["market_id"] == "m2"
    assert "assessment" not in view["m1"]["USDC"]


def test_registry_tracks_confidence_when_enabled():
    registry = EngineRegistry(track_confidence=True)
    record = registry.process_snapshot(_snap(0))

    assert record.assessment is not None
    data = registry.markets()["m1"]["USDC"]
    assert data["assessment"]["sample_count"] == 1
    assert data["assessment"]["decision"] in {"STABLE", "RISKY", "AVOID"}


def test_concurrent_keys_match_sequential_run():
    scenarios = {
        "spike": incentive_spike(),
        "rug": liquidity_rug(),
        "noise": high_noise(),
    }
    feeds = {
        name: [
            Snapshot(
                market_id=name,
                asset=s.asset,
                raw_yield=s.raw_yield,
                liquidity=s.liquidity,
                timestamp=s.timestamp,
            )
            for s in snapshots
        ]
        for name, snapshots in scenarios.items()
    }

    sequential = EngineRegistry()
    for feed in feeds.values():
        sequential.process_many(feed)

    concurrent = EngineRegistry()
    threads = [Thread(target=concurrent.process_many, args=(feed,)) for feed in feeds.values()]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert concurrent.markets() == sequential.markets()
    for name in feeds:
        assert concurrent.engine(name, "USDC").state == sequential.engine(name, "USDC").state
