import pytest

from whalepools.models.whale import WhalePool, WhaleTrader
from whalepools.services.snapshot_store import SnapshotCorruptError, SnapshotStore


def whale_pool(network="eth", address="0xpool") -> WhalePool:
    return WhalePool(
        network=network,
        name="WETH / USDC",
        address=address,
        whale_traders=[
            WhaleTrader(
                address="0xAAA",
                total_volume_usd=35000.0,
                trade_count=2,
                last_trade_timestamp="2024-05-01T12:00:00Z",
            )
        ],
    )


def test_missing_file_reads_as_empty(tmp_path):
    assert SnapshotStore(tmp_path / "nope" / "whalePools.json").read() == []


def test_write_then_read(tmp_path):
    store = SnapshotStore(tmp_path / "data" / "whalePools.json")
    store.write([whale_pool("eth"), whale_pool("bsc")])

    pools = store.read()
    assert [p.network for p in pools] == ["eth", "bsc"]
    assert pools[0].whale_traders[0].trade_count == 2


def test_write_overwrites_previous_content(tmp_path):
    store = SnapshotStore(tmp_path / "whalePools.json")
    store.write([whale_pool("eth"), whale_pool("bsc")])
    store.write([whale_pool("solana")])

    assert [p.network for p in store.read()] == ["solana"]
    # no temp files left behind
    assert [p.name for p in tmp_path.iterdir()] == ["whalePools.json"]


def test_corrupt_file_raises(tmp_path):
    path = tmp_path / "whalePools.json"
    path.write_text("{not json")

    with pytest.raises(SnapshotCorruptError):
        SnapshotStore(path).read()
