from datetime import datetime, timedelta, timezone

import pytest

from whalepools.models.holdings import TokenHolding, WalletHoldings
from whalepools.models.whale import WhalePool, WhaleTrader
from whalepools.services.holdings_indexer import HoldingsIndexer, wallets_by_network
from whalepools.services.holdings_provider import MockHoldingsProvider
from whalepools.services.holdings_store import HoldingsStore
from whalepools.services.rate_limiter import RateLimiter
from whalepools.services.retry import RetryingFetcher
from whalepools.services.snapshot_store import SnapshotStore
from whalepools.services.trade_source import PermanentFetchError

NOW = datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc)


def pool(network, address, traders):
    return WhalePool(
        network=network,
        name=address,
        address=address,
        whale_traders=[
            WhaleTrader(
                address=t,
                total_volume_usd=20000,
                trade_count=1,
                last_trade_timestamp="2024-05-01T12:00:00Z",
            )
            for t in traders
        ],
    )


class CountingProvider:
    def __init__(self, fail_for=()):
        self.calls = []
        self.fail_for = set(fail_for)

    async def get_holdings(self, network, address):
        self.calls.append((network, address))
        if address in self.fail_for:
            raise PermanentFetchError("explorer said no", 404)
        return [
            TokenHolding(token="USD Coin", symbol="USDC", quantity=100, value_usd=100.0),
            TokenHolding(token="Ethereum", symbol="ETH", quantity=1, value_usd=3500.0),
        ]


def build_indexer(settings, sleep, provider):
    snapshot_store = SnapshotStore(settings.snapshot_path)
    holdings_store = HoldingsStore(settings.holdings_dir)
    indexer = HoldingsIndexer(
        provider,
        snapshot_store,
        holdings_store,
        RetryingFetcher(sleep=sleep),
        RateLimiter(2.0, sleep=sleep),
        settings,
        clock=lambda: NOW,
    )
    return indexer, snapshot_store, holdings_store


def test_wallets_by_network_dedupes_in_first_seen_order():
    pools = [
        pool("eth", "0xp1", ["0xB", "0xA"]),
        pool("eth", "0xp2", ["0xA", "0xC"]),
        pool("bsc", "0xp3", ["0xA"]),
    ]
    assert wallets_by_network(pools) == {"eth": ["0xB", "0xA", "0xC"], "bsc": ["0xA"]}


@pytest.mark.asyncio
async def test_fresh_wallets_are_skipped_and_stale_refetched(settings, sleep):
    provider = CountingProvider()
    indexer, snapshot_store, holdings_store = build_indexer(settings, sleep, provider)
    snapshot_store.write([pool("eth", "0xp1", ["0xfresh", "0xstale", "0xnew"])])

    for address, age in [("0xfresh", timedelta(hours=1)), ("0xstale", timedelta(hours=30))]:
        holdings_store.write(
            WalletHoldings(
                address=address,
                network="eth",
                holdings=[],
                total_value_usd=0,
                last_updated=NOW - age,
            )
        )

    report = await indexer.run()

    assert provider.calls == [("eth", "0xstale"), ("eth", "0xnew")]
    assert (report.fetched, report.skipped_fresh, report.failed) == (2, 1, 0)
    saved = holdings_store.read("eth", "0xnew")
    assert saved.total_value_usd == 3600.0
    assert saved.last_updated == NOW
    assert sleep.delays == [2.0, 2.0]


@pytest.mark.asyncio
async def test_failing_wallet_is_skipped(settings, sleep):
    provider = CountingProvider(fail_for={"0xbad"})
    indexer, snapshot_store, holdings_store = build_indexer(settings, sleep, provider)
    snapshot_store.write([pool("eth", "0xp1", ["0xbad", "0xgood"])])

    report = await indexer.run()

    assert report.failed == 1
    assert holdings_store.read("eth", "0xbad") is None
    assert holdings_store.read("eth", "0xgood") is not None


@pytest.mark.asyncio
async def test_missing_snapshot_means_nothing_to_do(settings, sleep):
    provider = CountingProvider()
    indexer, _, _ = build_indexer(settings, sleep, provider)

    report = await indexer.run()

    assert report.wallets_total == 0
    assert provider.calls == []


@pytest.mark.parametrize(
    "network,address",
    [("eth", "../../etc/passwd"), ("..", "0xAAA"), ("eth/x", "0xAAA"), ("eth", "")],
)
def test_store_rejects_unsafe_path_components(tmp_path, network, address):
    with pytest.raises(ValueError):
        HoldingsStore(tmp_path).path_for(network, address)


def test_holdings_store_layout(tmp_path):
    store = HoldingsStore(tmp_path)
    assert store.path_for("solana", "So1aNa") == tmp_path / "solana" / "So1aNa.json"


@pytest.mark.asyncio
async def test_mock_provider_is_deterministic():
    provider = MockHoldingsProvider()
    first = await provider.get_holdings("solana", "0xabc")
    second = await provider.get_holdings("solana", "0xabc")

    assert first == second
    assert 2 <= len(first) <= 6
    assert len({h.symbol for h in first}) == len(first)
    assert all(h.value_usd > 0 for h in first)


def test_staleness_uses_max_age():
    holdings = WalletHoldings(
        address="0xAAA",
        network="eth",
        holdings=[],
        total_value_usd=0,
        last_updated=NOW - timedelta(hours=25),
    )
    assert holdings.is_stale(NOW, timedelta(hours=24))
    assert not holdings.is_stale(NOW, timedelta(hours=48))
