# services/mock_trade_source.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from whalepools.models.gecko import Network, Pool, Trade
from whalepools.services.trade_source import TradeSource

_NETWORKS = ["eth", "bsc", "solana"]
_POOLS_PER_NETWORK = 5
_TRADES_PER_POOL = 12


class MockTradeSource(TradeSource):
    """
    Deterministic synthetic source.

    Good enough to:
    - run the indexer offline
    - exercise whale filtering, including sub-threshold and malformed trades
    """

    def __init__(self, now: datetime | None = None) -> None:
        self._now = now or datetime(2025, 1, 1, tzinfo=timezone.utc)

    async def list_networks(self) -> list[Network]:
        return [Network(id=n, name=n.upper()) for n in _NETWORKS]

    async def list_pools(self, network: str, page: int = 1) -> list[Pool]:
        if page > 1:
            return []
        return [
            Pool(name=f"{network.upper()}-POOL-{i}", address=f"{network}_pool_{i:02d}")
            for i in range(_POOLS_PER_NETWORK)
        ]

    async def list_trades(self, network: str, pool_address: str) -> list[Trade]:
        seed = sum(ord(c) for c in pool_address)
        trades: list[Trade] = []
        for i in range(_TRADES_PER_POOL):
            ts = self._now - timedelta(minutes=5 * i)
            # every fourth pool has no whales at all
            scale = 0.1 if seed % 4 == 0 else 1.0
            volume = ((seed * (i + 7)) % 40_000 + 500.0) * scale
            trades.append(
                Trade(
                    volume_usd=f"{volume:.2f}",
                    timestamp_utc=ts.isoformat().replace("+00:00", "Z"),
                    kind="buy" if i % 2 == 0 else "sell",
                    from_address=f"0x{(seed + i % 3):040x}",
                )
            )
        # one malformed record per pool
        trades.append(Trade(volume_usd="n/a", timestamp_utc=None, kind="buy"))
        return trades
