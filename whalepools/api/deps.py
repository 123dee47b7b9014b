# api/deps.py
from __future__ import annotations

from functools import lru_cache

from whalepools.core.config import get_settings
from whalepools.services.gecko_trade_source import GeckoTradeSource
from whalepools.services.holdings_store import HoldingsStore
from whalepools.services.mock_trade_source import MockTradeSource
from whalepools.services.snapshot_store import SnapshotStore
from whalepools.services.trade_source import TradeSource


@lru_cache
def get_trade_source() -> TradeSource:
    settings = get_settings()
    if settings.TRADE_SOURCE == "remote":
        return GeckoTradeSource()
    return MockTradeSource()


@lru_cache
def get_snapshot_store() -> SnapshotStore:
    return SnapshotStore(get_settings().snapshot_path)


@lru_cache
def get_holdings_store() -> HoldingsStore:
    return HoldingsStore(get_settings().holdings_dir)
