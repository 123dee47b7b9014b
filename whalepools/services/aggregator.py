# services/aggregator.py
"""
Whale classification and per-trader aggregation for a single pool.

A trade is a whale trade when its USD volume is a plain decimal that parses to a finite float strictly
above the threshold, and it carries a sender address and a readable block
timestamp. Anything else is silently ignored: upstream payloads are loose and
a bad record must never sink the pool.
"""
from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Iterable

from whalepools.models.gecko import Pool, Trade
from whalepools.models.whale import WhalePool, WhaleTrader

MIN_WHALE_VOLUME_USD = 10_000.0

# plain ASCII decimal, optional exponent; no underscores, no "inf"/"nan"
_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def _parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None


def whale_volume(trade: Trade, threshold: float = MIN_WHALE_VOLUME_USD) -> float | None:
    """Return the trade's USD volume if it is a usable whale trade, else None."""
    if trade.volume_usd is None or not trade.from_address:
        return None
    raw = trade.volume_usd.strip()
    if not _DECIMAL.fullmatch(raw):
        return None
    volume = float(raw)
    if not math.isfinite(volume) or volume <= threshold:
        return None
    if _parse_timestamp(trade.timestamp_utc) is None:
        return None
    return volume


def aggregate_trades(
    trades: Iterable[Trade], threshold: float = MIN_WHALE_VOLUME_USD
) -> list[WhaleTrader]:
    traders: dict[str, WhaleTrader] = {}

    for trade in trades:
        volume = whale_volume(trade, threshold)
        if volume is None:
            continue
        # whale_volume guarantees both are set
        address = trade.from_address
        timestamp = trade.timestamp_utc

        trader = traders.get(address)
        if trader is None:
            traders[address] = WhaleTrader(
                address=address,
                total_volume_usd=volume,
                trade_count=1,
                last_trade_timestamp=timestamp,
            )
        else:
            total = trader.total_volume_usd + volume
            if not math.isfinite(total):
                # would overflow to inf and poison the snapshot
                continue
            trader.total_volume_usd = total
            trader.trade_count += 1
            # last seen in input order wins, even if it is older
            trader.last_trade_timestamp = timestamp

    # sorted() is stable: equal volumes keep first-seen order
    return sorted(traders.values(), key=lambda t: t.total_volume_usd, reverse=True)


def build_whale_pool(
    network: str,
    pool: Pool,
    trades: Iterable[Trade],
    threshold: float = MIN_WHALE_VOLUME_USD,
) -> WhalePool | None:
    whale_traders = aggregate_trades(trades, threshold)
    if not whale_traders:
        return None
    return WhalePool(
        network=network,
        name=pool.name,
        address=pool.address,
        whale_traders=whale_traders,
    )
