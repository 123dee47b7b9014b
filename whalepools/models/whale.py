# models/whale.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class WhaleTrader(BaseModel):
    """
    Aggregated whale activity of one address inside one pool.

    NOTE: ``last_trade_timestamp`` is the timestamp of the last qualifying trade
    in the order the upstream returned them, not the latest by value.
    """

    model_config = ConfigDict(populate_by_name=True)

    address: str
    total_volume_usd: float = Field(..., alias="totalVolumeUsd", ge=0)
    trade_count: int = Field(..., alias="tradeCount", ge=1)
    last_trade_timestamp: str = Field(..., alias="lastTradeTimestamp")


class WhalePool(BaseModel):
    """
    A pool with at least one whale trader, as persisted in the snapshot.

    Traders are ordered by total volume, largest first.
    """

    model_config = ConfigDict(populate_by_name=True)

    network: str
    name: str
    address: str
    whale_traders: list[WhaleTrader] = Field(..., alias="whaleTraders", min_length=1)

    @property
    def key(self) -> tuple[str, str]:
        return self.network, self.address


# The persisted snapshot document is a bare JSON array of pools.
SnapshotAdapter = TypeAdapter(list[WhalePool])
