# models/holdings.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field


class TokenHolding(BaseModel):
    token: str
    symbol: str
    quantity: float = Field(..., ge=0)
    value_usd: float = Field(..., ge=0)


class WalletHoldings(BaseModel):
    """
    One cached holdings document per (network, address).

    This is the on-disk shape under ``wallet-holdings/{network}/{address}.json``.
    """

    address: str
    network: str
    holdings: list[TokenHolding]
    total_value_usd: float
    last_updated: datetime

    def is_stale(self, now: datetime, max_age: timedelta) -> bool:
        last = self.last_updated
        if last.tzinfo is None:
            last = last.replace(tzinfo=timezone.utc)
        return now - last > max_age


class WalletHoldingsResponse(BaseModel):
    """
    Response body for GET /v1/wallet-holdings.

    ``no_cached_data`` is set when the indexer has not produced a document yet;
    staleness is advisory only.
    """

    address: str
    network: str
    holdings: list[TokenHolding] = []
    total_value_usd: float = 0.0
    last_updated: datetime | None = None
    is_stale: bool = False
    no_cached_data: bool = False
    message: str | None = None
