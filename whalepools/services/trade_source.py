# services/trade_source.py
from __future__ import annotations

from typing import Literal, Protocol

from whalepools.models.gecko import Network, Pool, Trade

TransientReason = Literal["connection-reset", "timeout", "rate-limited"]


class TradeSourceError(Exception):
    """Raised when the trade source cannot satisfy a request (upstream issue)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransientNetworkError(TradeSourceError):
    """Connection reset, timeout or HTTP 429. Worth retrying after a backoff."""

    def __init__(
        self,
        reason: TransientReason,
        message: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message or reason, status_code=status_code)
        self.reason = reason


class PermanentFetchError(TradeSourceError):
    """Any other HTTP or payload failure. Retrying would not help."""


class FatalBootstrapError(Exception):
    """The network list could not be fetched, so a run has nothing to walk."""


class TradeSource(Protocol):
    """
    Abstraction around the upstream network/pool/trade listing.

    The pool walker only talks to this interface, never directly to HTTP.
    """

    async def list_networks(self) -> list[Network]:
        ...

    async def list_pools(self, network: str, page: int = 1) -> list[Pool]:
        ...

    async def list_trades(self, network: str, pool_address: str) -> list[Trade]:
        ...
