"""
Shared fixtures for the whale pool indexer tests.

Nothing here touches the network: the trade source is an in-memory fake and
sleeps are recorded instead of awaited.
"""
from __future__ import annotations

from collections import defaultdict

import pytest

from whalepools.core.config import Settings
from whalepools.models.gecko import Network, Pool, Trade


def make_trade(volume, address="0xAAA", ts="2024-05-01T12:00:00Z", kind="buy") -> Trade:
    return Trade(volume_usd=volume, timestamp_utc=ts, kind=kind, from_address=address)


class RecordingSleep:
    """Stand-in for asyncio.sleep that remembers every requested delay."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FakeTradeSource:
    """
    In-memory TradeSource.

    ``failures`` maps a call key to a list of exceptions raised on successive
    calls (one per call) before the real answer is returned; a key mapped to
    a single exception instance fails on every call.
    Call keys: ``"networks"``, ``("pools", network)``, ``("trades", network, pool)``.
    """

    def __init__(
        self,
        networks: dict[str, dict[str, list[Trade]]] | None = None,
        failures: dict | None = None,
    ) -> None:
        self.networks = networks or {}
        self.failures = failures or {}
        self.calls: dict = defaultdict(int)

    def _maybe_fail(self, key) -> None:
        self.calls[key] += 1
        planned = self.failures.get(key)
        if planned is None:
            return
        if isinstance(planned, BaseException):
            raise planned
        if planned:
            raise planned.pop(0)

    async def list_networks(self) -> list[Network]:
        self._maybe_fail("networks")
        return [Network(id=n) for n in self.networks]

    async def list_pools(self, network: str, page: int = 1) -> list[Pool]:
        self._maybe_fail(("pools", network))
        if page > 1:
            return []
        return [Pool(name=f"{address}-name", address=address) for address in self.networks[network]]

    async def list_trades(self, network: str, pool_address: str) -> list[Trade]:
        self._maybe_fail(("trades", network, pool_address))
        return list(self.networks[network][pool_address])


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATA_DIR=tmp_path / "data",
        TRADE_SOURCE="mock",
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()
