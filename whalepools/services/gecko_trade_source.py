# services/gecko_trade_source.py
from __future__ import annotations

from loguru import logger

from whalepools.clients.gecko_client import GeckoTerminalClient
from whalepools.models.gecko import Network, Pool, Trade
from whalepools.services.trade_source import TradeSource


class GeckoTradeSource(TradeSource):
    """
    TradeSource backed by GeckoTerminal.

    All remote specifics live here + in GeckoTerminalClient. Records without
    an identifier are dropped here so the walker only sees usable networks
    and pools; trades are always kept and judged by the aggregator.
    """

    def __init__(self, client: GeckoTerminalClient | None = None) -> None:
        self._client = client or GeckoTerminalClient()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_networks(self) -> list[Network]:
        networks: list[Network] = []
        for item in await self._client.fetch_networks():
            network = Network.from_api(item)
            if network is None:
                logger.debug("Skipping network record without id: {!r}", item)
                continue
            networks.append(network)
        return networks

    async def list_pools(self, network: str, page: int = 1) -> list[Pool]:
        pools: list[Pool] = []
        for item in await self._client.fetch_pools(network, page=page):
            pool = Pool.from_api(item)
            if pool is None:
                logger.bind(network=network).debug("Skipping pool record without address")
                continue
            pools.append(pool)
        return pools

    async def list_trades(self, network: str, pool_address: str) -> list[Trade]:
        items = await self._client.fetch_trades(network, pool_address)
        return [Trade.from_api(item) for item in items]
