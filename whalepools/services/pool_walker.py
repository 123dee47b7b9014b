# services/pool_walker.py
"""
Pool walker: networks -> pools -> trades, one call at a time.

Flow per run:

    FetchingNetworks
      -> per network: FetchingPools
           -> per pool: FetchingTrades -> Aggregating -> RateLimitPause
         -> Checkpoint
    -> Done (final write)

The network list is the only fetch whose failure ends the run. A network whose
pool list cannot be fetched is skipped, a pool whose trades cannot be fetched
is skipped, and the walk carries on. After each network the whole snapshot
built so far is written out, so an interrupted run keeps everything up to the
last finished network.
"""
from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from whalepools.core.config import Settings
from whalepools.models.gecko import Network, Pool
from whalepools.models.whale import WhalePool
from whalepools.services.aggregator import build_whale_pool
from whalepools.services.rate_limiter import RateLimiter
from whalepools.services.retry import RetryingFetcher
from whalepools.services.snapshot_store import SnapshotStore
from whalepools.services.trade_source import (
    FatalBootstrapError,
    TradeSource,
    TradeSourceError,
)


class SnapshotAccumulator:
    """In-memory snapshot for one run. At most one entry per (network, address)."""

    def __init__(self) -> None:
        self._pools: list[WhalePool] = []
        self._index: dict[tuple[str, str], int] = {}

    def add(self, pool: WhalePool) -> None:
        position = self._index.get(pool.key)
        if position is None:
            self._index[pool.key] = len(self._pools)
            self._pools.append(pool)
        else:
            self._pools[position] = pool

    @property
    def pools(self) -> list[WhalePool]:
        return list(self._pools)

    def __len__(self) -> int:
        return len(self._pools)


@dataclass
class RunReport:
    networks_total: int = 0
    networks_skipped: int = 0
    pools_scanned: int = 0
    pools_failed: int = 0
    whale_pools: int = 0
    checkpoints: int = 0


class PoolWalker:
    def __init__(
        self,
        source: TradeSource,
        store: SnapshotStore,
        fetcher: RetryingFetcher,
        limiter: RateLimiter,
        settings: Settings,
    ) -> None:
        self._source = source
        self._store = store
        self._fetcher = fetcher
        self._limiter = limiter
        self._pool_limit = settings.POOL_LIMIT
        self._pool_max_pages = settings.POOL_MAX_PAGES
        self._threshold = settings.MIN_WHALE_VOLUME_USD

    async def run(self) -> RunReport:
        report = RunReport()
        snapshot = SnapshotAccumulator()

        try:
            networks = await self._fetcher.run(self._source.list_networks, "Fetching networks")
        except TradeSourceError as exc:
            raise FatalBootstrapError(f"Could not fetch network list: {exc}") from exc

        report.networks_total = len(networks)
        logger.info("Found {} networks to process", len(networks))

        for network in networks:
            await self._walk_network(network, snapshot, report)
            self._checkpoint(snapshot, report)

        self._store.write(snapshot.pools)
        report.whale_pools = len(snapshot)
        logger.info(
            "Indexing complete: {} whale pools from {} pools across {} networks "
            "({} networks skipped, {} pools failed) -> {}",
            report.whale_pools,
            report.pools_scanned,
            report.networks_total,
            report.networks_skipped,
            report.pools_failed,
            self._store.path,
        )
        return report

    async def _walk_network(
        self, network: Network, snapshot: SnapshotAccumulator, report: RunReport
    ) -> None:
        log = logger.bind(network=network.id)
        log.info("Processing network {}", network.id)

        try:
            pools = await self._fetch_pools(network.id)
        except TradeSourceError as exc:
            log.warning("Failed to fetch pools, skipping network: {}", exc)
            report.networks_skipped += 1
            await self._limiter.pause()
            return

        log.info("Found {} pools to check", len(pools))
        for pool in pools:
            await self._walk_pool(network.id, pool, snapshot, report)
            # always pause between pools, failed or not
            await self._limiter.pause()

    async def _fetch_pools(self, network_id: str) -> list[Pool]:
        pools: list[Pool] = []
        for page in range(1, self._pool_max_pages + 1):
            if page > 1:
                await self._limiter.pause()
            batch = await self._fetcher.run(
                lambda: self._source.list_pools(network_id, page=page),
                f"Fetching pools for {network_id} (page {page})",
            )
            pools.extend(batch)
            if not batch or len(pools) >= self._pool_limit:
                break
        return pools[: self._pool_limit]

    async def _walk_pool(
        self,
        network_id: str,
        pool: Pool,
        snapshot: SnapshotAccumulator,
        report: RunReport,
    ) -> None:
        log = logger.bind(network=network_id, pool=pool.address)
        report.pools_scanned += 1
        try:
            trades = await self._fetcher.run(
                lambda: self._source.list_trades(network_id, pool.address),
                f"Fetching trades for {pool.name}",
            )
        except TradeSourceError as exc:
            log.warning("Failed to process pool {}: {}", pool.name, exc)
            report.pools_failed += 1
            return

        whale_pool = build_whale_pool(network_id, pool, trades, self._threshold)
        if whale_pool is None:
            log.debug("No whales in pool {}", pool.name)
            return

        snapshot.add(whale_pool)
        log.info(
            "Whale pool found: {} with {} whale traders",
            pool.name,
            len(whale_pool.whale_traders),
        )

    def _checkpoint(self, snapshot: SnapshotAccumulator, report: RunReport) -> None:
        self._store.write(snapshot.pools)
        report.checkpoints += 1
        logger.info("Progress saved: {} whale pools so far", len(snapshot))
