# services/holdings_indexer.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from loguru import logger

from whalepools.core.config import Settings
from whalepools.models.holdings import WalletHoldings
from whalepools.models.whale import WhalePool
from whalepools.services.holdings_provider import HoldingsProvider
from whalepools.services.holdings_store import HoldingsStore
from whalepools.services.rate_limiter import RateLimiter
from whalepools.services.retry import RetryingFetcher
from whalepools.services.snapshot_store import SnapshotCorruptError, SnapshotStore
from whalepools.services.trade_source import TradeSourceError


def wallets_by_network(pools: list[WhalePool]) -> dict[str, list[str]]:
    """Unique whale addresses per network, in first-seen order."""
    wallets: dict[str, dict[str, None]] = {}
    for pool in pools:
        seen = wallets.setdefault(pool.network, {})
        for trader in pool.whale_traders:
            seen.setdefault(trader.address, None)
    return {network: list(addresses) for network, addresses in wallets.items()}


@dataclass
class HoldingsReport:
    wallets_total: int = 0
    fetched: int = 0
    skipped_fresh: int = 0
    failed: int = 0


class HoldingsIndexer:
    """
    Refreshes the per-wallet holdings cache for every whale in the snapshot.

    Wallets whose cached document is younger than HOLDINGS_MAX_AGE_HOURS are
    left alone; a wallet that keeps failing is logged and skipped.
    """

    def __init__(
        self,
        provider: HoldingsProvider,
        snapshot_store: SnapshotStore,
        holdings_store: HoldingsStore,
        fetcher: RetryingFetcher,
        limiter: RateLimiter,
        settings: Settings,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._provider = provider
        self._snapshot_store = snapshot_store
        self._holdings_store = holdings_store
        self._fetcher = fetcher
        self._limiter = limiter
        self._max_age = timedelta(hours=settings.HOLDINGS_MAX_AGE_HOURS)
        self._clock = clock

    async def run(self) -> HoldingsReport:
        report = HoldingsReport()
        pools = self._snapshot_store.read()
        if not pools:
            logger.warning(
                "No whale pools at {}; run the pool indexer first", self._snapshot_store.path
            )
            return report

        logger.info("Found {} whale pools to process", len(pools))
        for network, wallets in wallets_by_network(pools).items():
            logger.bind(network=network).info("Processing {} unique wallets", len(wallets))
            report.wallets_total += len(wallets)
            for address in wallets:
                await self._index_wallet(network, address, report)

        logger.info(
            "Holdings indexing complete: {} fetched, {} fresh, {} failed",
            report.fetched,
            report.skipped_fresh,
            report.failed,
        )
        return report

    async def _index_wallet(self, network: str, address: str, report: HoldingsReport) -> None:
        log = logger.bind(network=network, address=address)
        now = self._clock()

        try:
            existing = self._holdings_store.read(network, address)
        except SnapshotCorruptError as exc:
            log.warning("Ignoring unreadable cached holdings: {}", exc)
            existing = None
        except ValueError as exc:
            log.warning("Skipping wallet with unusable address: {}", exc)
            report.failed += 1
            return

        if existing is not None and not existing.is_stale(now, self._max_age):
            log.debug("Skipping wallet, data is fresh")
            report.skipped_fresh += 1
            return

        try:
            holdings = await self._fetcher.run(
                lambda: self._provider.get_holdings(network, address),
                f"Fetching holdings for {address}",
            )
        except TradeSourceError as exc:
            log.warning("Failed to fetch holdings: {}", exc)
            report.failed += 1
            await self._limiter.pause()
            return

        self._holdings_store.write(
            WalletHoldings(
                address=address,
                network=network,
                holdings=holdings,
                total_value_usd=sum(h.value_usd for h in holdings),
                last_updated=now,
            )
        )
        report.fetched += 1
        log.info("Saved holdings ({} tokens)", len(holdings))
        await self._limiter.pause()
