# cli.py: batch entry points for the external (hourly) scheduler
from __future__ import annotations

import argparse
import asyncio
import sys

from loguru import logger

from whalepools.clients.gecko_client import GeckoTerminalClient
from whalepools.core.config import Settings, get_settings
from whalepools.core.log import configure_logging
from whalepools.services.gecko_trade_source import GeckoTradeSource
from whalepools.services.holdings_indexer import HoldingsIndexer
from whalepools.services.holdings_provider import MockHoldingsProvider
from whalepools.services.holdings_store import HoldingsStore
from whalepools.services.mock_trade_source import MockTradeSource
from whalepools.services.pool_walker import PoolWalker
from whalepools.services.rate_limiter import RateLimiter
from whalepools.services.retry import RetryingFetcher
from whalepools.services.snapshot_store import SnapshotCorruptError, SnapshotStore
from whalepools.services.trade_source import FatalBootstrapError

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INTERRUPTED = 130


def _fetcher(settings: Settings) -> RetryingFetcher:
    return RetryingFetcher(
        max_retries=settings.MAX_RETRIES, base_delay=settings.RETRY_BASE_DELAY_SECONDS
    )


async def index_pools(settings: Settings) -> int:
    store = SnapshotStore(settings.snapshot_path)
    limiter = RateLimiter(settings.RATE_LIMIT_DELAY_SECONDS)

    if settings.TRADE_SOURCE == "mock":
        walker = PoolWalker(MockTradeSource(), store, _fetcher(settings), limiter, settings)
        await walker.run()
        return EXIT_OK

    async with GeckoTerminalClient(settings) as client:
        walker = PoolWalker(GeckoTradeSource(client), store, _fetcher(settings), limiter, settings)
        await walker.run()
    return EXIT_OK


async def index_holdings(settings: Settings) -> int:
    indexer = HoldingsIndexer(
        MockHoldingsProvider(),
        SnapshotStore(settings.snapshot_path),
        HoldingsStore(settings.holdings_dir),
        _fetcher(settings),
        RateLimiter(settings.RATE_LIMIT_DELAY_SECONDS),
        settings,
    )
    await indexer.run()
    return EXIT_OK


_COMMANDS = {
    "index-pools": ("Starting whale pool indexer", index_pools),
    "index-holdings": ("Starting wallet holdings indexer", index_holdings),
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="whalepools",
        description="Whale pool indexer. Configuration comes from the environment / .env.",
    )
    parser.add_argument("command", choices=sorted(_COMMANDS))
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    banner, command = _COMMANDS[args.command]
    logger.info(banner)
    try:
        return asyncio.run(command(settings))
    except (FatalBootstrapError, SnapshotCorruptError) as exc:
        logger.error("Fatal error: {}", exc)
        return EXIT_FATAL
    except KeyboardInterrupt:
        logger.warning("Interrupted; {} keeps its last checkpoint", settings.snapshot_path)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
