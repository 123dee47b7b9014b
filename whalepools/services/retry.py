# services/retry.py
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from loguru import logger

from whalepools.services.trade_source import TransientNetworkError

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


class RetryingFetcher:
    """
    Runs one external call with bounded exponential backoff.

    Only TransientNetworkError is retried. Attempt ``n`` (0-based) that fails
    transiently waits ``base_delay * 2 ** n`` seconds before the next try, up
    to ``max_retries`` retries; after that the last error propagates. Every
    other exception propagates at once, without waiting.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 5.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep

    async def run(self, operation: Callable[[], Awaitable[T]], name: str) -> T:
        attempt = 0
        while True:
            try:
                return await operation()
            except TransientNetworkError as exc:
                if attempt >= self.max_retries:
                    logger.warning(
                        "{}: giving up after {} retries ({})", name, self.max_retries, exc.reason
                    )
                    raise
                wait = self.base_delay * 2**attempt
                logger.info(
                    "{}: retry {}/{} after {}, waiting {:.0f}s",
                    name,
                    attempt + 1,
                    self.max_retries,
                    exc.reason,
                    wait,
                )
                await self._sleep(wait)
                attempt += 1
