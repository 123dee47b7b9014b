# services/rate_limiter.py
from __future__ import annotations

import asyncio

from whalepools.services.retry import Sleep


class RateLimiter:
    """Fixed pause between units of work; 2s keeps us at ~30 calls/minute."""

    def __init__(self, delay: float = 2.0, sleep: Sleep = asyncio.sleep) -> None:
        self.delay = delay
        self.pauses = 0
        self._sleep = sleep

    async def pause(self) -> None:
        self.pauses += 1
        await self._sleep(self.delay)
