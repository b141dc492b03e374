"""
Minimum-interval gate between consecutive PubMed batch requests.
"""

from typing import Awaitable, Callable, Optional
import asyncio
import logging
import time

from core.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Spaces requests at least ``min_interval`` seconds apart.

    The runner owns one instance per run and calls ``mark()`` after each
    batch request finishes and ``await_slot()`` before every batch except
    the first. Clock and sleep are injectable for tests.

    Usage:
        limiter = RateLimiter(min_interval=0.4)
        await fetcher.fetch_batch(first)
        limiter.mark()
        await limiter.await_slot()
        await fetcher.fetch_batch(second)
    """

    def __init__(
        self,
        min_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.min_interval = settings.MIN_REQUEST_INTERVAL if min_interval is None else min_interval
        if self.min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {self.min_interval}")
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None
        self.waits = 0

    def mark(self):
        """Record that a request just completed."""
        self._last = self._clock()

    async def await_slot(self):
        """Suspend until ``min_interval`` has passed since the last mark."""
        if self._last is None:
            delay = self.min_interval
        else:
            delay = self.min_interval - (self._clock() - self._last)

        if delay > 0:
            logger.debug(f"Rate limiter sleeping {delay:.3f}s")
            await self._sleep(delay)

        self.waits += 1
        self._last = self._clock()
