"""
Minimum-interval rate limiter for search and webhook calls.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

# Setup logging
logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Spaces out successive operations by a fixed minimum interval.

    The first acquire returns immediately; each later acquire waits until
    ``min_interval`` seconds have passed since the previous one. Sleep and
    clock are injectable so tests can run without real delays.
    """

    def __init__(
        self,
        min_interval: float,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic
    ):
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")
        self.min_interval = min_interval
        self._sleep = sleep
        self._clock = clock
        self._last_acquired: Optional[float] = None
        self.total_waited = 0.0

    async def acquire(self) -> float:
        """
        Wait for the next slot.

        Returns:
            Seconds slept before the slot was granted
        """
        waited = 0.0

        if self._last_acquired is not None:
            elapsed = self._clock() - self._last_acquired
            if elapsed < self.min_interval:
                waited = self.min_interval - elapsed
                logger.debug(f"Rate limiting: waiting {waited:.1f}s")
                await self._sleep(waited)
                self.total_waited += waited

        self._last_acquired = self._clock()
        return waited

    def reset(self) -> None:
        """Forget the previous slot so the next acquire is immediate."""
        self._last_acquired = None
