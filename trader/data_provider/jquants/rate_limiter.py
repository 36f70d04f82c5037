"""Sliding-window rate limiter for the J-Quants API."""
import asyncio
import logging
import time
from collections import deque
from typing import Callable, Deque

logger = logging.getLogger(__name__)

# J-Quants Free plan quota
RATE_LIMIT_MAX_REQUESTS = 5
RATE_LIMIT_WINDOW = 60.0  # seconds


class RateLimiter:
    """Admit at most ``max_requests`` grants within any trailing ``window`` seconds.

    Grant timestamps are kept oldest-first. The lock guards the
    evict/check/record step only; waiters sleep without holding it so other
    callers can keep evicting and registering.
    """

    def __init__(
        self,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window: float = RATE_LIMIT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window <= 0:
            raise ValueError("window must be positive")
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._grants: Deque[float] = deque()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait for a free slot, then record the grant."""
        while True:
            async with self._lock:
                now = self._clock()
                while self._grants and now - self._grants[0] >= self.window:
                    self._grants.popleft()

                if len(self._grants) < self.max_requests:
                    self._grants.append(now)
                    return

                wait = self._grants[0] + self.window - now

            logger.debug(f"Rate limit window full, waiting {wait:.2f}s")
            await asyncio.sleep(wait)

    @property
    def in_window(self) -> int:
        """Number of grants currently recorded."""
        return len(self._grants)
