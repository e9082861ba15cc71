"""
Sliding-window rate limiting for job starts.
"""

import asyncio
import time
from collections import deque
from collections.abc import Awaitable, Callable

from job_queue.constants import DEFAULT_RATE_WINDOW_SECONDS


class SlidingWindowRateLimiter:
    """
    Allows at most ``limit`` job starts in any trailing ``window`` seconds.

    Start timestamps are kept in order; the oldest one inside the window
    decides how long the next job must wait once the window is full.
    Acquisitions are serialized, so waiting jobs are admitted in the order
    they called ``acquire`` and each computes its wait from a fresh window.
    """

    def __init__(
        self,
        limit: int | None,
        window: float = DEFAULT_RATE_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the rate limiter.

        Args:
            limit: Maximum starts per window. None disables limiting.
            window: Window length in seconds.
            clock: Monotonic time source in seconds.
            sleep: Coroutine used to wait, injectable for tests.
        """
        if limit is not None and limit <= 0:
            raise ValueError("limit must be greater than 0")
        if window <= 0:
            raise ValueError("window must be greater than 0")

        self._limit = limit
        self._window = window
        self._clock = clock
        self._sleep = sleep
        self._starts: deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self._limit is not None

    @property
    def limit(self) -> int | None:
        return self._limit

    @property
    def window(self) -> float:
        return self._window

    def _prune(self, now: float) -> None:
        while self._starts and now - self._starts[0] >= self._window:
            self._starts.popleft()

    def wait_time(self) -> float:
        """Seconds until another start would be allowed, 0 if allowed now."""
        if self._limit is None:
            return 0.0
        now = self._clock()
        self._prune(now)
        if len(self._starts) < self._limit:
            return 0.0
        return max(0.0, self._window - (now - self._starts[0]))

    def recent_starts(self) -> int:
        """Number of starts recorded in the current window."""
        self._prune(self._clock())
        return len(self._starts)

    async def acquire(self) -> float:
        """
        Wait until a start slot is free, then record a start.

        Never fails for rate reasons; it only delays.

        Returns:
            Seconds spent waiting.
        """
        if self._limit is None:
            return 0.0

        waited = 0.0
        async with self._lock:
            delay = self.wait_time()
            while delay > 0:
                await self._sleep(delay)
                waited += delay
                delay = self.wait_time()

            self._starts.append(self._clock())

        return waited

    def reset(self) -> None:
        """Forget all recorded starts."""
        self._starts.clear()
