"""In-memory sliding window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Shared by every client; there is no per-key partitioning.
- Thread-safe: the check-then-record sequence runs under a lock, so the limiter
  stays correct when sync code paths run in the threadpool.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Admit at most ``limit`` requests in any trailing ``window_seconds``.

    Admission timestamps are kept in arrival order. Each check trims the
    expired prefix, then either rejects (window full) or records ``now``.
    Rejected requests are not recorded.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum admissions per window.
            window_seconds: Width of the sliding window in seconds.
            clock: Monotonic time source returning seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._timestamps: deque[float] = deque()

    @property
    def limit(self) -> int:
        return self._limit

    def _prune(self, now: float) -> None:
        # Timestamps are non-decreasing, so expired entries form a prefix.
        cutoff = now - self._window_seconds
        while self._timestamps and self._timestamps[0] < cutoff:
            self._timestamps.popleft()

    def consume(self) -> RateLimitResult:
        """Admit or reject the current request.

        Returns:
            RateLimitResult with the admission decision.
        """
        with self._lock:
            now = self._clock()
            self._prune(now)

            if len(self._timestamps) >= self._limit:
                return RateLimitResult(allowed=False, limit=self._limit, remaining=0)

            self._timestamps.append(now)
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                remaining=self._limit - len(self._timestamps),
            )

    def reset(self) -> None:
        """Forget all recorded admissions."""
        with self._lock:
            self._timestamps.clear()
