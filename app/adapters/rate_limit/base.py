"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation) so the
pipeline can be handed any limiter, including one driven by a fake clock.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit admission check.

    Attributes:
        allowed: Whether the request is admitted.
        limit: Max admissions per window.
        remaining: Admissions left in the current window (0 when blocked).
    """

    allowed: bool
    limit: int
    remaining: int


class AbstractRateLimiter(ABC):
    """Interface for process-wide rate limiters."""

    @abstractmethod
    def consume(self) -> RateLimitResult:
        """Check admission and, when admitted, record the request.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
