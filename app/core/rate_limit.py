"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Injectable: the limiter is built once by the app factory and stored on
  ``app.state``; tests pass their own limiter driven by a fake clock.
- Runs first in the admission chain, before fault injection, so rejected
  requests never count against the fault rate.
"""

from __future__ import annotations

import logging

from fastapi import Request

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from app.core.bypass import RATE_LIMIT_BYPASS_PARAM, bypass_requested
from app.core.config import AppSettings
from app.core.errors import ErrorCode, RateLimitAppError

logger = logging.getLogger(__name__)


def build_rate_limiter(app_settings: AppSettings) -> AbstractRateLimiter:
    """Build the process-wide limiter from configuration.

    Args:
        app_settings: Resolved application settings.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    return InMemorySlidingWindowRateLimiter(
        limit=app_settings.rate_limit_requests,
        window_seconds=app_settings.rate_limit_window_ms / 1000,
    )


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter owned by the running application."""
    return request.app.state.rate_limiter


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the sliding window rate limit.

    When enabled, records one admission. If the window is already full,
    raises a 429 error without a retry hint.

    Args:
        request: FastAPI request.

    Raises:
        RateLimitAppError: When the rate limit is exceeded.
    """

    app_settings: AppSettings = request.app.state.app_settings
    if not app_settings.rate_limit_enabled:
        return

    if bypass_requested(request, RATE_LIMIT_BYPASS_PARAM):
        logger.debug("rate_limit.bypassed", extra={"request_path": request.url.path})
        return

    result = get_rate_limiter(request).consume()
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={"limit": result.limit, "remaining": result.remaining},
        )
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "limit": result.limit,
            "window_ms": app_settings.rate_limit_window_ms,
            "request_path": request.url.path,
        },
    )
    raise RateLimitAppError(
        code=ErrorCode.RATE_LIMIT_EXCEEDED,
        message=(
            f"Rate limit exceeded. Only {result.limit} requests per "
            f"{app_settings.rate_limit_window_ms} ms allowed."
        ),
    )
