"""Random fault injection for client resilience testing.

Admitted requests fail with a 500 at a fixed probability, simulating unstable
infrastructure. The random source is injectable so tests can force either
outcome deterministically.
"""

from __future__ import annotations

import logging
import random
from typing import Callable

from fastapi import Request

from app.core.bypass import FAULT_INJECTION_BYPASS_PARAM, bypass_requested
from app.core.config import AppSettings
from app.core.errors import ErrorCode, ServerAppError

logger = logging.getLogger(__name__)


class FaultInjector:
    """Decide whether to force a failure for the current request."""

    def __init__(
        self,
        *,
        rate: float,
        random_source: Callable[[], float] = random.random,
    ) -> None:
        """
        Args:
            rate: Failure probability in [0, 1].
            random_source: Returns floats uniformly distributed in [0, 1).

        Raises:
            ValueError: If rate is outside [0, 1].
        """
        if not 0.0 <= rate <= 1.0:
            raise ValueError("rate must be between 0 and 1")
        self._rate = rate
        self._random = random_source

    @property
    def rate(self) -> float:
        return self._rate

    def should_fail(self) -> bool:
        return self._random() < self._rate


def build_fault_injector(app_settings: AppSettings) -> FaultInjector:
    return FaultInjector(rate=app_settings.fault_injection_rate)


async def inject_faults(request: Request) -> None:
    """FastAPI dependency that randomly fails admitted requests.

    Must run after ``enforce_rate_limit`` and before any route logic, so it
    neither touches limiter state nor interrupts partial work.

    Raises:
        ServerAppError: When a fault is injected.
    """

    app_settings: AppSettings = request.app.state.app_settings
    if not app_settings.fault_injection_enabled:
        return

    if bypass_requested(request, FAULT_INJECTION_BYPASS_PARAM):
        return

    injector: FaultInjector = request.app.state.fault_injector
    if not injector.should_fail():
        return

    logger.warning(
        "fault_injection.triggered",
        extra={"rate": injector.rate, "request_path": request.url.path},
    )
    raise ServerAppError(
        code=ErrorCode.SERVER_ERROR,
        message="Internal server error - random occurrence",
    )
