"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets TESTING/APP_ENV before any app import so no .env file is loaded.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from itertools import count
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from app.adapters.permit_source.base import AbstractPermitSource
from app.adapters.permit_source.json_file import JsonFilePermitSource
from app.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from app.core.app_factory import create_app
from app.core.config import DEFAULT_PERMITS_PATH, AppSettings
from app.core.fault_injection import FaultInjector
from app.schemas.permit import Permit

FIXTURE_PERMIT_COUNT = 12
FIRST_PERMIT_ID = "f47ac10b-58cc-4372-a567-0e02b2c3d479"
UNKNOWN_PERMIT_ID = "a2385cf5-4e9b-476e-b3b3-911d2b1cb3f5"


def spaced_clock(step: float = 2.0) -> Callable[[], float]:
    """Clock whose every reading is ``step`` seconds after the previous one."""
    ticks = count(start=1000.0, step=step)
    return lambda: next(ticks)


@pytest.fixture(scope="session")
def permits() -> list[Permit]:
    """The packaged 12-permit fixture collection."""
    return JsonFilePermitSource(DEFAULT_PERMITS_PATH).load()


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Build an isolated app and client.

    Defaults keep the admission chain active but inert: the limiter clock
    advances past the window on every request and the random source never
    falls under the fault rate.
    """

    def _make(
        *,
        app_settings: AppSettings | None = None,
        permit_source: AbstractPermitSource | None = None,
        clock: Callable[[], float] | None = None,
        random_value: float = 0.99,
    ) -> TestClient:
        cfg = app_settings or AppSettings()
        limiter = InMemorySlidingWindowRateLimiter(
            limit=cfg.rate_limit_requests,
            window_seconds=cfg.rate_limit_window_ms / 1000,
            clock=clock or spaced_clock(),
        )
        injector = FaultInjector(
            rate=cfg.fault_injection_rate,
            random_source=lambda: random_value,
        )
        app = create_app(
            cfg,
            permit_source=permit_source,
            rate_limiter=limiter,
            fault_injector=injector,
        )
        return TestClient(app, raise_server_exceptions=False)

    return _make


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    return make_client()
