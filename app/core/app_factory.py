"""Application factory for FastAPI app.

Centralizes app construction (collaborators, middleware, handlers, routers)
so tests can build isolated apps with their own limiter, fault injector and
permit source instead of sharing module-level state.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.permit_source.base import AbstractPermitSource
from app.adapters.permit_source.json_file import JsonFilePermitSource
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.api.routes import health_router, permits_router
from app.core.config import AppSettings, settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.fault_injection import FaultInjector, build_fault_injector
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.rate_limit import build_rate_limiter

logger = logging.getLogger(__name__)


def create_app(
    app_settings: AppSettings | None = None,
    *,
    permit_source: AbstractPermitSource | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    fault_injector: FaultInjector | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Collaborators not passed in are built from settings. Each is created once
    here and shared by reference with every request via ``app.state``.

    Args:
        app_settings: Application settings; defaults to the global settings.
        permit_source: Supplier of the permit collection.
        rate_limiter: Process-wide admission limiter.
        fault_injector: Random failure source.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    cfg = app_settings or settings.app

    app = FastAPI(
        title="Permits API",
        description=(
            "Read-only API over building permit records: filtered, paginated "
            "listing and single-permit lookup. Requests are rate limited "
            "process-wide and a share of them fail on purpose to exercise "
            "client retry logic."
        ),
        version="0.1.0",
        openapi_tags=[
            {"name": "Permits", "description": "Permit listing and lookup."},
            {"name": "Health", "description": "Liveness and readiness checks."},
        ],
    )

    app.state.app_settings = cfg
    app.state.permit_source = permit_source or JsonFilePermitSource(cfg.permits_data_path)
    app.state.rate_limiter = rate_limiter or build_rate_limiter(cfg)
    app.state.fault_injector = fault_injector or build_fault_injector(cfg)

    if cfg.bypass_flags_enabled and settings.app_env == "production":
        logger.warning(
            "bypass_flags.enabled_in_production",
            extra={"hint": "set APP_BYPASS_FLAGS_ENABLED=false"},
        )

    # Middleware
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(permits_router, prefix="/v1")
    app.include_router(health_router)

    logger.info(
        "app.created",
        extra={
            "rate_limit_enabled": cfg.rate_limit_enabled,
            "rate_limit_requests": cfg.rate_limit_requests,
            "rate_limit_window_ms": cfg.rate_limit_window_ms,
            "fault_injection_enabled": cfg.fault_injection_enabled,
            "fault_injection_rate": cfg.fault_injection_rate,
            "bypass_flags_enabled": cfg.bypass_flags_enabled,
        },
    )
    return app
