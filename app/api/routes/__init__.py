from __future__ import annotations

from app.api.routes.health import router as health_router
from app.api.routes.permits import router as permits_router

__all__ = ["health_router", "permits_router"]
