from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from app.adapters.permit_source.base import AbstractPermitSource
from app.api.dependencies import get_permit_source

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check.

    Returns a static status response; does not touch the permit source.
    Not subject to rate limiting or fault injection.

    Returns:
        dict: A dictionary with a single "status" key set to "ok".
    """

    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(
    permit_source: AbstractPermitSource = Depends(get_permit_source),
) -> dict:
    """Readiness check: the permit collection must load.

    A load failure propagates as PermitSourceError and is rendered as a 500
    serverError by the global handlers.
    """

    permits = await run_in_threadpool(permit_source.load)
    return {"status": "ok", "permitCount": len(permits)}
