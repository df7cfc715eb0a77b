"""Permit listing and lookup endpoints.

Every route on this router runs the admission chain first, in order:
rate limiter, then fault injector. Only admitted, non-faulted requests load
the permit collection.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from app.adapters.permit_source.base import AbstractPermitSource
from app.api.dependencies import get_permit_source
from app.core.errors import ErrorCode, ValidationAppError
from app.core.fault_injection import inject_faults
from app.core.rate_limit import enforce_rate_limit
from app.schemas.errors import ErrorResponse
from app.schemas.pagination import PaginatedPermits
from app.schemas.permit import Permit
from app.services.permit_query import Err, parse_permit_id, parse_permit_query
from app.services.permit_service import PERMITS_PATH, find_permit, paginate_permits

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid parameters"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Server error"},
}

router = APIRouter(
    prefix="/permits",
    tags=["Permits"],
    dependencies=[Depends(enforce_rate_limit), Depends(inject_faults)],
    responses=_ERROR_RESPONSES,
)


@router.get(
    "",
    response_model=PaginatedPermits,
    response_model_exclude_none=True,
)
async def list_permits(
    request: Request,
    permit_source: AbstractPermitSource = Depends(get_permit_source),
) -> PaginatedPermits:
    """List permits, filtered and paginated.

    Query parameters (all optional): ``page`` (>= 1, default 1),
    ``perPage`` (1-5, default 5), ``submittedAfter`` and ``submittedBefore``
    (inclusive, YYYY-MM-DD), ``status`` (exact status name).

    Raises:
        ValidationAppError: 400 listing every invalid parameter.
    """
    query_params = request.query_params
    raw = {key: query_params.getlist(key) for key in query_params.keys()}

    result = parse_permit_query(raw)
    if isinstance(result, Err):
        raise ValidationAppError(
            code=ErrorCode.VALIDATION_ERROR,
            message="Invalid query parameters",
            errors=result.errors,
        )

    permits = await run_in_threadpool(permit_source.load)
    return paginate_permits(permits, result.value, base_path=PERMITS_PATH)


@router.get(
    "/{permit_id}",
    response_model=Permit,
    responses={404: {"model": ErrorResponse, "description": "Permit not found"}},
)
async def get_permit(
    permit_id: str,
    permit_source: AbstractPermitSource = Depends(get_permit_source),
) -> Permit:
    """Return the full permit record for ``permit_id``.

    Raises:
        ValidationAppError: 400 if ``permit_id`` is not a UUID.
        NotFoundAppError: 404 if no permit has that identifier.
    """
    result = parse_permit_id(permit_id)
    if isinstance(result, Err):
        raise ValidationAppError(
            code=ErrorCode.VALIDATION_ERROR,
            message=result.errors[0].message,
            errors=result.errors,
        )

    permits = await run_in_threadpool(permit_source.load)
    return find_permit(permits, result.value)
