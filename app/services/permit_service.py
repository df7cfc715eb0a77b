"""Filter, paginate and look up permits.

Pure functions over an already-loaded permit collection; loading and admission
control happen in the HTTP layer.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, Sequence
from urllib.parse import urlencode

from app.core.errors import ErrorCode, NotFoundAppError
from app.schemas.pagination import PaginatedPermits, PaginationLinks, PaginationMeta
from app.schemas.permit import Permit, SimplifiedPermit
from app.services.permit_query import PermitQuery

logger = logging.getLogger(__name__)

PERMITS_PATH = "/v1/permits"

PermitPredicate = Callable[[Permit], bool]


def _build_predicates(query: PermitQuery) -> list[PermitPredicate]:
    """Return one predicate per active filter. Absent filters add none."""
    predicates: list[PermitPredicate] = []
    if query.submitted_after is not None:
        after = query.submitted_after
        predicates.append(lambda permit: permit.date_submitted >= after)
    if query.submitted_before is not None:
        before = query.submitted_before
        predicates.append(lambda permit: permit.date_submitted <= before)
    if query.status is not None:
        status = query.status
        predicates.append(lambda permit: permit.status == status)
    return predicates


def filter_permits(permits: Iterable[Permit], query: PermitQuery) -> list[Permit]:
    """Keep permits matching every active filter, preserving input order.

    Dates are compared as ``datetime.date`` values, not strings.
    """
    predicates = _build_predicates(query)
    return [permit for permit in permits if all(check(permit) for check in predicates)]


def count_pages(total: int, per_page: int) -> int:
    """Return ceil(total / per_page), which is 0 for an empty result."""
    if total <= 0:
        return 0
    return math.ceil(total / per_page)


def build_link(query: PermitQuery, page: int, base_path: str = PERMITS_PATH) -> str:
    """Build a listing URL for ``page`` that keeps perPage and active filters."""
    params: list[tuple[str, str]] = [("page", str(page)), ("perPage", str(query.per_page))]
    if query.submitted_after is not None:
        params.append(("submittedAfter", query.submitted_after.isoformat()))
    if query.submitted_before is not None:
        params.append(("submittedBefore", query.submitted_before.isoformat()))
    if query.status is not None:
        params.append(("status", query.status.value))
    return f"{base_path}?{urlencode(params)}"


def build_links(query: PermitQuery, total_pages: int, base_path: str = PERMITS_PATH) -> PaginationLinks:
    next_link = build_link(query, query.page + 1, base_path) if query.page < total_pages else None
    prev_link = build_link(query, query.page - 1, base_path) if query.page > 1 else None
    return PaginationLinks(
        self_link=build_link(query, query.page, base_path),
        next=next_link,
        prev=prev_link,
    )


def paginate_permits(
    permits: Sequence[Permit],
    query: PermitQuery,
    base_path: str = PERMITS_PATH,
) -> PaginatedPermits:
    """Filter the collection and cut out the requested page.

    A page past the end is not an error; it yields an empty ``data`` list
    with the same metadata as any other page.

    Args:
        permits: Full collection in storage order.
        query: Validated listing query.
        base_path: Path used when building navigation links.

    Returns:
        PaginatedPermits with simplified records, metadata and links.
    """

    matching = filter_permits(permits, query)
    total = len(matching)
    total_pages = count_pages(total, query.per_page)

    start = (query.page - 1) * query.per_page
    end = min(start + query.per_page, total)
    page_items = [SimplifiedPermit.from_permit(permit) for permit in matching[start:end]]

    logger.info(
        "permits.listed",
        extra={
            "page": query.page,
            "per_page": query.per_page,
            "total": total,
            "total_pages": total_pages,
            "returned": len(page_items),
            "status_filter": query.status.value if query.status else None,
        },
    )

    return PaginatedPermits(
        data=page_items,
        meta=PaginationMeta(
            current_page=query.page,
            total_pages=total_pages,
            per_page=query.per_page,
            total=total,
        ),
        links=build_links(query, total_pages, base_path),
    )


def find_permit(permits: Iterable[Permit], permit_id: str) -> Permit:
    """Return the permit whose identifier equals ``permit_id`` exactly.

    Raises:
        NotFoundAppError: If no permit has that identifier.
    """
    for permit in permits:
        if permit.permit_id == permit_id:
            return permit

    logger.info("permit.not_found", extra={"permit_id": permit_id})
    raise NotFoundAppError(
        code=ErrorCode.NOT_FOUND,
        message=f"Permit with ID {permit_id} not found",
    )
