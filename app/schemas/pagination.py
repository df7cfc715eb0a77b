"""Pydantic schemas for paginated permit listings."""

from __future__ import annotations

from pydantic import Field

from app.schemas.permit import CamelModel, SimplifiedPermit


class PaginationMeta(CamelModel):
    """Pagination metadata computed after filtering."""

    current_page: int = Field(..., ge=1, description="Effective page number.")
    total_pages: int = Field(..., ge=0, description="ceil(total / perPage); 0 when empty.")
    per_page: int = Field(..., ge=1, le=5, description="Effective page size.")
    total: int = Field(..., ge=0, description="Number of records matching the filters.")


class PaginationLinks(CamelModel):
    """Navigation links. ``next``/``prev`` are omitted when no such page exists."""

    self_link: str = Field(..., alias="self")
    next: str | None = None
    prev: str | None = None


class PaginatedPermits(CamelModel):
    """One page of simplified permits plus navigation."""

    data: list[SimplifiedPermit]
    meta: PaginationMeta
    links: PaginationLinks
