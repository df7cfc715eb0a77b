"""Request-scoped accessors for collaborators owned by the application."""

from __future__ import annotations

from fastapi import Request

from app.adapters.permit_source.base import AbstractPermitSource


def get_permit_source(request: Request) -> AbstractPermitSource:
    """Return the permit source configured by the app factory."""
    return request.app.state.permit_source
