"""Fixed in-memory permit collection (tests and demos)."""

from __future__ import annotations

from typing import Iterable

from app.adapters.permit_source.base import AbstractPermitSource
from app.schemas.permit import Permit


class InMemoryPermitSource(AbstractPermitSource):
    """Serve a permit collection held in memory."""

    def __init__(self, permits: Iterable[Permit]) -> None:
        self._permits = tuple(permits)

    def load(self) -> list[Permit]:
        return list(self._permits)
