"""Permit source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.schemas.permit import Permit


class AbstractPermitSource(ABC):
    """Supplies the full, schema-valid permit collection on demand."""

    @abstractmethod
    def load(self) -> list[Permit]:
        """Return every permit in storage order.

        Raises:
            PermitSourceError: If the collection cannot be read or parsed.
        """
        raise NotImplementedError
