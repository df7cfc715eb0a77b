"""JSON file permit source.

The file is re-read on every call so edits to the data file are picked up
without a restart. Permits are immutable pydantic models, so callers cannot
mutate what they receive.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from app.adapters.permit_source.base import AbstractPermitSource
from app.core.errors import ErrorCode, PermitSourceError
from app.schemas.permit import Permit

logger = logging.getLogger(__name__)

_PERMITS_ADAPTER = TypeAdapter(list[Permit])


class JsonFilePermitSource(AbstractPermitSource):
    """Load permits from a JSON array on disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> list[Permit]:
        """Read, parse and validate the permit file.

        Returns:
            Permits in file order.

        Raises:
            PermitSourceError: On missing/unreadable file, malformed JSON, or
                records that do not match the Permit schema.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            self._log_failure("read_error", exc)
            raise PermitSourceError(
                code=ErrorCode.SERVER_ERROR,
                message="Permit data could not be read",
            ) from exc

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            self._log_failure("invalid_json", exc)
            raise PermitSourceError(
                code=ErrorCode.SERVER_ERROR,
                message="Permit data is not valid JSON",
            ) from exc

        try:
            permits = _PERMITS_ADAPTER.validate_python(payload)
        except ValidationError as exc:
            self._log_failure("schema_mismatch", exc, error_count=exc.error_count())
            raise PermitSourceError(
                code=ErrorCode.SERVER_ERROR,
                message="Permit data does not match the expected schema",
            ) from exc

        logger.debug(
            "permit_source.loaded",
            extra={"path": str(self._path), "permit_count": len(permits)},
        )
        return permits

    def _log_failure(self, reason: str, exc: Exception, **extra: object) -> None:
        logger.error(
            "permit_source.load_failed",
            extra={
                "path": str(self._path),
                "reason": reason,
                "error_type": type(exc).__name__,
                **extra,
            },
        )
