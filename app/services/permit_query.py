"""Parse raw query parameters into a typed permit query.

Parsing is explicit rather than schema-driven: each parameter has its own
parser and every failing field is reported at once. Callers get back either
``Ok(value)`` or ``Err(errors)`` and decide how to surface the failure.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Generic, Mapping, Sequence, TypeVar, Union

from app.core.errors import FieldError
from app.schemas.permit import PermitStatus

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 5
# Hard cap, not configurable.
MAX_PER_PAGE = 5

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
# Longer digit strings are rejected before conversion.
_MAX_INT_DIGITS = 15
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_UUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)

_STATUS_VALUES = ", ".join(status.value for status in PermitStatus)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    errors: list[FieldError]


ParseResult = Union[Ok, Err]


@dataclass(frozen=True)
class PermitQuery:
    """Validated listing query with defaults applied.

    Attributes:
        page: 1-based page number.
        per_page: Page size in [1, MAX_PER_PAGE].
        submitted_after: Inclusive lower bound on submission date.
        submitted_before: Inclusive upper bound on submission date.
        status: Exact status to match.
    """

    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE
    submitted_after: date | None = None
    submitted_before: date | None = None
    status: PermitStatus | None = None


class _FieldInvalid(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _single_value(raw: Mapping[str, Any], name: str) -> str | None:
    """Return the parameter's only value, or None when absent or empty."""
    value = raw.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        values = list(value)
        if len(values) > 1:
            raise _FieldInvalid(f"{name} must be provided at most once")
        value = values[0] if values else ""
    return value or None


def _parse_int(name: str, text: str, *, minimum: int, maximum: int | None = None) -> int:
    if not _INTEGER_RE.fullmatch(text):
        raise _FieldInvalid(f"{name} must be an integer")
    if len(text.lstrip("+-")) > _MAX_INT_DIGITS:
        raise _FieldInvalid(f"{name} is out of range")
    number = int(text)
    if number < minimum:
        raise _FieldInvalid(f"{name} must be greater than or equal to {minimum}")
    if maximum is not None and number > maximum:
        raise _FieldInvalid(f"{name} must be less than or equal to {maximum}")
    return number


def _parse_date(name: str, text: str) -> date:
    if not _DATE_RE.fullmatch(text):
        raise _FieldInvalid(f"{name} must be in YYYY-MM-DD format")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise _FieldInvalid(f"{name} must be a valid calendar date") from None


def _parse_status(name: str, text: str) -> PermitStatus:
    try:
        return PermitStatus(text)
    except ValueError:
        raise _FieldInvalid(f"{name} must be one of: {_STATUS_VALUES}") from None


def parse_permit_query(raw: Mapping[str, str | Sequence[str]]) -> ParseResult:
    """Validate listing query parameters.

    Args:
        raw: Query parameters; values are a string or a list of strings when a
            key repeats. Unknown keys are ignored.

    Returns:
        Ok(PermitQuery) on success, Err(field errors) otherwise.
    """

    parsers = {
        "page": lambda name, text: _parse_int(name, text, minimum=1),
        "perPage": lambda name, text: _parse_int(name, text, minimum=1, maximum=MAX_PER_PAGE),
        "submittedAfter": _parse_date,
        "submittedBefore": _parse_date,
        "status": _parse_status,
    }

    parsed: dict[str, Any] = {}
    errors: list[FieldError] = []
    for name, parser in parsers.items():
        try:
            text = _single_value(raw, name)
            if text is not None:
                parsed[name] = parser(name, text)
        except _FieldInvalid as exc:
            errors.append(FieldError(field=name, message=exc.message))

    if errors:
        return Err(errors)

    return Ok(
        PermitQuery(
            page=parsed.get("page", DEFAULT_PAGE),
            per_page=parsed.get("perPage", DEFAULT_PER_PAGE),
            submitted_after=parsed.get("submittedAfter"),
            submitted_before=parsed.get("submittedBefore"),
            status=parsed.get("status"),
        )
    )


def parse_permit_id(permit_id: str) -> ParseResult:
    """Check that a path identifier is canonical hyphenated UUID text."""
    if _UUID_RE.fullmatch(permit_id):
        return Ok(permit_id)
    return Err([FieldError(field="permitId", message="permitId must be a valid UUID")])
