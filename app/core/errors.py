"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses. Each error class
carries the HTTP status it maps to, so handlers never need a type switch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class ErrorCode(str, Enum):
    """Closed set of machine-readable error codes returned to clients."""

    VALIDATION_ERROR = "validationError"
    NOT_FOUND = "notFound"
    RATE_LIMIT_EXCEEDED = "rateLimitExceeded"
    SERVER_ERROR = "serverError"


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure.

    Attributes:
        field: Dotted parameter name (e.g. ``perPage``).
        message: Human-readable explanation.
    """

    field: str
    message: str


@dataclass(eq=False)
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        errors: Optional field-level breakdown (validation failures only).
    """

    code: ErrorCode
    message: str
    errors: list[FieldError] | None = None

    http_status: ClassVar[int] = 500

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when client input fails validation."""

    http_status = 400


class NotFoundAppError(AppError):
    """Raised when a requested resource does not exist."""

    http_status = 404


class RateLimitAppError(AppError):
    """Raised when admission control rejects a request."""

    http_status = 429


class ServerAppError(AppError):
    """Raised for server-side faults (injected or real)."""

    http_status = 500


class PermitSourceError(ServerAppError):
    """Raised when the permit collection cannot be loaded or parsed."""
