"""Pydantic schemas for error responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.core.errors import AppError, ErrorCode


class FieldErrorModel(BaseModel):
    field: str = Field(..., description="Dotted parameter name.")
    message: str


class ErrorResponse(BaseModel):
    """Uniform JSON body for every non-2xx response."""

    code: ErrorCode = Field(..., description="Machine-readable error code.")
    message: str = Field(..., description="Human-readable message.")
    errors: list[FieldErrorModel] | None = Field(
        default=None,
        description="Field-level breakdown, present on validation failures.",
    )

    @classmethod
    def from_app_error(cls, exc: AppError) -> "ErrorResponse":
        errors = None
        if exc.errors:
            errors = [FieldErrorModel(field=e.field, message=e.message) for e in exc.errors]
        return cls(code=exc.code, message=exc.message, errors=errors)

    def to_content(self) -> dict:
        """Serialize for a JSONResponse, omitting an absent ``errors`` list."""
        return self.model_dump(mode="json", exclude_none=True)
