"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return the same flat JSON body:
``{"code": ..., "message": ..., "errors": [...]}``.

Design:
- AppError subclasses → their own HTTP status (400, 404, 429, 500)
- Undefined routes/methods → 404 notFound
- Request validation errors → 400 validationError
- Unexpected Exception → generic 500 (safety net, nothing leaked)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import AppError, ErrorCode, FieldError
from app.core.logging import get_request_id
from app.schemas.errors import ErrorResponse

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "The requested resource was not found"
SERVER_ERROR_MESSAGE = "An unexpected error occurred"

_STATUS_TO_CODE = {
    400: ErrorCode.VALIDATION_ERROR,
    404: ErrorCode.NOT_FOUND,
    429: ErrorCode.RATE_LIMIT_EXCEEDED,
}


def _error_response(status_code: int, body: ErrorResponse, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.to_content(), headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    The HTTP status comes from the error class (``http_status``). Client
    errors are logged at warning level, server errors at error level.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error body.
    """
    status_code = exc.http_status
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code.value,
            "error_message": exc.message,
            "status_code": status_code,
            "field_error_count": len(exc.errors or []),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )
    return _error_response(status_code, ErrorResponse.from_app_error(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Map framework HTTP errors onto the closed error-code set.

    Unknown paths and unsupported methods both answer 404 notFound.
    """
    if exc.status_code in (404, 405):
        body = ErrorResponse(code=ErrorCode.NOT_FOUND, message=NOT_FOUND_MESSAGE)
        return _error_response(404, body)

    code = _STATUS_TO_CODE.get(exc.status_code, ErrorCode.SERVER_ERROR)
    if code is ErrorCode.SERVER_ERROR:
        return _error_response(500, ErrorResponse(code=code, message=SERVER_ERROR_MESSAGE))
    return _error_response(
        exc.status_code,
        ErrorResponse(code=code, message=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI parameter validation failures as validationError."""
    field_errors = [
        FieldError(
            field=".".join(str(part) for part in err.get("loc", ())[1:]) or "request",
            message=err.get("msg", "Invalid value"),
        )
        for err in exc.errors()
    ]
    app_error = AppError(
        code=ErrorCode.VALIDATION_ERROR,
        message="Invalid request parameters",
        errors=field_errors,
    )
    return _error_response(400, ErrorResponse.from_app_error(app_error))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic
    message. No exception text or stack trace reaches the client.

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with a generic serverError body.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )
    body = ErrorResponse(code=ErrorCode.SERVER_ERROR, message=SERVER_ERROR_MESSAGE)
    return _error_response(500, body)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app.

    Must be called during app initialization. Specific handlers are
    registered before the general fallback.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
