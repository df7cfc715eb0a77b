"""Tests for global exception handlers.

Validates that all exception types are rendered as the flat error body with
the right HTTP status and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, Query
from fastapi.testclient import TestClient

from app.core.errors import (
    AppError,
    ErrorCode,
    FieldError,
    NotFoundAppError,
    PermitSourceError,
    RateLimitAppError,
    ServerAppError,
    ValidationAppError,
)
from app.core.exception_handlers import general_exception_handler, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestAppErrorHandler:
    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (ValidationAppError(code=ErrorCode.VALIDATION_ERROR, message="bad"), 400),
            (NotFoundAppError(code=ErrorCode.NOT_FOUND, message="missing"), 404),
            (RateLimitAppError(code=ErrorCode.RATE_LIMIT_EXCEEDED, message="slow down"), 429),
            (ServerAppError(code=ErrorCode.SERVER_ERROR, message="oops"), 500),
            (PermitSourceError(code=ErrorCode.SERVER_ERROR, message="no data"), 500),
        ],
    )
    def test_status_follows_error_class(self, client, app_with_handlers, error, status_code):
        @app_with_handlers.get("/raise")
        async def raise_error():
            raise error

        response = client.get("/raise")

        assert response.status_code == status_code
        assert response.json() == {"code": error.code.value, "message": error.message}

    def test_validation_error_includes_field_errors(self, client, app_with_handlers):
        @app_with_handlers.get("/invalid")
        async def invalid():
            raise ValidationAppError(
                code=ErrorCode.VALIDATION_ERROR,
                message="Invalid query parameters",
                errors=[
                    FieldError(field="page", message="page must be an integer"),
                    FieldError(field="status", message="status must be one of: Pending"),
                ],
            )

        response = client.get("/invalid")

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "page", "message": "page must be an integer"},
            {"field": "status", "message": "status must be one of: Pending"},
        ]

    def test_str_of_error_is_message(self):
        error = AppError(code=ErrorCode.SERVER_ERROR, message="readable")

        assert str(error) == "readable"


class TestFrameworkErrors:
    def test_unknown_route_is_not_found(self, client):
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert response.json() == {
            "code": "notFound",
            "message": "The requested resource was not found",
        }

    def test_request_validation_maps_to_validation_error(self, client, app_with_handlers):
        @app_with_handlers.get("/typed")
        async def typed(limit: int = Query(...)):
            return {"limit": limit}

        response = client.get("/typed?limit=abc")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "validationError"
        assert body["errors"][0]["field"] == "limit"


class TestGeneralExceptionHandler:
    def test_unexpected_exception_returns_generic_500(self, client, app_with_handlers):
        @app_with_handlers.get("/boom")
        async def boom():
            raise RuntimeError("database connection failed")

        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {"code": "serverError", "message": "An unexpected error occurred"}

    def test_general_exception_handler_never_leaks_stack_trace(self):
        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = ValueError("Test error with details")
        response = asyncio.run(general_exception_handler(request, exc))

        response_text = bytes(response.body).decode()
        assert json.loads(response_text)["code"] == "serverError"
        assert "Traceback" not in response_text
        assert "Test error with details" not in response_text
        assert "ValueError" not in response_text


def test_setup_exception_handlers_registers_handlers(app_with_handlers: FastAPI):
    assert AppError in app_with_handlers.exception_handlers
    assert Exception in app_with_handlers.exception_handlers
