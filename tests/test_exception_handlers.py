"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from quickpaste.core.errors import (
    AppError,
    CapacityExceededError,
    ContentTooLargeError,
    IdentifierExhaustedError,
    PasteNotFoundError,
    RateLimitedError,
    StoreBackendError,
    UnsupportedMediaTypeError,
    ValidationAppError,
)
from quickpaste.core.exception_handlers import setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client with handlers enabled."""
    return TestClient(app_with_handlers)


def _raise_on(app: FastAPI, path: str, exc: Exception) -> None:
    @app.get(path)
    async def endpoint():
        raise exc


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (ValidationAppError(code="content_empty", message="Content cannot be empty"), 400),
            (ContentTooLargeError(code="content_too_large", message="Content too large"), 413),
            (UnsupportedMediaTypeError(code="unsupported_media_type", message="Use JSON"), 415),
            (PasteNotFoundError(code="paste_not_found", message="Paste not found"), 404),
        ],
    )
    def test_client_errors_keep_their_message(
        self, client: TestClient, app_with_handlers: FastAPI, exc: AppError, status: int
    ) -> None:
        _raise_on(app_with_handlers, "/boom", exc)

        response = client.get("/boom")

        assert response.status_code == status
        data = response.json()
        assert data["error"]["code"] == exc.code
        assert data["error"]["message"] == exc.message
        assert "request_id" in data["error"]

    def test_validation_error_includes_details(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        _raise_on(
            app_with_handlers,
            "/too-big",
            ContentTooLargeError(
                code="content_too_large",
                message="Content too large",
                details={"max_chars": 500000, "actual_chars": 500001},
            ),
        )

        data = client.get("/too-big").json()

        assert data["error"]["details"]["max_chars"] == 500000
        assert data["error"]["details"]["actual_chars"] == 500001

    def test_rate_limited_returns_429_with_retry_after(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        _raise_on(
            app_with_handlers,
            "/limited",
            RateLimitedError(
                code="rate_limited",
                message="Too many requests. Please try again later.",
                details={"limit": 10, "retry_after": 60},
            ),
        )

        response = client.get("/limited")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert response.headers["X-RateLimit-Limit"] == "10"
        assert response.headers["X-RateLimit-Remaining"] == "0"

    @pytest.mark.parametrize(
        "exc",
        [
            IdentifierExhaustedError(code="identifier_exhausted", message="Failed to generate unique ID"),
            StoreBackendError(code="store_backend_error", message="redis at 10.0.0.5 refused", details={"backend": "redis"}),
            AppError(code="whatever", message="internal detail"),
        ],
    )
    def test_server_errors_are_generic(self, client: TestClient, app_with_handlers: FastAPI, exc: AppError) -> None:
        _raise_on(app_with_handlers, "/fail", exc)

        response = client.get("/fail")

        assert response.status_code == 500
        data = response.json()
        assert data["error"]["code"] == "internal_server_error"
        assert data["error"]["message"] == "Internal server error"
        assert "details" not in data["error"]
        assert exc.message not in response.text

    def test_capacity_exceeded_returns_503_try_later(self, client: TestClient, app_with_handlers: FastAPI) -> None:
        _raise_on(
            app_with_handlers,
            "/full",
            CapacityExceededError(code="store_capacity_exceeded", message="full", details={"max_entries": 3}),
        )

        response = client.get("/full")

        assert response.status_code == 503
        assert "try again later" in response.json()["error"]["message"]


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI) -> None:
        assert Exception in app_with_handlers.exception_handlers

    def test_general_exception_handler_never_leaks_details(self) -> None:
        from quickpaste.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = RuntimeError("redis connection failed at 10.0.0.5")
        response = asyncio.run(general_exception_handler(request, exc))

        response_text = bytes(response.body).decode()
        data = json.loads(response_text)
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "redis" not in response_text
        assert "Traceback" not in response_text
        assert "RuntimeError" not in response_text

    def test_unhandled_exception_through_app(self, app_with_handlers: FastAPI) -> None:
        _raise_on(app_with_handlers, "/crash", KeyError("secret"))
        client = TestClient(app_with_handlers, raise_server_exceptions=False)

        response = client.get("/crash")

        assert response.status_code == 500
        assert "secret" not in response.text


def test_multiple_handler_setups_does_not_fail() -> None:
    app = FastAPI()

    setup_exception_handlers(app)
    setup_exception_handlers(app)

    assert AppError in app.exception_handlers
