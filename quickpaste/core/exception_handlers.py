"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes and traceability.

Design:
- Client errors (validation, size, media type, rate limit, not found) carry
  their specific message.
- Server-side errors (identifier exhaustion, store failures) are logged with
  detail and answered with a generic message.
- All responses include request_id for distributed tracing.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from quickpaste.core.errors import (
    AppError,
    CapacityExceededError,
    ContentTooLargeError,
    PasteNotFoundError,
    RateLimitedError,
    UnsupportedMediaTypeError,
    ValidationAppError,
)
from quickpaste.core.logging import get_request_id

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"
CAPACITY_MESSAGE = "The service is at capacity. Please try again later."


def status_code_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code."""
    if isinstance(exc, ContentTooLargeError):
        return 413
    if isinstance(exc, UnsupportedMediaTypeError):
        return 415
    if isinstance(exc, ValidationAppError):
        return 400
    if isinstance(exc, PasteNotFoundError):
        return 404
    if isinstance(exc, RateLimitedError):
        return 429
    if isinstance(exc, CapacityExceededError):
        return 503
    return 500


def _rate_limit_headers(exc: RateLimitedError) -> dict[str, str]:
    details = exc.details or {}
    return {
        "Retry-After": str(details.get("retry_after", 60)),
        "X-RateLimit-Limit": str(details.get("limit", "")),
        "X-RateLimit-Remaining": "0",
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Response body:
    - error.code: Machine-readable error code
    - error.message: Human-readable message (generic for 5xx)
    - error.request_id: For distributed tracing
    - error.details: Structured context, client errors only

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    status_code = status_code_for(exc)
    is_server_error = status_code >= 500

    log = logger.error if is_server_error else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    if is_server_error:
        error_content = {
            "code": "service_unavailable" if status_code == 503 else "internal_server_error",
            "message": CAPACITY_MESSAGE if status_code == 503 else GENERIC_SERVER_ERROR,
            "request_id": get_request_id(),
        }
    else:
        error_content = {
            "code": exc.code,
            "message": exc.message,
            "request_id": get_request_id(),
        }
        if exc.details:
            error_content["details"] = exc.details

    headers = _rate_limit_headers(exc) if isinstance(exc, RateLimitedError) else None

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
        headers=headers,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic message.
    No stack traces or internal details reach the client.
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

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": GENERIC_SERVER_ERROR,
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
