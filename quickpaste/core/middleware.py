"""HTTP middleware: request correlation and response hardening.

``request_id_middleware``:
- Accepts incoming X-Request-ID header or generates a UUID
- Stores request_id in contextvars for access throughout the request lifecycle
- Injects request_id and total duration into response headers

``security_headers_middleware``:
- Answers 404 to common vulnerability-scanner probes before routing
- Adds anti-sniffing and framing headers to every response

Usage:
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import re
import time
import uuid

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

from quickpaste.core.config import settings
from quickpaste.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-XSS-Protection": "1; mode=block",
}

BLOCKED_PATH_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\.env",
        r"\.git",
        r"\.config",
        r"wp-admin",
        r"wp-login",
        r"phpmyadmin",
        r"\.php$",
        r"\.asp$",
        r"\.aspx$",
    )
)


def is_blocked_path(path: str) -> bool:
    """True if the path looks like a scanner probe."""
    return any(pattern.search(path) for pattern in BLOCKED_PATH_PATTERNS)


async def request_id_middleware(request: Request, call_next) -> Response:
    """HTTP middleware for request ID generation and propagation.

    If the client provides an X-Request-ID header (configurable via
    LOG_REQUEST_ID_HEADER), that value is used. Otherwise, a new UUID is
    generated. The id is stored in contextvars for log correlation and
    echoed back on the response together with the request duration.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with request_id and duration headers.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


async def security_headers_middleware(request: Request, call_next) -> Response:
    """Reject probe paths and add security headers to every response."""

    if is_blocked_path(request.url.path):
        logger.info("request.blocked_path", extra={"request_path": request.url.path})
        response: Response = PlainTextResponse("Not Found", status_code=404)
    else:
        response = await call_next(request)

    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response
