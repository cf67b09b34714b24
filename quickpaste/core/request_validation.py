"""Request body validation for the paste JSON API."""
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Request

from quickpaste.core.config import settings
from quickpaste.core.errors import (
    ContentTooLargeError,
    UnsupportedMediaTypeError,
    ValidationAppError,
)

logger = logging.getLogger(__name__)

# A code point outside the BMP escapes to a 12-byte surrogate pair (\uXXXX\uXXXX)
_MAX_BYTES_PER_CHAR = 12


def max_body_bytes() -> int:
    """Largest raw body accepted before parsing."""
    cfg = settings.paste
    return cfg.max_content_chars * _MAX_BYTES_PER_CHAR + cfg.body_overhead_bytes


def _too_large(max_bytes: int) -> ContentTooLargeError:
    return ContentTooLargeError(
        code="content_too_large",
        message=f"Content too large. Maximum size is {settings.paste.max_content_chars} characters",
        details={"max_bytes": max_bytes},
    )


async def read_json_body(request: Request) -> dict[str, Any]:
    """Read and parse a JSON object body enforcing the size limit.

    Checks Content-Length when the client sends it, then enforces the limit
    again while streaming so a lying header cannot exhaust memory.

    Args:
        request: Incoming request.

    Returns:
        The decoded JSON object.

    Raises:
        UnsupportedMediaTypeError: If Content-Type is not application/json.
        ContentTooLargeError: If the raw body exceeds the byte ceiling.
        ValidationAppError: If the body is not a JSON object.
    """
    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type.lower():
        raise UnsupportedMediaTypeError(
            code="unsupported_media_type",
            message="Content-Type must be application/json",
        )

    max_bytes = max_body_bytes()

    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        logger.warning(
            "request_validation.rejected_by_header",
            extra={"content_length": int(declared), "max_bytes": max_bytes},
        )
        raise _too_large(max_bytes)

    size = 0
    chunks: list[bytes] = []
    async for chunk in request.stream():
        size += len(chunk)
        if size > max_bytes:
            logger.warning(
                "request_validation.rejected_by_stream",
                extra={"size": size, "max_bytes": max_bytes},
            )
            raise _too_large(max_bytes)
        chunks.append(chunk)

    try:
        payload = json.loads(b"".join(chunks))
    except ValueError as exc:
        raise ValidationAppError(
            code="invalid_json",
            message="Invalid JSON body",
        ) from exc

    if not isinstance(payload, dict):
        raise ValidationAppError(
            code="invalid_json",
            message="Request body must be a JSON object",
        )

    return payload
