"""Application-level exception types.

Domain errors raised by the store, service and rate limiter. The exception
handlers translate them to HTTP responses; only validation errors carry a
client-facing message, everything else is reported generically.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    max_chars: int
    actual_chars: int
    attempts: int
    max_entries: int
    max_bytes: int
    limit: int
    retry_after: int
    backend: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when submitted input is malformed or out of bounds."""


class ContentTooLargeError(ValidationAppError):
    """Raised when paste content exceeds the configured ceiling."""


class RateLimitedError(AppError):
    """Raised when a client exhausts its request budget."""


class PasteAlreadyExistsError(AppError):
    """Raised by a store when the identifier is already taken."""


class IdentifierExhaustedError(AppError):
    """Raised when no free identifier was found within the attempt budget."""


class CapacityExceededError(AppError):
    """Raised when the store refuses new pastes because it is full."""


class StoreBackendError(AppError):
    """Raised when the storage backend fails (network, decoding, ...)."""


class UnsupportedMediaTypeError(ValidationAppError):
    """Raised when the request body is not declared as JSON."""


class PasteNotFoundError(AppError):
    """Raised by the JSON API when a paste is missing, expired or malformed."""
