"""Rate limiting dependency for the paste write path.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: routes depend on a dependency function only.
- Swap-friendly: the limiter lives on ``app.state`` behind an abstract
  interface, so a shared backend can be injected by the app factory.

Client identity:
- First address of ``X-Forwarded-For``, then ``X-Real-IP``, then the socket
  peer, else a shared ``unknown`` bucket.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request

from quickpaste.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from quickpaste.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from quickpaste.core.config import RateLimitSettings, settings
from quickpaste.core.errors import RateLimitedError

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def build_rate_limiter(rate_settings: RateLimitSettings | None = None) -> AbstractRateLimiter:
    """Create the process-local limiter from configuration."""
    cfg = rate_settings or settings.rate_limit
    return InMemoryFixedWindowRateLimiter(
        limit=cfg.requests,
        window_seconds=cfg.window_seconds,
    )


def client_key_from_request(request: Request) -> str:
    """Derive the limiter key for the current request.

    Args:
        request: FastAPI request.

    Returns:
        str: Client address, or ``"unknown"`` when none can be determined.
    """

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = (request.headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host

    return UNKNOWN_CLIENT


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


async def enforce_rate_limit(request: Request) -> RateLimitResult | None:
    """FastAPI dependency enforcing the per-client write budget.

    Consumes 1 unit from the requester's budget and returns the result so the
    route can echo ``X-RateLimit-*`` headers. Returns None when disabled.

    Raises:
        RateLimitedError: When the client exceeded its budget (HTTP 429).
    """

    if not settings.rate_limit.enabled:
        return None

    limiter: AbstractRateLimiter = request.app.state.rate_limiter
    key = client_key_from_request(request)
    key_hash = _hash_limiter_key(key)
    window_s = settings.rate_limit.window_seconds

    result = limiter.consume(key)
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
                "window_s": window_s,
            },
        )
        return result

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "limit": result.limit,
            "window_s": window_s,
            "retry_after_s": result.retry_after_seconds,
        },
    )
    raise RateLimitedError(
        code="rate_limited",
        message="Too many requests. Please try again later.",
        details={"limit": result.limit, "retry_after": window_s},
    )
