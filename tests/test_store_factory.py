"""Tests for configuration-driven construction of stores and limiters."""

import pytest

from quickpaste.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from quickpaste.adapters.store import InMemoryPasteStore, RedisPasteStore, create_paste_store
from quickpaste.core.config import RateLimitSettings, StoreSettings
from quickpaste.core.errors import ValidationAppError
from quickpaste.core.rate_limit import build_rate_limiter


def test_memory_backend_uses_configured_limits() -> None:
    store = create_paste_store(
        StoreSettings(backend="memory", max_entries=42, max_retention_seconds=3600)
    )

    assert isinstance(store, InMemoryPasteStore)
    assert store.max_entries == 42
    assert store.max_retention_seconds == 3600


def test_backend_name_is_case_insensitive() -> None:
    assert isinstance(create_paste_store(StoreSettings(backend="MEMORY")), InMemoryPasteStore)


def test_redis_backend_builds_client_without_connecting() -> None:
    store = create_paste_store(
        StoreSettings(backend="redis", redis_url="redis://localhost:6399/0", key_prefix="test:")
    )

    assert isinstance(store, RedisPasteStore)


def test_unknown_backend_raises() -> None:
    with pytest.raises(ValidationAppError) as exc_info:
        create_paste_store(StoreSettings(backend="sqlite"))

    assert exc_info.value.code == "store_unknown_backend"


def test_build_rate_limiter_from_settings() -> None:
    limiter = build_rate_limiter(RateLimitSettings(requests=3, window_seconds=30))

    assert isinstance(limiter, InMemoryFixedWindowRateLimiter)
    assert limiter.limit == 3
    assert limiter.window_seconds == 30
