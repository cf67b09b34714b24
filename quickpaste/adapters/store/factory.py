"""Factory for the paste store selected by configuration."""

from __future__ import annotations

from quickpaste.adapters.store.base import AbstractPasteStore
from quickpaste.adapters.store.in_memory import InMemoryPasteStore
from quickpaste.adapters.store.redis_store import RedisPasteStore
from quickpaste.core.config import StoreSettings, settings
from quickpaste.core.errors import ValidationAppError


def create_paste_store(store_settings: StoreSettings | None = None) -> AbstractPasteStore:
    """Instantiate the configured paste store backend.

    Reads ``settings.store`` unless explicit settings are passed. The backend
    is decided here, once, so nothing else inspects the environment.

    Returns:
        AbstractPasteStore: Ready-to-use store instance.

    Raises:
        ValidationAppError: If the configured backend is unknown.
    """
    cfg = store_settings or settings.store
    backend = cfg.backend.lower()

    if backend == "memory":
        return InMemoryPasteStore(
            max_entries=cfg.max_entries,
            max_retention_seconds=cfg.max_retention_seconds,
        )

    if backend == "redis":
        return RedisPasteStore.from_url(
            cfg.redis_url,
            socket_timeout=cfg.redis_socket_timeout_seconds,
            key_prefix=cfg.key_prefix,
            max_retention_seconds=cfg.max_retention_seconds,
        )

    raise ValidationAppError(
        code="store_unknown_backend",
        message=f"Unknown store backend: '{backend}'. Supported backends: memory, redis",
    )
