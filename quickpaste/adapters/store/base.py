"""Paste store interface.

The service depends on this abstraction only; the concrete backend (in-memory
or Redis) is chosen once at startup by the factory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from quickpaste.schemas.paste import Paste


def utc_now() -> datetime:
    """Timezone-aware current time, the default clock for stores and services."""
    return datetime.now(timezone.utc)


class AbstractPasteStore(ABC):
    """Key-value persistence for pastes with per-key expiration."""

    @abstractmethod
    async def exists(self, paste_id: str) -> bool:
        """Return True if a paste is stored under ``paste_id``."""
        raise NotImplementedError

    @abstractmethod
    async def put(self, paste: Paste, ttl_seconds: int | None = None) -> None:
        """Insert a paste unless its identifier is already taken.

        The check and the insert must be a single atomic step.

        Args:
            paste: Paste to persist, keyed by ``paste.id``.
            ttl_seconds: Lifetime in seconds. None means "never expires"; the
                backend still applies its retention ceiling.

        Raises:
            PasteAlreadyExistsError: If the identifier is in use.
            CapacityExceededError: If the backend refuses new entries.
            StoreBackendError: If the backend fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def get(self, paste_id: str) -> Paste | None:
        """Fetch a paste, deleting and hiding it if it has already expired."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, paste_id: str) -> None:
        """Remove a paste. Deleting a missing id is not an error."""
        raise NotImplementedError

    async def ping(self) -> bool:
        """Report whether the backend is reachable."""
        return True

    async def close(self) -> None:
        """Release backend resources."""
        return None
