"""In-memory paste store (single process).

Notes:
- Per-process only: every worker holds its own pastes, nothing survives a
  restart.
- Mutations never await between check and write, which makes them atomic
  under the asyncio scheduler. No lock is needed or used.
- Expired entries are removed lazily on access and by ``PasteReaper``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from quickpaste.adapters.store.base import AbstractPasteStore, utc_now
from quickpaste.core.errors import CapacityExceededError, PasteAlreadyExistsError
from quickpaste.schemas.paste import Paste

logger = logging.getLogger(__name__)


@dataclass
class _StoredPaste:
    paste: Paste
    retain_until: datetime


class InMemoryPasteStore(AbstractPasteStore):
    """Dict-backed store with a hard entry ceiling.

    Attributes:
        max_entries: Maximum number of pastes held at once.
        max_retention_seconds: Upper bound on how long any paste is kept,
            including pastes that never expire.
    """

    def __init__(
        self,
        *,
        max_entries: int = 100_000,
        max_retention_seconds: int = 30 * 24 * 60 * 60,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        if max_retention_seconds < 1:
            raise ValueError("max_retention_seconds must be >= 1")

        self.max_entries = max_entries
        self.max_retention_seconds = max_retention_seconds
        self._clock = clock
        self._entries: dict[str, _StoredPaste] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def exists(self, paste_id: str) -> bool:
        return self._live_entry(paste_id, self._clock()) is not None

    async def put(self, paste: Paste, ttl_seconds: int | None = None) -> None:
        now = self._clock()

        if self._live_entry(paste.id, now) is not None:
            raise PasteAlreadyExistsError(
                code="paste_already_exists",
                message="Paste identifier is already in use",
            )

        if len(self._entries) >= self.max_entries:
            self.reap_expired()
            if len(self._entries) >= self.max_entries:
                logger.error(
                    "store.capacity_exceeded",
                    extra={"entries": len(self._entries), "max_entries": self.max_entries},
                )
                raise CapacityExceededError(
                    code="store_capacity_exceeded",
                    message="Paste storage is full. Please try again later.",
                    details={"max_entries": self.max_entries},
                )

        retention = self.max_retention_seconds
        if ttl_seconds is not None:
            retention = min(ttl_seconds, retention)

        self._entries[paste.id] = _StoredPaste(
            paste=paste,
            retain_until=now + timedelta(seconds=retention),
        )

    async def get(self, paste_id: str) -> Paste | None:
        entry = self._live_entry(paste_id, self._clock())
        return entry.paste if entry else None

    async def delete(self, paste_id: str) -> None:
        self._entries.pop(paste_id, None)

    def reap_expired(self) -> int:
        """Evict every entry past its expiry or retention deadline.

        Returns:
            Number of evicted pastes.
        """
        now = self._clock()
        stale = [key for key, entry in self._entries.items() if self._is_stale(entry, now)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def _live_entry(self, paste_id: str, now: datetime) -> _StoredPaste | None:
        entry = self._entries.get(paste_id)
        if entry is None:
            return None
        if self._is_stale(entry, now):
            del self._entries[paste_id]
            return None
        return entry

    @staticmethod
    def _is_stale(entry: _StoredPaste, now: datetime) -> bool:
        return entry.retain_until <= now or entry.paste.is_expired(now)
