"""Background sweep of expired pastes for the in-memory store.

Redis expires keys natively, so the reaper is only started for the
in-memory backend. It runs as an asyncio task owned by the application
lifespan.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from quickpaste.adapters.store.in_memory import InMemoryPasteStore

logger = logging.getLogger(__name__)


class PasteReaper:
    """Periodically evicts expired entries from an ``InMemoryPasteStore``."""

    def __init__(self, store: InMemoryPasteStore, *, interval_seconds: float = 300) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._store = store
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="paste-reaper")
        logger.info("store.reaper_started", extra={"interval_s": self._interval})

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("store.reaper_stopped")

    def run_once(self) -> int:
        """Sweep once and return how many pastes were evicted."""
        removed = self._store.reap_expired()
        if removed:
            logger.info(
                "store.reaped",
                extra={"removed": removed, "entries": len(self._store)},
            )
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.run_once()
            except Exception:
                # Keep sweeping on the next tick
                logger.exception("store.reaper_failed")
