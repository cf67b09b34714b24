"""Redis paste store adapter.

Pastes are serialized as JSON under ``<prefix><id>`` and rely on Redis key
expiry for cleanup. Inserts use ``SET NX EX`` so concurrent writers racing on
the same identifier cannot overwrite each other.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from quickpaste.adapters.store.base import AbstractPasteStore, utc_now
from quickpaste.core.errors import PasteAlreadyExistsError, StoreBackendError
from quickpaste.schemas.paste import Paste

logger = logging.getLogger(__name__)


class RedisPasteStore(AbstractPasteStore):
    """Store backed by Redis (or any server speaking its protocol).

    Uses the official ``redis`` client in asyncio mode. Every client failure,
    including socket timeouts, is reported as ``StoreBackendError``.
    """

    def __init__(
        self,
        client: Redis,
        *,
        key_prefix: str = "paste:",
        max_retention_seconds: int = 30 * 24 * 60 * 60,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the adapter around an existing client.

        Args:
            client: ``redis.asyncio.Redis`` instance created with
                ``decode_responses=True``.
            key_prefix: Namespace prepended to paste ids.
            max_retention_seconds: TTL applied to pastes that never expire.
            clock: Time source used for the expiry double-check on reads.
        """
        self._client = client
        self._key_prefix = key_prefix
        self._max_retention_seconds = max_retention_seconds
        self._clock = clock

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        socket_timeout: float = 5.0,
        **kwargs,
    ) -> "RedisPasteStore":
        """Build a store with its own connection pool from a Redis URL."""
        client = Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client, **kwargs)

    def _key(self, paste_id: str) -> str:
        return f"{self._key_prefix}{paste_id}"

    def _backend_error(self, operation: str, exc: Exception) -> StoreBackendError:
        logger.error(
            "store.backend_error",
            extra={
                "backend": "redis",
                "operation": operation,
                "error_type": type(exc).__name__,
                "error_msg": str(exc),
            },
        )
        return StoreBackendError(
            code="store_backend_error",
            message="Paste storage is unavailable",
            details={"backend": "redis"},
        )

    async def exists(self, paste_id: str) -> bool:
        try:
            return bool(await self._client.exists(self._key(paste_id)))
        except RedisError as exc:
            raise self._backend_error("exists", exc) from exc

    async def put(self, paste: Paste, ttl_seconds: int | None = None) -> None:
        ttl = self._max_retention_seconds
        if ttl_seconds is not None:
            ttl = max(1, min(ttl_seconds, ttl))

        try:
            stored = await self._client.set(
                self._key(paste.id),
                paste.model_dump_json(),
                nx=True,
                ex=ttl,
            )
        except RedisError as exc:
            raise self._backend_error("put", exc) from exc

        if not stored:
            raise PasteAlreadyExistsError(
                code="paste_already_exists",
                message="Paste identifier is already in use",
            )

    async def get(self, paste_id: str) -> Paste | None:
        key = self._key(paste_id)
        try:
            raw = await self._client.get(key)
        except RedisError as exc:
            raise self._backend_error("get", exc) from exc

        if raw is None:
            return None

        try:
            paste = Paste.model_validate_json(raw)
        except ValidationError as exc:
            raise self._backend_error("decode", exc) from exc

        # Key expiry can lag behind the logical deadline
        if paste.is_expired(self._clock()):
            await self.delete(paste_id)
            return None

        return paste

    async def delete(self, paste_id: str) -> None:
        try:
            await self._client.delete(self._key(paste_id))
        except RedisError as exc:
            raise self._backend_error("delete", exc) from exc

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as exc:
            logger.warning(
                "store.ping_failed",
                extra={"backend": "redis", "error_type": type(exc).__name__},
            )
            return False

    async def close(self) -> None:
        await self._client.aclose()
