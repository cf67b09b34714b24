"""Unit tests for the Redis paste store adapter (client mocked)."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from quickpaste.adapters.store.redis_store import RedisPasteStore
from quickpaste.core.errors import PasteAlreadyExistsError, StoreBackendError
from quickpaste.schemas.paste import Paste

THIRTY_DAYS = 30 * 24 * 3600


def _paste(clock, *, expires_in: timedelta | None = timedelta(hours=1)) -> Paste:
    now = clock()
    return Paste(
        id="abcde",
        content="SELECT 1;",
        language="sql",
        expires_at=now + expires_in if expires_in is not None else None,
        created_at=now,
    )


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def store(client: AsyncMock, clock) -> RedisPasteStore:
    return RedisPasteStore(client, max_retention_seconds=THIRTY_DAYS, clock=clock)


@pytest.mark.asyncio
async def test_put_uses_namespaced_set_nx_with_ttl(store: RedisPasteStore, client: AsyncMock, clock) -> None:
    client.set.return_value = True
    paste = _paste(clock)

    await store.put(paste, ttl_seconds=3600)

    client.set.assert_awaited_once_with(
        "paste:abcde",
        paste.model_dump_json(),
        nx=True,
        ex=3600,
    )


@pytest.mark.asyncio
async def test_put_without_ttl_applies_retention_ceiling(store: RedisPasteStore, client: AsyncMock, clock) -> None:
    client.set.return_value = True

    await store.put(_paste(clock, expires_in=None), ttl_seconds=None)

    assert client.set.await_args.kwargs["ex"] == THIRTY_DAYS


@pytest.mark.asyncio
async def test_put_raises_when_key_exists(store: RedisPasteStore, client: AsyncMock, clock) -> None:
    client.set.return_value = None

    with pytest.raises(PasteAlreadyExistsError):
        await store.put(_paste(clock), ttl_seconds=3600)


@pytest.mark.asyncio
async def test_get_round_trips_json(store: RedisPasteStore, client: AsyncMock, clock) -> None:
    paste = _paste(clock)
    client.get.return_value = paste.model_dump_json()

    assert await store.get("abcde") == paste
    client.get.assert_awaited_once_with("paste:abcde")


@pytest.mark.asyncio
async def test_get_missing_returns_none(store: RedisPasteStore, client: AsyncMock) -> None:
    client.get.return_value = None

    assert await store.get("abcde") is None


@pytest.mark.asyncio
async def test_get_deletes_record_past_its_expiry(store: RedisPasteStore, client: AsyncMock, clock) -> None:
    client.get.return_value = _paste(clock).model_dump_json()
    clock.advance(hours=2)

    assert await store.get("abcde") is None
    client.delete.assert_awaited_once_with("paste:abcde")


@pytest.mark.asyncio
async def test_corrupt_record_is_backend_error(store: RedisPasteStore, client: AsyncMock) -> None:
    client.get.return_value = "{not json"

    with pytest.raises(StoreBackendError):
        await store.get("abcde")


@pytest.mark.asyncio
async def test_exists_maps_reply_to_bool(store: RedisPasteStore, client: AsyncMock) -> None:
    client.exists.return_value = 1
    assert await store.exists("abcde") is True

    client.exists.return_value = 0
    assert await store.exists("abcde") is False


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["exists", "get", "delete"])
async def test_redis_failures_become_backend_errors(
    store: RedisPasteStore, client: AsyncMock, operation: str
) -> None:
    getattr(client, operation).side_effect = RedisTimeoutError("timed out")

    with pytest.raises(StoreBackendError) as exc_info:
        await getattr(store, operation)("abcde")

    assert exc_info.value.code == "store_backend_error"
    assert "timed out" not in exc_info.value.message


@pytest.mark.asyncio
async def test_put_failure_becomes_backend_error(store: RedisPasteStore, client: AsyncMock, clock) -> None:
    client.set.side_effect = RedisConnectionError("connection refused")

    with pytest.raises(StoreBackendError):
        await store.put(_paste(clock), ttl_seconds=60)


@pytest.mark.asyncio
async def test_ping_reports_unreachable_backend(store: RedisPasteStore, client: AsyncMock) -> None:
    client.ping.return_value = True
    assert await store.ping() is True

    client.ping.side_effect = RedisConnectionError("down")
    assert await store.ping() is False


@pytest.mark.asyncio
async def test_custom_key_prefix(client: AsyncMock, clock) -> None:
    store = RedisPasteStore(client, key_prefix="qp:paste:", clock=clock)
    client.get.return_value = None

    await store.get("abcde")

    client.get.assert_awaited_once_with("qp:paste:abcde")
