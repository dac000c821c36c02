"""
Unit tests for the redis-backed key-value store
"""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from gamehub_proxy.domain.errors import StoreUnavailableError
from gamehub_proxy.service.store import RedisStore


class StubRedis:
    """Stands in for ``redis.asyncio.Redis``; ``error`` is raised from every read."""

    def __init__(self, data=None, error=None):
        self.data = dict(data or {})
        self.error = error
        self.closed = False

    async def get(self, key):
        if self.error is not None:
            raise self.error
        return self.data.get(key)

    async def aclose(self):
        self.closed = True


class TestRedisStore:
    @pytest.mark.asyncio
    async def test_get_returns_value(self):
        store = RedisStore(StubRedis({"gamehub:token": '{"token": "T"}'}))
        assert await store.get("gamehub:token") == '{"token": "T"}'

    @pytest.mark.asyncio
    async def test_missing_key_is_none(self):
        assert await RedisStore(StubRedis()).get("absent") is None

    @pytest.mark.asyncio
    async def test_connection_error_becomes_store_unavailable(self):
        cause = RedisConnectionError("connection refused")
        store = RedisStore(StubRedis(error=cause))
        with pytest.raises(StoreUnavailableError) as excinfo:
            await store.get("gamehub:token")
        assert excinfo.value.__cause__ is cause
        assert "gamehub:token" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_close_releases_client(self):
        client = StubRedis()
        await RedisStore(client).close()
        assert client.closed
