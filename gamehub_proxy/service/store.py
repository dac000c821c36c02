from __future__ import annotations

from typing import Optional, Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..domain.errors import StoreUnavailableError
from ..logging_conf import get_logger

__all__ = ["KeyValueStore", "RedisStore"]

logger = get_logger("service.store")


class KeyValueStore(Protocol):
    """Read-only view of a shared key-value store."""

    async def get(self, key: str) -> Optional[str]: ...


class RedisStore:
    """KeyValueStore backed by redis. Values are returned as decoded strings."""

    def __init__(self, client: "redis.Redis") -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisStore":
        return cls(redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._client.get(key)
        except RedisError as e:
            logger.warning(
                "store.read_failed",
                extra={"event": "store_read_failed", "key": key, "error": str(e)},
            )
            raise StoreUnavailableError(f"could not read {key!r}: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()
