"""Keyed TTL cache used by the weather read path.

`CacheService` owns serialization and key generation; the backing
`CacheStore` only moves opaque strings with an expiry. Two stores are
provided: `RedisCacheStore` for deployments and `MemoryCacheStore` for a
single process (and for tests).
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any, Protocol, TypeVar

import redis.asyncio as aioredis
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pywxalert.exceptions import CacheReadError, CacheWriteError

_logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class CacheStore(Protocol):
    """Backing key/value store with per-key expiry."""

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    async def get(self, key: str) -> str | None:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def exists(self, key: str) -> bool:
        ...


class RedisCacheStore:
    """`CacheStore` over a ``redis.asyncio`` client."""

    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> RedisCacheStore:
        return cls(aioredis.Redis.from_url(url, decode_responses=True))

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(key, value, ex=ttl_seconds)

    async def get(self, key: str) -> str | None:
        value = await self._client.get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def exists(self, key: str) -> bool:
        return bool(await self._client.exists(key))

    async def aclose(self) -> None:
        await self._client.aclose()


class MemoryCacheStore:
    """In-process `CacheStore`.

    Expired entries are evicted lazily on access. *clock* returns monotonic
    seconds and can be replaced to control expiry in tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._storage: dict[str, tuple[float, str]] = {}

    def _live(self, key: str) -> str | None:
        item = self._storage.get(key)
        if item is None:
            return None
        expires_at, value = item
        if self._clock() >= expires_at:
            self._storage.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._storage[key] = (self._clock() + ttl_seconds, value)

    async def get(self, key: str) -> str | None:
        return self._live(key)

    async def delete(self, key: str) -> None:
        self._storage.pop(key, None)

    async def exists(self, key: str) -> bool:
        return self._live(key) is not None

    def clear(self) -> None:
        self._storage.clear()


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    return value


class CacheService:
    """Serializing adapter over a `CacheStore`.

    Values are stored as compact JSON. Pydantic models are dumped by alias
    and can be restored with ``get(key, model=...)``.
    """

    def __init__(self, store: CacheStore) -> None:
        self._store = store

    @property
    def store(self) -> CacheStore:
        return self._store

    @staticmethod
    def generate_key(prefix: str, params: Mapping[str, Any]) -> str:
        """Build a cache key from *prefix* and *params*.

        Parameters are sorted by name and JSON-encoded, so the key does not
        depend on insertion order and values containing ``:`` cannot make
        two different parameter sets collide.
        """
        serialized = json.dumps(dict(params), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
        return f"{prefix}:{serialized}"

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Serialize *value* and store it under *key* for *ttl_seconds*.

        Raises
        ------
        CacheWriteError
            The backing store rejected the write or is unreachable.
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        try:
            payload = json.dumps(_to_jsonable(value), separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise CacheWriteError(f"Cannot serialize value for {key}: {exc}", key=key) from exc

        try:
            await self._store.set(key, payload, ttl_seconds)
        except Exception as exc:
            _logger.error("Cache set error: %s", key, exc_info=True)
            raise CacheWriteError(f"Cache set failed for {key}: {exc}", key=key) from exc
        _logger.debug("Cache set: %s (TTL: %ss)", key, ttl_seconds)

    async def get(self, key: str, *, model: type[ModelT] | None = None) -> Any:
        """Return the value stored under *key*, or ``None`` when absent or expired.

        With *model*, the stored JSON is validated into that pydantic model.

        Raises
        ------
        CacheReadError
            The backing store is unreachable or the payload is corrupt.
        """
        try:
            raw = await self._store.get(key)
        except Exception as exc:
            _logger.error("Cache get error: %s", key, exc_info=True)
            raise CacheReadError(f"Cache get failed for {key}: {exc}", key=key) from exc

        if raw is None:
            _logger.debug("Cache miss: %s", key)
            return None

        try:
            if model is not None:
                value: Any = model.model_validate_json(raw)
            else:
                value = json.loads(raw)
        except (json.JSONDecodeError, PydanticValidationError) as exc:
            raise CacheReadError(f"Corrupt cache payload for {key}: {exc}", key=key) from exc

        _logger.debug("Cache hit: %s", key)
        return value

    async def delete(self, key: str) -> None:
        """Remove *key*; a missing key is not an error."""
        try:
            await self._store.delete(key)
        except Exception as exc:
            _logger.error("Cache delete error: %s", key, exc_info=True)
            raise CacheWriteError(f"Cache delete failed for {key}: {exc}", key=key) from exc
        _logger.debug("Cache deleted: %s", key)

    async def has(self, key: str) -> bool:
        try:
            return await self._store.exists(key)
        except Exception as exc:
            _logger.error("Cache has error: %s", key, exc_info=True)
            raise CacheReadError(f"Cache exists check failed for {key}: {exc}", key=key) from exc
