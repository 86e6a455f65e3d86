"""Cache backends for CachedAccountReader.

RedisAccountCache   - production, SET ... EX for expiry
InMemoryAccountCache - local runs and tests, lazy expiry on read
NullAccountCache    - caching disabled, every read is a miss

Adapters raise CacheUnavailableError for backend failures; the reader turns
that into a miss.
"""

import time

import redis.asyncio as aioredis

from src.ct_account.domain.cache import CacheUnavailableError


class RedisAccountCache:
    def __init__(self, client: aioredis.Redis | None = None) -> None:
        self._client = client

    def bind(self, client: aioredis.Redis | None) -> None:
        """Attach (or detach, with None) the client once the app has started."""
        self._client = client

    async def get(self, key: str) -> str | None:
        client = self._require_client()
        try:
            value = await client.get(key)
            if value is None or isinstance(value, str):
                return value
            return value.decode("utf-8")
        except (aioredis.RedisError, OSError) as exc:
            raise CacheUnavailableError(str(exc)) from exc
        except UnicodeDecodeError as exc:
            # decode_responses=True makes redis-py raise this from get() itself
            raise CacheUnavailableError(f"undecodable entry {key}") from exc

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        client = self._require_client()
        try:
            await client.set(key, value, ex=ttl_seconds)
        except (aioredis.RedisError, OSError) as exc:
            raise CacheUnavailableError(str(exc)) from exc

    async def delete(self, key: str) -> None:
        client = self._require_client()
        try:
            await client.delete(key)
        except (aioredis.RedisError, OSError) as exc:
            raise CacheUnavailableError(str(exc)) from exc

    def _require_client(self) -> aioredis.Redis:
        if self._client is None:
            raise CacheUnavailableError("Redis client not configured")
        return self._client


class InMemoryAccountCache:
    """Dict-backed cache with absolute expiry measured on time.monotonic()."""

    def __init__(self) -> None:
        self._store: dict[str, tuple[float, str]] = {}

    async def get(self, key: str) -> str | None:
        item = self._store.get(key)
        if item is None:
            return None
        expiry, value = item
        if time.monotonic() >= expiry:
            # Expired
            self._store.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._store[key] = (time.monotonic() + ttl_seconds, value)

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)


class NullAccountCache:
    async def get(self, key: str) -> str | None:
        return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None
