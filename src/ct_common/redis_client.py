"""Redis client factory: used only as the account lookup accelerator.

Redis is never the source of truth. If it cannot be reached the service keeps
running and every cache read is a miss.
"""

import logging

import redis.asyncio as aioredis

from config.settings import settings

logger = logging.getLogger("ct.cache")

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Get or create the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=1.0,
            socket_connect_timeout=1.0,
        )
    return _redis_pool


async def ping_redis() -> bool:
    """Startup probe. Logs and returns False instead of raising."""
    client = await get_redis()
    try:
        await client.ping()
    except (aioredis.RedisError, OSError) as exc:
        logger.warning("Redis unavailable, cache disabled until it recovers: %s", exc)
        return False
    logger.info("Redis connected")
    return True


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
