"""Async Redis client utilities."""

import redis.asyncio as redis

from src.utils.settings.redis import RedisSettings
from src.utils.logger import get_logger

logger = get_logger(__name__)

# Global connection pool - initialized once, reused everywhere
_redis_pool: redis.ConnectionPool | None = None


def _ensure_redis_pool() -> redis.ConnectionPool:
    global _redis_pool
    if _redis_pool is None:
        settings = RedisSettings()
        _redis_pool = redis.ConnectionPool.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
        )
    return _redis_pool


async def get_redis_client() -> redis.Redis | None:
    """Redis client for dependency injection; None when rate limiting is disabled."""
    if not RedisSettings().RATE_LIMIT_ENABLED:
        return None
    return redis.Redis(connection_pool=_ensure_redis_pool())


async def close_redis_pool() -> None:
    """Close Redis connection pool - called during app shutdown."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.disconnect()
        _redis_pool = None


async def is_redis_healthy() -> bool:
    try:
        client = redis.Redis(connection_pool=_ensure_redis_pool())
        await client.ping()
        return True
    except Exception:
        return False
