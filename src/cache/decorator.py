import asyncio
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar
from uuid import UUID

from src.cache.store import FileCache, get_cache
from src.utils.logger import get_logger
from src.utils.settings.cache import CacheSettings

logger = get_logger(__name__)

T = TypeVar("T")

_MISSING = object()


def _generate_cache_key(func, args: tuple, kwargs: dict) -> str:
    """Generate cache key from function name and business parameters only."""
    key_parts = [func.__module__.replace(".", ":"), func.__qualname__.replace(".", ":")]

    # Only include simple types in cache key (skip self, Request, AsyncSession, etc.)
    for arg in args:
        if isinstance(arg, (str, int, float, bool, UUID)):
            key_parts.append(str(arg).replace(":", "_"))

    for k, v in sorted(kwargs.items()):
        if isinstance(v, (str, int, float, bool, UUID)):
            key_parts.append(f"{k}={str(v).replace(':', '_')}")

    return "cache:" + ":".join(key_parts)


async def with_cache(
    key: str,
    fetcher: Callable[[], Awaitable[T]],
    ttl: int | None = None,
    fallback: Any = _MISSING,
    cache: FileCache | None = None,
) -> T:
    """Serve ``key`` from the file cache, refreshing it through ``fetcher``.

    When the fetcher fails, a stale cached value is returned if one exists,
    then ``fallback`` if given; otherwise the error propagates.
    """
    cache = cache or get_cache()
    ttl = ttl if ttl is not None else CacheSettings().CACHE_DEFAULT_TTL

    cached_value, expired = await asyncio.to_thread(cache.read, key)
    if cached_value is not None and not expired:
        logger.debug(f"Cache hit: {key}")
        return cached_value

    try:
        fresh_value = await fetcher()
    except Exception as e:
        logger.error(f"Cache fetch error for key '{key}': {e}")
        if cached_value is not None:
            return cached_value
        if fallback is not _MISSING:
            return fallback
        raise

    await asyncio.to_thread(cache.set, key, fresh_value, ttl)
    logger.debug(f"Cached: {key}")
    return fresh_value


def cached(ttl: int | None = None, key: str | None = None):
    """Cache decorator for coroutine functions returning JSON-serializable data."""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            cache_key = key or _generate_cache_key(func, args, kwargs)
            return await with_cache(cache_key, lambda: func(*args, **kwargs), ttl)

        return wrapper

    return decorator


def invalidate_cache(key: str) -> None:
    """Drop a cache entry and its expiry stamp."""
    get_cache().delete(key)
    logger.info(f"Invalidated cache: {key}")
