from functools import wraps
from typing import Any, Callable

from fastapi import Request, status
import redis.asyncio as redis

from src.api.core.decorators._common import extract_request_and_redis
from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.api.core.models.rate_limit import (
    ClientIdentifier,
    RateLimitClientType,
)
from src.core.rate_limiting import RateLimiter
from src.utils.logger import get_client_ip, get_logger

logger = get_logger(__name__)


def create_rate_limit_key(request: Request, scope: str) -> ClientIdentifier:
    """Signed-in users are limited per user id, everyone else per client IP."""
    user = getattr(request.state, "user", None)
    if user and hasattr(user, "id"):
        return ClientIdentifier(
            scope=scope,
            client_type=RateLimitClientType.USER,
            client_id=str(user.id),
        )

    return ClientIdentifier(
        scope=scope,
        client_type=RateLimitClientType.IP,
        client_id=get_client_ip(request),
    )


def rate_limit(limit: int, window_seconds: int, scope: str | None = None):
    """
    Rate limiting decorator for FastAPI endpoints.

    The endpoint must declare a ``redis_client`` dependency; when it resolves
    to None (rate limiting disabled) the check is skipped.

    Args:
        limit: Maximum requests allowed
        window_seconds: Time window in seconds
        scope: Key namespace, defaults to the endpoint function name
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        key_scope = scope or func.__name__

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            request, redis_client = extract_request_and_redis(*args, **kwargs)

            if not request:
                logger.error("Rate limit decorator: Request not found")
                return await func(*args, **kwargs)

            if not redis_client:
                logger.debug("Rate limit skipped, no Redis client", scope=key_scope)
                return await func(*args, **kwargs)

            await check_rate_limit(
                request, redis_client, key_scope, limit, window_seconds
            )

            return await func(*args, **kwargs)

        return wrapper

    return decorator


async def check_rate_limit(
    request: Request,
    redis_client: redis.Redis,
    scope: str,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Check rate limit for endpoint.

    Raises:
        IridiumException: When rate limit is exceeded
    """
    client_identifier = create_rate_limit_key(request, scope)

    rate_limiter = RateLimiter(redis_client)
    result = await rate_limiter.is_allowed(client_identifier, limit, window_seconds)

    if not result.is_allowed:
        retry_after = str(result.time_to_reset or result.window_seconds)
        logger.warning(
            "Rate limit exceeded",
            client=str(client_identifier),
            current_count=result.current_count,
            limit=result.limit,
            window_seconds=result.window_seconds,
        )

        raise IridiumException(
            MessageCode.RATE_LIMIT_EXCEEDED,
            status.HTTP_429_TOO_MANY_REQUESTS,
            details={
                "limit": result.limit,
                "window_seconds": result.window_seconds,
                "retry_after": int(retry_after),
            },
            headers={
                "Retry-After": retry_after,
                "X-RateLimit-Limit": str(result.limit),
                "X-RateLimit-Reset": retry_after,
                "X-RateLimit-Window": str(result.window_seconds),
            },
        )
