"""Rate limiting types and models."""

from enum import Enum

from pydantic import BaseModel

from src.api.core.constants import RateLimitKeys


class RateLimitClientType(str, Enum):
    """Types of clients for rate limiting."""

    USER = "user"
    IP = "ip"


class ClientIdentifier(BaseModel):
    """Client identifier for rate limiting, namespaced by endpoint scope."""

    scope: str
    client_type: RateLimitClientType
    client_id: str

    def to_cache_key(self) -> str:
        """Generate Redis cache key for this client."""
        if self.client_type == RateLimitClientType.USER:
            return RateLimitKeys.user(self.scope, self.client_id)
        return RateLimitKeys.ip(self.scope, self.client_id)

    def __str__(self) -> str:
        return f"{self.scope}:{self.client_type.value}:{self.client_id}"


class RateLimitResult(BaseModel):
    """Result of rate limit check."""

    is_allowed: bool
    current_count: int
    time_to_reset: int | None
    client_identifier: ClientIdentifier
    limit: int
    window_seconds: int
