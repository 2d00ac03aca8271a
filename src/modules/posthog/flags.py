"""Feature flags managed in PostHog."""

import asyncio
from dataclasses import dataclass
from typing import Any

from src.cache import FileCache, get_cache, with_cache
from src.modules.posthog.client import PostHogClient, capture_exception
from src.utils.logger import get_logger

logger = get_logger(__name__)

FEATURE_FLAGS_CACHE_KEY = "posthog:feature-flags"
FEATURE_FLAGS_CACHE_TTL = 600


@dataclass
class FeatureFlag:
    id: int
    key: str
    name: str
    active: bool
    created_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "FeatureFlag":
        return cls(
            id=data["id"],
            key=data["key"],
            name=data.get("name") or "",
            active=bool(data.get("active")),
            created_at=data.get("created_at"),
        )


def get_active_flags(flags: list[FeatureFlag]) -> dict[str, bool]:
    """Map of flag key to active state."""
    return {flag.key: flag.active for flag in flags}


class FeatureFlagService:
    def __init__(
        self, client: PostHogClient | None = None, cache: FileCache | None = None
    ):
        self.client = client or PostHogClient()
        self.cache = cache or get_cache()

    async def _fetch_flags(self) -> list[dict[str, Any]]:
        data = await self.client.api_request("GET", "feature_flags/")
        return [flag for flag in data.get("results", []) if not flag.get("deleted")]

    async def list_flags(self) -> list[FeatureFlag]:
        """All non-deleted flags, served from the file cache when fresh."""
        try:
            raw_flags = await with_cache(
                FEATURE_FLAGS_CACHE_KEY,
                self._fetch_flags,
                ttl=FEATURE_FLAGS_CACHE_TTL,
                cache=self.cache,
            )
        except Exception as e:
            await capture_exception(e, properties={"source": "feature_flags"})
            raise
        return [FeatureFlag.from_api(flag) for flag in raw_flags]

    async def get_active_flags(self) -> dict[str, bool]:
        """Flag states for clients. Empty when PostHog is unreachable."""
        try:
            return get_active_flags(await self.list_flags())
        except Exception as e:
            logger.warning("Feature flags unavailable", error=str(e))
            return {}

    async def is_active(self, key: str) -> bool:
        return (await self.get_active_flags()).get(key, False)

    async def toggle_flag(self, flag_id: int, active: bool) -> FeatureFlag:
        data = await self.client.api_request(
            "PATCH", f"feature_flags/{flag_id}/", json={"active": active}
        )
        await asyncio.to_thread(self.cache.delete, FEATURE_FLAGS_CACHE_KEY)
        logger.info("Feature flag toggled", flag_id=flag_id, active=active)
        return FeatureFlag.from_api(data)
