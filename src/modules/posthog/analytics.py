"""Product analytics read back from PostHog through HogQL."""

from typing import Any

from src.cache import cached
from src.modules.posthog.client import PostHogClient
from src.utils.logger import get_logger

logger = get_logger(__name__)


class PostHogAnalyticsService:
    def __init__(self, client: PostHogClient | None = None):
        self.client = client or PostHogClient()

    async def run_query(self, hogql: str) -> list[list[Any]]:
        data = await self.client.api_request(
            "POST", "query/", json={"query": {"kind": "HogQLQuery", "query": hogql}}
        )
        return data.get("results", [])

    @cached(ttl=600)
    async def get_summary(self, days: int = 30, top_events_limit: int = 10) -> dict:
        """Event totals, unique users and top events for the trailing window."""
        window = f"timestamp >= now() - INTERVAL {int(days)} DAY"

        totals = await self.run_query(
            f"SELECT count(), count(DISTINCT distinct_id) FROM events WHERE {window}"
        )
        pageviews = await self.run_query(
            f"SELECT count() FROM events WHERE event = '$pageview' AND {window}"
        )
        top_events = await self.run_query(
            f"SELECT event, count() AS c FROM events WHERE {window} "
            f"GROUP BY event ORDER BY c DESC LIMIT {int(top_events_limit)}"
        )

        total_events, unique_users = totals[0] if totals else (0, 0)
        return {
            "days": days,
            "total_events": total_events,
            "unique_users": unique_users,
            "pageviews": pageviews[0][0] if pageviews else 0,
            "top_events": [
                {"event": event, "count": count} for event, count in top_events
            ],
        }
