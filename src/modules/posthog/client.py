"""Thin async client for the PostHog ingestion and management APIs."""

import asyncio
import traceback
from datetime import datetime, timezone
from typing import Any

import aiohttp

from src.utils.logger import get_logger
from src.utils.settings.posthog import PostHogSettings

logger = get_logger(__name__)

ANONYMOUS_DISTINCT_ID = "server"

# One connection pool per process and event loop, closed on app shutdown
_http_session: aiohttp.ClientSession | None = None
_http_session_loop: asyncio.AbstractEventLoop | None = None
# Strong references keep queued captures alive until they finish
_pending_captures: set[asyncio.Task] = set()


def get_http_session() -> aiohttp.ClientSession:
    global _http_session, _http_session_loop
    loop = asyncio.get_running_loop()
    if _http_session is None or _http_session.closed or _http_session_loop is not loop:
        _http_session = aiohttp.ClientSession()
        _http_session_loop = loop
    return _http_session


async def close_posthog_session() -> None:
    """Flush queued captures and close the shared session - called during app shutdown."""
    global _http_session
    if _pending_captures:
        await asyncio.gather(*_pending_captures, return_exceptions=True)
    if _http_session and not _http_session.closed:
        await _http_session.close()
    _http_session = None


class PostHogError(RuntimeError):
    """Raised when the PostHog management API rejects a request."""


class PostHogClient:
    """Sends events to PostHog and calls its project REST API."""

    def __init__(self, settings: PostHogSettings | None = None):
        self.settings = settings or PostHogSettings()
        self.timeout = aiohttp.ClientTimeout(total=self.settings.POSTHOG_TIMEOUT)

    async def capture(
        self,
        event: str,
        distinct_id: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> bool:
        """Capture an analytics event. Best effort: failures are logged, never raised."""
        if not self.settings.can_capture:
            logger.debug("PostHog capture skipped, no API key", posthog_event=event)
            return False

        payload = {
            "api_key": self.settings.POSTHOG_API_KEY,
            "event": event,
            "distinct_id": distinct_id or ANONYMOUS_DISTINCT_ID,
            "properties": properties or {},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            async with get_http_session().post(
                f"{self.settings.POSTHOG_HOST.rstrip('/')}/i/v0/e/",
                json=payload,
                timeout=self.timeout,
            ) as response:
                response.raise_for_status()
            return True
        except Exception as e:
            logger.warning("PostHog capture failed", posthog_event=event, error=str(e))
            return False

    async def capture_exception(
        self,
        exc: BaseException,
        distinct_id: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> bool:
        exception_properties = {
            "$exception_type": type(exc).__name__,
            "$exception_message": str(exc),
            "$exception_stack_trace_raw": "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            ),
            **(properties or {}),
        }
        return await self.capture("$exception", distinct_id, exception_properties)

    async def api_request(
        self, method: str, path: str, json: dict | None = None
    ) -> Any:
        """Call the project-scoped management API with the personal API key."""
        if not self.settings.can_manage:
            raise PostHogError("PostHog personal API key or project id missing")

        url = (
            f"{self.settings.POSTHOG_API_HOST.rstrip('/')}"
            f"/api/projects/{self.settings.POSTHOG_PROJECT_ID}/{path.lstrip('/')}"
        )
        headers = {
            "Authorization": f"Bearer {self.settings.POSTHOG_PERSONAL_API_KEY.get_secret_value()}",
            "Content-Type": "application/json",
        }
        try:
            async with get_http_session().request(
                method, url, json=json, headers=headers, timeout=self.timeout
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise PostHogError(
                        f"PostHog API {method} {path} failed: {response.status} {body[:200]}"
                    )
                return await response.json()
        except aiohttp.ClientError as e:
            logger.error(f"PostHog API request failed: {e}")
            raise PostHogError(f"PostHog API unavailable: {e}") from e


def run_in_background(coro) -> asyncio.Task:
    task = asyncio.create_task(coro)
    _pending_captures.add(task)
    task.add_done_callback(_pending_captures.discard)
    return task


async def capture_event(
    event: str,
    distinct_id: str | None = None,
    properties: dict[str, Any] | None = None,
) -> None:
    """Queue an event; the caller does not wait on PostHog."""
    client = PostHogClient()
    if client.settings.can_capture:
        run_in_background(client.capture(event, distinct_id, properties))


async def capture_exception(
    exc: BaseException,
    distinct_id: str | None = None,
    properties: dict[str, Any] | None = None,
) -> None:
    client = PostHogClient()
    if client.settings.can_capture:
        run_in_background(client.capture_exception(exc, distinct_id, properties))
