"""In-memory stand-ins for the vendor clients used by the API."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable

from src.modules.email.service import EmailResult, EmailService
from src.modules.posthog.client import PostHogClient, PostHogError
from src.utils.s3_client import StorageClient, StoredObject
from src.utils.settings.email import EmailSettings
from src.utils.settings.posthog import PostHogSettings
from src.utils.settings.storage import StorageSettings


class FakeEmailService(EmailService):
    """Records outgoing email instead of calling Resend."""

    def __init__(self, configured: bool = True, fail: bool = False):
        super().__init__(
            EmailSettings(
                RESEND_API_KEY="re_test" if configured else "",
                ADMIN_EMAIL="admin@example.com",
            )
        )
        self.outbox: list[dict[str, Any]] = []
        self.fail = fail

    async def send_email(self, to, subject, html=None, text=None, **kwargs):
        if not self.is_configured:
            return EmailResult(skipped=True)
        if self.fail:
            raise RuntimeError("Resend is down")
        self.outbox.append({"to": to, "subject": subject, "html": html, "text": text})
        return EmailResult(skipped=False, email_id=f"email_{len(self.outbox)}")

    def subjects(self) -> list[str]:
        return [message["subject"] for message in self.outbox]


class FakePostHogClient(PostHogClient):
    """Answers management API calls from registered handlers."""

    def __init__(self, manage: bool = True):
        super().__init__(
            PostHogSettings(
                POSTHOG_API_KEY="phc_test",
                POSTHOG_PERSONAL_API_KEY="phx_test" if manage else "",
                POSTHOG_PROJECT_ID="1" if manage else "",
            )
        )
        self.captured: list[tuple[str, str | None, dict]] = []
        self.requests: list[tuple[str, str, dict | None]] = []
        self.handlers: dict[tuple[str, str], Callable[[dict | None], Any]] = {}
        self.fail = False

    def on(self, method: str, path: str, handler: Callable[[dict | None], Any]):
        self.handlers[(method, path)] = handler

    async def capture(self, event, distinct_id=None, properties=None) -> bool:
        self.captured.append((event, distinct_id, properties or {}))
        return True

    async def api_request(self, method, path, json=None):
        if not self.settings.can_manage:
            raise PostHogError("PostHog personal API key or project id missing")
        self.requests.append((method, path, json))
        if self.fail:
            raise PostHogError(f"PostHog API {method} {path} failed: 500")
        handler = self.handlers.get((method, path))
        if handler is None:
            raise PostHogError(f"PostHog API {method} {path} failed: 404")
        return handler(json)


class FakeStorageClient(StorageClient):
    """Bucket kept in a dict."""

    def __init__(self, configured: bool = True):
        super().__init__(
            StorageSettings(
                AWS_BUCKET_NAME="iridium-test" if configured else "",
                AWS_ACCESS_KEY_ID="AKIATEST" if configured else "",
            )
        )
        self.objects: dict[str, bytes] = {}

    async def list_objects(self, prefix="", max_keys=200):
        self._require_configured()
        keys = sorted(key for key in self.objects if key.startswith(prefix))
        return [
            StoredObject(
                key=key,
                size=len(self.objects[key]),
                last_modified=datetime.now(timezone.utc),
            )
            for key in keys[:max_keys]
        ]

    async def upload_object(self, key, body, content_type=None):
        self._require_configured()
        self.objects[key] = body
        return StoredObject(key=key, size=len(body), last_modified=None)

    async def create_signed_download_url(self, key, expires_in=3600):
        self._require_configured()
        return f"https://iridium-test.s3.amazonaws.com/{key}?X-Amz-Expires={expires_in}"


def text_completion(text: str) -> SimpleNamespace:
    message = SimpleNamespace(content=text, tool_calls=None)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def tool_call_completion(*calls: tuple[str, str, dict]) -> SimpleNamespace:
    """Completion asking for tools; each call is (id, name, arguments)."""
    tool_calls = [
        SimpleNamespace(
            id=call_id,
            function=SimpleNamespace(name=name, arguments=json.dumps(arguments)),
        )
        for call_id, name, arguments in calls
    ]
    message = SimpleNamespace(content=None, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@dataclass
class FakeCompletions:
    responses: list[Any] = field(default_factory=list)
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if not self.responses:
            return text_completion("Done.")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeOpenAI:
    """Scripted replacement for AsyncOpenAI; queue completions on ``completions``."""

    def __init__(self, *responses: Any):
        self.completions = FakeCompletions(list(responses))
        self.chat = SimpleNamespace(completions=self.completions)

    def queue(self, *responses: Any) -> None:
        self.completions.responses.extend(responses)
