"""Tests for the Resend email service."""

import pytest
import resend

from src.modules.email.service import EmailResult, EmailService
from src.utils.settings.email import EmailSettings


@pytest.fixture
def sent(monkeypatch) -> list[dict]:
    """Capture the params handed to Resend."""
    outbox: list[dict] = []

    def send(params):
        outbox.append(params)
        return {"id": f"re_{len(outbox)}"}

    monkeypatch.setattr(resend.Emails, "send", send)
    return outbox


def make_service(**overrides) -> EmailService:
    settings = {
        "RESEND_API_KEY": "re_test",
        "EMAIL_FROM": "Iridium <noreply@iridium.dev>",
        "EMAIL_REPLY_TO": None,
        "ADMIN_EMAIL": "",
        **overrides,
    }
    return EmailService(EmailSettings(**settings))


@pytest.mark.asyncio
async def test_send_email_builds_resend_params(sent):
    service = make_service(EMAIL_REPLY_TO="support@iridium.dev")

    result = await service.send_email(
        to="ada@example.com",
        subject="Hello",
        text="Hi Ada",
        cc="grace@example.com",
        bcc=["ops@example.com", "audit@example.com"],
    )

    assert result == EmailResult(skipped=False, email_id="re_1")
    assert sent[0] == {
        "from": "Iridium <noreply@iridium.dev>",
        "to": ["ada@example.com"],
        "subject": "Hello",
        "text": "Hi Ada",
        "reply_to": "support@iridium.dev",
        "cc": ["grace@example.com"],
        "bcc": ["ops@example.com", "audit@example.com"],
    }


@pytest.mark.asyncio
async def test_send_is_skipped_without_api_key(sent):
    result = await make_service(RESEND_API_KEY="").send_email(
        to="ada@example.com", subject="Hello", text="Hi"
    )

    assert result.skipped is True
    assert sent == []


@pytest.mark.asyncio
async def test_provider_errors_propagate(monkeypatch):
    def fail(params):
        raise RuntimeError("Resend rejected the request")

    monkeypatch.setattr(resend.Emails, "send", fail)

    with pytest.raises(RuntimeError):
        await make_service().send_email(to="ada@example.com", subject="Hi", text="x")


@pytest.mark.asyncio
async def test_best_effort_swallows_failures():
    service = make_service()

    async def failing_send():
        raise RuntimeError("Resend is down")

    assert await service.best_effort(failing_send()) is None


@pytest.mark.asyncio
async def test_templates_escape_user_input(sent):
    await make_service().send_welcome_email(
        "ada@example.com", "<script>Ada</script>", "https://app.example.com"
    )

    html = sent[0]["html"]
    assert "<script>" not in html
    assert "&lt;script&gt;Ada&lt;/script&gt;" in html
    assert 'href="https://app.example.com"' in html


@pytest.mark.asyncio
async def test_admin_notifications_need_admin_address(sent):
    service = make_service()

    interest = await service.send_admin_interest_notification("a@example.com", "SALES")
    billing = await service.send_billing_notification("invoice.paid", "in_1", {})

    assert interest.skipped is True
    assert billing.skipped is True
    assert sent == []


@pytest.mark.asyncio
async def test_billing_notification_includes_payload(sent):
    service = make_service(ADMIN_EMAIL="admin@example.com")

    await service.send_billing_notification(
        "charge.refunded", "ch_9", {"id": "ch_9", "amount_refunded": 500}
    )

    assert sent[0]["to"] == ["admin@example.com"]
    assert sent[0]["subject"] == "Stripe: charge.refunded"
    assert '"amount_refunded": 500' in sent[0]["text"]
