"""Transactional email over Resend."""

import asyncio
import json
from dataclasses import dataclass
from functools import partial
from html import escape
from typing import Awaitable

import resend

from src.modules.posthog.client import capture_exception
from src.utils.logger import get_logger
from src.utils.settings.app import AppSettings
from src.utils.settings.email import EmailSettings

logger = get_logger(__name__)


@dataclass
class EmailResult:
    skipped: bool
    email_id: str | None = None


def _as_list(value: str | list[str] | None) -> list[str] | None:
    if value is None:
        return None
    return [value] if isinstance(value, str) else list(value)


def _paragraphs(*lines: str) -> str:
    return "".join(f"<p>{escape(line)}</p>" for line in lines if line)


def _button(label: str, url: str) -> str:
    return f'<p><a href="{escape(url, quote=True)}">{escape(label)}</a></p>'


class EmailService:
    """Sends email through Resend. Without an API key sends are skipped."""

    def __init__(self, settings: EmailSettings | None = None):
        self.settings = settings or EmailSettings()
        self.app_name = AppSettings().APP_NAME

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.RESEND_API_KEY)

    async def send_email(
        self,
        to: str | list[str],
        subject: str,
        html: str | None = None,
        text: str | None = None,
        reply_to: str | None = None,
        cc: str | list[str] | None = None,
        bcc: str | list[str] | None = None,
        from_address: str | None = None,
    ) -> EmailResult:
        """Send one email; provider errors are captured and re-raised."""
        if not self.is_configured:
            logger.warning("Resend not configured, skipping email", subject=subject)
            return EmailResult(skipped=True)

        params: dict = {
            "from": from_address or self.settings.EMAIL_FROM,
            "to": _as_list(to),
            "subject": subject,
        }
        if html:
            params["html"] = html
        if text:
            params["text"] = text
        if reply_to or self.settings.EMAIL_REPLY_TO:
            params["reply_to"] = reply_to or self.settings.EMAIL_REPLY_TO
        if cc:
            params["cc"] = _as_list(cc)
        if bcc:
            params["bcc"] = _as_list(bcc)

        resend.api_key = self.settings.RESEND_API_KEY
        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(
                None, partial(resend.Emails.send, params)
            )
        except Exception as e:
            logger.error(f"Failed to send email: {e}", subject=subject)
            await capture_exception(e, properties={"context": "email", "subject": subject})
            raise

        email_id = response.get("id") if isinstance(response, dict) else None
        logger.info("Email sent", email_id=email_id, subject=subject)
        return EmailResult(skipped=False, email_id=email_id)

    async def best_effort(self, send: Awaitable[EmailResult]) -> EmailResult | None:
        """Await a send and swallow failures; used where the email is a side effect."""
        try:
            return await send
        except Exception as e:
            logger.warning(f"Best-effort email not sent: {e}")
            return None

    async def send_verification_email(self, to: str, verification_url: str):
        return await self.send_email(
            to=to,
            subject="Verify your email address",
            html=_paragraphs(
                f"Confirm that {to} is your email address for {self.app_name}."
            )
            + _button("Verify email", verification_url),
            text=f"Verify your email address: {verification_url}",
        )

    async def send_password_reset_email(self, to: str, reset_url: str):
        return await self.send_email(
            to=to,
            subject="Reset your password",
            html=_paragraphs(
                "We received a request to reset your password.",
                "If you did not ask for this, you can ignore this email.",
            )
            + _button("Reset password", reset_url),
            text=f"Reset your password: {reset_url}",
        )

    async def send_welcome_email(self, to: str, user_name: str, dashboard_url: str):
        return await self.send_email(
            to=to,
            subject=f"Welcome to {self.app_name}!",
            html=_paragraphs(f"Hi {user_name}, thanks for signing up.")
            + _button("Go to dashboard", dashboard_url),
            text=f"Hi {user_name}, thanks for signing up. {dashboard_url}",
        )

    async def send_transactional_email(
        self,
        to: str,
        heading: str,
        message: str,
        button_text: str | None = None,
        button_url: str | None = None,
        footer_text: str | None = None,
    ):
        html = f"<h1>{escape(heading)}</h1>" + _paragraphs(message)
        if button_text and button_url:
            html += _button(button_text, button_url)
        if footer_text:
            html += _paragraphs(footer_text)
        return await self.send_email(to=to, subject=heading, html=html, text=message)

    async def send_account_deletion_email(self, to: str, user_name: str):
        return await self.send_email(
            to=to,
            subject=f"Your {self.app_name} account has been deleted",
            html=_paragraphs(
                f"Hi {user_name},",
                "Your account and its data have been permanently deleted.",
            ),
            text="Your account and its data have been permanently deleted.",
        )

    async def send_interest_confirmation_email(self, to: str):
        return await self.send_email(
            to=to,
            subject=f"You're on the {self.app_name} list",
            html=_paragraphs(
                "Thanks for your interest! We'll let you know as soon as we have news."
            ),
            text="Thanks for your interest! We'll let you know as soon as we have news.",
        )

    async def send_admin_interest_notification(
        self, email: str, inquiry_type: str, note: str | None = None
    ):
        if not self.settings.ADMIN_EMAIL:
            return EmailResult(skipped=True)
        lines = [f"Email: {email}", f"Inquiry type: {inquiry_type}"]
        if note:
            lines.append(f"Note: {note}")
        return await self.send_email(
            to=self.settings.ADMIN_EMAIL,
            subject="New interest list signup",
            html=_paragraphs(*lines),
            text="\n".join(lines),
        )

    async def send_ban_notice(
        self, to: str, user_name: str, reason: str | None = None
    ):
        lines = [f"Hi {user_name},", f"Your {self.app_name} account has been suspended."]
        if reason:
            lines.append(f"Reason: {reason}")
        return await self.send_email(
            to=to,
            subject="Your account has been suspended",
            html=_paragraphs(*lines),
            text="\n".join(lines),
        )

    async def send_billing_notification(self, event_type: str, object_id: str, payload: dict):
        if not self.settings.ADMIN_EMAIL:
            return EmailResult(skipped=True)
        text = (
            f"Stripe event: {event_type}\n\nObject ID: {object_id}\n\n"
            f"Payload: {json.dumps(payload, indent=2, default=str)}"
        )
        return await self.send_email(
            to=self.settings.ADMIN_EMAIL,
            subject=f"Stripe: {event_type}",
            text=text,
        )
