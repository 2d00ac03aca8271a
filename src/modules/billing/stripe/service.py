"""Stripe products, checkout, customer portal, revenue and webhook handling."""

import asyncio
import json
from datetime import datetime
from functools import partial
from typing import Any
from uuid import UUID

import stripe  # type: ignore
from fastapi import status
from stripe import (  # type: ignore
    InvalidRequestError,
    SignatureVerificationError,
    StripeError,
)

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.database.models import User
from src.modules.email.service import EmailService
from src.modules.posthog.client import capture_event
from src.utils.dates import as_utc
from src.utils.logger import get_logger
from src.utils.settings.stripe import StripeSettings
from .revenue import summarize_revenue

logger = get_logger(__name__)

# Webhook event type -> analytics event name
HANDLED_WEBHOOK_EVENTS = {
    "checkout.session.completed": "stripe_checkout_completed",
    "customer.subscription.created": "stripe_subscription_created",
    "customer.subscription.updated": "stripe_subscription_updated",
    "customer.subscription.deleted": "stripe_subscription_deleted",
    "invoice.paid": "stripe_invoice_paid",
    "invoice.payment_failed": "stripe_invoice_payment_failed",
    "charge.refunded": "stripe_charge_refunded",
}

SYSTEM_DISTINCT_ID = "system"
PAGE_SIZE = 100


def list_all(resource: Any, **params: Any) -> list[Any]:
    """Every item of a Stripe list call, following pagination."""
    return list(resource.list(limit=PAGE_SIZE, **params).auto_paging_iter())


class StripeBillingService:
    def __init__(
        self,
        settings: StripeSettings | None = None,
        email_service: EmailService | None = None,
    ):
        self.settings = settings or StripeSettings()
        self.email_service = email_service or EmailService()
        stripe.api_key = self.settings.STRIPE_SECRET_KEY.get_secret_value()

    def _require_configured(self) -> None:
        if not self.settings.is_configured:
            raise IridiumException(
                MessageCode.BILLING_NOT_CONFIGURED, status.HTTP_503_SERVICE_UNAVAILABLE
            )

    async def _call(
        self, func, not_found: MessageCode | None = None, **kwargs
    ) -> Any:
        """Run a blocking Stripe SDK call off the event loop.

        With ``not_found`` set, a Stripe 404 becomes that 404 instead of a 502.
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(func, **kwargs))
        except StripeError as e:
            if (
                not_found
                and isinstance(e, InvalidRequestError)
                and e.http_status == status.HTTP_404_NOT_FOUND
            ):
                raise IridiumException(not_found, status.HTTP_404_NOT_FOUND) from e
            logger.error(f"Stripe request failed: {e}")
            raise IridiumException(
                MessageCode.EXTERNAL_SERVICE_ERROR,
                status.HTTP_502_BAD_GATEWAY,
                {"provider": "stripe"},
            ) from e

    async def find_customer(self, user_id: UUID) -> Any | None:
        """Stripe customer tagged with this user's id, if any."""
        self._require_configured()
        result = await self._call(
            stripe.Customer.search,
            query=f"metadata['user_id']:'{user_id}'",
            limit=1,
        )
        return result.data[0] if result.data else None

    async def create_checkout_session(
        self,
        user: User,
        price_id: str | None = None,
        success_url: str | None = None,
        cancel_url: str | None = None,
    ) -> Any:
        self._require_configured()
        price_id = price_id or self.settings.STRIPE_DEFAULT_PRICE_ID
        if not price_id:
            raise IridiumException(
                MessageCode.INVALID_INPUT,
                status.HTTP_400_BAD_REQUEST,
                {"field": "price_id", "reason": "No price configured"},
            )

        customer = await self.find_customer(user.id)
        customer_args = (
            {"customer": customer.id} if customer else {"customer_email": user.email}
        )
        checkout_session = await self._call(
            stripe.checkout.Session.create,
            mode="subscription",
            line_items=[{"price": price_id, "quantity": 1}],
            success_url=success_url or self.settings.BILLING_SUCCESS_URL,
            cancel_url=cancel_url or self.settings.BILLING_CANCEL_URL,
            client_reference_id=str(user.id),
            metadata={"user_id": str(user.id)},
            subscription_data={"metadata": {"user_id": str(user.id)}},
            allow_promotion_codes=True,
            **customer_args,
        )
        logger.info(
            "Checkout session created",
            user_id=str(user.id),
            checkout_session_id=checkout_session.id,
        )
        return checkout_session

    async def create_portal_session(
        self, user_id: UUID, return_url: str | None = None
    ) -> Any:
        customer = await self.find_customer(user_id)
        if customer is None:
            raise IridiumException(
                MessageCode.BILLING_CUSTOMER_NOT_FOUND, status.HTTP_404_NOT_FOUND
            )
        return await self._call(
            stripe.billing_portal.Session.create,
            customer=customer.id,
            return_url=return_url or self.settings.BILLING_PORTAL_RETURN_URL,
        )

    async def list_products(self) -> list[Any]:
        """Active products with their default price expanded."""
        self._require_configured()
        return await self._call(
            list_all,
            resource=stripe.Product,
            active=True,
            expand=["data.default_price"],
        )

    async def get_product(self, product_id: str) -> tuple[Any, list[Any]]:
        """A product and its active prices; 404 when Stripe does not know it."""
        self._require_configured()
        product = await self._call(
            stripe.Product.retrieve,
            not_found=MessageCode.BILLING_PRODUCT_NOT_FOUND,
            id=product_id,
            expand=["default_price"],
        )
        prices = await self._call(
            list_all, resource=stripe.Price, product=product_id, active=True
        )
        return product, prices

    async def get_revenue_metrics(self, start: datetime, end: datetime) -> dict:
        """Orders, revenue, refunds and fees settled between ``start`` and ``end``."""
        self._require_configured()
        transactions = await self._call(
            list_all,
            resource=stripe.BalanceTransaction,
            created={
                "gte": int(as_utc(start).timestamp()),
                "lte": int(as_utc(end).timestamp()),
            },
        )
        return {"start": start, "end": end, **summarize_revenue(transactions)}

    def construct_event(self, payload: bytes, signature: str | None) -> dict:
        """Verify the webhook signature and decode the event; 400 on failure."""
        if not signature or not self.settings.STRIPE_WEBHOOK_SECRET:
            raise IridiumException(
                MessageCode.WEBHOOK_INVALID, status.HTTP_400_BAD_REQUEST
            )
        try:
            stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"),
                signature,
                self.settings.STRIPE_WEBHOOK_SECRET,
                tolerance=stripe.Webhook.DEFAULT_TOLERANCE,
            )
            return json.loads(payload)
        except (ValueError, SignatureVerificationError) as e:
            logger.warning(f"Rejected Stripe webhook: {e}")
            raise IridiumException(
                MessageCode.WEBHOOK_INVALID, status.HTTP_400_BAD_REQUEST
            ) from e

    async def handle_webhook_event(self, event: dict) -> bool:
        """Record a handled event and notify the admin. False when ignored."""
        event_type = event["type"]
        analytics_event = HANDLED_WEBHOOK_EVENTS.get(event_type)
        if analytics_event is None:
            return False

        data = event["data"]["object"]
        object_id = data.get("id", "")
        await capture_event(
            analytics_event,
            SYSTEM_DISTINCT_ID,
            {"event_id": event.get("id"), "object_id": object_id},
        )
        await self.email_service.best_effort(
            self.email_service.send_billing_notification(event_type, object_id, data)
        )
        logger.info("Stripe webhook handled", event_type=event_type)
        return True
