"""Stripe webhook endpoint."""

from fastapi import APIRouter, Request

from src.api.core.dependencies import BillingServiceDep
from src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/stripe", tags=["stripe"])


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    billing_service: BillingServiceDep,
):
    """Verify and handle a Stripe webhook event. Invalid signatures get a 400."""
    payload = await request.body()
    event = billing_service.construct_event(
        payload, request.headers.get("stripe-signature")
    )

    if await billing_service.handle_webhook_event(event):
        return {"status": "success", "received": True}

    logger.debug(f"Webhook event not handled: {event['type']}")
    return {"status": "ignored", "received": True}
