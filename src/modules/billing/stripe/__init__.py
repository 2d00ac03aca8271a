"""Stripe billing."""

from .service import HANDLED_WEBHOOK_EVENTS, StripeBillingService

__all__ = ["StripeBillingService", "HANDLED_WEBHOOK_EVENTS"]
