"""Factory for interest list signups."""

from datetime import datetime, timezone

import factory
from src.database.models import InquiryType, InterestListSignup
from .base import AsyncSQLAlchemyModelFactory, UUIDFactory


class InterestSignupFactory(AsyncSQLAlchemyModelFactory[InterestListSignup]):
    class Meta:
        model = InterestListSignup

    id = UUIDFactory()
    email = factory.Sequence(lambda n: f"interested-{n}@example.com")
    inquiry_type = InquiryType.GENERAL
    note = None
    created_at = factory.LazyFunction(lambda: datetime.now(timezone.utc))
