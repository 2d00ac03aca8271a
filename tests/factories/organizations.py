"""Factories for Organization and OrganizationMember models."""

from datetime import datetime, timezone

import factory
from src.database.models import Organization, OrganizationMember, OrganizationRole
from .base import AsyncSQLAlchemyModelFactory, UUIDFactory


class OrganizationFactory(AsyncSQLAlchemyModelFactory[Organization]):
    """Factory for creating Organization instances."""

    class Meta:
        model = Organization

    id = UUIDFactory()
    name = factory.Faker("company")
    slug = factory.Sequence(lambda n: f"organization-{n}")
    logo = None
    description = factory.Faker("sentence")
    created_at = factory.LazyFunction(lambda: datetime.now(timezone.utc))
    deleted_at = None


class OrganizationMemberFactory(AsyncSQLAlchemyModelFactory[OrganizationMember]):
    class Meta:
        model = OrganizationMember

    id = UUIDFactory()
    role = OrganizationRole.MEMBER
    created_at = factory.LazyFunction(lambda: datetime.now(timezone.utc))
