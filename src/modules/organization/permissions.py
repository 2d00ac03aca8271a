"""Organization role hierarchy checks."""

from uuid import UUID

from sqlalchemy import select

from src.database.models import (
    ROLE_RANK,
    Organization,
    OrganizationMember,
    OrganizationRole,
)
from src.core.base import BaseService


def role_rank(role: OrganizationRole | str) -> int:
    """Rank of a role; unknown roles rank below MEMBER."""
    try:
        return ROLE_RANK[OrganizationRole(role)]
    except ValueError:
        return 0


def role_satisfies(role: OrganizationRole | str, required: OrganizationRole) -> bool:
    return role_rank(role) >= role_rank(required)


class PermissionService(BaseService):
    role_satisfies = staticmethod(role_satisfies)

    async def get_active_membership(
        self, user_id: UUID, organization_id: UUID
    ) -> OrganizationMember | None:
        """Membership in an organization that has not been soft-deleted."""
        result = await self.db.execute(
            select(OrganizationMember)
            .join(Organization, Organization.id == OrganizationMember.organization_id)
            .where(
                OrganizationMember.user_id == user_id,
                OrganizationMember.organization_id == organization_id,
                Organization.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def has_role(
        self, user_id: UUID, organization_id: UUID, required: OrganizationRole
    ) -> bool:
        membership = await self.get_active_membership(user_id, organization_id)
        if membership is None:
            return False
        return role_satisfies(membership.role, required)
