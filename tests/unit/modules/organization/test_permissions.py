"""Tests for the organization role hierarchy."""

import pytest

from src.database.models import OrganizationRole
from src.modules.organization.permissions import (
    PermissionService,
    role_rank,
    role_satisfies,
)
from src.utils.dates import utcnow
from tests.factories import OrganizationFactory, OrganizationMemberFactory


def test_roles_rank_owner_above_admin_above_member():
    assert (
        role_rank(OrganizationRole.OWNER)
        > role_rank(OrganizationRole.ADMIN)
        > role_rank(OrganizationRole.MEMBER)
        > 0
    )


def test_role_rank_accepts_plain_strings():
    assert role_rank("ADMIN") == role_rank(OrganizationRole.ADMIN)


def test_unknown_role_ranks_below_member():
    assert role_rank("SUPERVISOR") == 0
    assert role_satisfies("SUPERVISOR", OrganizationRole.MEMBER) is False


@pytest.mark.parametrize(
    "role,required,expected",
    [
        (OrganizationRole.OWNER, OrganizationRole.ADMIN, True),
        (OrganizationRole.ADMIN, OrganizationRole.ADMIN, True),
        (OrganizationRole.MEMBER, OrganizationRole.ADMIN, False),
        (OrganizationRole.ADMIN, OrganizationRole.OWNER, False),
        (OrganizationRole.MEMBER, OrganizationRole.MEMBER, True),
    ],
)
def test_role_satisfies(role, required, expected):
    assert role_satisfies(role, required) is expected


@pytest.mark.asyncio
async def test_has_role_ignores_deleted_organizations(db_session, test_user):
    organization = await OrganizationFactory.create_async(db_session)
    await OrganizationMemberFactory.create_async(
        db_session,
        organization_id=organization.id,
        user_id=test_user.id,
        role=OrganizationRole.ADMIN,
    )
    service = PermissionService(db_session)

    assert await service.has_role(test_user.id, organization.id, OrganizationRole.MEMBER)
    assert not await service.has_role(
        test_user.id, organization.id, OrganizationRole.OWNER
    )

    organization.deleted_at = utcnow()
    await db_session.commit()

    assert await service.get_active_membership(test_user.id, organization.id) is None
    assert not await service.has_role(
        test_user.id, organization.id, OrganizationRole.MEMBER
    )
