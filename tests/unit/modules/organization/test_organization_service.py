"""Tests for organization lifecycle and membership rules."""

from datetime import timedelta

import pytest
from fastapi import status

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.database.models import Organization, OrganizationRole
from src.modules.organization.use_cases import OrganizationService
from src.utils.dates import utcnow
from src.utils.path_helpers import slugify
from tests.factories import OrganizationFactory


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Acme Rockets", "acme-rockets"),
        ("  --Hello, World!--  ", "hello-world"),
        ("Crème Brûlée", "cr-me-br-l-e"),
        ("!!!", "org"),
    ],
)
def test_slugify(name, expected):
    assert slugify(name) == expected


@pytest.mark.asyncio
async def test_create_organization_adds_owner(db_session, test_user):
    service = OrganizationService(db_session)

    organization = await service.create_organization("Blue Sky", test_user.id)

    membership = await service.get_membership(organization.id, test_user.id)
    assert organization.slug == "blue-sky"
    assert membership.role == OrganizationRole.OWNER
    assert await service.count_members(organization.id) == 1


@pytest.mark.asyncio
async def test_add_member_twice_conflicts(db_session, test_organization, user_factory):
    user = await user_factory.create_async(db_session)
    service = OrganizationService(db_session)
    await service.add_member(test_organization.id, user.id)

    with pytest.raises(IridiumException) as exc_info:
        await service.add_member(test_organization.id, user.id)

    assert exc_info.value.message_code == MessageCode.USER_ALREADY_MEMBER
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT


@pytest.mark.asyncio
async def test_soft_deleted_organization_is_hidden(db_session, test_organization):
    service = OrganizationService(db_session)

    await service.soft_delete_organization(test_organization.id)

    assert await service.get_organization(test_organization.id) is None
    with pytest.raises(IridiumException) as exc_info:
        await service.get_organization_or_404(test_organization.id)
    assert exc_info.value.message_code == MessageCode.ORGANIZATION_NOT_FOUND


@pytest.mark.asyncio
async def test_restore_within_grace_period(db_session, test_organization, test_user):
    test_organization.deleted_at = utcnow() - timedelta(days=29)
    await db_session.commit()

    restored = await OrganizationService(db_session).restore_organization(
        test_organization.id, test_user.id
    )

    assert restored.deleted_at is None


@pytest.mark.asyncio
async def test_restore_after_grace_period(db_session, test_organization, test_user):
    test_organization.deleted_at = utcnow() - timedelta(days=31)
    await db_session.commit()

    with pytest.raises(IridiumException) as exc_info:
        await OrganizationService(db_session).restore_organization(
            test_organization.id, test_user.id
        )

    assert exc_info.value.message_code == MessageCode.ORGANIZATION_RESTORE_EXPIRED


@pytest.mark.asyncio
async def test_purge_only_removes_expired_deletions(db_session):
    active = await OrganizationFactory.create_async(db_session)
    recent = await OrganizationFactory.create_async(
        db_session, deleted_at=utcnow() - timedelta(days=10)
    )
    stale = await OrganizationFactory.create_async(
        db_session, deleted_at=utcnow() - timedelta(days=60)
    )

    removed = await OrganizationService(db_session).purge_soft_deleted()

    assert removed == 1
    db_session.expunge_all()
    assert await db_session.get(Organization, stale.id) is None
    assert await db_session.get(Organization, recent.id) is not None
    assert await db_session.get(Organization, active.id) is not None


@pytest.mark.asyncio
async def test_owner_role_cannot_be_changed(db_session, test_organization, test_user):
    with pytest.raises(IridiumException) as exc_info:
        await OrganizationService(db_session).update_member_role(
            test_organization.id, test_user.id, OrganizationRole.ADMIN
        )

    assert exc_info.value.message_code == MessageCode.CANNOT_GRANT_OWNER


@pytest.mark.asyncio
async def test_lookups_by_slug_and_with_members(
    db_session, test_organization, create_member
):
    member = await create_member(test_organization, OrganizationRole.ADMIN)
    service = OrganizationService(db_session)

    by_slug = await service.get_organization_by_slug(test_organization.slug)
    loaded = await service.get_organization_with_members(test_organization.id)

    assert by_slug.id == test_organization.id
    assert {m.user.email for m in loaded.members} >= {member.email}
    assert len(loaded.members) == 2


@pytest.mark.asyncio
async def test_permanent_delete_removes_memberships(
    db_session, test_organization, test_user
):
    service = OrganizationService(db_session)

    await service.delete_organization_permanently(test_organization.id)

    db_session.expunge_all()
    assert await db_session.get(Organization, test_organization.id) is None
    assert await service.get_membership(test_organization.id, test_user.id) is None
