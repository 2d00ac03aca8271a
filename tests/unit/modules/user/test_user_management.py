"""Tests for user management and ban expiry."""

from datetime import timedelta

import pytest

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.database.models import Note, User, UserSession
from src.modules.user.management import (
    UserManagementService,
    is_ban_active,
    normalize_email,
)
from src.utils.dates import utcnow
from tests.factories import NoteFactory, UserFactory, UserSessionFactory


def test_normalize_email():
    assert normalize_email("  Ada@Example.COM ") == "ada@example.com"


@pytest.mark.parametrize(
    "banned,expires_delta,expected",
    [
        (False, None, False),
        (True, None, True),
        (True, timedelta(hours=1), True),
        (True, -timedelta(seconds=1), False),
    ],
)
def test_is_ban_active(banned, expires_delta, expected):
    user = UserFactory.build(
        banned=banned,
        ban_expires=utcnow() + expires_delta if expires_delta else None,
    )

    assert is_ban_active(user) is expected


@pytest.mark.asyncio
async def test_create_user_lowercases_and_hashes(db_session):
    service = UserManagementService(db_session)

    user = await service.create_user("New@Example.com", "New", password="pa55word")

    assert user.email == "new@example.com"
    assert user.password_hash and user.password_hash != "pa55word"
    assert (await service.get_user_by_email("NEW@example.com")).id == user.id


@pytest.mark.asyncio
async def test_create_user_duplicate_email(db_session, test_user):
    with pytest.raises(IridiumException) as exc_info:
        await UserManagementService(db_session).create_user(
            test_user.email.upper(), "Copy"
        )

    assert exc_info.value.message_code == MessageCode.EMAIL_ALREADY_REGISTERED


@pytest.mark.asyncio
async def test_update_profile_ignores_unset_fields(db_session, test_user):
    user = await UserManagementService(db_session).update_profile(
        test_user.id, bio="Hello", name=None, email="hijack@example.com"
    )

    assert user.bio == "Hello"
    assert user.name == "Test User"
    assert user.email != "hijack@example.com"


@pytest.mark.asyncio
async def test_lift_expired_ban(db_session):
    user = await UserFactory.create_async(
        db_session,
        banned=True,
        ban_reason="spam",
        ban_expires=utcnow() - timedelta(minutes=1),
    )

    assert await UserManagementService(db_session).lift_expired_ban(user) is True
    assert user.banned is False
    assert user.ban_reason is None


@pytest.mark.asyncio
async def test_active_ban_is_not_lifted(db_session):
    user = await UserFactory.create_async(db_session, banned=True)

    assert await UserManagementService(db_session).lift_expired_ban(user) is False
    assert user.banned is True


@pytest.mark.asyncio
async def test_delete_user_cascades(db_session, test_user):
    session = await UserSessionFactory.create_async(db_session, user_id=test_user.id)
    note = await NoteFactory.create_async(db_session, user_id=test_user.id)

    await UserManagementService(db_session).delete_user(test_user.id)

    db_session.expunge_all()
    assert await db_session.get(User, test_user.id) is None
    assert await db_session.get(UserSession, session.id) is None
    assert await db_session.get(Note, note.id) is None
