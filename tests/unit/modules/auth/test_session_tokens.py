"""Tests for session cookies and session resolution."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Response
from jose import jwt

from src.modules.auth.service import AuthService
from src.modules.auth.tokens import (
    decode_session_cookie,
    encode_session_cookie,
    set_session_cookie,
)
from src.utils.dates import utcnow
from tests.factories import UserFactory, UserSessionFactory


def test_cookie_round_trip_carries_session_token():
    cookie = encode_session_cookie("tok_123", "user-1", utcnow() + timedelta(days=1))

    assert decode_session_cookie(cookie) == "tok_123"


def test_expired_cookie_is_rejected():
    cookie = encode_session_cookie("tok_123", "user-1", utcnow() - timedelta(minutes=1))

    assert decode_session_cookie(cookie) is None


def test_cookie_signed_with_other_secret_is_rejected():
    forged = jwt.encode({"sid": "tok_123"}, "not-the-secret", algorithm="HS256")

    assert decode_session_cookie(forged) is None


def test_naive_expiry_is_read_as_utc():
    # SQLite hands back timestamps without tzinfo
    naive = datetime(2030, 6, 5, 12, 0, 0)
    response = Response()

    set_session_cookie(response, "tok_123", "user-1", naive)

    header = response.headers["set-cookie"]
    assert "05 Jun 2030 12:00:00 GMT" in header
    cookie = header.split(";", 1)[0].split("=", 1)[1]
    claims = jwt.get_unverified_claims(cookie)
    assert claims["exp"] == int(naive.replace(tzinfo=timezone.utc).timestamp())


@pytest.mark.parametrize("value", [None, "", "garbage"])
def test_unusable_cookie_values(value):
    assert decode_session_cookie(value) is None


@pytest.mark.asyncio
async def test_resolve_live_session(db_session, test_user):
    session = await UserSessionFactory.create_async(db_session, user_id=test_user.id)

    resolved = await AuthService(db_session).resolve_session(session.token)

    assert resolved is not None
    user, resolved_session = resolved
    assert user.id == test_user.id
    assert resolved_session.id == session.id


@pytest.mark.asyncio
async def test_resolve_removes_expired_session(db_session, test_user):
    session = await UserSessionFactory.create_async(
        db_session, user_id=test_user.id, expires_at=utcnow() - timedelta(seconds=1)
    )
    service = AuthService(db_session)

    assert await service.resolve_session(session.token) is None
    assert await service.list_user_sessions(test_user.id) == []


@pytest.mark.asyncio
async def test_resolve_rejects_banned_user(db_session):
    user = await UserFactory.create_async(db_session, banned=True)
    session = await UserSessionFactory.create_async(db_session, user_id=user.id)

    assert await AuthService(db_session).resolve_session(session.token) is None
