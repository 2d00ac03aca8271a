"""Admin impersonation tests."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from src.api.core.messages import MessageCode
from src.database.models import UserRole, UserSession
from src.utils.settings.auth import AuthSettings
from tests.utils.assertions import assert_error_response, assert_success_response

COOKIE_NAME = AuthSettings().SESSION_COOKIE_NAME
ADMIN_COOKIE_NAME = AuthSettings().ADMIN_SESSION_COOKIE_NAME


def client_with(app: FastAPI, cookies: dict[str, str]) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test-iridium-api",
        cookies=cookies,
    )


async def start_impersonating(admin_client: AsyncClient, user_id) -> dict[str, str]:
    response = await admin_client.post(f"/v1/admin/users/{user_id}/impersonate")
    assert_success_response(response, MessageCode.IMPERSONATION_STARTED)
    return {
        COOKIE_NAME: response.cookies[COOKIE_NAME],
        ADMIN_COOKIE_NAME: response.cookies[ADMIN_COOKIE_NAME],
    }


@pytest.mark.asyncio
async def test_impersonate_user(
    admin_client: AsyncClient, app, test_user, test_admin_user, session_factory
):
    response = await admin_client.post(f"/v1/admin/users/{test_user.id}/impersonate")

    data = assert_success_response(response, MessageCode.IMPERSONATION_STARTED)
    assert data["user"]["id"] == str(test_user.id)
    assert data["session"]["impersonated_by_id"] == str(test_admin_user.id)
    expires_at = datetime.fromisoformat(data["session"]["expires_at"])
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    assert expires_at - datetime.now(timezone.utc) <= timedelta(
        minutes=AuthSettings().IMPERSONATION_TTL_MINUTES
    )

    async with client_with(app, {COOKIE_NAME: response.cookies[COOKIE_NAME]}) as client:
        me = assert_success_response(await client.get("/v1/auth/session"))
    assert me["user"]["id"] == str(test_user.id)
    assert me["session"]["impersonated_by_id"] == str(test_admin_user.id)

    async with session_factory() as session:
        result = await session.execute(
            select(UserSession).where(UserSession.user_id == test_user.id)
        )
        assert [row.impersonated_by_id for row in result.scalars()] == [
            test_admin_user.id
        ]


@pytest.mark.asyncio
async def test_stop_impersonating_restores_admin(
    admin_client: AsyncClient, app, test_user, test_admin_user, session_factory
):
    cookies = await start_impersonating(admin_client, test_user.id)

    async with client_with(app, cookies) as client:
        response = await client.post("/v1/auth/stop-impersonating")

    data = assert_success_response(response, MessageCode.IMPERSONATION_STOPPED)
    assert data["user"]["id"] == str(test_admin_user.id)
    assert data["session"]["impersonated_by_id"] is None
    assert response.cookies.get(COOKIE_NAME)
    assert ADMIN_COOKIE_NAME in response.headers.get("set-cookie", "")

    async with client_with(app, {COOKIE_NAME: response.cookies[COOKIE_NAME]}) as client:
        me = assert_success_response(await client.get("/v1/auth/session"))
    assert me["user"]["id"] == str(test_admin_user.id)

    async with session_factory() as session:
        result = await session.execute(
            select(UserSession).where(UserSession.user_id == test_user.id)
        )
        assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_stop_without_admin_cookie_signs_out(
    admin_client: AsyncClient, app, test_user, session_factory
):
    cookies = await start_impersonating(admin_client, test_user.id)

    async with client_with(app, {COOKIE_NAME: cookies[COOKIE_NAME]}) as client:
        response = await client.post("/v1/auth/stop-impersonating")

    assert_error_response(
        response, MessageCode.INVALID_SESSION, status.HTTP_401_UNAUTHORIZED
    )
    async with session_factory() as session:
        result = await session.execute(
            select(UserSession).where(UserSession.user_id == test_user.id)
        )
        assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_stop_when_not_impersonating(authorized_client: AsyncClient):
    response = await authorized_client.post("/v1/auth/stop-impersonating")

    assert_error_response(
        response, MessageCode.NOT_IMPERSONATING, status.HTTP_400_BAD_REQUEST
    )


@pytest.mark.asyncio
async def test_cannot_impersonate_admin(
    admin_client: AsyncClient, user_factory, db_session
):
    other_admin = await user_factory.create_async(db_session, role=UserRole.ADMIN)

    response = await admin_client.post(f"/v1/admin/users/{other_admin.id}/impersonate")

    assert_error_response(
        response, MessageCode.CANNOT_IMPERSONATE_ADMIN, status.HTTP_403_FORBIDDEN
    )


@pytest.mark.asyncio
async def test_cannot_impersonate_self(admin_client: AsyncClient, test_admin_user):
    response = await admin_client.post(
        f"/v1/admin/users/{test_admin_user.id}/impersonate"
    )

    assert_error_response(
        response, MessageCode.CANNOT_MODERATE_YOURSELF, status.HTTP_400_BAD_REQUEST
    )


@pytest.mark.asyncio
async def test_cannot_impersonate_banned_user(
    admin_client: AsyncClient, user_factory, db_session
):
    banned = await user_factory.create_async(db_session, banned=True)

    response = await admin_client.post(f"/v1/admin/users/{banned.id}/impersonate")

    assert_error_response(response, MessageCode.USER_BANNED, status.HTTP_403_FORBIDDEN)


@pytest.mark.asyncio
async def test_regular_user_cannot_impersonate(
    authorized_client: AsyncClient, user_factory, db_session
):
    other = await user_factory.create_async(db_session)

    response = await authorized_client.post(f"/v1/admin/users/{other.id}/impersonate")

    assert_error_response(
        response, MessageCode.ADMIN_REQUIRED, status.HTTP_403_FORBIDDEN
    )
