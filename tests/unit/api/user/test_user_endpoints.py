"""Current user profile, sessions and account deletion tests."""

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import select

from src.api.core.messages import MessageCode
from src.database.models import OrganizationMember, OrganizationRole, User, UserSession
from tests.utils.assertions import (
    assert_authentication_error,
    assert_error_response,
    assert_success_response,
    assert_validation_error,
)


@pytest.mark.asyncio
async def test_get_user_profile_success(authorized_client: AsyncClient, test_user):
    response = await authorized_client.get("/v1/users/me")

    user_data = assert_success_response(response)
    assert user_data["id"] == str(test_user.id)
    assert user_data["email"] == test_user.email
    assert user_data["name"] == "Test User"
    assert user_data["role"] == "USER"
    assert user_data["banned"] is False


@pytest.mark.asyncio
async def test_get_user_profile_unauthorized(public_client: AsyncClient):
    """Test that profile endpoint requires authentication."""
    response = await public_client.get("/v1/users/me")

    assert_authentication_error(response)


@pytest.mark.asyncio
async def test_update_user_profile_partial(
    authorized_client: AsyncClient, test_user, email_service, session_factory
):
    """Only the fields sent are changed."""
    response = await authorized_client.patch(
        "/v1/users/me",
        json={"bio": "Builds things", "website": "https://ada.example.com"},
    )

    data = assert_success_response(response, MessageCode.USER_UPDATED)
    assert data["bio"] == "Builds things"
    assert data["website"] == "https://ada.example.com/"
    assert data["name"] == "Test User"
    assert "Your profile was updated" in email_service.subjects()

    async with session_factory() as session:
        user = await session.get(User, test_user.id)
        assert user.bio == "Builds things"


@pytest.mark.asyncio
async def test_update_user_profile_validation(authorized_client: AsyncClient):
    response = await authorized_client.patch("/v1/users/me", json={"name": ""})

    assert_validation_error(response)


@pytest.mark.asyncio
async def test_profile_update_survives_email_failure(
    app, authorized_client: AsyncClient, email_service
):
    """Notification email failures do not fail the request."""
    email_service.fail = True

    response = await authorized_client.patch("/v1/users/me", json={"location": "Oslo"})

    assert_success_response(response, MessageCode.USER_UPDATED)


@pytest.mark.asyncio
async def test_list_user_organizations(
    authorized_client: AsyncClient, test_organization
):
    response = await authorized_client.get("/v1/users/me/organizations")

    data = assert_success_response(response)
    assert len(data) == 1
    assert data[0]["id"] == str(test_organization.id)
    assert data[0]["role"] == OrganizationRole.OWNER.value


@pytest.mark.asyncio
async def test_list_and_revoke_sessions(
    authorized_client: AsyncClient, client_factory, test_user
):
    # A second device
    async with await client_factory(test_user) as other_device:
        sessions = assert_success_response(
            await authorized_client.get("/v1/users/me/sessions")
        )
        assert len(sessions) == 2

        current = assert_success_response(
            await other_device.get("/v1/auth/session")
        )["session"]["id"]
        response = await authorized_client.delete(f"/v1/users/me/sessions/{current}")
        assert_success_response(response, MessageCode.SESSION_REVOKED)

        assert_authentication_error(await other_device.get("/v1/users/me"))


@pytest.mark.asyncio
async def test_revoke_unknown_session(authorized_client: AsyncClient):
    response = await authorized_client.delete(
        "/v1/users/me/sessions/00000000-0000-0000-0000-000000000000"
    )

    assert_error_response(
        response, MessageCode.SESSION_NOT_FOUND, status.HTTP_404_NOT_FOUND
    )


@pytest.mark.asyncio
async def test_delete_account_cascades(
    authorized_client: AsyncClient,
    test_user,
    test_organization,
    email_service,
    session_factory,
):
    response = await authorized_client.delete("/v1/users/me")

    assert_success_response(response, MessageCode.USER_DELETED)
    assert email_service.outbox[-1]["to"] == test_user.email

    async with session_factory() as session:
        assert await session.get(User, test_user.id) is None
        sessions = await session.execute(
            select(UserSession).where(UserSession.user_id == test_user.id)
        )
        assert sessions.scalars().all() == []
        memberships = await session.execute(
            select(OrganizationMember).where(OrganizationMember.user_id == test_user.id)
        )
        assert memberships.scalars().all() == []
