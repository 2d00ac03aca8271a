"""User domain router for the signed-in user's own account."""

from uuid import UUID

from fastapi import APIRouter, Request, Response

from src.api.core.dependencies import (
    AuthServiceDep,
    CurrentUserAuthDep,
    EmailServiceDep,
    OrganizationServiceDep,
    UserManagementServiceDep,
)
from src.api.core.messages import APIResponse, MessageCode
from src.api.user.models import SessionModel, UserModel, UserOrganizationModel
from src.api.user.requests import (
    UserDeletedResponse,
    UserOrganizationsResponse,
    UserProfileResponse,
    UserProfileUpdateRequest,
)
from src.modules.auth.tokens import clear_session_cookie
from src.modules.posthog.client import capture_event

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserProfileResponse)
async def get_current_user(
    request: Request,
    current_user: CurrentUserAuthDep,
    user_service: UserManagementServiceDep,
) -> UserProfileResponse:
    """Get current user's profile information."""
    user = await user_service.get_user_or_404(current_user.user.id)
    return APIResponse.success(data=UserModel.model_validate(user))


@router.patch("/me", response_model=UserProfileResponse)
async def update_current_user(
    request: Request,
    profile_data: UserProfileUpdateRequest,
    current_user: CurrentUserAuthDep,
    user_service: UserManagementServiceDep,
    email_service: EmailServiceDep,
) -> UserProfileResponse:
    """Update profile fields; unset fields are left unchanged."""
    changes = profile_data.model_dump(exclude_unset=True, mode="json")
    user = await user_service.update_profile(current_user.user.id, **changes)

    await email_service.best_effort(
        email_service.send_transactional_email(
            to=user.email,
            heading="Your profile was updated",
            message=f"Hi {user.name}, the changes to your profile have been saved.",
            footer_text="If you did not make this change, contact support.",
        )
    )

    return APIResponse.success(
        message_code=MessageCode.USER_UPDATED, data=UserModel.model_validate(user)
    )


@router.delete("/me", response_model=UserDeletedResponse)
async def delete_current_user(
    request: Request,
    response: Response,
    current_user: CurrentUserAuthDep,
    user_service: UserManagementServiceDep,
    email_service: EmailServiceDep,
) -> UserDeletedResponse:
    """Delete the account and everything it owns, then sign out."""
    user = await user_service.delete_user(current_user.user.id)
    clear_session_cookie(response)

    await email_service.best_effort(
        email_service.send_account_deletion_email(user.email, user.name)
    )
    await capture_event("user_account_deleted", str(user.id))

    return APIResponse.success(message_code=MessageCode.USER_DELETED, data=True)


@router.get("/me/organizations", response_model=UserOrganizationsResponse)
async def list_user_organizations(
    request: Request,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> UserOrganizationsResponse:
    """Organizations the current user belongs to, with their role."""
    memberships = await organization_service.get_user_organizations(
        current_user.user.id
    )
    return APIResponse.success(
        data=[
            UserOrganizationModel(
                id=organization.id,
                name=organization.name,
                slug=organization.slug,
                logo=organization.logo,
                role=role,
                created_at=organization.created_at,
            )
            for organization, role in memberships
        ]
    )


@router.get("/me/sessions", response_model=APIResponse[list[SessionModel]])
async def list_user_sessions(
    request: Request,
    current_user: CurrentUserAuthDep,
    auth_service: AuthServiceDep,
) -> APIResponse[list[SessionModel]]:
    sessions = await auth_service.list_user_sessions(current_user.user.id)
    return APIResponse.success(
        data=[SessionModel.model_validate(session) for session in sessions]
    )


@router.delete("/me/sessions/{session_id}", response_model=APIResponse[bool])
async def revoke_user_session(
    session_id: UUID,
    request: Request,
    current_user: CurrentUserAuthDep,
    auth_service: AuthServiceDep,
) -> APIResponse[bool]:
    await auth_service.revoke_session(session_id, current_user.user.id)
    return APIResponse.success(message_code=MessageCode.SESSION_REVOKED, data=True)
