"""Administrative endpoints: user moderation, sessions and maintenance."""

from uuid import UUID

from fastapi import APIRouter, Query, Request, Response, status

from src.api.admin.models import CleanupResult, InterestSignupModel, SessionsRevoked
from src.api.auth.models import AuthSessionData
from src.api.auth.requests import AuthSessionResponse
from src.api.admin.requests import (
    AdminSessionsResponse,
    AdminUserCreateRequest,
    AdminUserListResponse,
    AdminUserResponse,
    AdminUserUpdateRequest,
    BanUserRequest,
    CleanupResponse,
    InterestSignupListResponse,
    SessionsRevokedResponse,
    SetPasswordRequest,
    SetRoleRequest,
)
from src.api.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from src.api.core.decorators.admin import admin
from src.api.core.dependencies import (
    AdminServiceDep,
    AsyncSessionDep,
    AuthServiceDep,
    CurrentUserAuthDep,
    EmailServiceDep,
    InterestListServiceDep,
    OrganizationInvitationServiceDep,
    OrganizationServiceDep,
)
from src.api.core.messages import APIResponse, MessageCode, Paginated
from src.api.user.models import SessionModel, UserModel
from src.database.models import UserRole
from src.modules.user.admin import SortDirection, UserSortField
from src.modules.auth.tokens import set_session_cookie
from src.modules.posthog.client import capture_event
from src.modules.user.management import UserManagementService
from src.utils.logger import get_client_ip
from src.utils.settings.auth import AuthSettings

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=AdminUserListResponse)
@admin()
async def list_users(
    request: Request,
    current_user: CurrentUserAuthDep,
    admin_service: AdminServiceDep,
    search: str | None = Query(default=None, max_length=100),
    role: UserRole | None = Query(default=None),
    banned: bool | None = Query(default=None),
    sort_by: UserSortField = Query(default=UserSortField.CREATED_AT),
    sort_direction: SortDirection = Query(default=SortDirection.DESC),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
) -> AdminUserListResponse:
    """Search and page through all users."""
    users, total = await admin_service.list_users(
        search=search,
        role=role,
        banned=banned,
        sort_by=sort_by,
        sort_direction=sort_direction,
        limit=limit,
        offset=offset,
    )
    return APIResponse.success(
        data=Paginated.build(
            [UserModel.model_validate(user) for user in users], total, limit, offset
        )
    )


@router.post(
    "/users",
    response_model=AdminUserResponse,
    status_code=status.HTTP_201_CREATED,
)
@admin()
async def create_user(
    request: Request,
    user_data: AdminUserCreateRequest,
    current_user: CurrentUserAuthDep,
    admin_service: AdminServiceDep,
) -> AdminUserResponse:
    user = await admin_service.create_user(
        email=user_data.email,
        name=user_data.name,
        password=user_data.password,
        role=user_data.role,
    )
    return APIResponse.success(
        message_code=MessageCode.USER_CREATED, data=UserModel.model_validate(user)
    )


@router.patch("/users/{user_id}", response_model=AdminUserResponse)
@admin()
async def update_user(
    user_id: UUID,
    request: Request,
    user_data: AdminUserUpdateRequest,
    current_user: CurrentUserAuthDep,
    admin_service: AdminServiceDep,
) -> AdminUserResponse:
    user = await admin_service.update_user(
        user_id,
        name=user_data.name,
        email=user_data.email,
        email_verified=user_data.email_verified,
    )
    return APIResponse.success(
        message_code=MessageCode.USER_UPDATED, data=UserModel.model_validate(user)
    )


@router.put("/users/{user_id}/role", response_model=AdminUserResponse)
@admin()
async def set_user_role(
    user_id: UUID,
    request: Request,
    role_data: SetRoleRequest,
    current_user: CurrentUserAuthDep,
    admin_service: AdminServiceDep,
) -> AdminUserResponse:
    user = await admin_service.set_role(user_id, role_data.role, current_user.user.id)
    return APIResponse.success(
        message_code=MessageCode.ROLE_CHANGED, data=UserModel.model_validate(user)
    )


@router.put("/users/{user_id}/password", response_model=AdminUserResponse)
@admin()
async def set_user_password(
    user_id: UUID,
    request: Request,
    password_data: SetPasswordRequest,
    current_user: CurrentUserAuthDep,
    admin_service: AdminServiceDep,
) -> AdminUserResponse:
    """Replace the password and sign the user out everywhere."""
    user = await admin_service.set_password(user_id, password_data.password)
    return APIResponse.success(
        message_code=MessageCode.USER_UPDATED, data=UserModel.model_validate(user)
    )


@router.post("/users/{user_id}/ban", response_model=AdminUserResponse)
@admin()
async def ban_user(
    user_id: UUID,
    request: Request,
    ban_data: BanUserRequest,
    current_user: CurrentUserAuthDep,
    admin_service: AdminServiceDep,
    email_service: EmailServiceDep,
) -> AdminUserResponse:
    user = await admin_service.ban_user(
        user_id,
        current_user.user.id,
        reason=ban_data.reason,
        expires_in_seconds=ban_data.expires_in_seconds,
    )
    await email_service.best_effort(
        email_service.send_ban_notice(user.email, user.name, ban_data.reason)
    )
    return APIResponse.success(
        message_code=MessageCode.USER_BAN_APPLIED, data=UserModel.model_validate(user)
    )


@router.post("/users/{user_id}/unban", response_model=AdminUserResponse)
@admin()
async def unban_user(
    user_id: UUID,
    request: Request,
    current_user: CurrentUserAuthDep,
    admin_service: AdminServiceDep,
) -> AdminUserResponse:
    user = await admin_service.unban_user(user_id)
    return APIResponse.success(
        message_code=MessageCode.USER_BAN_LIFTED, data=UserModel.model_validate(user)
    )


@router.delete("/users/{user_id}", response_model=AdminUserResponse)
@admin()
async def remove_user(
    user_id: UUID,
    request: Request,
    current_user: CurrentUserAuthDep,
    admin_service: AdminServiceDep,
) -> AdminUserResponse:
    user = await admin_service.remove_user(user_id, current_user.user.id)
    return APIResponse.success(
        message_code=MessageCode.USER_DELETED, data=UserModel.model_validate(user)
    )


@router.get("/users/{user_id}/sessions", response_model=AdminSessionsResponse)
@admin()
async def list_user_sessions(
    user_id: UUID,
    request: Request,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    auth_service: AuthServiceDep,
) -> AdminSessionsResponse:
    await UserManagementService(db).get_user_or_404(user_id)
    sessions = await auth_service.list_user_sessions(user_id)
    return APIResponse.success(
        data=[SessionModel.model_validate(session) for session in sessions]
    )


@router.delete(
    "/users/{user_id}/sessions/{session_id}",
    response_model=SessionsRevokedResponse,
)
@admin()
async def revoke_user_session(
    user_id: UUID,
    session_id: UUID,
    request: Request,
    current_user: CurrentUserAuthDep,
    auth_service: AuthServiceDep,
) -> SessionsRevokedResponse:
    await auth_service.revoke_session(session_id, user_id)
    return APIResponse.success(
        message_code=MessageCode.SESSION_REVOKED, data=SessionsRevoked(revoked=1)
    )


@router.delete("/users/{user_id}/sessions", response_model=SessionsRevokedResponse)
@admin()
async def revoke_all_user_sessions(
    user_id: UUID,
    request: Request,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    auth_service: AuthServiceDep,
) -> SessionsRevokedResponse:
    await UserManagementService(db).get_user_or_404(user_id)
    revoked = await auth_service.revoke_user_sessions(user_id)
    return APIResponse.success(
        message_code=MessageCode.SESSION_REVOKED,
        data=SessionsRevoked(revoked=revoked),
    )


@router.post("/users/{user_id}/impersonate", response_model=AuthSessionResponse)
@admin()
async def impersonate_user(
    user_id: UUID,
    request: Request,
    response: Response,
    current_user: CurrentUserAuthDep,
    admin_service: AdminServiceDep,
) -> AuthSessionResponse:
    """
    Sign in as another user. The admin's own session is parked in a second
    cookie and comes back through ``POST /v1/auth/stop-impersonating``.
    """
    user, session = await admin_service.impersonate_user(
        user_id,
        current_user.user.id,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    admin_session = current_user.session
    set_session_cookie(
        response,
        admin_session.token,
        str(current_user.user.id),
        admin_session.expires_at,
        cookie_name=AuthSettings().ADMIN_SESSION_COOKIE_NAME,
    )
    set_session_cookie(response, session.token, str(user.id), session.expires_at)
    await capture_event(
        "user_impersonated", str(current_user.user.id), {"user_id": str(user.id)}
    )

    return APIResponse.success(
        message_code=MessageCode.IMPERSONATION_STARTED,
        data=AuthSessionData(
            user=UserModel.model_validate(user),
            session=SessionModel.model_validate(session),
        ),
    )


@router.get("/interest", response_model=InterestSignupListResponse)
@admin()
async def list_interest_signups(
    request: Request,
    current_user: CurrentUserAuthDep,
    interest_service: InterestListServiceDep,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
) -> InterestSignupListResponse:
    signups, total = await interest_service.list_signups(limit=limit, offset=offset)
    return APIResponse.success(
        data=Paginated.build(
            [InterestSignupModel.model_validate(item) for item in signups],
            total,
            limit,
            offset,
        )
    )


@router.post("/maintenance/invitations/cleanup", response_model=CleanupResponse)
@admin()
async def cleanup_expired_invitations(
    request: Request,
    current_user: CurrentUserAuthDep,
    invitation_service: OrganizationInvitationServiceDep,
) -> CleanupResponse:
    """Delete invitations that expired without being accepted."""
    removed = await invitation_service.cleanup_expired_invitations()
    return APIResponse.success(
        message_code=MessageCode.CLEANUP_COMPLETED,
        data=CleanupResult(removed=removed),
    )


@router.post("/maintenance/organizations/purge", response_model=CleanupResponse)
@admin()
async def purge_deleted_organizations(
    request: Request,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> CleanupResponse:
    """Permanently delete organizations past their restore window."""
    removed = await organization_service.purge_soft_deleted()
    return APIResponse.success(
        message_code=MessageCode.CLEANUP_COMPLETED,
        data=CleanupResult(removed=removed),
    )
