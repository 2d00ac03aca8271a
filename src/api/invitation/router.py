"""Organization invitation endpoints."""

from uuid import UUID

from fastapi import APIRouter, Request, status

from src.api.core.decorators.auth import require_org_role
from src.api.core.dependencies import (
    AsyncSessionDep,
    CurrentUserAuthDep,
    EmailServiceDep,
    OrganizationInvitationServiceDep,
)
from src.api.core.messages import APIResponse, MessageCode
from src.api.invitation.models import (
    InvitationModel,
    InvitationPreview,
    InvitationWithTokenModel,
    OrganizationSummary,
    UserInvitationModel,
)
from src.api.invitation.requests import (
    InvitationAcceptResponse,
    InvitationActionResponse,
    InvitationCreateRequest,
    InvitationCreateResponse,
    InvitationListResponse,
    InvitationPreviewResponse,
    UserInvitationsResponse,
)
from src.database.models import OrganizationRole
from src.modules.organization.invitation import is_invitation_valid
from src.modules.organization.use_cases import OrganizationService
from src.modules.posthog.client import capture_event
from src.utils.settings.app import AppSettings

router = APIRouter(prefix="/invitations", tags=["invitations"])


@router.post(
    "/organizations/{organization_id}",
    response_model=InvitationCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
@require_org_role(OrganizationRole.ADMIN)
async def create_invitation(
    organization_id: UUID,
    request: Request,
    invitation_data: InvitationCreateRequest,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    invitation_service: OrganizationInvitationServiceDep,
    email_service: EmailServiceDep,
) -> InvitationCreateResponse:
    """Invite an email address to the organization (admins and owner)."""
    invitation = await invitation_service.create_invitation(
        organization_id=organization_id,
        email=invitation_data.email,
        invited_by_id=current_user.user.id,
        role=invitation_data.role,
    )
    organization = await OrganizationService(db).get_organization_or_404(
        organization_id
    )

    await email_service.best_effort(
        email_service.send_transactional_email(
            to=invitation.email,
            heading=f"You're invited to join {organization.name}",
            message=(
                f"{current_user.user.name} invited you to join {organization.name} "
                f"as {OrganizationRole(invitation.role).value.lower()}."
            ),
            button_text="View invitation",
            button_url=f"{AppSettings().APP_URL}/invitations/{invitation.token}",
            footer_text="This invitation expires in 7 days.",
        )
    )
    await capture_event(
        "organization_invitation_sent",
        str(current_user.user.id),
        {"organization_id": str(organization_id)},
    )

    return APIResponse.success(
        message_code=MessageCode.INVITE_CREATED,
        data=InvitationWithTokenModel.model_validate(invitation),
    )


@router.get("/organizations/{organization_id}", response_model=InvitationListResponse)
@require_org_role(OrganizationRole.ADMIN)
async def list_organization_invitations(
    organization_id: UUID,
    request: Request,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    invitation_service: OrganizationInvitationServiceDep,
) -> InvitationListResponse:
    """Pending invitations of the organization, newest first."""
    invitations = await invitation_service.list_organization_invitations(
        organization_id
    )
    return APIResponse.success(
        data=[InvitationModel.model_validate(item) for item in invitations]
    )


@router.delete(
    "/organizations/{organization_id}/{invitation_id}",
    response_model=InvitationActionResponse,
)
@require_org_role(OrganizationRole.ADMIN)
async def revoke_invitation(
    organization_id: UUID,
    invitation_id: UUID,
    request: Request,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    invitation_service: OrganizationInvitationServiceDep,
) -> InvitationActionResponse:
    await invitation_service.revoke_invitation(invitation_id, organization_id)
    return APIResponse.success(message_code=MessageCode.INVITE_REVOKED, data=True)


@router.get("/me", response_model=UserInvitationsResponse)
async def list_my_invitations(
    request: Request,
    current_user: CurrentUserAuthDep,
    invitation_service: OrganizationInvitationServiceDep,
) -> UserInvitationsResponse:
    """Pending invitations addressed to the current user's email."""
    invitations = await invitation_service.get_user_invitations(
        current_user.user.email
    )
    return APIResponse.success(
        data=[UserInvitationModel.model_validate(item) for item in invitations]
    )


@router.get("/token/{token}", response_model=InvitationPreviewResponse)
async def preview_invitation(
    token: str,
    request: Request,
    invitation_service: OrganizationInvitationServiceDep,
) -> InvitationPreviewResponse:
    """Public summary of an invitation, shown before sign-in."""
    invitation = await invitation_service.get_invitation_by_token_or_404(token)
    return APIResponse.success(
        data=InvitationPreview(
            organization=OrganizationSummary.model_validate(invitation.organization),
            email=invitation.email,
            role=invitation.role,
            inviter_name=invitation.invited_by.name,
            expires_at=invitation.expires_at,
            is_valid=is_invitation_valid(invitation),
        )
    )


@router.post("/token/{token}/accept", response_model=InvitationAcceptResponse)
async def accept_invitation(
    token: str,
    request: Request,
    current_user: CurrentUserAuthDep,
    invitation_service: OrganizationInvitationServiceDep,
) -> InvitationAcceptResponse:
    invitation = await invitation_service.accept_invitation(
        token, current_user.user.id
    )
    await capture_event(
        "organization_invitation_accepted",
        str(current_user.user.id),
        {"organization_id": str(invitation.organization_id)},
    )
    return APIResponse.success(
        message_code=MessageCode.INVITE_ACCEPTED,
        data=InvitationModel.model_validate(invitation),
    )


@router.post("/token/{token}/decline", response_model=InvitationActionResponse)
async def decline_invitation(
    token: str,
    request: Request,
    current_user: CurrentUserAuthDep,
    invitation_service: OrganizationInvitationServiceDep,
) -> InvitationActionResponse:
    """Decline an invitation; it is deleted."""
    await invitation_service.decline_invitation(token, current_user.user.id)
    return APIResponse.success(message_code=MessageCode.INVITE_DECLINED, data=True)
