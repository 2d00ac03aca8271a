"""Organization domain router."""

from uuid import UUID

from fastapi import APIRouter, Request, status

from src.api.core.decorators.auth import require_org_role
from src.api.core.dependencies import (
    AsyncSessionDep,
    CurrentUserAuthDep,
    OrganizationServiceDep,
)
from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import APIResponse, MessageCode
from src.api.organization.models import (
    OrganizationDetails,
    OrganizationMemberModel,
    OrganizationMemberWithUser,
    OrganizationModel,
)
from src.api.organization.requests import (
    MemberRoleUpdateRequest,
    OrganizationCreateRequest,
    OrganizationDetailsResponse,
    OrganizationListResponse,
    OrganizationMemberResponse,
    OrganizationMembersResponse,
    OrganizationResponse,
    OrganizationUpdateRequest,
    RemoveUserResponse,
)
from src.database.models import OrganizationRole
from src.modules.organization.use_cases import OrganizationService

router = APIRouter(
    prefix="/organizations",
    tags=["organizations"],
)


async def _details(
    service: OrganizationService, organization, role: OrganizationRole | str
) -> OrganizationDetails:
    return OrganizationDetails(
        **OrganizationModel.model_validate(organization).model_dump(),
        role=OrganizationRole(role).value,
        member_count=await service.count_members(organization.id),
    )


@router.post(
    "/",
    response_model=OrganizationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_organization(
    request: Request,
    organization_data: OrganizationCreateRequest,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> OrganizationResponse:
    """Create an organization owned by the current user."""
    organization = await organization_service.create_organization(
        name=organization_data.name,
        owner_id=current_user.user.id,
        slug=organization_data.slug,
        logo=str(organization_data.logo) if organization_data.logo else None,
        description=organization_data.description,
    )
    return APIResponse.success(
        message_code=MessageCode.ORGANIZATION_CREATED,
        data=OrganizationModel.model_validate(organization),
    )


@router.get("/", response_model=OrganizationListResponse)
async def list_my_organizations(
    request: Request,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> OrganizationListResponse:
    memberships = await organization_service.get_user_organizations(
        current_user.user.id
    )
    return APIResponse.success(
        data=[
            await _details(organization_service, organization, role)
            for organization, role in memberships
        ]
    )


@router.get("/{organization_id}", response_model=OrganizationDetailsResponse)
@require_org_role(OrganizationRole.MEMBER)
async def get_organization(
    organization_id: UUID,
    request: Request,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> OrganizationDetailsResponse:
    organization = await organization_service.get_organization_or_404(organization_id)
    membership = await organization_service.get_membership(
        organization_id, current_user.user.id
    )
    return APIResponse.success(
        data=await _details(organization_service, organization, membership.role)
    )


@router.patch("/{organization_id}", response_model=OrganizationResponse)
@require_org_role(OrganizationRole.ADMIN)
async def update_organization(
    organization_id: UUID,
    request: Request,
    organization_data: OrganizationUpdateRequest,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> OrganizationResponse:
    """Update organization details (admins and owner)."""
    organization = await organization_service.update_organization(
        organization_id,
        name=organization_data.name,
        slug=organization_data.slug,
        logo=str(organization_data.logo) if organization_data.logo else None,
        description=organization_data.description,
    )
    return APIResponse.success(
        message_code=MessageCode.ORGANIZATION_UPDATED,
        data=OrganizationModel.model_validate(organization),
    )


@router.delete("/{organization_id}", response_model=OrganizationResponse)
@require_org_role(OrganizationRole.OWNER)
async def delete_organization(
    organization_id: UUID,
    request: Request,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> OrganizationResponse:
    """Soft delete; the owner can restore it during the grace period."""
    organization = await organization_service.soft_delete_organization(
        organization_id
    )
    return APIResponse.success(
        message_code=MessageCode.ORGANIZATION_DELETED,
        data=OrganizationModel.model_validate(organization),
    )


@router.post("/{organization_id}/restore", response_model=OrganizationResponse)
async def restore_organization(
    organization_id: UUID,
    request: Request,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> OrganizationResponse:
    organization = await organization_service.restore_organization(
        organization_id, current_user.user.id
    )
    return APIResponse.success(
        message_code=MessageCode.ORGANIZATION_RESTORED,
        data=OrganizationModel.model_validate(organization),
    )


@router.get("/{organization_id}/members", response_model=OrganizationMembersResponse)
@require_org_role(OrganizationRole.MEMBER)
async def list_organization_members(
    organization_id: UUID,
    request: Request,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> OrganizationMembersResponse:
    """Members ordered by role, owner first."""
    members = await organization_service.list_members(organization_id)
    return APIResponse.success(
        data=[OrganizationMemberWithUser.model_validate(member) for member in members]
    )


@router.patch(
    "/{organization_id}/members/{user_id}",
    response_model=OrganizationMemberResponse,
)
@require_org_role(OrganizationRole.ADMIN)
async def update_member_role(
    organization_id: UUID,
    user_id: UUID,
    request: Request,
    role_data: MemberRoleUpdateRequest,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> OrganizationMemberResponse:
    if user_id == current_user.user.id:
        raise IridiumException(
            MessageCode.CANNOT_CHANGE_OWN_ROLE, status.HTTP_400_BAD_REQUEST
        )

    membership = await organization_service.update_member_role(
        organization_id, user_id, role_data.role
    )
    return APIResponse.success(
        message_code=MessageCode.ROLE_CHANGED,
        data=OrganizationMemberModel.model_validate(membership),
    )


@router.delete(
    "/{organization_id}/members/{user_id}",
    response_model=RemoveUserResponse,
)
@require_org_role(OrganizationRole.ADMIN)
async def remove_organization_member(
    organization_id: UUID,
    user_id: UUID,
    request: Request,
    db: AsyncSessionDep,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> RemoveUserResponse:
    """Remove a member (admins and owner). The owner cannot be removed."""
    await organization_service.remove_member(organization_id, user_id)
    return APIResponse.success(
        message_code=MessageCode.USER_REMOVED_FROM_ORGANIZATION,
        data=True,
    )


@router.post("/{organization_id}/leave", response_model=RemoveUserResponse)
async def leave_organization(
    organization_id: UUID,
    request: Request,
    current_user: CurrentUserAuthDep,
    organization_service: OrganizationServiceDep,
) -> RemoveUserResponse:
    await organization_service.leave_organization(
        organization_id, current_user.user.id
    )
    return APIResponse.success(message_code=MessageCode.ORGANIZATION_LEFT, data=True)
