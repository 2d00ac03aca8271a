from pydantic import BaseModel, EmailStr, field_validator

from src.api.core.messages import APIResponse
from src.api.invitation.models import (
    InvitationModel,
    InvitationPreview,
    InvitationWithTokenModel,
    UserInvitationModel,
)
from src.database.models import OrganizationRole


class InvitationCreateRequest(BaseModel):
    email: EmailStr
    role: OrganizationRole = OrganizationRole.MEMBER

    @field_validator("role")
    @classmethod
    def role_is_not_owner(cls, value: OrganizationRole) -> OrganizationRole:
        if value == OrganizationRole.OWNER:
            raise ValueError("Invitations cannot grant ownership")
        return value


InvitationCreateResponse = APIResponse[InvitationWithTokenModel]
InvitationListResponse = APIResponse[list[InvitationModel]]
UserInvitationsResponse = APIResponse[list[UserInvitationModel]]
InvitationPreviewResponse = APIResponse[InvitationPreview]
InvitationAcceptResponse = APIResponse[InvitationModel]
InvitationActionResponse = APIResponse[bool]
