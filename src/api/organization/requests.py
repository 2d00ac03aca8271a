from pydantic import BaseModel, Field, HttpUrl

from src.api.core.messages import APIResponse
from src.api.organization.models import (
    OrganizationDetails,
    OrganizationMemberModel,
    OrganizationMemberWithUser,
    OrganizationModel,
)
from src.database.models import OrganizationRole

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class OrganizationCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str | None = Field(None, min_length=2, max_length=48, pattern=SLUG_PATTERN)
    logo: HttpUrl | None = None
    description: str | None = Field(None, max_length=500)


class OrganizationUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    slug: str | None = Field(None, min_length=2, max_length=48, pattern=SLUG_PATTERN)
    logo: HttpUrl | None = None
    description: str | None = Field(None, max_length=500)


class MemberRoleUpdateRequest(BaseModel):
    role: OrganizationRole


OrganizationResponse = APIResponse[OrganizationModel]
OrganizationDetailsResponse = APIResponse[OrganizationDetails]
OrganizationListResponse = APIResponse[list[OrganizationDetails]]
OrganizationMembersResponse = APIResponse[list[OrganizationMemberWithUser]]
OrganizationMemberResponse = APIResponse[OrganizationMemberModel]
RemoveUserResponse = APIResponse[bool]
