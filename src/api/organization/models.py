"""Organization domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class OrganizationModel(BaseModel):
    """Core organization model."""

    id: UUID
    name: str
    slug: str
    logo: str | None = None
    description: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    model_config = {"from_attributes": True}


class OrganizationDetails(OrganizationModel):
    role: str
    member_count: int


class MemberUser(BaseModel):
    id: UUID
    name: str
    email: str
    image: str | None = None

    model_config = {"from_attributes": True}


class OrganizationMemberModel(BaseModel):
    id: UUID
    organization_id: UUID
    user_id: UUID
    role: str
    created_at: datetime

    model_config = {"from_attributes": True}


class OrganizationMemberWithUser(OrganizationMemberModel):
    user: MemberUser
