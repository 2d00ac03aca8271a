"""Invitation domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.api.organization.models import MemberUser


class OrganizationSummary(BaseModel):
    id: UUID
    name: str
    slug: str
    logo: str | None = None

    model_config = {"from_attributes": True}


class InvitationModel(BaseModel):
    id: UUID
    organization_id: UUID
    email: str
    role: str
    invited_by_id: UUID
    expires_at: datetime
    accepted_at: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class InvitationWithTokenModel(InvitationModel):
    token: str


class UserInvitationModel(InvitationWithTokenModel):
    """A pending invitation addressed to the current user."""

    organization: OrganizationSummary
    invited_by: MemberUser


class InvitationPreview(BaseModel):
    """What an invitee sees before signing in."""

    organization: OrganizationSummary
    email: str
    role: str
    inviter_name: str
    expires_at: datetime
    is_valid: bool
