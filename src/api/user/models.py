"""User domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class UserModel(BaseModel):
    """Public view of a user account."""

    id: UUID
    email: str
    name: str
    role: str
    email_verified: bool
    image: str | None = None
    bio: str | None = None
    website: str | None = None
    location: str | None = None
    phone_number: str | None = None
    banned: bool = False
    ban_reason: str | None = None
    ban_expires: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class SessionModel(BaseModel):
    id: UUID
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    impersonated_by_id: UUID | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserOrganizationModel(BaseModel):
    """An organization the user belongs to, with their role in it."""

    id: UUID
    name: str
    slug: str
    logo: str | None = None
    role: str
    created_at: datetime
