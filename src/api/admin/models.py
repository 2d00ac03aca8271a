from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class CleanupResult(BaseModel):
    """Rows removed by a maintenance sweep."""

    removed: int


class SessionsRevoked(BaseModel):
    revoked: int


class InterestSignupModel(BaseModel):
    id: UUID
    email: str
    inquiry_type: str
    note: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
