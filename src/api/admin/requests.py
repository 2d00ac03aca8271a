from pydantic import BaseModel, EmailStr, Field, field_validator

from src.api.admin.models import CleanupResult, InterestSignupModel, SessionsRevoked
from src.api.auth.requests import validate_password_strength
from src.api.core.constants import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from src.api.core.messages import APIResponse, Paginated
from src.api.user.models import SessionModel, UserModel
from src.database.models import UserRole


class AdminUserCreateRequest(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    password: str | None = Field(
        None, min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    role: UserRole = UserRole.USER

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str | None) -> str | None:
        return validate_password_strength(value) if value is not None else None


class AdminUserUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    email_verified: bool | None = None


class SetRoleRequest(BaseModel):
    role: UserRole


class SetPasswordRequest(BaseModel):
    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        return validate_password_strength(value)


class BanUserRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)
    expires_in_seconds: int | None = Field(None, gt=0)


AdminUserResponse = APIResponse[UserModel]
AdminUserListResponse = APIResponse[Paginated[UserModel]]
AdminSessionsResponse = APIResponse[list[SessionModel]]
SessionsRevokedResponse = APIResponse[SessionsRevoked]
CleanupResponse = APIResponse[CleanupResult]
InterestSignupListResponse = APIResponse[Paginated[InterestSignupModel]]
