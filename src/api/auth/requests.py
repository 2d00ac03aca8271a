from pydantic import BaseModel, EmailStr, Field, field_validator

from src.api.auth.models import AuthSessionData
from src.api.core.constants import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from src.api.core.messages import APIResponse


def validate_password_strength(value: str) -> str:
    """Passwords need at least one letter and one digit."""
    if not any(c.isalpha() for c in value):
        raise ValueError("Password must contain at least one letter")
    if not any(c.isdigit() for c in value):
        raise ValueError("Password must contain at least one number")
    return value


class SignUpRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        return validate_password_strength(value)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_LENGTH)


AuthSessionResponse = APIResponse[AuthSessionData]
SignOutResponse = APIResponse[bool]
