from pydantic import BaseModel, Field, HttpUrl

from src.api.core.messages import APIResponse
from src.api.user.models import UserModel, UserOrganizationModel


class UserProfileUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=500)
    website: HttpUrl | None = None
    location: str | None = Field(None, max_length=100)
    phone_number: str | None = Field(None, max_length=32)
    image: HttpUrl | None = None


UserProfileResponse = APIResponse[UserModel]
UserOrganizationsResponse = APIResponse[list[UserOrganizationModel]]
UserDeletedResponse = APIResponse[bool]
