from pydantic import BaseModel, EmailStr, Field

from src.api.admin.models import InterestSignupModel
from src.api.core.constants import INTEREST_NOTE_MAX_LENGTH
from src.api.core.messages import APIResponse
from src.database.models import InquiryType


class InterestSignupRequest(BaseModel):
    email: EmailStr
    inquiry_type: InquiryType = InquiryType.GENERAL
    note: str | None = Field(None, max_length=INTEREST_NOTE_MAX_LENGTH)


InterestSignupResponse = APIResponse[InterestSignupModel]
