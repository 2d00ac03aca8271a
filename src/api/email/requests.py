from pydantic import BaseModel, EmailStr, Field, model_validator

from src.api.core.messages import APIResponse
from src.api.email.models import SentEmailModel


class SendEmailRequest(BaseModel):
    to: list[EmailStr] = Field(..., min_length=1, max_length=50)
    subject: str = Field(..., min_length=1, max_length=255)
    html: str | None = None
    text: str | None = None
    reply_to: EmailStr | None = None
    cc: list[EmailStr] | None = None
    bcc: list[EmailStr] | None = None

    @model_validator(mode="after")
    def check_body(self) -> "SendEmailRequest":
        if not self.html and not self.text:
            raise ValueError("Either html or text is required")
        return self


SendEmailResponse = APIResponse[SentEmailModel]
