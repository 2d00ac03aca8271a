from pydantic import BaseModel


class SentEmailModel(BaseModel):
    email_id: str | None
    status: str
