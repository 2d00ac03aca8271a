from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from src.database.models import MessageRole


class MessageModel(BaseModel):
    id: str
    role: MessageRole
    parts: list[dict[str, Any]] = Field(validation_alias="content")
    user_id: UUID | None = None
    created_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class ThreadModel(BaseModel):
    """A chat thread with its messages, oldest first."""

    id: UUID
    title: str
    created_at: datetime
    updated_at: datetime
    messages: list[MessageModel] = []

    model_config = {"from_attributes": True}


class ChatReply(BaseModel):
    """The thread after an exchange and the two messages just saved."""

    thread: ThreadModel
    messages: list[MessageModel]
