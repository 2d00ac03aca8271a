from pydantic import BaseModel, Field

from src.api.chat.models import ChatReply, ThreadModel
from src.api.core.messages import APIResponse


class ThreadCreateRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=100)


class ThreadUpdateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)


class ChatMessageRequest(BaseModel):
    """A user prompt. ``id`` lets the client re-send an exchange idempotently."""

    id: str | None = Field(None, min_length=1, max_length=64)
    text: str = Field(..., min_length=1, max_length=8000)


ThreadResponse = APIResponse[ThreadModel]
ThreadListResponse = APIResponse[list[ThreadModel]]
ThreadDeletedResponse = APIResponse[bool]
ChatReplyResponse = APIResponse[ChatReply]
