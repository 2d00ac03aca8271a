"""Chat threads and the note-taking assistant."""

import uuid
from uuid import UUID

from fastapi import APIRouter, Request, status

from src.api.chat.models import ChatReply, MessageModel, ThreadModel
from src.api.chat.requests import (
    ChatMessageRequest,
    ChatReplyResponse,
    ThreadCreateRequest,
    ThreadDeletedResponse,
    ThreadListResponse,
    ThreadResponse,
    ThreadUpdateRequest,
)
from src.api.core.dependencies import ChatAgentDep, CurrentUserAuthDep, ThreadServiceDep
from src.api.core.messages import APIResponse, MessageCode
from src.database.models import DEFAULT_THREAD_TITLE, MessageRole
from src.modules.chat.threads import ChatMessage
from src.modules.posthog.client import capture_event
from src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

AUTO_TITLE_MIN_MESSAGES = 3


@router.get("/threads", response_model=ThreadListResponse)
async def list_threads(
    request: Request,
    current_user: CurrentUserAuthDep,
    thread_service: ThreadServiceDep,
) -> ThreadListResponse:
    threads = await thread_service.list_threads(current_user.user.id)
    return APIResponse.success(
        data=[ThreadModel.model_validate(thread) for thread in threads]
    )


@router.post(
    "/threads", response_model=ThreadResponse, status_code=status.HTTP_201_CREATED
)
async def create_thread(
    request: Request,
    thread_data: ThreadCreateRequest,
    current_user: CurrentUserAuthDep,
    thread_service: ThreadServiceDep,
) -> ThreadResponse:
    thread = await thread_service.create_thread(
        current_user.user.id, title=thread_data.title
    )
    return APIResponse.success(
        message_code=MessageCode.THREAD_CREATED,
        data=ThreadModel.model_validate(thread),
    )


@router.get("/threads/{thread_id}", response_model=ThreadResponse)
async def get_thread(
    thread_id: UUID,
    request: Request,
    current_user: CurrentUserAuthDep,
    thread_service: ThreadServiceDep,
) -> ThreadResponse:
    thread = await thread_service.get_thread(thread_id, current_user.user.id)
    return APIResponse.success(data=ThreadModel.model_validate(thread))


@router.patch("/threads/{thread_id}", response_model=ThreadResponse)
async def rename_thread(
    thread_id: UUID,
    request: Request,
    thread_data: ThreadUpdateRequest,
    current_user: CurrentUserAuthDep,
    thread_service: ThreadServiceDep,
) -> ThreadResponse:
    thread = await thread_service.update_thread_title(
        thread_id, current_user.user.id, thread_data.title
    )
    return APIResponse.success(
        message_code=MessageCode.THREAD_UPDATED,
        data=ThreadModel.model_validate(thread),
    )


@router.delete("/threads/{thread_id}", response_model=ThreadDeletedResponse)
async def delete_thread(
    thread_id: UUID,
    request: Request,
    current_user: CurrentUserAuthDep,
    thread_service: ThreadServiceDep,
) -> ThreadDeletedResponse:
    """Delete a thread and its messages."""
    await thread_service.delete_thread(thread_id, current_user.user.id)
    return APIResponse.success(message_code=MessageCode.THREAD_DELETED, data=True)


@router.post("/threads/{thread_id}/messages", response_model=ChatReplyResponse)
async def send_message(
    thread_id: UUID,
    request: Request,
    message_data: ChatMessageRequest,
    current_user: CurrentUserAuthDep,
    thread_service: ThreadServiceDep,
    chat_agent: ChatAgentDep,
) -> ChatReplyResponse:
    """
    Run the assistant on a new user message and persist the exchange.

    Threads still carrying the default title are renamed once they hold more
    than three messages.
    """
    user_id = current_user.user.id
    thread = await thread_service.get_thread(thread_id, user_id)

    reply_parts = await chat_agent.run(list(thread.messages), message_data.text, user_id)
    exchange = [
        ChatMessage(
            id=message_data.id or uuid.uuid4().hex,
            role=MessageRole.USER,
            parts=[{"type": "text", "text": message_data.text}],
        ),
        ChatMessage(id=uuid.uuid4().hex, role=MessageRole.ASSISTANT, parts=reply_parts),
    ]
    saved = await thread_service.save_chat(thread.id, user_id, exchange)

    thread = await thread_service.get_thread(thread_id, user_id)
    if (
        thread.title == DEFAULT_THREAD_TITLE
        and await thread_service.count_messages(thread.id) > AUTO_TITLE_MIN_MESSAGES
    ):
        title = await chat_agent.generate_title(list(thread.messages))
        if title:
            thread = await thread_service.update_thread_title(thread.id, user_id, title)
            logger.info("Thread titled", thread_id=str(thread.id))

    await capture_event(
        "chat_message_sent", str(user_id), {"thread_id": str(thread.id)}
    )
    return APIResponse.success(
        data=ChatReply(
            thread=ThreadModel.model_validate(thread),
            messages=[MessageModel.model_validate(message) for message in saved],
        )
    )
