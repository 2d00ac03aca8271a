from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import DEFAULT_THREAD_TITLE, Message, MessageRole, Thread
from src.utils.dates import utcnow


@dataclass
class ChatMessage:
    """A message as exchanged with the client: an id, a role and typed parts."""

    id: str
    role: MessageRole
    parts: list[dict] = field(default_factory=list)


def message_text(parts: list[dict]) -> str:
    """Concatenate the text parts of a message."""
    return " ".join(
        part.get("text", "") for part in parts if part.get("type") == "text"
    ).strip()


class ThreadService(BaseService):
    async def create_thread(self, user_id: UUID, title: str | None = None) -> Thread:
        thread = Thread(created_by_id=user_id, title=title or DEFAULT_THREAD_TITLE)
        self.db.add(thread)
        await self.db.commit()
        return await self.get_thread(thread.id, user_id)

    async def list_threads(self, user_id: UUID) -> list[Thread]:
        """User's threads newest first, each with messages oldest first."""
        result = await self.db.execute(
            select(Thread)
            .where(Thread.created_by_id == user_id)
            .options(selectinload(Thread.messages))
            .order_by(Thread.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_thread(self, thread_id: UUID, user_id: UUID) -> Thread:
        result = await self.db.execute(
            select(Thread)
            .where(Thread.id == thread_id, Thread.created_by_id == user_id)
            .options(selectinload(Thread.messages))
            .execution_options(populate_existing=True)
        )
        thread = result.scalar_one_or_none()
        if thread is None:
            raise IridiumException(
                MessageCode.THREAD_NOT_FOUND, status.HTTP_404_NOT_FOUND
            )
        return thread

    async def update_thread_title(
        self, thread_id: UUID, user_id: UUID, title: str
    ) -> Thread:
        thread = await self.get_thread(thread_id, user_id)
        thread.title = title
        await self.db.commit()
        return await self.get_thread(thread_id, user_id)

    async def delete_thread(self, thread_id: UUID, user_id: UUID) -> None:
        thread = await self.get_thread(thread_id, user_id)
        await self.db.delete(thread)
        await self.db.commit()

    async def count_messages(self, thread_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(Message)
            .where(Message.thread_id == thread_id)
        )
        return result.scalar_one()

    async def add_message(
        self,
        thread_id: UUID,
        role: MessageRole,
        parts: list[dict],
        user_id: UUID | None = None,
        message_id: str | None = None,
        created_at: datetime | None = None,
    ) -> Message:
        message = Message(
            thread_id=thread_id,
            role=role,
            content=parts,
            user_id=user_id if role == MessageRole.USER else None,
            created_at=created_at or utcnow(),
        )
        if message_id:
            message.id = message_id
        self.db.add(message)
        await self.db.commit()
        await self.db.refresh(message)
        return message

    async def save_chat(
        self, thread_id: UUID, user_id: UUID, messages: list[ChatMessage]
    ) -> list[Message]:
        """
        Persist the latest exchange of a conversation.

        Only the last two messages (the user's prompt and the reply) are
        written. Messages whose id already exists have their content replaced,
        so re-sending an exchange is idempotent.
        """
        thread = await self.get_thread(thread_id, user_id)
        stamp = utcnow()
        saved = []

        for offset, chat_message in enumerate(messages[-2:]):
            existing = await self.db.get(Message, chat_message.id)
            if existing is not None and existing.thread_id == thread.id:
                existing.content = chat_message.parts
                saved.append(existing)
                continue

            is_user = chat_message.role == MessageRole.USER
            message = Message(
                id=chat_message.id,
                thread_id=thread.id,
                role=MessageRole.USER if is_user else MessageRole.ASSISTANT,
                content=chat_message.parts,
                user_id=user_id if is_user else None,
                # Keeps the reply ordered after its prompt within one save
                created_at=stamp + timedelta(microseconds=offset),
            )
            self.db.add(message)
            saved.append(message)

        thread.updated_at = stamp
        await self.db.commit()
        return saved
