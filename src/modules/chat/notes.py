from uuid import UUID

from sqlalchemy import or_, select

from src.core.base import BaseService
from src.database.models import Note


class NoteService(BaseService):
    """Notes are always scoped to the user who owns them."""

    async def create_note(self, user_id: UUID, title: str, content: str) -> Note:
        note = Note(title=title, content=content, user_id=user_id)
        self.db.add(note)
        await self.db.commit()
        await self.db.refresh(note)
        return note

    async def list_notes(self, user_id: UUID) -> list[Note]:
        result = await self.db.execute(
            select(Note).where(Note.user_id == user_id).order_by(Note.created_at.desc())
        )
        return list(result.scalars().all())

    async def search_notes(self, user_id: UUID, query: str) -> list[Note]:
        """Case-insensitive substring match on title or content."""
        result = await self.db.execute(
            select(Note)
            .where(
                Note.user_id == user_id,
                or_(
                    Note.title.icontains(query, autoescape=True),
                    Note.content.icontains(query, autoescape=True),
                ),
            )
            .order_by(Note.created_at.desc())
        )
        return list(result.scalars().all())
