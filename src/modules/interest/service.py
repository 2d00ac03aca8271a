from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import InquiryType, InterestListSignup


class InterestListService(BaseService):
    async def get_signup_by_email(self, email: str) -> InterestListSignup | None:
        result = await self.db.execute(
            select(InterestListSignup).where(
                InterestListSignup.email == email.strip().lower()
            )
        )
        return result.scalar_one_or_none()

    async def create_signup(
        self,
        email: str,
        inquiry_type: InquiryType = InquiryType.GENERAL,
        note: str | None = None,
    ) -> InterestListSignup:
        """Add an email to the interest list; 409 when it is already there."""
        email = email.strip().lower()
        if await self.get_signup_by_email(email):
            raise IridiumException(
                MessageCode.INTEREST_ALREADY_SIGNED_UP, status.HTTP_409_CONFLICT
            )

        signup = InterestListSignup(
            email=email, inquiry_type=inquiry_type, note=note or None
        )
        self.db.add(signup)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Concurrent signup with the same email
            await self.db.rollback()
            raise IridiumException(
                MessageCode.INTEREST_ALREADY_SIGNED_UP, status.HTTP_409_CONFLICT
            ) from e
        await self.db.refresh(signup)
        return signup

    async def list_signups(
        self, limit: int = 20, offset: int = 0
    ) -> tuple[list[InterestListSignup], int]:
        total = (
            await self.db.execute(select(func.count()).select_from(InterestListSignup))
        ).scalar_one()
        result = await self.db.execute(
            select(InterestListSignup)
            .order_by(InterestListSignup.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total
