"""User lookups, profile updates and account deletion."""

from uuid import UUID

from fastapi import status
from sqlalchemy import func, select

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import User, UserRole
from src.utils.dates import as_utc, utcnow
from src.utils.hashing import HashingService

PROFILE_FIELDS = ("name", "bio", "website", "location", "phone_number", "image")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_ban_active(user: User) -> bool:
    """A ban with an expiry in the past no longer applies."""
    if not user.banned:
        return False
    if user.ban_expires is None:
        return True
    return as_utc(user.ban_expires) > utcnow()


class UserManagementService(BaseService):
    async def get_user_or_404(self, user_id: UUID) -> User:
        return await self.get_or_404(User, user_id, MessageCode.USER_NOT_FOUND)

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def create_user(
        self,
        email: str,
        name: str,
        password: str | None = None,
        role: UserRole = UserRole.USER,
        email_verified: bool = False,
    ) -> User:
        """Create a user; 409 when the email is already registered."""
        email = normalize_email(email)
        if await self.get_user_by_email(email):
            raise IridiumException(
                MessageCode.EMAIL_ALREADY_REGISTERED, status.HTTP_409_CONFLICT
            )

        user = User(
            email=email,
            name=name,
            role=role,
            email_verified=email_verified,
            password_hash=HashingService.hash_password(password) if password else None,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        self.logger.info("Created user", user_id=str(user.id))
        return user

    async def update_profile(self, user_id: UUID, **changes) -> User:
        user = await self.get_user_or_404(user_id)
        for field in PROFILE_FIELDS:
            if changes.get(field) is not None:
                setattr(user, field, changes[field])
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def lift_expired_ban(self, user: User) -> bool:
        """Clear a ban whose expiry has passed. Returns True if it was lifted."""
        if not user.banned or is_ban_active(user):
            return False
        user.banned = False
        user.ban_reason = None
        user.ban_expires = None
        await self.db.commit()
        self.logger.info("Expired ban lifted", user_id=str(user.id))
        return True

    async def delete_user(self, user_id: UUID) -> User:
        """Delete the user; sessions, memberships, threads and notes cascade."""
        user = await self.get_user_or_404(user_id)
        await self.db.delete(user)
        await self.db.commit()
        self.logger.info("User deleted", user_id=str(user_id))
        return user

