"""Administrative user management: search, roles, bans, sessions and impersonation."""

from datetime import timedelta
from enum import Enum
from uuid import UUID

from fastapi import status
from sqlalchemy import func, or_, select

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import User, UserRole, UserSession
from src.modules.auth.service import AuthService
from src.modules.user.management import (
    UserManagementService,
    is_ban_active,
    normalize_email,
)
from src.utils.dates import utcnow
from src.utils.hashing import HashingService
from src.utils.settings.auth import AuthSettings


class UserSortField(str, Enum):
    CREATED_AT = "created_at"
    EMAIL = "email"
    NAME = "name"
    ROLE = "role"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class AdminService(BaseService):
    async def list_users(
        self,
        search: str | None = None,
        role: UserRole | None = None,
        banned: bool | None = None,
        sort_by: UserSortField = UserSortField.CREATED_AT,
        sort_direction: SortDirection = SortDirection.DESC,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[User], int]:
        """Filtered page of users plus the total matching count."""
        filters = []
        if search:
            term = search.strip()
            filters.append(
                or_(
                    User.email.icontains(term, autoescape=True),
                    User.name.icontains(term, autoescape=True),
                )
            )
        if role is not None:
            filters.append(User.role == role)
        if banned is not None:
            filters.append(User.banned.is_(banned))

        total = (
            await self.db.execute(select(func.count()).select_from(User).where(*filters))
        ).scalar_one()

        column = getattr(User, sort_by.value)
        order = column.asc() if sort_direction == SortDirection.ASC else column.desc()
        result = await self.db.execute(
            select(User).where(*filters).order_by(order).limit(limit).offset(offset)
        )
        return list(result.scalars().all()), total

    async def create_user(
        self,
        email: str,
        name: str,
        password: str | None = None,
        role: UserRole = UserRole.USER,
    ) -> User:
        return await UserManagementService(self.db).create_user(
            email=email, name=name, password=password, role=role, email_verified=True
        )

    async def update_user(
        self,
        user_id: UUID,
        name: str | None = None,
        email: str | None = None,
        email_verified: bool | None = None,
    ) -> User:
        users = UserManagementService(self.db)
        user = await users.get_user_or_404(user_id)

        if email is not None and normalize_email(email) != user.email:
            existing = await users.get_user_by_email(email)
            if existing and existing.id != user.id:
                raise IridiumException(
                    MessageCode.EMAIL_ALREADY_REGISTERED, status.HTTP_409_CONFLICT
                )
            user.email = normalize_email(email)
        if name is not None:
            user.name = name
        if email_verified is not None:
            user.email_verified = email_verified

        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def set_role(self, user_id: UUID, role: UserRole, acting_user_id: UUID) -> User:
        if user_id == acting_user_id:
            raise IridiumException(
                MessageCode.CANNOT_MODERATE_YOURSELF, status.HTTP_400_BAD_REQUEST
            )
        user = await UserManagementService(self.db).get_user_or_404(user_id)
        user.role = role
        await self.db.commit()
        await self.db.refresh(user)
        self.logger.info("User role changed", user_id=str(user_id), role=role.value)
        return user

    async def set_password(self, user_id: UUID, password: str) -> User:
        user = await UserManagementService(self.db).get_user_or_404(user_id)
        user.password_hash = HashingService.hash_password(password)
        await self.db.commit()
        await AuthService(self.db).revoke_user_sessions(user.id)
        return user

    async def ban_user(
        self,
        user_id: UUID,
        acting_user_id: UUID,
        reason: str | None = None,
        expires_in_seconds: int | None = None,
    ) -> User:
        """Ban a user and end all of their sessions."""
        if user_id == acting_user_id:
            raise IridiumException(
                MessageCode.CANNOT_MODERATE_YOURSELF, status.HTTP_400_BAD_REQUEST
            )
        user = await UserManagementService(self.db).get_user_or_404(user_id)
        user.banned = True
        user.ban_reason = reason
        user.ban_expires = (
            utcnow() + timedelta(seconds=expires_in_seconds)
            if expires_in_seconds
            else None
        )
        await self.db.commit()
        revoked = await AuthService(self.db).revoke_user_sessions(user.id)
        await self.db.refresh(user)

        self.logger.info("User banned", user_id=str(user_id), sessions_revoked=revoked)
        return user

    async def unban_user(self, user_id: UUID) -> User:
        user = await UserManagementService(self.db).get_user_or_404(user_id)
        user.banned = False
        user.ban_reason = None
        user.ban_expires = None
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def remove_user(self, user_id: UUID, acting_user_id: UUID) -> User:
        if user_id == acting_user_id:
            raise IridiumException(
                MessageCode.CANNOT_MODERATE_YOURSELF, status.HTTP_400_BAD_REQUEST
            )
        return await UserManagementService(self.db).delete_user(user_id)

    async def impersonate_user(
        self,
        user_id: UUID,
        acting_user_id: UUID,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[User, UserSession]:
        """Open a short session as ``user_id`` on behalf of an admin."""
        if user_id == acting_user_id:
            raise IridiumException(
                MessageCode.CANNOT_MODERATE_YOURSELF, status.HTTP_400_BAD_REQUEST
            )
        user = await UserManagementService(self.db).get_user_or_404(user_id)
        if user.role == UserRole.ADMIN:
            raise IridiumException(
                MessageCode.CANNOT_IMPERSONATE_ADMIN, status.HTTP_403_FORBIDDEN
            )
        if is_ban_active(user):
            raise IridiumException(MessageCode.USER_BANNED, status.HTTP_403_FORBIDDEN)

        session = await AuthService(self.db).create_session(
            user,
            ip_address,
            user_agent,
            ttl=timedelta(minutes=AuthSettings().IMPERSONATION_TTL_MINUTES),
            impersonated_by_id=acting_user_id,
        )
        self.logger.info(
            "Impersonation started",
            admin_id=str(acting_user_id),
            user_id=str(user_id),
        )
        return user, session
