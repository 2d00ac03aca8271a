"""Email/password authentication backed by database sessions."""

from datetime import timedelta
from secrets import token_urlsafe
from uuid import UUID

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import User, UserSession
from src.modules.user.management import (
    UserManagementService,
    is_ban_active,
    normalize_email,
)
from src.utils.dates import as_utc, utcnow
from src.utils.hashing import HashingService
from src.utils.settings.auth import AuthSettings


class AuthService(BaseService):
    async def sign_up(
        self,
        name: str,
        email: str,
        password: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[User, UserSession]:
        user = await UserManagementService(self.db).create_user(
            email=email, name=name, password=password
        )
        session = await self.create_session(user, ip_address, user_agent)
        return user, session

    async def sign_in(
        self,
        email: str,
        password: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[User, UserSession]:
        users = UserManagementService(self.db)
        user = await users.get_user_by_email(normalize_email(email))
        if user is None or not HashingService.verify_password(
            password, user.password_hash
        ):
            raise IridiumException(
                MessageCode.INVALID_CREDENTIALS, status.HTTP_401_UNAUTHORIZED
            )

        if user.banned:
            await users.lift_expired_ban(user)
        if is_ban_active(user):
            raise IridiumException(
                MessageCode.USER_BANNED,
                status.HTTP_403_FORBIDDEN,
                {"reason": user.ban_reason} if user.ban_reason else None,
            )

        session = await self.create_session(user, ip_address, user_agent)
        self.logger.info("User signed in", user_id=str(user.id))
        return user, session

    async def create_session(
        self,
        user: User,
        ip_address: str | None = None,
        user_agent: str | None = None,
        ttl: timedelta | None = None,
        impersonated_by_id: UUID | None = None,
    ) -> UserSession:
        session = UserSession(
            user_id=user.id,
            token=token_urlsafe(32),
            expires_at=utcnow()
            + (ttl or timedelta(days=AuthSettings().SESSION_TTL_DAYS)),
            ip_address=ip_address,
            user_agent=user_agent,
            impersonated_by_id=impersonated_by_id,
        )
        self.db.add(session)
        await self.db.commit()
        await self.db.refresh(session)
        return session

    async def resolve_session(
        self, session_token: str
    ) -> tuple[User, UserSession] | None:
        """Look up a live session and its user; expired sessions are removed."""
        result = await self.db.execute(
            select(UserSession)
            .options(selectinload(UserSession.user))
            .where(UserSession.token == session_token)
        )
        session = result.scalar_one_or_none()
        if session is None:
            return None

        if as_utc(session.expires_at) <= utcnow():
            await self.db.delete(session)
            await self.db.commit()
            return None

        user = session.user
        if user.banned:
            await UserManagementService(self.db).lift_expired_ban(user)
            if is_ban_active(user):
                return None
        return user, session

    async def stop_impersonating(
        self, session: UserSession, admin_session_token: str | None
    ) -> tuple[User, UserSession]:
        """
        End an impersonation session and hand back the admin's own session.

        The impersonation session is removed even when the admin session can
        no longer be resumed, which leaves the caller signed out.
        """
        if session.impersonated_by_id is None:
            raise IridiumException(
                MessageCode.NOT_IMPERSONATING, status.HTTP_400_BAD_REQUEST
            )
        admin_id = session.impersonated_by_id
        await self.sign_out(session.token)

        resolved = (
            await self.resolve_session(admin_session_token)
            if admin_session_token
            else None
        )
        if resolved is None or resolved[0].id != admin_id:
            raise IridiumException(
                MessageCode.INVALID_SESSION, status.HTTP_401_UNAUTHORIZED
            )
        self.logger.info(
            "Impersonation stopped",
            admin_id=str(admin_id),
            user_id=str(session.user_id),
        )
        return resolved

    async def sign_out(self, session_token: str) -> None:
        await self.db.execute(
            delete(UserSession).where(UserSession.token == session_token)
        )
        await self.db.commit()

    async def list_user_sessions(self, user_id: UUID) -> list[UserSession]:
        result = await self.db.execute(
            select(UserSession)
            .where(UserSession.user_id == user_id)
            .order_by(UserSession.created_at.desc())
        )
        return list(result.scalars().all())

    async def revoke_session(self, session_id: UUID, user_id: UUID) -> None:
        result = await self.db.execute(
            delete(UserSession).where(
                UserSession.id == session_id, UserSession.user_id == user_id
            )
        )
        if not result.rowcount:
            raise IridiumException(
                MessageCode.SESSION_NOT_FOUND, status.HTTP_404_NOT_FOUND
            )
        await self.db.commit()

    async def revoke_user_sessions(self, user_id: UUID) -> int:
        result = await self.db.execute(
            delete(UserSession).where(UserSession.user_id == user_id)
        )
        await self.db.commit()
        return result.rowcount
