from datetime import datetime, timedelta
from secrets import token_hex
from uuid import UUID

from fastapi import status
from sqlalchemy import delete, func, select
from sqlalchemy.orm import selectinload

from src.api.core.constants import INVITATION_TOKEN_BYTES, INVITATION_TTL_DAYS
from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import (
    Organization,
    OrganizationInvitation,
    OrganizationMember,
    OrganizationRole,
    User,
)
from src.modules.organization.use_cases import OrganizationService
from src.utils.dates import as_utc, utcnow


def generate_invitation_token() -> str:
    return token_hex(INVITATION_TOKEN_BYTES)


def is_invitation_valid(
    invitation: OrganizationInvitation, now: datetime | None = None
) -> bool:
    """An invitation is usable until it is accepted or its expiry passes."""
    if invitation.accepted_at is not None:
        return False
    return (now or utcnow()) <= as_utc(invitation.expires_at)


class OrganizationInvitationService(BaseService):
    is_invitation_valid = staticmethod(is_invitation_valid)

    def _pending_filter(self):
        return (
            OrganizationInvitation.accepted_at.is_(None),
            OrganizationInvitation.expires_at > utcnow(),
        )

    async def create_invitation(
        self,
        organization_id: UUID,
        email: str,
        invited_by_id: UUID,
        role: OrganizationRole = OrganizationRole.MEMBER,
    ) -> OrganizationInvitation:
        organization = await OrganizationService(self.db).get_organization_or_404(
            organization_id
        )
        email = email.strip().lower()

        await self._ensure_user_not_member(email, organization.id)
        if await self.has_pending_invitation(organization.id, email):
            raise IridiumException(
                MessageCode.INVITE_ALREADY_PENDING,
                status.HTTP_409_CONFLICT,
                details={"email": email},
            )

        invitation = OrganizationInvitation(
            organization_id=organization.id,
            invited_by_id=invited_by_id,
            email=email,
            role=role,
            token=generate_invitation_token(),
            expires_at=utcnow() + timedelta(days=INVITATION_TTL_DAYS),
        )
        self.db.add(invitation)
        await self.db.commit()
        await self.db.refresh(invitation)

        self.logger.info(
            "Invitation created",
            organization_id=str(organization.id),
            invitation_id=str(invitation.id),
        )
        return invitation

    async def get_invitation_by_token(
        self, token: str
    ) -> OrganizationInvitation | None:
        result = await self.db.execute(
            select(OrganizationInvitation)
            .options(
                selectinload(OrganizationInvitation.organization),
                selectinload(OrganizationInvitation.invited_by),
            )
            .where(OrganizationInvitation.token == token)
        )
        return result.scalar_one_or_none()

    async def get_invitation_by_token_or_404(
        self, token: str
    ) -> OrganizationInvitation:
        invitation = await self.get_invitation_by_token(token)
        if invitation is None or invitation.organization.deleted_at is not None:
            raise IridiumException(
                MessageCode.INVITE_NOT_FOUND, status.HTTP_404_NOT_FOUND
            )
        return invitation

    async def accept_invitation(
        self, token: str, user_id: UUID
    ) -> OrganizationInvitation:
        invitation = await self.get_invitation_by_token_or_404(token)
        if not is_invitation_valid(invitation):
            raise IridiumException(
                MessageCode.INVITATION_INVALID, status.HTTP_400_BAD_REQUEST
            )

        user = await self.get_or_404(User, user_id, MessageCode.USER_NOT_FOUND)
        if user.email.strip().lower() != invitation.email:
            raise IridiumException(
                MessageCode.INVITATION_EMAIL_MISMATCH, status.HTTP_403_FORBIDDEN
            )

        await OrganizationService(self.db).add_member(
            invitation.organization_id,
            user.id,
            OrganizationRole(invitation.role),
            commit=False,
        )
        invitation.accepted_at = utcnow()
        await self.db.commit()
        await self.db.refresh(invitation)

        self.logger.info(
            "Invitation accepted",
            organization_id=str(invitation.organization_id),
            user_id=str(user.id),
        )
        return invitation

    async def decline_invitation(self, token: str, user_id: UUID) -> None:
        invitation = await self.get_invitation_by_token_or_404(token)
        user = await self.get_or_404(User, user_id, MessageCode.USER_NOT_FOUND)
        if user.email.strip().lower() != invitation.email:
            raise IridiumException(
                MessageCode.INVITATION_EMAIL_MISMATCH, status.HTTP_403_FORBIDDEN
            )
        await self.db.delete(invitation)
        await self.db.commit()

    async def revoke_invitation(
        self, invitation_id: UUID, organization_id: UUID | None = None
    ) -> None:
        invitation = await self.db.get(OrganizationInvitation, invitation_id)
        if invitation is None or (
            organization_id is not None
            and invitation.organization_id != organization_id
        ):
            raise IridiumException(
                MessageCode.INVITE_NOT_FOUND, status.HTTP_404_NOT_FOUND
            )
        await self.db.delete(invitation)
        await self.db.commit()

    async def list_organization_invitations(
        self, organization_id: UUID
    ) -> list[OrganizationInvitation]:
        """Pending invitations, newest first."""
        result = await self.db.execute(
            select(OrganizationInvitation)
            .options(selectinload(OrganizationInvitation.invited_by))
            .where(
                OrganizationInvitation.organization_id == organization_id,
                *self._pending_filter(),
            )
            .order_by(OrganizationInvitation.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_pending_invitation(
        self, organization_id: UUID, email: str
    ) -> OrganizationInvitation | None:
        result = await self.db.execute(
            select(OrganizationInvitation)
            .where(
                OrganizationInvitation.organization_id == organization_id,
                OrganizationInvitation.email == email.strip().lower(),
                *self._pending_filter(),
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def has_pending_invitation(self, organization_id: UUID, email: str) -> bool:
        return await self.get_pending_invitation(organization_id, email) is not None

    async def get_user_invitations(self, email: str) -> list[OrganizationInvitation]:
        result = await self.db.execute(
            select(OrganizationInvitation)
            .join(
                Organization,
                Organization.id == OrganizationInvitation.organization_id,
            )
            .options(
                selectinload(OrganizationInvitation.organization),
                selectinload(OrganizationInvitation.invited_by),
            )
            .where(
                OrganizationInvitation.email == email.strip().lower(),
                Organization.deleted_at.is_(None),
                *self._pending_filter(),
            )
            .order_by(OrganizationInvitation.created_at.desc())
        )
        return list(result.scalars().all())

    async def cleanup_expired_invitations(self) -> int:
        """Delete expired invitations that were never accepted."""
        result = await self.db.execute(
            delete(OrganizationInvitation).where(
                OrganizationInvitation.accepted_at.is_(None),
                OrganizationInvitation.expires_at < utcnow(),
            )
        )
        await self.db.commit()
        if result.rowcount:
            self.logger.info("Expired invitations removed", count=result.rowcount)
        return result.rowcount

    async def _ensure_user_not_member(self, email: str, organization_id: UUID):
        result = await self.db.execute(
            select(OrganizationMember.id)
            .join(User, User.id == OrganizationMember.user_id)
            .where(
                OrganizationMember.organization_id == organization_id,
                func.lower(User.email) == email,
            )
        )
        if result.first() is not None:
            raise IridiumException(
                MessageCode.USER_ALREADY_MEMBER,
                status.HTTP_409_CONFLICT,
                details={"email": email},
            )
