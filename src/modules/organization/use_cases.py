from datetime import timedelta
from uuid import UUID

from fastapi import status
from sqlalchemy import case, delete, func, select
from sqlalchemy.orm import selectinload

from src.api.core.constants import ORGANIZATION_DELETION_GRACE_DAYS
from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.core.base import BaseService
from src.database.models import (
    ROLE_RANK,
    Organization,
    OrganizationMember,
    OrganizationRole,
)
from src.utils.dates import as_utc, utcnow
from src.utils.path_helpers import slugify

_rank_order = case(
    {role.value: rank for role, rank in ROLE_RANK.items()},
    value=OrganizationMember.role,
    else_=0,
)


class OrganizationService(BaseService):
    async def _slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(Organization.id).where(Organization.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Organization.id != exclude_id)
        return (await self.db.execute(stmt)).first() is not None

    async def _unique_slug(self, name: str) -> str:
        base = slugify(name)
        candidate = base
        suffix = 2
        while await self._slug_exists(candidate):
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    async def create_organization(
        self,
        name: str,
        owner_id: UUID,
        slug: str | None = None,
        logo: str | None = None,
        description: str | None = None,
    ) -> Organization:
        """Create an organization with ``owner_id`` as its OWNER member."""
        if slug:
            if await self._slug_exists(slug):
                raise IridiumException(
                    MessageCode.ORGANIZATION_SLUG_TAKEN, status.HTTP_409_CONFLICT
                )
        else:
            slug = await self._unique_slug(name)

        organization = Organization(
            name=name, slug=slug, logo=logo, description=description
        )
        organization.members.append(
            OrganizationMember(user_id=owner_id, role=OrganizationRole.OWNER)
        )
        self.db.add(organization)
        await self.db.commit()
        await self.db.refresh(organization)

        self.logger.info(
            "Organization created",
            organization_id=str(organization.id),
            owner_id=str(owner_id),
        )
        return organization

    async def get_organization(self, organization_id: UUID) -> Organization | None:
        """Active (not soft-deleted) organization by id."""
        result = await self.db.execute(
            select(Organization).where(
                Organization.id == organization_id,
                Organization.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def get_organization_or_404(self, organization_id: UUID) -> Organization:
        organization = await self.get_organization(organization_id)
        if organization is None:
            raise IridiumException(
                MessageCode.ORGANIZATION_NOT_FOUND, status.HTTP_404_NOT_FOUND
            )
        return organization

    async def get_organization_by_slug(self, slug: str) -> Organization | None:
        result = await self.db.execute(
            select(Organization).where(
                Organization.slug == slug, Organization.deleted_at.is_(None)
            )
        )
        return result.scalar_one_or_none()

    async def get_organization_with_members(
        self, organization_id: UUID
    ) -> Organization | None:
        result = await self.db.execute(
            select(Organization)
            .where(
                Organization.id == organization_id,
                Organization.deleted_at.is_(None),
            )
            .options(
                selectinload(Organization.members).selectinload(
                    OrganizationMember.user
                )
            )
        )
        return result.scalar_one_or_none()

    async def get_user_organizations(
        self, user_id: UUID
    ) -> list[tuple[Organization, OrganizationRole]]:
        """Active organizations the user belongs to, with the user's role."""
        result = await self.db.execute(
            select(Organization, OrganizationMember.role)
            .join(
                OrganizationMember,
                OrganizationMember.organization_id == Organization.id,
            )
            .where(
                OrganizationMember.user_id == user_id,
                Organization.deleted_at.is_(None),
            )
            .order_by(Organization.created_at.desc())
        )
        return [(org, OrganizationRole(role)) for org, role in result.all()]

    async def update_organization(
        self,
        organization_id: UUID,
        name: str | None = None,
        slug: str | None = None,
        logo: str | None = None,
        description: str | None = None,
    ) -> Organization:
        organization = await self.get_organization_or_404(organization_id)

        if slug is not None and slug != organization.slug:
            if await self._slug_exists(slug, exclude_id=organization.id):
                raise IridiumException(
                    MessageCode.ORGANIZATION_SLUG_TAKEN, status.HTTP_409_CONFLICT
                )
            organization.slug = slug
        if name is not None:
            organization.name = name
        if logo is not None:
            organization.logo = logo
        if description is not None:
            organization.description = description

        await self.db.commit()
        await self.db.refresh(organization)
        return organization

    async def soft_delete_organization(self, organization_id: UUID) -> Organization:
        """Hide the organization; it stays restorable for the grace period."""
        organization = await self.get_organization_or_404(organization_id)
        organization.deleted_at = utcnow()
        await self.db.commit()
        self.logger.info(
            "Organization soft deleted", organization_id=str(organization_id)
        )
        return organization

    async def restore_organization(
        self, organization_id: UUID, user_id: UUID
    ) -> Organization:
        organization = await self.db.get(Organization, organization_id)
        membership = await self.get_membership(organization_id, user_id)
        if organization is None or membership is None:
            raise IridiumException(
                MessageCode.ORGANIZATION_NOT_FOUND, status.HTTP_404_NOT_FOUND
            )
        if membership.role != OrganizationRole.OWNER:
            raise IridiumException(
                MessageCode.AUTH_INSUFFICIENT_ROLE_PERMISSIONS,
                status.HTTP_403_FORBIDDEN,
                {"required_role": OrganizationRole.OWNER.value},
            )
        if organization.deleted_at is None:
            return organization

        grace_cutoff = utcnow() - timedelta(days=ORGANIZATION_DELETION_GRACE_DAYS)
        if as_utc(organization.deleted_at) < grace_cutoff:
            raise IridiumException(
                MessageCode.ORGANIZATION_RESTORE_EXPIRED, status.HTTP_400_BAD_REQUEST
            )

        organization.deleted_at = None
        await self.db.commit()
        await self.db.refresh(organization)
        return organization

    async def delete_organization_permanently(self, organization_id: UUID) -> None:
        organization = await self.get_or_404(
            Organization, organization_id, MessageCode.ORGANIZATION_NOT_FOUND
        )
        await self.db.delete(organization)
        await self.db.commit()

    async def purge_soft_deleted(self) -> int:
        """Permanently delete organizations past the restore grace period."""
        grace_cutoff = utcnow() - timedelta(days=ORGANIZATION_DELETION_GRACE_DAYS)
        result = await self.db.execute(
            select(Organization).where(
                Organization.deleted_at.is_not(None),
                Organization.deleted_at < grace_cutoff,
            )
        )
        organizations = list(result.scalars().all())
        for organization in organizations:
            await self.db.delete(organization)
        await self.db.commit()

        if organizations:
            self.logger.info("Purged soft deleted organizations", count=len(organizations))
        return len(organizations)

    async def get_membership(
        self, organization_id: UUID, user_id: UUID
    ) -> OrganizationMember | None:
        result = await self.db.execute(
            select(OrganizationMember).where(
                OrganizationMember.organization_id == organization_id,
                OrganizationMember.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def _get_membership_or_404(
        self, organization_id: UUID, user_id: UUID
    ) -> OrganizationMember:
        membership = await self.get_membership(organization_id, user_id)
        if membership is None:
            raise IridiumException(
                MessageCode.USER_NOT_MEMBER_OF_ORGANIZATION,
                status.HTTP_404_NOT_FOUND,
            )
        return membership

    async def add_member(
        self,
        organization_id: UUID,
        user_id: UUID,
        role: OrganizationRole = OrganizationRole.MEMBER,
        commit: bool = True,
    ) -> OrganizationMember:
        if await self.get_membership(organization_id, user_id):
            raise IridiumException(
                MessageCode.USER_ALREADY_MEMBER, status.HTTP_409_CONFLICT
            )

        membership = OrganizationMember(
            organization_id=organization_id, user_id=user_id, role=role
        )
        self.db.add(membership)
        if commit:
            await self.db.commit()
            await self.db.refresh(membership)
        else:
            await self.db.flush()
        return membership

    async def remove_member(self, organization_id: UUID, user_id: UUID) -> None:
        membership = await self._get_membership_or_404(organization_id, user_id)
        if membership.role == OrganizationRole.OWNER:
            raise IridiumException(
                MessageCode.OWNER_CANNOT_BE_REMOVED, status.HTTP_403_FORBIDDEN
            )
        await self.db.delete(membership)
        await self.db.commit()

    async def update_member_role(
        self, organization_id: UUID, user_id: UUID, role: OrganizationRole
    ) -> OrganizationMember:
        membership = await self._get_membership_or_404(organization_id, user_id)
        if membership.role == OrganizationRole.OWNER or role == OrganizationRole.OWNER:
            raise IridiumException(
                MessageCode.CANNOT_GRANT_OWNER, status.HTTP_403_FORBIDDEN
            )
        membership.role = role
        await self.db.commit()
        await self.db.refresh(membership)
        return membership

    async def list_members(self, organization_id: UUID) -> list[OrganizationMember]:
        """Members ordered by role (OWNER first), then by join date."""
        result = await self.db.execute(
            select(OrganizationMember)
            .where(OrganizationMember.organization_id == organization_id)
            .options(selectinload(OrganizationMember.user))
            .order_by(_rank_order.desc(), OrganizationMember.created_at.asc())
        )
        return list(result.scalars().all())

    async def count_members(self, organization_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(OrganizationMember)
            .where(OrganizationMember.organization_id == organization_id)
        )
        return result.scalar_one()

    async def leave_organization(self, organization_id: UUID, user_id: UUID) -> None:
        """Members may leave; the owner must transfer or delete instead."""
        membership = await self._get_membership_or_404(organization_id, user_id)
        if membership.role == OrganizationRole.OWNER:
            raise IridiumException(
                MessageCode.OWNER_CANNOT_LEAVE, status.HTTP_403_FORBIDDEN
            )
        await self.db.execute(
            delete(OrganizationMember).where(OrganizationMember.id == membership.id)
        )
        await self.db.commit()
        self.logger.info(
            "Member left organization",
            organization_id=str(organization_id),
            user_id=str(user_id),
        )
