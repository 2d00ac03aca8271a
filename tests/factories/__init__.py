"""Test factories for Iridium API models."""

from .base import AsyncSQLAlchemyModelFactory
from .chat import MessageFactory, NoteFactory, ThreadFactory
from .interest import InterestSignupFactory
from .invitations import InvitationFactory
from .organizations import OrganizationFactory, OrganizationMemberFactory
from .users import DEFAULT_PASSWORD, UserFactory, UserSessionFactory

__all__ = [
    "AsyncSQLAlchemyModelFactory",
    "DEFAULT_PASSWORD",
    "UserFactory",
    "UserSessionFactory",
    "OrganizationFactory",
    "OrganizationMemberFactory",
    "InvitationFactory",
    "ThreadFactory",
    "MessageFactory",
    "NoteFactory",
    "InterestSignupFactory",
]
