"""Database models for the Iridium API."""

from .base import Base
from .chat import DEFAULT_THREAD_TITLE, Message, MessageRole, Thread
from .interest import InquiryType, InterestListSignup
from .invitations import OrganizationInvitation
from .notes import Note
from .organizations import (
    ROLE_RANK,
    Organization,
    OrganizationMember,
    OrganizationRole,
)
from .sessions import UserSession
from .users import User, UserRole

# Export all models and enums
__all__ = [
    # Base
    "Base",
    # Enums
    "UserRole",
    "OrganizationRole",
    "MessageRole",
    "InquiryType",
    # Constants
    "ROLE_RANK",
    "DEFAULT_THREAD_TITLE",
    # Models
    "User",
    "UserSession",
    "Organization",
    "OrganizationMember",
    "OrganizationInvitation",
    "Thread",
    "Message",
    "Note",
    "InterestListSignup",
]
