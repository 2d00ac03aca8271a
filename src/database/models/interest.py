"""Waitlist signups."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class InquiryType(str, Enum):
    GENERAL = "GENERAL"
    BUSINESS = "BUSINESS"


class InterestListSignup(Base):
    __tablename__ = "interest_list_signups"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    inquiry_type: Mapped[InquiryType] = mapped_column(
        String, default=InquiryType.GENERAL, nullable=False
    )
    note: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
