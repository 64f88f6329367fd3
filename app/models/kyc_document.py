from __future__ import annotations

"""
KYC document model.

A user submits one document per `DocumentType`; resubmitting the same
type replaces the URL and sends it back to PENDING.  Review fields are
set by an admin reviewer on approve / reject.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Enum, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.clock import utcnow
from app.models.base import Base, UTCDateTime, UUIDPrimaryKeyMixin


class KycStatus(str, enum.Enum):
    PENDING = "PENDING"      # submitted, awaiting review
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"    # always with a reason


class DocumentType(str, enum.Enum):
    PASSPORT = "PASSPORT"
    NATIONAL_ID = "NATIONAL_ID"
    DRIVING_LICENSE = "DRIVING_LICENSE"
    BUSINESS_REGISTRATION = "BUSINESS_REGISTRATION"
    TAX_CERTIFICATE = "TAX_CERTIFICATE"


class KycDocument(Base, UUIDPrimaryKeyMixin):
    __tablename__ = "kyc_documents"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    document_type: Mapped[DocumentType] = mapped_column(
        Enum(DocumentType, name="document_type"),
        nullable=False,
    )
    document_url: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[KycStatus] = mapped_column(
        Enum(KycStatus, name="kyc_status"),
        default=KycStatus.PENDING,
        nullable=False,
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    reviewed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    verified_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    reviewer_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "document_type", name="uq_kyc_documents_user_type"),
        Index("ix_kyc_documents_status_submitted", "status", "submitted_at"),
    )

    def __repr__(self) -> str:
        return f"<KycDocument {self.document_type.value} user={self.user_id} [{self.status.value}]>"
