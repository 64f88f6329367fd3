from __future__ import annotations

"""
User model.

Design decisions:
- NO role-specific columns here (host DOB, agency company, etc.)
  Those live in the per-kind profile tables, referenced by user_id.
- Status is an ENUM (PENDING_ONBOARDING → ACTIVE ↔ SUSPENDED, → BANNED).
- Roles are attached via a many-to-many so new roles can be added
  without schema changes.
- No ORM cascades: dependent rows (sessions, profiles, KYC documents,
  role links) are removed explicitly by `user_service.delete_user`.
"""

import enum
from datetime import datetime

from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin
from typing import TYPE_CHECKING

from app.models.role import user_roles  # association table

if TYPE_CHECKING:
    from app.models.role import Role


class AccountStatus(str, enum.Enum):
    PENDING_ONBOARDING = "PENDING_ONBOARDING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    BANNED = "BANNED"


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"

    email: Mapped[str | None] = mapped_column(String(255), unique=True, index=True, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(20), unique=True, index=True, nullable=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_phone_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    account_status: Mapped[AccountStatus] = mapped_column(
        Enum(AccountStatus, name="account_status"),
        default=AccountStatus.PENDING_ONBOARDING,
        nullable=False,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    # ── Relationships ────────────────────────────────────────────────
    # Read-only view; assignments go through role_service.
    roles: Mapped[list["Role"]] = relationship(  # noqa: F821
        secondary=user_roles,
        lazy="selectin",
        viewonly=True,
        order_by=user_roles.c.assigned_at,
    )

    def __repr__(self) -> str:
        return f"<User {self.email or self.phone_number}>"
