from __future__ import annotations

"""
Role model & the user ↔ role association table.

Roles are a closed set (`RoleName`) seeded at startup.  `user_roles`
carries an `assigned_at` stamp, so it is written with plain inserts by
`role_service` rather than through relationship collections.
"""

import enum

from sqlalchemy import Column, Enum, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from app.core.clock import utcnow
from app.models.base import Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin


class RoleName(str, enum.Enum):
    HOST = "HOST"        # content creator / streamer
    AGENCY = "AGENCY"    # agency managing hosts
    BRAND = "BRAND"      # brand / advertiser
    GIFTER = "GIFTER"    # viewer who sends gifts
    ADMIN = "ADMIN"


# ── Association table ────────────────────────────────────────────────
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("assigned_at", UTCDateTime, default=utcnow, nullable=False),
)


class Role(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "roles"

    name: Mapped[RoleName] = mapped_column(
        Enum(RoleName, name="role_name"),
        unique=True,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Role {self.name.value}>"
