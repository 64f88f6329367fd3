"""
Role-specific profile models.

A user owns at most one profile, of exactly one kind.  Each kind has
its own table; `ProfileKind` is the tag that `profile_service` switches
on and that the API exposes as the discriminator of the profile union.
"""

import enum
import uuid
from datetime import date
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import Boolean, Date, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ProfileKind(str, enum.Enum):
    HOST = "HOST"
    AGENCY = "AGENCY"
    BRAND = "BRAND"
    GIFTER = "GIFTER"


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"
    PREFER_NOT_TO_SAY = "PREFER_NOT_TO_SAY"


class ProfileMixin(UUIDPrimaryKeyMixin, TimestampMixin):
    """Columns shared by every profile table."""

    kind: ClassVar[ProfileKind]

    @declared_attr
    def user_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            ForeignKey("users.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        )


class ProfileHost(ProfileMixin, Base):
    __tablename__ = "profile_hosts"
    kind = ProfileKind.HOST

    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    gender: Mapped[Gender | None] = mapped_column(Enum(Gender, name="gender"), nullable=True)
    dob: Mapped[date] = mapped_column(Date, nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_pic_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    onboarding_step: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class ProfileAgency(ProfileMixin, Base):
    __tablename__ = "profile_agencies"
    kind = ProfileKind.AGENCY

    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    registration_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(100), nullable=True)
    agency_code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class ProfileBrand(ProfileMixin, Base):
    __tablename__ = "profile_brands"
    kind = ProfileKind.BRAND

    brand_name: Mapped[str] = mapped_column(String(200), nullable=False)
    website_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class ProfileGifter(ProfileMixin, Base):
    __tablename__ = "profile_gifters"
    kind = ProfileKind.GIFTER

    level: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    vip_status: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    total_spent: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)


PROFILE_MODELS: dict[ProfileKind, type[ProfileMixin]] = {
    ProfileKind.HOST: ProfileHost,
    ProfileKind.AGENCY: ProfileAgency,
    ProfileKind.BRAND: ProfileBrand,
    ProfileKind.GIFTER: ProfileGifter,
}
