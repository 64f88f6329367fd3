"""
Models package — import every model so SQLAlchemy's Base.metadata
knows about all tables (critical for `create_all` / Alembic).
"""

from app.models.base import Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin
from app.models.role import Role, RoleName, user_roles
from app.models.user import AccountStatus, User
from app.models.session import UserSession
from app.models.profile import (
    PROFILE_MODELS,
    Gender,
    ProfileAgency,
    ProfileBrand,
    ProfileGifter,
    ProfileHost,
    ProfileKind,
)
from app.models.kyc_document import DocumentType, KycDocument, KycStatus

__all__ = [
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "UUIDPrimaryKeyMixin",
    "Role",
    "RoleName",
    "user_roles",
    "AccountStatus",
    "User",
    "UserSession",
    "PROFILE_MODELS",
    "Gender",
    "ProfileAgency",
    "ProfileBrand",
    "ProfileGifter",
    "ProfileHost",
    "ProfileKind",
    "DocumentType",
    "KycDocument",
    "KycStatus",
]
