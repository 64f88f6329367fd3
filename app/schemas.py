"""
Pydantic schemas for request / response serialization.

Kept in a single file for now — split per-domain when it grows.
Schemas are deliberately decoupled from SQLAlchemy models so the
API surface can evolve independently of the DB layer.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import AliasChoices, BaseModel, EmailStr, Field, model_validator

from app.models.kyc_document import DocumentType, KycStatus
from app.models.profile import Gender, ProfileKind
from app.models.role import RoleName
from app.models.user import AccountStatus


# ── Auth ─────────────────────────────────────────────────────────────
class RegisterRequest(BaseModel):
    email: EmailStr | None = None
    phone_number: str | None = Field(default=None, pattern=r"^\+?[1-9]\d{1,14}$")
    password: str = Field(min_length=8, max_length=128)
    device_info: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _email_or_phone(self) -> "RegisterRequest":
        if self.email is None and self.phone_number is None:
            raise ValueError("Either email or phone_number is required")
        return self


class LoginRequest(BaseModel):
    email_or_phone: str
    password: str
    device_info: str | None = Field(default=None, max_length=500)


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(min_length=8, max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user_id: uuid.UUID
    session_id: uuid.UUID | None = None
    email: str | None = None
    account_status: AccountStatus | None = None
    roles: list[RoleName] = []
    message: str | None = None


# ── User ─────────────────────────────────────────────────────────────
class UserOut(BaseModel):
    id: uuid.UUID
    email: str | None = None
    phone_number: str | None = None
    is_email_verified: bool
    is_phone_verified: bool
    account_status: AccountStatus
    roles: list[RoleName] = []
    created_at: datetime
    last_login_at: datetime | None = None


class UpdateAccountStatusRequest(BaseModel):
    account_status: AccountStatus


# ── Sessions ─────────────────────────────────────────────────────────
class SessionOut(BaseModel):
    session_id: uuid.UUID = Field(validation_alias=AliasChoices("id", "session_id"))
    device_info: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime
    expires_at: datetime
    last_accessed_at: datetime

    model_config = {"from_attributes": True}


# ── Roles ────────────────────────────────────────────────────────────
class RoleSelectionRequest(BaseModel):
    role_name: RoleName


class UserRolesOut(BaseModel):
    user_id: uuid.UUID
    roles: list[RoleName]


# ── Profiles ─────────────────────────────────────────────────────────
# Requests are a tagged union on `kind`.
class HostProfileCreate(BaseModel):
    kind: Literal["HOST"]
    display_name: str | None = Field(default=None, max_length=100)
    gender: Gender | None = None
    dob: date | None = None
    bio: str | None = None
    profile_pic_url: str | None = Field(default=None, max_length=500)


class AgencyProfileCreate(BaseModel):
    kind: Literal["AGENCY"]
    company_name: str | None = Field(default=None, max_length=200)
    registration_number: str | None = Field(default=None, max_length=100)
    contact_person: str | None = Field(default=None, max_length=100)


class BrandProfileCreate(BaseModel):
    kind: Literal["BRAND"]
    brand_name: str | None = Field(default=None, max_length=200)
    website_url: str | None = Field(default=None, max_length=500)
    industry: str | None = Field(default=None, max_length=100)


class GifterProfileCreate(BaseModel):
    kind: Literal["GIFTER"]


ProfileCreate = Annotated[
    Union[HostProfileCreate, AgencyProfileCreate, BrandProfileCreate, GifterProfileCreate],
    Field(discriminator="kind"),
]

# Updates share the create shapes: every field optional, None = unchanged.
HostProfileUpdate = HostProfileCreate
AgencyProfileUpdate = AgencyProfileCreate
BrandProfileUpdate = BrandProfileCreate
GifterProfileUpdate = GifterProfileCreate
ProfileUpdate = ProfileCreate


class _ProfileOutBase(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    kind: ProfileKind
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class HostProfileOut(_ProfileOutBase):
    kind: Literal[ProfileKind.HOST]
    display_name: str | None = None
    gender: Gender | None = None
    dob: date
    bio: str | None = None
    profile_pic_url: str | None = None
    onboarding_step: int
    is_verified: bool


class AgencyProfileOut(_ProfileOutBase):
    kind: Literal[ProfileKind.AGENCY]
    company_name: str
    registration_number: str | None = None
    contact_person: str | None = None
    agency_code: str
    is_verified: bool


class BrandProfileOut(_ProfileOutBase):
    kind: Literal[ProfileKind.BRAND]
    brand_name: str
    website_url: str | None = None
    industry: str | None = None
    is_verified: bool


class GifterProfileOut(_ProfileOutBase):
    kind: Literal[ProfileKind.GIFTER]
    level: int
    vip_status: bool
    total_spent: Decimal


ProfileOut = Annotated[
    Union[HostProfileOut, AgencyProfileOut, BrandProfileOut, GifterProfileOut],
    Field(discriminator="kind"),
]

PROFILE_OUT: dict[ProfileKind, type[_ProfileOutBase]] = {
    ProfileKind.HOST: HostProfileOut,
    ProfileKind.AGENCY: AgencyProfileOut,
    ProfileKind.BRAND: BrandProfileOut,
    ProfileKind.GIFTER: GifterProfileOut,
}


# ── KYC ──────────────────────────────────────────────────────────────
class KycSubmissionRequest(BaseModel):
    document_type: DocumentType
    document_url: str = Field(min_length=1, max_length=500)


class KycRejectRequest(BaseModel):
    reason: str = Field(min_length=1)


class KycOut(BaseModel):
    document_id: uuid.UUID = Field(validation_alias=AliasChoices("id", "document_id"))
    user_id: uuid.UUID
    document_type: DocumentType
    document_url: str
    status: KycStatus
    rejection_reason: str | None = None
    submitted_at: datetime
    reviewed_at: datetime | None = None
    verified_at: datetime | None = None
    reviewer_id: uuid.UUID | None = None

    model_config = {"from_attributes": True}


# ── Generic ──────────────────────────────────────────────────────────
class MessageResponse(BaseModel):
    detail: str
