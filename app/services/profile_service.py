"""
Profile service — one role-specific profile per user.

The request payloads are a tagged union on `kind`; every operation
dispatches on that tag to the matching table and field rules:

- HOST:   date of birth required, minimum age enforced
- AGENCY: company name required, agency code generated
- BRAND:  brand name required
- GIFTER: no input; level / VIP / spend are managed elsewhere
"""

import logging
import uuid
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.core.config import settings
from app.core.exceptions import BadRequestError, NotFoundError
from app.models.profile import (
    PROFILE_MODELS,
    ProfileAgency,
    ProfileBrand,
    ProfileGifter,
    ProfileHost,
    ProfileKind,
    ProfileMixin,
)
from app.schemas import (
    AgencyProfileCreate,
    AgencyProfileUpdate,
    BrandProfileCreate,
    BrandProfileUpdate,
    GifterProfileCreate,
    HostProfileCreate,
    HostProfileUpdate,
    ProfileCreate,
    ProfileUpdate,
)
from app.services import user_service

logger = logging.getLogger(__name__)


def _age_on(dob: date, today: date) -> int:
    return today.year - dob.year - ((today.month, today.day) < (dob.month, dob.day))


def _check_host_dob(dob: date | None) -> date:
    if dob is None:
        raise BadRequestError("Date of birth is required for host profile")
    today = utcnow().date()
    if dob >= today:
        raise BadRequestError("Date of birth must be in the past")
    if _age_on(dob, today) < settings.MIN_HOST_AGE:
        raise BadRequestError(f"Hosts must be at least {settings.MIN_HOST_AGE} years old")
    return dob


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def generate_agency_code(user_id: uuid.UUID) -> str:
    return "AG-" + str(user_id)[:8].upper()


# ── Lookup ───────────────────────────────────────────────────────────


async def find_profile(user_id: uuid.UUID, db: AsyncSession) -> ProfileMixin | None:
    for model in PROFILE_MODELS.values():
        result = await db.execute(select(model).where(model.user_id == user_id))
        profile = result.scalar_one_or_none()
        if profile is not None:
            return profile
    return None


async def get_profile(user_id: uuid.UUID, db: AsyncSession) -> ProfileMixin:
    profile = await find_profile(user_id, db)
    if profile is None:
        raise NotFoundError(f"Profile not found for user: {user_id}")
    return profile


# ── Create ───────────────────────────────────────────────────────────


def _build_host(user_id: uuid.UUID, data: HostProfileCreate) -> ProfileHost:
    return ProfileHost(
        user_id=user_id,
        display_name=data.display_name,
        gender=data.gender,
        dob=_check_host_dob(data.dob),
        bio=data.bio,
        profile_pic_url=data.profile_pic_url,
    )


def _build_agency(user_id: uuid.UUID, data: AgencyProfileCreate) -> ProfileAgency:
    if _is_blank(data.company_name):
        raise BadRequestError("Company name is required for agency profile")
    return ProfileAgency(
        user_id=user_id,
        company_name=data.company_name.strip(),
        registration_number=data.registration_number,
        contact_person=data.contact_person,
        agency_code=generate_agency_code(user_id),
    )


def _build_brand(user_id: uuid.UUID, data: BrandProfileCreate) -> ProfileBrand:
    if _is_blank(data.brand_name):
        raise BadRequestError("Brand name is required for brand profile")
    return ProfileBrand(
        user_id=user_id,
        brand_name=data.brand_name.strip(),
        website_url=data.website_url,
        industry=data.industry,
    )


def _build_gifter(user_id: uuid.UUID, data: GifterProfileCreate) -> ProfileGifter:
    return ProfileGifter(user_id=user_id)


_BUILDERS = {
    ProfileKind.HOST: _build_host,
    ProfileKind.AGENCY: _build_agency,
    ProfileKind.BRAND: _build_brand,
    ProfileKind.GIFTER: _build_gifter,
}


async def create_profile(
    user_id: uuid.UUID,
    data: ProfileCreate,
    db: AsyncSession,
) -> ProfileMixin:
    await user_service.get_user_by_id(user_id, db)
    if await find_profile(user_id, db) is not None:
        raise BadRequestError(f"Profile already exists for user: {user_id}")

    kind = ProfileKind(data.kind)
    profile = _BUILDERS[kind](user_id, data)
    profile.id = uuid.uuid4()
    db.add(profile)
    await db.flush()
    logger.info("Created %s profile for user %s", kind.value, user_id)
    return profile


# ── Update ───────────────────────────────────────────────────────────


def _apply_host(profile: ProfileHost, data: HostProfileUpdate) -> None:
    if not _is_blank(data.display_name):
        profile.display_name = data.display_name
    if data.gender is not None:
        profile.gender = data.gender
    if data.dob is not None:
        profile.dob = _check_host_dob(data.dob)
    if data.bio is not None:
        profile.bio = data.bio
    if data.profile_pic_url is not None:
        profile.profile_pic_url = data.profile_pic_url


def _apply_agency(profile: ProfileAgency, data: AgencyProfileUpdate) -> None:
    if not _is_blank(data.company_name):
        profile.company_name = data.company_name.strip()
    if data.registration_number is not None:
        profile.registration_number = data.registration_number
    if data.contact_person is not None:
        profile.contact_person = data.contact_person


def _apply_brand(profile: ProfileBrand, data: BrandProfileUpdate) -> None:
    if not _is_blank(data.brand_name):
        profile.brand_name = data.brand_name.strip()
    if data.website_url is not None:
        profile.website_url = data.website_url
    if data.industry is not None:
        profile.industry = data.industry


def _apply_gifter(profile: ProfileGifter, data) -> None:
    pass  # nothing user-editable


_UPDATERS = {
    ProfileKind.HOST: _apply_host,
    ProfileKind.AGENCY: _apply_agency,
    ProfileKind.BRAND: _apply_brand,
    ProfileKind.GIFTER: _apply_gifter,
}


async def update_profile(
    user_id: uuid.UUID,
    data: ProfileUpdate,
    db: AsyncSession,
) -> ProfileMixin:
    profile = await get_profile(user_id, db)
    if ProfileKind(data.kind) != profile.kind:
        raise BadRequestError(
            f"Profile is of kind {profile.kind.value}, not {data.kind}"
        )

    _UPDATERS[profile.kind](profile, data)
    await db.flush()
    return profile


# ── Delete ───────────────────────────────────────────────────────────


async def delete_profile(user_id: uuid.UUID, db: AsyncSession) -> None:
    profile = await get_profile(user_id, db)
    model = PROFILE_MODELS[profile.kind]
    await db.execute(delete(model).where(model.user_id == user_id))
    await db.flush()
    logger.info("Deleted %s profile of user %s", profile.kind.value, user_id)
