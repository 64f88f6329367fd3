"""
Profile controller — the caller's role-specific profile.

Request bodies are discriminated on `kind` (HOST / AGENCY / BRAND /
GIFTER); responses carry the same tag.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.models.profile import ProfileMixin
from app.models.user import User
from app.rbac.dependencies import get_current_active_user
from app.schemas import PROFILE_OUT, MessageResponse, ProfileCreate, ProfileOut, ProfileUpdate
from app.services import profile_service

router = APIRouter(prefix=f"{settings.API_PREFIX}/profiles", tags=["Profiles"])


def _to_out(profile: ProfileMixin):
    return PROFILE_OUT[profile.kind].model_validate(profile)


@router.get("/me", response_model=ProfileOut)
async def get_my_profile(
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    return _to_out(await profile_service.get_profile(user.id, db))


@router.post("/me", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
async def create_my_profile(
    body: Annotated[ProfileCreate, Body(discriminator="kind")],
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    return _to_out(await profile_service.create_profile(user.id, body, db))


@router.patch("/me", response_model=ProfileOut)
async def update_my_profile(
    body: Annotated[ProfileUpdate, Body(discriminator="kind")],
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    return _to_out(await profile_service.update_profile(user.id, body, db))


@router.delete("/me", response_model=MessageResponse)
async def delete_my_profile(
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    await profile_service.delete_profile(user.id, db)
    return MessageResponse(detail="Profile deleted")


@router.get("/{user_id}", response_model=ProfileOut)
async def get_profile(
    user_id: uuid.UUID,
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    return _to_out(await profile_service.get_profile(user_id, db))
