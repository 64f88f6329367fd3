"""
Role controller — self role selection and admin role management.

Users may pick any non-admin role for themselves during onboarding;
granting or revoking roles on other accounts is admin-only.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ForbiddenError
from app.models.role import RoleName
from app.models.user import User
from app.rbac.dependencies import get_current_active_user, require_admin
from app.schemas import MessageResponse, RoleSelectionRequest, UserRolesOut
from app.services import role_service

router = APIRouter(prefix=f"{settings.API_PREFIX}/roles", tags=["Roles"])


@router.get("/me", response_model=UserRolesOut)
async def my_roles(
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    return UserRolesOut(user_id=user.id, roles=await role_service.get_user_roles(user.id, db))


@router.post("/me", response_model=UserRolesOut)
async def select_role(
    body: RoleSelectionRequest,
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    if body.role_name == RoleName.ADMIN:
        raise ForbiddenError("ADMIN cannot be self-assigned")
    await role_service.assign_role(user.id, body.role_name, db)
    return UserRolesOut(user_id=user.id, roles=await role_service.get_user_roles(user.id, db))


@router.get("/user/{user_id}", response_model=UserRolesOut)
async def user_roles(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return UserRolesOut(user_id=user_id, roles=await role_service.get_user_roles(user_id, db))


@router.post("/user/{user_id}", response_model=MessageResponse)
async def assign_role(
    user_id: uuid.UUID,
    body: RoleSelectionRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await role_service.assign_role(user_id, body.role_name, db)
    return MessageResponse(detail=f"Role {body.role_name.value} assigned")


@router.delete("/user/{user_id}/{role_name}", response_model=MessageResponse)
async def remove_role(
    user_id: uuid.UUID,
    role_name: RoleName,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await role_service.remove_role(user_id, role_name, db)
    return MessageResponse(detail=f"Role {role_name.value} removed")
