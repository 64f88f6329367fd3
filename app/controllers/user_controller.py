"""
User controller — current account, and admin status / deletion.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.models.user import User
from app.rbac.dependencies import get_current_active_user, require_admin
from app.schemas import MessageResponse, UpdateAccountStatusRequest, UserOut
from app.services import user_service

router = APIRouter(prefix=f"{settings.API_PREFIX}/users", tags=["Users"])


def _user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        phone_number=user.phone_number,
        is_email_verified=user.is_email_verified,
        is_phone_verified=user.is_phone_verified,
        account_status=user.account_status,
        roles=[r.name for r in user.roles],
        created_at=user.created_at,
        last_login_at=user.last_login_at,
    )


@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_active_user)):
    return _user_out(user)


@router.patch("/{user_id}/status", response_model=UserOut)
async def update_status(
    user_id: uuid.UUID,
    body: UpdateAccountStatusRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Suspending or banning also ends every session of the user."""
    user = await user_service.update_account_status(user_id, body.account_status, db)
    return _user_out(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await user_service.delete_user(user_id, db)
    return MessageResponse(detail="User deleted")
