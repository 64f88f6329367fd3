"""
Session controller — list and terminate device sessions.

Users see and end their own sessions; admins may act on anyone's.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ForbiddenError
from app.models.user import User
from app.rbac.dependencies import get_current_active_user, is_admin, require_admin
from app.schemas import MessageResponse, SessionOut
from app.services import session_service

router = APIRouter(prefix=f"{settings.API_PREFIX}/sessions", tags=["Sessions"])


@router.get("", response_model=list[SessionOut])
async def list_my_sessions(
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    sessions = await session_service.get_active_sessions(user.id, db)
    return [SessionOut.model_validate(s) for s in sessions]


@router.get("/user/{user_id}", response_model=list[SessionOut])
async def list_user_sessions(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    sessions = await session_service.get_active_sessions(user_id, db)
    return [SessionOut.model_validate(s) for s in sessions]


@router.delete("/{session_id}", response_model=MessageResponse)
async def terminate_session(
    session_id: uuid.UUID,
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Terminate one session.  Already-gone sessions count as terminated."""
    session = await session_service.get_session_by_id(session_id, db)
    if session is not None and session.user_id != user.id and not is_admin(user):
        raise ForbiddenError()
    await session_service.delete_session(session_id, db)
    return MessageResponse(detail="Session terminated")


@router.delete("", response_model=MessageResponse)
async def terminate_all_sessions(
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Log out everywhere, including the calling device."""
    count = await session_service.delete_all_sessions(user.id, db)
    return MessageResponse(detail=f"Terminated {count} session(s)")
