"""
KYC controller — document submission (any user) and review (admin).
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ForbiddenError
from app.models.user import User
from app.rbac.dependencies import get_current_active_user, is_admin, require_admin
from app.schemas import KycOut, KycRejectRequest, KycSubmissionRequest, MessageResponse
from app.services import kyc_service

router = APIRouter(prefix=f"{settings.API_PREFIX}/kyc", tags=["KYC"])


def _check_owner_or_admin(user: User, owner_id: uuid.UUID) -> None:
    if owner_id != user.id and not is_admin(user):
        raise ForbiddenError()


@router.post("/submit", response_model=KycOut, status_code=status.HTTP_201_CREATED)
async def submit_document(
    body: KycSubmissionRequest,
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    document = await kyc_service.submit_document(user.id, body.document_type, body.document_url, db)
    return KycOut.model_validate(document)


@router.get("/pending", response_model=list[KycOut])
async def pending_documents(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return [KycOut.model_validate(d) for d in await kyc_service.get_pending_documents(db)]


@router.get("/user/{user_id}", response_model=list[KycOut])
async def user_documents(
    user_id: uuid.UUID,
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    _check_owner_or_admin(user, user_id)
    return [KycOut.model_validate(d) for d in await kyc_service.get_user_documents(user_id, db)]


@router.get("/{document_id}", response_model=KycOut)
async def get_document(
    document_id: uuid.UUID,
    user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    document = await kyc_service.get_document(document_id, db)
    _check_owner_or_admin(user, document.user_id)
    return KycOut.model_validate(document)


@router.post("/{document_id}/approve", response_model=MessageResponse)
async def approve_document(
    document_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await kyc_service.approve_document(document_id, admin.id, db)
    return MessageResponse(detail="Document approved")


@router.post("/{document_id}/reject", response_model=MessageResponse)
async def reject_document(
    document_id: uuid.UUID,
    body: KycRejectRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await kyc_service.reject_document(document_id, admin.id, body.reason, db)
    return MessageResponse(detail="Document rejected")
