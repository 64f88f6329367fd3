"""
KYC service — document submission and admin review.

Review flow:  submit → PENDING → APPROVED | REJECTED.
Resubmitting a document type the user already has replaces its URL
and sends it back to PENDING, clearing any previous review.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.core.exceptions import BadRequestError, NotFoundError
from app.models.kyc_document import DocumentType, KycDocument, KycStatus
from app.services import user_service

logger = logging.getLogger(__name__)


async def submit_document(
    user_id: uuid.UUID,
    document_type: DocumentType,
    document_url: str,
    db: AsyncSession,
) -> KycDocument:
    await user_service.get_user_by_id(user_id, db)

    stmt = select(KycDocument).where(
        KycDocument.user_id == user_id,
        KycDocument.document_type == document_type,
    )
    document = (await db.execute(stmt)).scalar_one_or_none()
    if document is None:
        document = KycDocument(id=uuid.uuid4(), user_id=user_id, document_type=document_type)
        db.add(document)

    document.document_url = document_url
    document.status = KycStatus.PENDING
    document.submitted_at = utcnow()
    document.rejection_reason = None
    document.reviewed_at = None
    document.verified_at = None
    document.reviewer_id = None

    await db.flush()
    logger.info("KYC %s submitted by user %s", document_type.value, user_id)
    return document


async def get_document(document_id: uuid.UUID, db: AsyncSession) -> KycDocument:
    document = await db.get(KycDocument, document_id)
    if document is None:
        raise NotFoundError(f"KYC document not found with id: {document_id}")
    return document


async def get_user_documents(user_id: uuid.UUID, db: AsyncSession) -> list[KycDocument]:
    stmt = (
        select(KycDocument)
        .where(KycDocument.user_id == user_id)
        .order_by(KycDocument.submitted_at)
    )
    return list((await db.execute(stmt)).scalars().all())


async def get_pending_documents(db: AsyncSession) -> list[KycDocument]:
    """Review queue, oldest submission first."""
    stmt = (
        select(KycDocument)
        .where(KycDocument.status == KycStatus.PENDING)
        .order_by(KycDocument.submitted_at, KycDocument.id)
    )
    return list((await db.execute(stmt)).scalars().all())


async def _get_reviewer_id(reviewer_id: uuid.UUID | None, db: AsyncSession) -> uuid.UUID | None:
    if reviewer_id is None:
        return None
    reviewer = await user_service.find_user_by_id(reviewer_id, db)
    if reviewer is None:
        raise NotFoundError(f"Reviewer not found with id: {reviewer_id}")
    return reviewer.id


async def approve_document(
    document_id: uuid.UUID,
    reviewer_id: uuid.UUID | None,
    db: AsyncSession,
) -> KycDocument:
    document = await get_document(document_id, db)
    now = utcnow()

    document.status = KycStatus.APPROVED
    document.reviewer_id = await _get_reviewer_id(reviewer_id, db)
    document.reviewed_at = now
    document.verified_at = now
    document.rejection_reason = None

    await db.flush()
    logger.info("KYC document %s approved by %s", document_id, reviewer_id)
    return document


async def reject_document(
    document_id: uuid.UUID,
    reviewer_id: uuid.UUID | None,
    reason: str | None,
    db: AsyncSession,
) -> KycDocument:
    if reason is None or not reason.strip():
        raise BadRequestError("Rejection reason is required")

    document = await get_document(document_id, db)

    document.status = KycStatus.REJECTED
    document.reviewer_id = await _get_reviewer_id(reviewer_id, db)
    document.reviewed_at = utcnow()
    document.verified_at = None
    document.rejection_reason = reason.strip()

    await db.flush()
    logger.info("KYC document %s rejected by %s", document_id, reviewer_id)
    return document
