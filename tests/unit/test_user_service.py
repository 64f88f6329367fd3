"""Unit tests for account status changes and user deletion."""

import uuid

import pytest
from sqlalchemy import func, select

from app.core.exceptions import BadRequestError, UserNotFoundError
from app.models import (
    AccountStatus,
    DocumentType,
    KycDocument,
    ProfileGifter,
    RoleName,
    UserSession,
    user_roles,
)
from app.schemas import GifterProfileCreate
from app.services import kyc_service, profile_service, session_service, user_service
from tests.factories import create_admin, create_user, open_session


async def _count(db, stmt):
    return (await db.execute(stmt)).scalar_one()


@pytest.mark.parametrize("status", [AccountStatus.SUSPENDED, AccountStatus.BANNED])
async def test_restricting_ends_sessions(db, status):
    user = await create_user(db)
    await open_session(db, user)
    await open_session(db, user)

    updated = await user_service.update_account_status(user.id, status, db)

    assert updated.account_status == status
    assert await session_service.get_active_sessions(user.id, db) == []


async def test_activation_keeps_sessions(db):
    user = await create_user(db, account_status=AccountStatus.PENDING_ONBOARDING)
    session, _ = await open_session(db, user)

    await user_service.update_account_status(user.id, AccountStatus.ACTIVE, db)

    assert [s.id for s in await session_service.get_active_sessions(user.id, db)] == [session.id]


async def test_banned_is_final(db):
    user = await create_user(db, account_status=AccountStatus.BANNED)
    with pytest.raises(BadRequestError):
        await user_service.update_account_status(user.id, AccountStatus.ACTIVE, db)


async def test_unknown_user(db):
    with pytest.raises(UserNotFoundError):
        await user_service.update_account_status(uuid.uuid4(), AccountStatus.ACTIVE, db)


async def test_find_by_identifier(db):
    user = await create_user(db, email="mia@example.com", phone_number="+15550004444")

    assert (await user_service.find_user_by_identifier(" MIA@example.com ", db)).id == user.id
    assert (await user_service.find_user_by_identifier("+15550004444", db)).id == user.id
    assert await user_service.find_user_by_identifier("nobody@example.com", db) is None


async def test_delete_user_removes_dependents(db):
    user = await create_user(db, roles=(RoleName.GIFTER,))
    admin = await create_admin(db)
    await open_session(db, user)
    await profile_service.create_profile(user.id, GifterProfileCreate(kind="GIFTER"), db)
    await kyc_service.submit_document(user.id, DocumentType.PASSPORT, "https://files/p", db)
    # a document the user reviewed as an admin keeps existing
    other = await create_user(db)
    reviewed = await kyc_service.submit_document(other.id, DocumentType.PASSPORT, "https://files/o", db)
    await kyc_service.approve_document(reviewed.id, admin.id, db)

    await user_service.delete_user(user.id, db)
    await user_service.delete_user(admin.id, db)

    assert await user_service.find_user_by_id(user.id, db) is None
    assert await _count(db, select(func.count()).select_from(UserSession).where(UserSession.user_id == user.id)) == 0
    assert await _count(db, select(func.count()).select_from(ProfileGifter)) == 0
    assert await _count(db, select(func.count()).select_from(user_roles)) == 0
    remaining = (await db.execute(select(KycDocument))).scalars().all()
    assert [d.id for d in remaining] == [reviewed.id]
    assert remaining[0].reviewer_id is None


async def test_delete_unknown_user(db):
    with pytest.raises(UserNotFoundError):
        await user_service.delete_user(uuid.uuid4(), db)
