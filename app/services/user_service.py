"""
User service — identity lookups, account status & deletion.

Deletion cascades explicitly: sessions, KYC documents, profiles and
role links are removed here, in one transaction, before the user row.
"""

import logging
import uuid

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestError, UserNotFoundError
from app.models.kyc_document import KycDocument
from app.models.profile import PROFILE_MODELS
from app.models.role import user_roles
from app.models.user import AccountStatus, User
from app.services import session_service

logger = logging.getLogger(__name__)

# Statuses that end every live session the moment they are applied.
RESTRICTED_STATUSES = {AccountStatus.SUSPENDED, AccountStatus.BANNED}


async def find_user_by_id(
    user_id: uuid.UUID,
    db: AsyncSession,
) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_id(
    user_id: uuid.UUID,
    db: AsyncSession,
) -> User:
    user = await find_user_by_id(user_id, db)
    if user is None:
        raise UserNotFoundError(f"User not found with id: {user_id}")
    return user


async def find_user_by_identifier(
    identifier: str,
    db: AsyncSession,
) -> User | None:
    """Look a user up by email (case-insensitive) or phone number."""
    stmt = select(User).where(
        or_(User.email == identifier.strip().lower(), User.phone_number == identifier.strip())
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def email_exists(email: str, db: AsyncSession) -> bool:
    result = await db.execute(select(User.id).where(User.email == email.lower()))
    return result.first() is not None


async def phone_exists(phone_number: str, db: AsyncSession) -> bool:
    result = await db.execute(select(User.id).where(User.phone_number == phone_number))
    return result.first() is not None


async def update_account_status(
    user_id: uuid.UUID,
    new_status: AccountStatus,
    db: AsyncSession,
) -> User:
    """Admin action: change account status.

    Suspending or banning a user immediately invalidates all sessions.
    A banned account is final.
    """
    user = await get_user_by_id(user_id, db)
    if user.account_status == AccountStatus.BANNED and new_status != AccountStatus.BANNED:
        raise BadRequestError("Banned accounts cannot be reactivated")

    user.account_status = new_status
    if new_status in RESTRICTED_STATUSES:
        await session_service.delete_all_sessions(user_id, db)
    await db.flush()
    logger.info("Account status of user %s set to %s", user_id, new_status.value)
    return user


async def delete_user(
    user_id: uuid.UUID,
    db: AsyncSession,
) -> None:
    """Delete a user and everything that references it."""
    user = await get_user_by_id(user_id, db)

    await session_service.delete_all_sessions(user_id, db)
    await db.execute(
        update(KycDocument).where(KycDocument.reviewer_id == user_id).values(reviewer_id=None)
    )
    await db.execute(delete(KycDocument).where(KycDocument.user_id == user_id))
    for model in PROFILE_MODELS.values():
        await db.execute(delete(model).where(model.user_id == user_id))
    await db.execute(delete(user_roles).where(user_roles.c.user_id == user_id))

    await db.delete(user)
    await db.flush()
    logger.info("User %s deleted", user_id)
