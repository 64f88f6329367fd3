"""
Session service — the authoritative registry of live sessions.

Handles:
- Creating sessions under the per-user concurrency bound (evicting the
  oldest session when the bound is reached)
- Querying active sessions
- Deleting single sessions (logout) and every session of a user
  (logout-all, password change, account restriction)
- Reaping expired rows

Concurrency rules for `create_session`:
- Calls for the same user are serialized twice over: an in-process
  keyed asyncio lock, and a write lock on the user record taken inside
  the transaction (covers several worker processes on PostgreSQL).
- Count → evict → insert run in one transaction, committed before the
  lock is released.  Nothing is visible until that commit, so a failure
  or cancellation at any point leaves the previous state intact.
- Transient conflicts retry inside a savepoint, never discarding the
  caller's pending work.
- Calls for different users never wait on each other.

Everything except `create_session` works inside the caller's
transaction; the request-scoped `get_db` commits it.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta

from sqlalchemy import delete, exists, select, update
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.core.config import settings
from app.core.exceptions import ConcurrencyConflictError, UserNotFoundError
from app.core.locks import KeyedLock
from app.core.security import hash_token, verify_token_hash
from app.models.session import UserSession
from app.models.user import User
from app.services.session_policy import select_eviction_candidates

logger = logging.getLogger(__name__)

_user_locks = KeyedLock()

# serialization_failure, deadlock_detected, lock_not_available
_TRANSIENT_SQLSTATES = {"40001", "40P01", "55P03"}

_RETRY_BACKOFF_SECONDS = 0.05


def _is_transient(exc: DBAPIError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code in _TRANSIENT_SQLSTATES:
        return True
    return "database is locked" in str(orig)


def _active_sessions_stmt(user_id: uuid.UUID, now: datetime):
    return (
        select(UserSession)
        .where(
            UserSession.user_id == user_id,
            UserSession.expires_at > now,
        )
        .order_by(UserSession.created_at, UserSession.id)
    )


# ── Create ───────────────────────────────────────────────────────────


async def _lock_user_row(user_id: uuid.UUID, db: AsyncSession) -> None:
    """Take the write lock on the user's row before reading anything.

    A no-op UPDATE (row lock on PostgreSQL, the database write lock on
    SQLite): an attempt never holds a bare read lock that another
    writer's commit has to wait for, so rolling back to the savepoint
    and retrying can make progress.
    """
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(updated_at=User.updated_at)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount == 0:
        raise UserNotFoundError(f"User not found: {user_id}")


async def _evict_and_insert(
    user_id: uuid.UUID,
    token_hash: str,
    db: AsyncSession,
    *,
    device_info: str | None,
    ip_address: str | None,
    user_agent: str | None,
    now: datetime,
) -> UserSession:
    await _lock_user_row(user_id, db)

    active = list((await db.execute(_active_sessions_stmt(user_id, now))).scalars().all())
    for victim in select_eviction_candidates(active, settings.MAX_SESSIONS_PER_USER):
        await db.delete(victim)
        logger.info(
            "Evicting session %s of user %s (created %s): session limit %d reached",
            victim.id,
            user_id,
            victim.created_at.isoformat(),
            settings.MAX_SESSIONS_PER_USER,
        )

    session = UserSession(
        id=uuid.uuid4(),
        user_id=user_id,
        refresh_token_hash=token_hash,
        device_info=device_info,
        ip_address=ip_address,
        user_agent=user_agent,
        created_at=now,
        last_accessed_at=now,
        expires_at=now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )
    db.add(session)
    await db.flush()
    return session


async def create_session(
    user_id: uuid.UUID,
    refresh_token: str,
    db: AsyncSession,
    *,
    device_info: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    now: datetime | None = None,
) -> UserSession:
    """
    Register a new session for `user_id`, keyed by the hash of
    `refresh_token`, evicting the oldest active session if the user is
    already at `MAX_SESSIONS_PER_USER`.

    Commits its own unit of work: anything the caller has pending on
    `db` is committed with it, so callers flush dependent rows (e.g. a
    freshly registered user) before calling.

    Each attempt runs in a SAVEPOINT.  A transient conflict rolls back
    only that attempt; the caller's flushed rows and loaded objects
    survive the retry.

    Raises `UserNotFoundError` for an unknown user and
    `ConcurrencyConflictError` when transient storage conflicts outlast
    `SESSION_CREATE_MAX_ATTEMPTS`.
    """
    token_hash = hash_token(refresh_token)
    max_attempts = settings.SESSION_CREATE_MAX_ATTEMPTS

    async with _user_locks.hold(user_id):
        for attempt in range(1, max_attempts + 1):
            try:
                async with db.begin_nested():
                    session = await _evict_and_insert(
                        user_id,
                        token_hash,
                        db,
                        device_info=device_info,
                        ip_address=ip_address,
                        user_agent=user_agent,
                        now=now or utcnow(),
                    )
            except DBAPIError as exc:
                if not _is_transient(exc):
                    raise
                logger.warning(
                    "Transient conflict creating session for user %s (attempt %d/%d): %s",
                    user_id,
                    attempt,
                    max_attempts,
                    exc.orig,
                )
                if attempt == max_attempts:
                    raise ConcurrencyConflictError() from exc
                await asyncio.sleep(_RETRY_BACKOFF_SECONDS * attempt)
                continue

            try:
                await db.commit()
            except DBAPIError as exc:
                # the whole transaction is gone, caller's work included
                await db.rollback()
                if _is_transient(exc):
                    raise ConcurrencyConflictError() from exc
                raise

            logger.info("Session %s created for user %s", session.id, user_id)
            return session

    raise AssertionError("unreachable")  # pragma: no cover


# ── Queries ──────────────────────────────────────────────────────────


async def get_active_sessions(
    user_id: uuid.UUID,
    db: AsyncSession,
    *,
    now: datetime | None = None,
) -> list[UserSession]:
    """Return the user's unexpired sessions, oldest first."""
    result = await db.execute(_active_sessions_stmt(user_id, now or utcnow()))
    return list(result.scalars().all())


async def get_session_by_id(
    session_id: uuid.UUID,
    db: AsyncSession,
) -> UserSession | None:
    return await db.get(UserSession, session_id)


async def is_session_active(
    session_id: uuid.UUID,
    db: AsyncSession,
    *,
    now: datetime | None = None,
) -> bool:
    stmt = select(
        exists().where(
            UserSession.id == session_id,
            UserSession.expires_at > (now or utcnow()),
        )
    )
    return bool((await db.execute(stmt)).scalar())


async def find_session_for_refresh_token(
    user_id: uuid.UUID,
    refresh_token: str,
    db: AsyncSession,
    *,
    now: datetime | None = None,
) -> UserSession | None:
    """Return the active session of `user_id` whose hash matches the token.

    Hashes are salted, so they cannot be looked up directly; the bound
    keeps the number of candidates to check small.
    """
    for session in await get_active_sessions(user_id, db, now=now):
        if verify_token_hash(refresh_token, session.refresh_token_hash):
            return session
    return None


# ── Mutations ────────────────────────────────────────────────────────


async def update_last_accessed_at(
    session_id: uuid.UUID,
    db: AsyncSession,
    *,
    timestamp: datetime | None = None,
) -> bool:
    """Best-effort bookkeeping.  Returns False if nothing was updated."""
    stmt = (
        update(UserSession)
        .where(UserSession.id == session_id)
        .values(last_accessed_at=timestamp or utcnow())
    )
    try:
        result = await db.execute(stmt)
        await db.flush()
    except SQLAlchemyError:
        logger.warning("Could not update last_accessed_at for session %s", session_id, exc_info=True)
        return False
    return result.rowcount > 0


async def delete_session(
    session_id: uuid.UUID,
    db: AsyncSession,
) -> bool:
    """Delete a single session (logout).  Idempotent: a missing row is fine.

    Returns whether a row was actually removed.
    """
    result = await db.execute(delete(UserSession).where(UserSession.id == session_id))
    await db.flush()
    deleted = result.rowcount > 0
    if deleted:
        logger.info("Session deleted: %s", session_id)
    return deleted


async def delete_all_sessions(
    user_id: uuid.UUID,
    db: AsyncSession,
) -> int:
    """
    Delete every session for a given user.

    Returns the number of sessions removed.
    Used by logout-all, password change and account restriction.
    """
    result = await db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    await db.flush()
    logger.info("Deleted %d session(s) for user %s", result.rowcount, user_id)
    return result.rowcount


async def cleanup_expired_sessions(
    db: AsyncSession,
    *,
    now: datetime | None = None,
) -> int:
    """Delete every session whose `expires_at` is already in the past."""
    result = await db.execute(
        delete(UserSession).where(UserSession.expires_at < (now or utcnow()))
    )
    await db.flush()
    logger.info("Cleaned up %d expired session(s)", result.rowcount)
    return result.rowcount
