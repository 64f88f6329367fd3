"""
Concurrent session creation.

Each task gets its own database session, as concurrent requests do.
Whatever the interleaving, the user must end up at the bound.
"""

import asyncio
from datetime import timedelta

from sqlalchemy import func, select

from app.core.clock import utcnow
from app.core.config import settings
from app.core.security import create_refresh_token
from app.models import UserSession
from app.services import session_service
from tests.factories import create_user


async def _create(session_factory, user_id, now=None):
    async with session_factory() as db:
        return await session_service.create_session(
            user_id, create_refresh_token(user_id), db, now=now,
        )


async def _count(session_factory, user_id):
    async with session_factory() as db:
        stmt = select(func.count()).select_from(UserSession).where(UserSession.user_id == user_id)
        return (await db.execute(stmt)).scalar_one()


async def test_concurrent_logins_leave_exactly_the_bound(db, session_factory):
    user = await create_user(db)
    await db.commit()

    created = await asyncio.gather(*(_create(session_factory, user.id) for _ in range(10)))

    async with session_factory() as check:
        active = await session_service.get_active_sessions(user.id, check)
    assert len(active) == settings.MAX_SESSIONS_PER_USER
    assert await _count(session_factory, user.id) == settings.MAX_SESSIONS_PER_USER
    # the survivors are the two most recently created
    assert {s.id for s in active} == {s.id for s in created[-2:]}
    assert len(session_service._user_locks) == 0


async def test_concurrent_logins_for_different_users(db, session_factory):
    users = [await create_user(db) for _ in range(3)]
    await db.commit()

    await asyncio.gather(
        *(_create(session_factory, u.id) for u in users for _ in range(4))
    )

    for u in users:
        assert await _count(session_factory, u.id) == settings.MAX_SESSIONS_PER_USER


async def test_cleanup_interleaved_with_creation(db, session_factory):
    user = await create_user(db)
    await db.commit()
    stale_time = utcnow() - timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS + 1)
    await _create(session_factory, user.id, now=stale_time)

    async def cleanup():
        async with session_factory() as db:
            removed = await session_service.cleanup_expired_sessions(db)
            await db.commit()
            return removed

    results = await asyncio.gather(
        cleanup(),
        *(_create(session_factory, user.id) for _ in range(3)),
    )

    assert results[0] == 1
    assert await _count(session_factory, user.id) == settings.MAX_SESSIONS_PER_USER
