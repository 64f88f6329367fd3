"""Unit tests for the background expired-session reaper."""

import asyncio
from datetime import timedelta

from app.core.clock import utcnow
from app.core.config import settings
from app.services import session_service
from app.services.session_cleanup import SessionCleanupWorker
from tests.factories import create_user, open_session


async def _seed_sessions(db):
    user = await create_user(db)
    stale = utcnow() - timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS + 1)
    expired, _ = await open_session(db, user, now=stale)
    live, _ = await open_session(db, user)
    return expired, live


async def test_run_once(db, session_factory):
    expired, live = await _seed_sessions(db)
    worker = SessionCleanupWorker(session_factory)

    assert await worker.run_once() == 1
    assert await worker.run_once() == 0

    db.expunge_all()
    assert await session_service.get_session_by_id(expired.id, db) is None
    assert await session_service.get_session_by_id(live.id, db) is not None


async def test_default_interval_comes_from_settings(session_factory):
    worker = SessionCleanupWorker(session_factory)
    assert worker.interval_seconds == settings.SESSION_CLEANUP_INTERVAL_HOURS * 3600


async def test_loop_runs_periodically(db, session_factory):
    expired, _ = await _seed_sessions(db)
    worker = SessionCleanupWorker(session_factory, interval_seconds=0.01)

    await worker.start()
    assert worker.running
    for _ in range(100):
        db.expunge_all()
        if await session_service.get_session_by_id(expired.id, db) is None:
            break
        await asyncio.sleep(0.01)
    await worker.stop()

    assert not worker.running
    db.expunge_all()
    assert await session_service.get_session_by_id(expired.id, db) is None


async def test_failed_pass_does_not_stop_the_loop(session_factory, monkeypatch):
    calls = []

    async def flaky(db, **kwargs):
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("database unavailable")
        return 0

    monkeypatch.setattr(session_service, "cleanup_expired_sessions", flaky)
    worker = SessionCleanupWorker(session_factory, interval_seconds=0.01)

    await worker.start()
    for _ in range(100):
        if len(calls) >= 2:
            break
        await asyncio.sleep(0.01)
    await worker.stop()

    assert len(calls) >= 2


async def test_stop_without_start(session_factory):
    worker = SessionCleanupWorker(session_factory)
    await worker.stop()
    assert not worker.running
