"""
Background reaper for expired sessions.

Started and stopped by the application lifecycle hooks.  Each pass runs
in its own database session and commits on its own; a failed pass is
logged and the loop carries on at the next interval.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.services import session_service

logger = logging.getLogger(__name__)


class SessionCleanupWorker:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        interval_seconds: float | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.interval_seconds = (
            interval_seconds
            if interval_seconds is not None
            else settings.SESSION_CLEANUP_INTERVAL_HOURS * 3600
        )
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            logger.warning("Session cleanup worker already running")
            return
        self._task = asyncio.create_task(self._run_loop(), name="session-cleanup")
        logger.info("Session cleanup worker started (every %.0fs)", self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Session cleanup worker stopped")

    async def run_once(self) -> int:
        async with self.session_factory() as db:
            deleted = await session_service.cleanup_expired_sessions(db)
            await db.commit()
        return deleted

    async def _run_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception:
                logger.exception("Expired-session cleanup failed; retrying next interval")
