"""
FastAPI application factory.

Assembles the app, registers all routers and error handlers, and wires
up lifecycle events.  Database schema is managed by Alembic — NOT create_all.
"""

import logging

from fastapi import FastAPI

from app.controllers.auth_controller import router as auth_router
from app.controllers.kyc_controller import router as kyc_router
from app.controllers.profile_controller import router as profile_router
from app.controllers.role_controller import router as role_router
from app.controllers.session_controller import router as session_router
from app.controllers.user_controller import router as user_router
from app.core.config import settings
from app.core.database import SessionLocal, engine
from app.core.error_handling import register_exception_handlers
from app.models import Base  # noqa: F401 — ensures all models are registered
from app.services.session_cleanup import SessionCleanupWorker

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    register_exception_handlers(app)

    # ── Register routers ─────────────────────────────────────────────
    app.include_router(auth_router)
    app.include_router(session_router)
    app.include_router(user_router)
    app.include_router(role_router)
    app.include_router(profile_router)
    app.include_router(kyc_router)

    cleanup_worker = SessionCleanupWorker(SessionLocal)
    app.state.session_cleanup = cleanup_worker

    # ── Startup / Shutdown ───────────────────────────────────────────
    @app.on_event("startup")
    async def on_startup() -> None:
        """Seed roles and start the expired-session reaper.

        NOTE: Database schema is managed by Alembic migrations.
        Run `alembic upgrade head` before starting the app.
        """
        from app.rbac.role_seed import seed

        async with SessionLocal() as session:
            await seed(session)

        if settings.SESSION_CLEANUP_ENABLED:
            await cleanup_worker.start()

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await cleanup_worker.stop()
        await engine.dispose()
        logger.info("Database engine disposed.")

    # ── Health check ─────────────────────────────────────────────────
    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
