"""
Role seeding script.

Populates the `roles` table with every `RoleName`.  It is IDEMPOTENT:
safe to re-run, and run automatically on application startup.

Usage:
    python -m app.rbac.role_seed
"""

import asyncio
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from app.models import Base  # registers every table
from app.models.role import Role, RoleName

logger = logging.getLogger(__name__)

ROLE_DESCRIPTIONS: dict[RoleName, str] = {
    RoleName.HOST: "Content creator / streamer",
    RoleName.AGENCY: "Agency managing hosts",
    RoleName.BRAND: "Brand / advertiser",
    RoleName.GIFTER: "Viewer who sends gifts",
    RoleName.ADMIN: "System administrator",
}


async def seed(session: AsyncSession) -> int:
    """Create missing roles.  Returns how many were added."""
    existing = set((await session.execute(select(Role.name))).scalars().all())

    added = 0
    for role_name, description in ROLE_DESCRIPTIONS.items():
        if role_name in existing:
            continue
        session.add(Role(id=uuid.uuid4(), name=role_name, description=description))
        added += 1

    await session.commit()
    logger.info("Role seed complete (%d added)", added)
    return added


# ── CLI entrypoint:  python -m app.rbac.role_seed ───────────────────
async def main() -> None:
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async_session = async_sessionmaker(engine, expire_on_commit=False)
    async with async_session() as session:
        await seed(session)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
