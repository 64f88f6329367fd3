"""
Test configuration and fixtures.

- A fresh SQLite (aiosqlite) database file per test, built with
  `create_all` and seeded with every role
- `session_factory` / `db` fixtures for service-level tests
- An httpx `AsyncClient` bound to the ASGI app with `get_db` overridden
- Cheap bcrypt rounds so hashing does not dominate the run
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.core.config import settings
from app.core.database import get_db
from app.main import app
from app.models import Base
from app.rbac.role_seed import seed


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)
    monkeypatch.setattr(settings, "MAX_SESSIONS_PER_USER", 2)
    monkeypatch.setattr(settings, "SESSION_CREATE_MAX_ATTEMPTS", 3)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        await seed(session)
    return factory


@pytest_asyncio.fixture
async def db(session_factory):
    """Service-level session.  Commit before driving the API with it."""
    async with session_factory() as session:
        yield session


# =============================================================================
# API Client
# =============================================================================


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
