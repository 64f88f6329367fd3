"""Fixtures shared by the API tests."""

import pytest_asyncio

from tests.factories import auth_headers, create_admin


@pytest_asyncio.fixture
async def admin(db):
    user = await create_admin(db, email="admin@example.com")
    await db.commit()
    return user


@pytest_asyncio.fixture
async def admin_headers(db, admin):
    return await auth_headers(db, admin)
