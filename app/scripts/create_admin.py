"""
One-time bootstrap script — creates the first ADMIN user.

Usage:
    python -m app.scripts.create_admin

You only need this ONCE. After the first admin exists, further admins
are granted the role through the admin role endpoints.
"""

import asyncio
import getpass
import uuid

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.core.security import hash_password
from app.models import Base  # noqa: F401  registers every table
from app.models.role import RoleName
from app.models.user import AccountStatus, User
from app.services import role_service, user_service


async def create_admin() -> None:
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async with session_factory() as session:
        # ── Collect input ────────────────────────────────────────────
        print("\n🔧  Creator Identity Backend — First Admin Setup\n")
        email = input("  Admin email: ").strip().lower()
        password = getpass.getpass("  Password:    ")
        confirm = getpass.getpass("  Confirm:     ")

        if password != confirm:
            print("\n❌  Passwords do not match.")
            await engine.dispose()
            return

        if not email or not password:
            print("\n❌  All fields are required.")
            await engine.dispose()
            return

        # ── Check for existing user ──────────────────────────────────
        if await user_service.email_exists(email, session):
            print(f"\n❌  User with email '{email}' already exists.")
            await engine.dispose()
            return

        # ── Create the admin user ────────────────────────────────────
        admin_user = User(
            id=uuid.uuid4(),
            email=email,
            password_hash=hash_password(password),
            is_email_verified=True,
            account_status=AccountStatus.ACTIVE,
        )
        session.add(admin_user)
        await session.flush()

        # ADMIN role must be seeded first
        try:
            await role_service.assign_role(admin_user.id, RoleName.ADMIN, session)
        except NotFoundError:
            print("\n❌  ADMIN role not found. Start the app once first so")
            print("   roles get seeded, then re-run this script.")
            await session.rollback()
            await engine.dispose()
            return

        await session.commit()

        print("\n✅  Admin user created successfully!")
        print(f"    ID:    {admin_user.id}")
        print(f"    Email: {admin_user.email}")
        print("    Role:  ADMIN")
        print(f"\n   You can now log in via POST {settings.API_PREFIX}/auth/login\n")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(create_admin())
