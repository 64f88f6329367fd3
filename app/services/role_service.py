"""
Role service — assigning and revoking platform roles.

Roles themselves are seeded (see `app.rbac.role_seed`); this module
only manages the user ↔ role links.
"""

import logging
import uuid

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.core.exceptions import BadRequestError, NotFoundError
from app.models.role import Role, RoleName, user_roles
from app.services import user_service

logger = logging.getLogger(__name__)


async def _get_role(role_name: RoleName, db: AsyncSession) -> Role:
    result = await db.execute(select(Role).where(Role.name == role_name))
    role = result.scalar_one_or_none()
    if role is None:
        raise NotFoundError(f"Role not found: {role_name.value}")
    return role


async def has_role(
    user_id: uuid.UUID,
    role_name: RoleName,
    db: AsyncSession,
) -> bool:
    stmt = (
        select(user_roles.c.user_id)
        .join(Role, Role.id == user_roles.c.role_id)
        .where(user_roles.c.user_id == user_id, Role.name == role_name)
    )
    result = await db.execute(stmt)
    return result.first() is not None


async def get_user_roles(
    user_id: uuid.UUID,
    db: AsyncSession,
) -> list[RoleName]:
    """Role names held by the user, in assignment order."""
    stmt = (
        select(Role.name)
        .join(user_roles, Role.id == user_roles.c.role_id)
        .where(user_roles.c.user_id == user_id)
        .order_by(user_roles.c.assigned_at)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def assign_role(
    user_id: uuid.UUID,
    role_name: RoleName,
    db: AsyncSession,
) -> None:
    user = await user_service.get_user_by_id(user_id, db)
    role = await _get_role(role_name, db)

    if await has_role(user_id, role_name, db):
        raise BadRequestError(f"User already has role: {role_name.value}")

    await db.execute(
        insert(user_roles).values(user_id=user.id, role_id=role.id, assigned_at=utcnow())
    )
    await db.flush()
    # the viewonly `User.roles` collection would otherwise stay stale
    await db.refresh(user, ["roles"])
    logger.info("Assigned role %s to user %s", role_name.value, user_id)


async def remove_role(
    user_id: uuid.UUID,
    role_name: RoleName,
    db: AsyncSession,
) -> None:
    role = await _get_role(role_name, db)
    if not await has_role(user_id, role_name, db):
        raise NotFoundError("Role not assigned to user")

    await db.execute(
        delete(user_roles).where(
            user_roles.c.user_id == user_id,
            user_roles.c.role_id == role.id,
        )
    )
    await db.flush()
    user = await user_service.find_user_by_id(user_id, db)
    if user is not None:
        await db.refresh(user, ["roles"])
    logger.info("Removed role %s from user %s", role_name.value, user_id)
