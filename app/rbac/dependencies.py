"""
RBAC dependencies.

`require_role` is a *dependency factory*: call it with one or more role
names and it returns a FastAPI dependency that will:

1. Verify the access token and its session (via `get_current_user_token`).
2. Load the user with roles.
3. Reject restricted accounts (SUSPENDED / BANNED).
4. Verify the user holds at least one of the given roles.
5. Return 403 on failure, without naming the missing role.

Usage in a route:
    @router.get("/pending", dependencies=[Depends(require_role(RoleName.ADMIN))])
    async def pending(...): ...

Or inject the user object:
    @router.get("/me")
    async def me(user: User = Depends(get_current_active_user)): ...
"""

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import AccountStatusError, ForbiddenError
from app.core.security import TokenClaims, get_current_user_token
from app.models.role import RoleName
from app.models.user import User
from app.services import user_service

logger = logging.getLogger("rbac")


async def get_current_active_user(
    claims: TokenClaims = Depends(get_current_user_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependency that returns the current user WITHOUT role checks.
    Useful for routes that only need authentication, not authorization."""
    user = await user_service.get_user_by_id(claims.user_id, db)
    if user.account_status in user_service.RESTRICTED_STATUSES:
        raise AccountStatusError(f"Account {user.account_status.value.lower()}")
    return user


def is_admin(user: User) -> bool:
    return any(r.name == RoleName.ADMIN for r in user.roles)


class require_role:
    """
    Dependency factory.

    Can be used as:
        Depends(require_role(RoleName.ADMIN))
        Depends(require_role(RoleName.HOST, RoleName.AGENCY))
    """

    def __init__(self, *role_names: RoleName):
        self.allowed = set(role_names)

    async def __call__(self, user: User = Depends(get_current_active_user)) -> User:
        granted = {r.name for r in user.roles}
        if not self.allowed & granted:
            logger.warning(
                "Role check failed for user %s (allowed: %s, granted: %s)",
                user.id,
                sorted(r.value for r in self.allowed),
                sorted(r.value for r in granted),
            )
            raise ForbiddenError()
        return user


require_admin = require_role(RoleName.ADMIN)
