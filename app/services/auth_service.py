"""
Authentication service.

Handles:
- Registration (email and/or phone, password) with an initial session
- Login by email or phone with session-bound token issuance
- Access-token refresh against the stored refresh-token hash
- Logout of one session / all sessions
- Password change (ends every session)

Session bound:
- Every login or registration creates a session through
  `session_service.create_session`, which keeps at most
  MAX_SESSIONS_PER_USER live sessions per user by evicting the oldest.
  Going over the bound is never an error for the user.

All business logic lives here — controllers call service methods
and return the result.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.core.exceptions import (
    AccountStatusError,
    BadRequestError,
    DuplicateResourceError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from app.core.security import (
    TokenType,
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
    verify_token,
)
from app.models.user import AccountStatus, User
from app.services import session_service, user_service

logger = logging.getLogger(__name__)


@dataclass
class ClientInfo:
    device_info: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


# ── Helpers ──────────────────────────────────────────────────────────


def _role_names(user: User) -> list[str]:
    return [r.name.value for r in user.roles]


def _check_account_status(user: User) -> None:
    if user.account_status == AccountStatus.BANNED:
        raise AccountStatusError("Account is banned")
    if user.account_status == AccountStatus.SUSPENDED:
        raise AccountStatusError("Account is suspended")


async def _open_session(user: User, client: ClientInfo, db: AsyncSession) -> dict:
    """Mint a refresh token, register its session, then mint the access token."""
    user_id = user.id
    roles = _role_names(user)
    result = {
        "token_type": "bearer",
        "user_id": user_id,
        "email": user.email,
        "account_status": user.account_status,
        "roles": roles,
    }

    refresh_token = create_refresh_token(user_id)
    session = await session_service.create_session(
        user_id,
        refresh_token,
        db,
        device_info=client.device_info,
        ip_address=client.ip_address,
        user_agent=client.user_agent,
    )
    access_token = create_access_token(
        user_id,
        roles[0] if roles else None,
        session_id=session.id,
        roles=roles,
    )
    return {
        **result,
        "access_token": access_token,
        "refresh_token": refresh_token,
        "session_id": session.id,
    }


# ── Register ─────────────────────────────────────────────────────────


async def register(
    email: str | None,
    phone_number: str | None,
    password: str,
    client: ClientInfo,
    db: AsyncSession,
) -> dict:
    email = email.strip().lower() if email else None
    logger.info("Registering new user: %s", email or phone_number)

    if email and await user_service.email_exists(email, db):
        raise DuplicateResourceError("Email already registered")
    if phone_number and await user_service.phone_exists(phone_number, db):
        raise DuplicateResourceError("Phone number already registered")

    user = User(
        id=uuid.uuid4(),
        email=email,
        phone_number=phone_number,
        password_hash=hash_password(password),
        is_email_verified=False,
        is_phone_verified=False,
        account_status=AccountStatus.PENDING_ONBOARDING,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user, ["roles"])

    # create_session commits, taking the new user row with it
    result = await _open_session(user, client, db)
    logger.info("User registered: %s", user.id)
    return {**result, "message": "Registered successfully"}


# ── Login ────────────────────────────────────────────────────────────


async def login(
    email_or_phone: str,
    password: str,
    client: ClientInfo,
    db: AsyncSession,
) -> dict:
    """
    Validate credentials and account status, open a session (evicting
    the oldest one if the user is at the bound) and return the token pair.
    """
    logger.info("Login attempt for: %s", email_or_phone)
    user = await user_service.find_user_by_identifier(email_or_phone, db)

    if user is None or not verify_password(password, user.password_hash or ""):
        raise InvalidCredentialsError()

    _check_account_status(user)

    result = await _open_session(user, client, db)
    user.last_login_at = utcnow()
    await db.flush()

    logger.info("User logged in: %s (session %s)", user.id, result["session_id"])
    return {**result, "message": "Login successful"}


# ── Refresh ──────────────────────────────────────────────────────────


async def refresh_access_token(refresh_token_raw: str, db: AsyncSession) -> dict:
    """
    Validate a refresh token against its live session and return a new
    access token.  The refresh token itself is returned unchanged; its
    hash is fixed for the lifetime of the session.
    """
    claims = verify_token(refresh_token_raw, TokenType.REFRESH)

    session = await session_service.find_session_for_refresh_token(
        claims.user_id, refresh_token_raw, db,
    )
    if session is None:
        raise InvalidTokenError("Session not found or expired")

    user = await user_service.get_user_by_id(claims.user_id, db)
    _check_account_status(user)

    await session_service.update_last_accessed_at(session.id, db)

    roles = _role_names(user)
    access_token = create_access_token(
        user.id,
        roles[0] if roles else None,
        session_id=session.id,
        roles=roles,
    )
    logger.info("Access token refreshed for user %s (session %s)", user.id, session.id)
    return {
        "access_token": access_token,
        "refresh_token": refresh_token_raw,
        "token_type": "bearer",
        "user_id": user.id,
        "session_id": session.id,
        "email": user.email,
        "account_status": user.account_status,
        "roles": roles,
        "message": "Token refreshed successfully",
    }


# ── Logout ───────────────────────────────────────────────────────────


async def logout(session_id: uuid.UUID, db: AsyncSession) -> None:
    logger.info("Logging out session: %s", session_id)
    await session_service.delete_session(session_id, db)


async def logout_all(user_id: uuid.UUID, db: AsyncSession) -> int:
    logger.info("Logging out all sessions for user: %s", user_id)
    return await session_service.delete_all_sessions(user_id, db)


# ── Password ─────────────────────────────────────────────────────────


async def change_password(
    user_id: uuid.UUID,
    old_password: str,
    new_password: str,
    db: AsyncSession,
) -> None:
    user = await user_service.get_user_by_id(user_id, db)

    if not verify_password(old_password, user.password_hash or ""):
        raise BadRequestError("Current password is incorrect")

    user.password_hash = hash_password(new_password)
    await db.flush()

    # every session ends on a password change
    await logout_all(user_id, db)
    logger.info("Password changed for user: %s", user_id)
