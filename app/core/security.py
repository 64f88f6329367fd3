"""
Password hashing, refresh-token hashing & JWT helpers.

- Passwords are hashed with bcrypt directly (passlib is unmaintained
  and broken with bcrypt>=4.1).
- Refresh tokens are stored only as a bcrypt hash.  A JWT is longer
  than the 72 bytes bcrypt consumes, so it is SHA-256 digested first.
- Two token classes share one signing key and are told apart by the
  `type` claim.  Issuer and audience are checked on every decode.
- Access tokens carry the session id (`sid`); the bearer dependency
  rejects them as soon as that session is gone.
"""

import enum
import hashlib
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

import bcrypt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import ExpiredTokenError, InvalidTokenError
from app.models.session import UserSession

# ── Password hashing ────────────────────────────────────────────────


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


# ── Token hashing (for refresh tokens) ──────────────────────────────


def _digest(token: str) -> bytes:
    return hashlib.sha256(token.encode("utf-8")).hexdigest().encode("ascii")


def hash_token(token: str) -> str:
    """Salted, slow hash of a refresh token (bcrypt over its SHA-256)."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_digest(token), salt).decode("utf-8")


def verify_token_hash(token: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_digest(token), hashed.encode("utf-8"))
    except ValueError:
        return False


# ── JWT ──────────────────────────────────────────────────────────────
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")


class TokenType(str, enum.Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    user_id: uuid.UUID
    token_type: TokenType
    role: str | None = None
    roles: list[str] = field(default_factory=list)
    session_id: uuid.UUID | None = None


def _encode(claims: dict[str, Any], *, token_type: TokenType, now: datetime, ttl: timedelta) -> str:
    to_encode = dict(claims)
    to_encode.update(
        {
            "type": token_type.value,
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": uuid.uuid4().hex,
        }
    )
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(
    user_id: uuid.UUID,
    role: str | None,
    *,
    session_id: uuid.UUID | None = None,
    roles: list[str] | None = None,
    now: datetime | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "roles": roles if roles is not None else ([role] if role else []),
    }
    if session_id is not None:
        claims["sid"] = str(session_id)
    return _encode(
        claims,
        token_type=TokenType.ACCESS,
        now=now or utcnow(),
        ttl=expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(
    user_id: uuid.UUID,
    *,
    now: datetime | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a long-lived refresh token.  Only its hash is ever persisted."""
    return _encode(
        {"sub": str(user_id)},
        token_type=TokenType.REFRESH,
        now=now or utcnow(),
        ttl=expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def verify_token(token: str, expected_type: TokenType) -> TokenClaims:
    """Decode & validate a JWT of the given class.

    Raises `ExpiredTokenError` when the token is past `exp` and
    `InvalidTokenError` for anything else (signature, issuer, audience,
    token class, malformed subject).
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except ExpiredSignatureError:
        raise ExpiredTokenError()
    except JWTError:
        raise InvalidTokenError()

    if payload.get("type") != expected_type.value:
        raise InvalidTokenError("Invalid token type")

    try:
        user_id = uuid.UUID(payload["sub"])
        sid = payload.get("sid")
        session_id = uuid.UUID(sid) if sid else None
    except (KeyError, TypeError, ValueError):
        raise InvalidTokenError("Invalid token payload")

    return TokenClaims(
        user_id=user_id,
        token_type=expected_type,
        role=payload.get("role"),
        roles=list(payload.get("roles") or []),
        session_id=session_id,
    )


# ── Per-request session validation ──────────────────────────────────


async def get_current_user_token(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> TokenClaims:
    """
    FastAPI dependency — decodes the access token **and** checks that
    the session it was issued for is still live (not logged out,
    evicted or expired).
    """
    claims = verify_token(token, TokenType.ACCESS)
    if claims.session_id is None:
        raise InvalidTokenError("Invalid token payload: missing session")

    live = select(
        exists().where(
            UserSession.id == claims.session_id,
            UserSession.expires_at > utcnow(),
        )
    )
    if not (await db.execute(live)).scalar():
        raise InvalidTokenError("Session expired or revoked")

    return claims
