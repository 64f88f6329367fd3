"""
Auth controller — register, login, token refresh, logout & password.

Register, login and refresh are PUBLIC (no auth dependency).
Everything else requires a live session.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.security import TokenClaims, get_current_user_token
from app.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
)
from app.services import auth_service
from app.services.auth_service import ClientInfo

router = APIRouter(prefix=f"{settings.API_PREFIX}/auth", tags=["Auth"])


def _client_info(request: Request, device_info: str | None) -> ClientInfo:
    user_agent = request.headers.get("user-agent")
    return ClientInfo(
        device_info=device_info,
        ip_address=request.client.host if request.client else None,
        user_agent=user_agent[:1024] if user_agent else None,
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, request: Request, db: AsyncSession = Depends(get_db)):
    """Create an account and receive the first JWT pair."""
    return await auth_service.register(
        body.email,
        body.phone_number,
        body.password,
        _client_info(request, body.device_info),
        db,
    )


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, request: Request, db: AsyncSession = Depends(get_db)):
    """Authenticate with email/phone + password → receive JWT pair."""
    return await auth_service.login(
        body.email_or_phone,
        body.password,
        _client_info(request, body.device_info),
        db,
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    body: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db),
):
    """Exchange a valid refresh token for a new access token."""
    return await auth_service.refresh_access_token(body.refresh_token, db)


@router.delete("/logout", response_model=MessageResponse)
async def logout(
    claims: TokenClaims = Depends(get_current_user_token),
    db: AsyncSession = Depends(get_db),
):
    """End the current session (server-side logout)."""
    await auth_service.logout(claims.session_id, db)
    return MessageResponse(detail="Logged out successfully")


@router.post("/logout-all", response_model=MessageResponse)
async def logout_all(
    claims: TokenClaims = Depends(get_current_user_token),
    db: AsyncSession = Depends(get_db),
):
    """End every session of the current user, on all devices."""
    count = await auth_service.logout_all(claims.user_id, db)
    return MessageResponse(detail=f"Logged out of {count} session(s)")


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    body: ChangePasswordRequest,
    claims: TokenClaims = Depends(get_current_user_token),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.change_password(claims.user_id, body.old_password, body.new_password, db)
    return MessageResponse(detail="Password changed; please log in again")
