"""
Authentication endpoints for the admin surface.

Tokens never appear in response bodies; they are delivered and rotated
through the accessToken / refreshToken cookies.

    POST /auth/login    email + password -> cookies
    POST /auth/refresh  refreshToken cookie -> rotated cookies
    POST /auth/logout   (protected) -> session cleared, cookies deleted
    GET  /auth/me       (protected) -> admin profile
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Cookie, Response, status

from portfolio.api.cookies import clear_auth_cookies, set_auth_cookies
from portfolio.api.dependencies import (
    REFRESH_TOKEN_COOKIE,
    AppSettings,
    AuthServiceDep,
    CurrentAdmin,
)
from portfolio.core.errors import AuthError, InvalidRefreshTokenError, UnauthorizedError
from portfolio.schemas.auth import (
    AdminProfile,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
)


router = APIRouter()

_UNAUTHORIZED = {status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}}


@router.post(
    "/login",
    response_model=MessageResponse,
    responses=_UNAUTHORIZED,
    summary="Admin login",
)
async def login(
    body: LoginRequest,
    response: Response,
    auth_service: AuthServiceDep,
    settings: AppSettings,
) -> MessageResponse:
    """
    Authenticate the admin and start a session.

    Security:
        - Same 401 body for unknown email and wrong password
        - Any earlier session's refresh token stops working
        - Rate limited per client IP by RateLimitMiddleware
    """
    tokens = await auth_service.login(body.email, body.password)
    set_auth_cookies(response, tokens, settings)
    return MessageResponse(message="Login successful")


@router.post(
    "/refresh",
    response_model=MessageResponse,
    responses=_UNAUTHORIZED,
    summary="Rotate tokens",
)
async def refresh(
    response: Response,
    auth_service: AuthServiceDep,
    settings: AppSettings,
    refresh_token: Annotated[Optional[str], Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> MessageResponse:
    """
    Exchange the refresh cookie for a new access/refresh pair.

    The presented refresh token is revoked by the rotation; replaying it
    afterwards fails. Every failure other than a missing cookie returns
    the same message.
    """
    if not refresh_token:
        raise UnauthorizedError("No refresh token", reason="refresh cookie missing")

    try:
        tokens = await auth_service.refresh(refresh_token)
    except AuthError as exc:
        raise InvalidRefreshTokenError("Failed to refresh tokens", reason=exc.reason) from exc

    set_auth_cookies(response, tokens, settings)
    return MessageResponse(message="Tokens refreshed")


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses=_UNAUTHORIZED,
    summary="Admin logout",
)
async def logout(
    response: Response,
    admin: CurrentAdmin,
    auth_service: AuthServiceDep,
    settings: AppSettings,
) -> MessageResponse:
    """
    Clear the stored refresh token hash and delete both cookies.
    """
    await auth_service.logout(admin)
    clear_auth_cookies(response, settings)
    return MessageResponse(message="Logout successful")


@router.get(
    "/me",
    response_model=AdminProfile,
    responses=_UNAUTHORIZED,
    summary="Current admin",
)
async def read_current_admin(
    admin: CurrentAdmin,
    auth_service: AuthServiceDep,
) -> AdminProfile:
    record = await auth_service.get_admin(admin)
    return AdminProfile(id=record.id, email=record.email)
