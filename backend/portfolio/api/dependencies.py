"""
FastAPI dependency functions.

Provides reusable dependency injection functions for FastAPI routes,
including settings access, database sessions, services and the
access-token gate for protected routes.
"""

from typing import Annotated, Optional

from fastapi import Cookie, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.config import Settings
from portfolio.core.database import get_db
from portfolio.core.errors import UnauthorizedError
from portfolio.core.logging_config import get_logger
from portfolio.core.security import decode_access_token
from portfolio.repositories.admin import AdminRepository
from portfolio.services.auth import AuthContext, AuthService


logger = get_logger(__name__)

# Cookie names shared with the frontend
ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


def get_settings(request: Request) -> Settings:
    """
    Dependency returning the Settings object built at startup.
    """
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_settings)]
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


def get_auth_service(db: DatabaseSession, settings: AppSettings) -> AuthService:
    return AuthService(AdminRepository(db), settings)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


async def get_current_admin(
    request: Request,
    settings: AppSettings,
    access_token: Annotated[Optional[str], Cookie(alias=ACCESS_TOKEN_COOKIE)] = None,
) -> AuthContext:
    """
    Gate for protected routes.

    Reads the access token from its cookie and verifies signature, type
    and expiry with the access secret. Admits the request with an
    AuthContext or rejects it with 401. Never touches the token store.

    Args:
        request: Incoming request (for log context)
        settings: Application settings (access secret)
        access_token: Value of the accessToken cookie

    Returns:
        AuthContext for the authenticated admin

    Raises:
        UnauthorizedError: If the cookie is missing or the token is invalid/expired

    Example:
        @router.post("/projects")
        async def create_project(admin: CurrentAdmin):
            ...
    """
    path = request.url.path
    request_id = getattr(request.state, "request_id", None)

    if not access_token:
        logger.warning(
            "Unauthorized access attempt - no token provided",
            extra={"path": path, "request_id": request_id},
        )
        raise UnauthorizedError("Unauthorized: No token provided", reason="access cookie missing")

    payload = decode_access_token(access_token, settings)
    if payload is None:
        logger.warning(
            "Unauthorized access attempt - invalid token",
            extra={"path": path, "request_id": request_id},
        )
        raise UnauthorizedError("Unauthorized: Invalid token", reason="access token rejected")

    return AuthContext(admin_id=payload.admin_id)


CurrentAdmin = Annotated[AuthContext, Depends(get_current_admin)]
