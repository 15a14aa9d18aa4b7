"""
Authentication service: login, refresh-token rotation and logout.

State kept per admin is a single refresh token hash. Every operation
validates first and writes last, so a failure never leaves a partial
update behind:

    login    verify credentials -> mint pair -> store hash(refresh)
    refresh  verify JWT -> load admin -> compare hash -> mint pair -> CAS hash
    logout   clear hash

Failures raise AuthError subclasses. Callers map them to 401 and must
not retry.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from portfolio.core.config import Settings
from portfolio.core.errors import (
    AdminNotFoundError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UnauthorizedError,
)
from portfolio.core.logging_config import get_logger
from portfolio.core.security import (
    TokenPair,
    burn_password_check,
    create_token_pair,
    decode_refresh_token,
    hash_refresh_token,
    verify_password,
    verify_refresh_token_hash,
)
from portfolio.models.admin import Admin
from portfolio.repositories.admin import AdminRepository


logger = get_logger(__name__)

T = TypeVar("T")


async def run_blocking(func: Callable[..., T], *args: Any) -> T:
    """
    Run a CPU-bound call (bcrypt) in the default executor.

    Keeps the event loop serving other requests while a hash is computed.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


@dataclass(frozen=True)
class AuthContext:
    """
    Identity attached to a request that passed the access-token check.

    Threaded from the get_current_admin dependency into handlers and
    services in place of an untyped request attribute.
    """
    admin_id: str


class AuthService:
    """
    Credential verification and session lifecycle for the admin.

    Attributes:
        repository: Admin repository (credential lookup and token store)
        settings: Application settings (secrets, lifetimes, bcrypt cost)
    """

    def __init__(self, repository: AdminRepository, settings: Settings):
        self.repository = repository
        self.settings = settings

    async def authenticate(self, email: str, password: str) -> Admin:
        """
        Verify an email/password pair.

        The same error is raised for an unknown email and a wrong password,
        and both paths run one bcrypt comparison.

        Raises:
            InvalidCredentialsError: If the email or password is wrong
        """
        admin = await self.repository.get_by_email(email)

        if admin is None:
            await run_blocking(burn_password_check, password)
            raise InvalidCredentialsError(reason="unknown email")

        if not await run_blocking(verify_password, password, admin.password_hash):
            raise InvalidCredentialsError(reason="password mismatch")

        return admin

    async def _issue(self, admin_id: str) -> tuple[TokenPair, str]:
        tokens = create_token_pair(admin_id, self.settings)
        token_hash = await run_blocking(
            hash_refresh_token, tokens.refresh_token, self.settings.bcrypt_rounds
        )
        return tokens, token_hash

    async def login(self, email: str, password: str) -> TokenPair:
        """
        Authenticate and start a new session.

        Overwrites any stored refresh token hash, so a previous session's
        refresh token stops working.

        Returns:
            Fresh access/refresh token pair

        Raises:
            InvalidCredentialsError: If authentication fails
        """
        try:
            admin = await self.authenticate(email, password)
        except InvalidCredentialsError as exc:
            logger.warning("Login rejected", extra={"reason": exc.reason})
            raise

        tokens, token_hash = await self._issue(admin.id)
        await self.repository.set_refresh_token_hash(admin.id, token_hash)

        logger.info("Login succeeded", extra={"admin_id": admin.id})
        return tokens

    async def refresh(self, refresh_token: str | None) -> TokenPair:
        """
        Exchange a valid refresh token for a new pair and rotate the hash.

        A token that was already rotated out (or cleared by logout) no
        longer matches the stored hash and is rejected, even before it
        expires. Of two concurrent refreshes with the same token only one
        wins the compare-and-swap.

        Raises:
            UnauthorizedError: If no token was presented
            InvalidRefreshTokenError: Bad signature, expired, replayed or lost race
            AdminNotFoundError: If the token names an admin that no longer exists
        """
        if not refresh_token:
            raise UnauthorizedError("No refresh token", reason="refresh cookie missing")

        payload = decode_refresh_token(refresh_token, self.settings)
        if payload is None:
            logger.warning("Refresh rejected", extra={"reason": "invalid or expired token"})
            raise InvalidRefreshTokenError(reason="invalid or expired token")

        admin = await self.repository.get_by_id(payload.admin_id)
        if admin is None:
            logger.warning(
                "Refresh rejected",
                extra={"reason": "admin not found", "admin_id": payload.admin_id},
            )
            raise AdminNotFoundError(reason="admin not found")

        stored_hash = admin.refresh_token_hash
        if not await run_blocking(verify_refresh_token_hash, refresh_token, stored_hash):
            logger.warning(
                "Refresh rejected",
                extra={"reason": "token does not match active session", "admin_id": admin.id},
            )
            raise InvalidRefreshTokenError(reason="hash mismatch")

        tokens, new_hash = await self._issue(admin.id)
        rotated = await self.repository.rotate_refresh_token_hash(admin.id, stored_hash, new_hash)
        if not rotated:
            logger.warning(
                "Refresh rejected",
                extra={"reason": "concurrent rotation", "admin_id": admin.id},
            )
            raise InvalidRefreshTokenError(reason="concurrent rotation")

        logger.info("Tokens refreshed", extra={"admin_id": admin.id})
        return tokens

    async def logout(self, context: AuthContext) -> None:
        """
        End the admin's session by clearing the stored refresh token hash.
        """
        await self.repository.set_refresh_token_hash(context.admin_id, None)
        logger.info("Logout", extra={"admin_id": context.admin_id})

    async def get_admin(self, context: AuthContext) -> Admin:
        admin = await self.repository.get_by_id(context.admin_id)
        if admin is None:
            raise AdminNotFoundError(reason="admin not found")
        return admin
