"""
Exception types shared across the service.

AppError subclasses carry the HTTP status and the terse message shown to
clients; the exception handlers in portfolio.api.errors turn them into
{"error": message} responses. Authentication failures all map to 401 and
never reveal which check failed.
"""

from typing import Optional


class PortfolioError(Exception):
    """Base exception for the portfolio service"""
    pass


class ConfigurationError(PortfolioError):
    """Raised at startup when required configuration is missing or invalid"""
    pass


class AppError(PortfolioError):
    """
    Error with an HTTP status and a client-facing message.

    Attributes:
        status_code: HTTP status returned to the client
        message: Client-visible message
        reason: Internal detail for logs only (never sent to the client)
    """

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, reason: Optional[str] = None):
        self.message = message or self.default_message
        self.reason = reason or self.message
        super().__init__(self.message)


class AuthError(AppError):
    """Base for every authentication failure (always 401)"""

    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentialsError(AuthError):
    default_message = "Invalid credentials"


class UnauthorizedError(AuthError):
    default_message = "Unauthorized"


class InvalidRefreshTokenError(AuthError):
    default_message = "Invalid refresh token"


class AdminNotFoundError(AuthError):
    default_message = "Admin not found"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"
