"""
Auth cookie helpers.

Both tokens travel as HTTP-only cookies. In production they are Secure and
SameSite=None so a frontend on another origin can send them; elsewhere
they use SameSite=Lax without Secure so plain-HTTP local setups work.
Max-Age matches the token lifetime.
"""

from fastapi import Response

from portfolio.api.dependencies import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from portfolio.core.config import Settings
from portfolio.core.security import TokenPair


def _cookie_attributes(settings: Settings) -> dict:
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "lax",
        "path": "/",
    }


def set_auth_cookies(response: Response, tokens: TokenPair, settings: Settings) -> None:
    attributes = _cookie_attributes(settings)
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        tokens.access_token,
        max_age=int(settings.access_token_lifetime.total_seconds()),
        **attributes,
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        tokens.refresh_token,
        max_age=int(settings.refresh_token_lifetime.total_seconds()),
        **attributes,
    )


def clear_auth_cookies(response: Response, settings: Settings) -> None:
    # Browsers only drop a cookie when the attributes match the ones it was set with
    attributes = _cookie_attributes(settings)
    response.delete_cookie(ACCESS_TOKEN_COOKIE, **attributes)
    response.delete_cookie(REFRESH_TOKEN_COOKIE, **attributes)
