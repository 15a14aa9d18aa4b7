"""
Security primitives for authentication.

Provides password hashing, refresh token hashing, and JWT issuance and
verification using bcrypt and python-jose.

Access and refresh tokens are signed with distinct secrets and carry a
"type" claim, so neither can stand in for the other.
"""

import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Literal, Optional

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel

from portfolio.core.config import Settings


ALGORITHM = "HS256"

# Claim holding the admin identity; kept in camelCase for frontend compatibility
ADMIN_ID_CLAIM = "adminId"

TokenType = Literal["access", "refresh"]


class TokenPayload(BaseModel):
    """
    Decoded claims of a verified token.

    Attributes:
        admin_id: Identity the token was issued to
        token_type: "access" or "refresh"
        exp: Expiry timestamp
        jti: Unique token id
    """
    admin_id: str
    token_type: TokenType
    exp: datetime
    jti: Optional[str] = None


class TokenPair(BaseModel):
    """Access/refresh pair minted together on login and on every refresh."""
    access_token: str
    refresh_token: str


def _password_bytes(password: str) -> bytes:
    password_bytes = password.encode("utf-8")
    # bcrypt only reads the first 72 bytes
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    return password_bytes


def get_password_hash(password: str, rounds: int = 12) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash
        rounds: bcrypt cost factor

    Returns:
        Hashed password string (salt embedded)
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verify a plain password against a bcrypt hash.

    Returns False for a missing or malformed hash instead of raising.
    """
    if not hashed_password:
        return False

    if isinstance(hashed_password, str):
        hashed_bytes = hashed_password.encode("utf-8")
    else:
        hashed_bytes = hashed_password

    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_bytes)
    except ValueError:
        return False


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return get_password_hash(uuid.uuid4().hex)


def burn_password_check(password: str) -> None:
    """
    Run a bcrypt comparison that always fails.

    Used when the email is unknown so the response takes as long as a
    wrong-password attempt.
    """
    verify_password(password, _dummy_password_hash())


def _token_digest(token: str) -> bytes:
    # JWTs for the same admin share their first 72 bytes, so bcrypt must see a digest
    return hashlib.sha256(token.encode("utf-8")).hexdigest().encode("ascii")


def hash_refresh_token(token: str, rounds: int = 12) -> str:
    """
    Produce the salted one-way hash stored for the active refresh token.

    Args:
        token: Raw refresh token
        rounds: bcrypt cost factor

    Returns:
        bcrypt hash of the token's SHA-256 digest
    """
    return bcrypt.hashpw(_token_digest(token), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_refresh_token_hash(token: str, stored_hash: Optional[str]) -> bool:
    """
    Check a raw refresh token against the stored hash.

    An absent hash (no active session) never matches.
    """
    if not stored_hash:
        return False
    try:
        return bcrypt.checkpw(_token_digest(token), stored_hash.encode("utf-8"))
    except ValueError:
        return False


def _create_token(
    admin_id: str,
    token_type: TokenType,
    secret: str,
    expires_delta: timedelta,
) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        ADMIN_ID_CLAIM: admin_id,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def create_access_token(
    admin_id: str,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a short-lived access token.

    Args:
        admin_id: Admin identity to embed
        settings: Application settings (secret and default lifetime)
        expires_delta: Optional custom lifetime

    Returns:
        Encoded JWT string

    Example:
        >>> token = create_access_token(admin.id, settings)
    """
    return _create_token(
        admin_id,
        "access",
        settings.jwt_access_secret,
        expires_delta or settings.access_token_lifetime,
    )


def create_refresh_token(
    admin_id: str,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a long-lived refresh token signed with the refresh secret.
    """
    return _create_token(
        admin_id,
        "refresh",
        settings.jwt_refresh_secret,
        expires_delta or settings.refresh_token_lifetime,
    )


def create_token_pair(admin_id: str, settings: Settings) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(admin_id, settings),
        refresh_token=create_refresh_token(admin_id, settings),
    )


def decode_token(
    token: Optional[str],
    secret: str,
    expected_type: TokenType,
) -> Optional[TokenPayload]:
    """
    Decode and validate a JWT.

    Fails closed: a bad signature, malformed token, expired token, missing
    identity claim or wrong token type all return None. Callers treat None
    uniformly as unauthenticated.

    Args:
        token: JWT string (may be None or empty)
        secret: Secret the token must be signed with
        expected_type: "access" or "refresh"

    Returns:
        TokenPayload if valid, None otherwise
    """
    if not token:
        return None

    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None

    admin_id = payload.get(ADMIN_ID_CLAIM)
    if not admin_id or payload.get("type") != expected_type:
        return None

    exp = payload.get("exp")
    if exp is None:
        return None

    return TokenPayload(
        admin_id=str(admin_id),
        token_type=expected_type,
        exp=datetime.fromtimestamp(exp, tz=timezone.utc),
        jti=payload.get("jti"),
    )


def decode_access_token(token: Optional[str], settings: Settings) -> Optional[TokenPayload]:
    return decode_token(token, settings.jwt_access_secret, "access")


def decode_refresh_token(token: Optional[str], settings: Settings) -> Optional[TokenPayload]:
    return decode_token(token, settings.jwt_refresh_secret, "refresh")
