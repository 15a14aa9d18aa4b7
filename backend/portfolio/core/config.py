"""
Centralized configuration management using Pydantic Settings.

This module provides type-safe configuration management with validation,
loading settings from environment variables and .env files.

The settings object is built once by load_settings() at process start and
handed to create_app(); request handlers reach it through the get_settings
dependency rather than reading the environment themselves.
"""

import json
import re
from datetime import timedelta
from typing import Annotated, List, Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from portfolio.core.errors import ConfigurationError


# Placeholder values shipped in .env.example that must never reach a deployment
PLACEHOLDER_SECRETS = {
    "generate-with-openssl-rand-hex-32",
    "CHANGE_ME_32_CHARS_MIN",
    "your-secret-key-here",
    "your-access-secret",
    "your-refresh-secret",
}

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*(ms|s|m|h|d|w)?\s*$", re.IGNORECASE)

_DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}


def parse_duration(value: str) -> timedelta:
    """
    Parse a compact duration string into a timedelta.

    Accepts the "<number><unit>" form used for token lifetimes, where unit
    is one of ms, s, m, h, d, w. A bare number is read as seconds.

    Args:
        value: Duration string such as "15m" or "7d"

    Returns:
        Parsed timedelta

    Raises:
        ValueError: If the string does not match the grammar or is zero

    Example:
        >>> parse_duration("15m")
        datetime.timedelta(seconds=900)
    """
    match = _DURATION_PATTERN.match(str(value))
    if not match:
        raise ValueError(
            f"Invalid duration {value!r}. Use forms like '900', '15m', '12h' or '7d'"
        )

    amount = int(match.group(1))
    unit = (match.group(2) or "s").lower()
    duration = amount * _DURATION_UNITS[unit]

    if duration <= timedelta(0):
        raise ValueError(f"Duration must be positive, got {value!r}")

    return duration


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Secrets should never be committed to code - use .env file (gitignored).
    """

    # Application
    app_env: Literal["development", "production", "test"] = Field(
        default="development",
        description="Deployment environment; production tightens cookie attributes"
    )
    project_name: str = Field(
        default="Portfolio API",
        description="Project name displayed in API docs"
    )
    api_prefix: str = Field(
        default="/api",
        description="Prefix for all API routes"
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/portfolio.db",
        description="Database connection URL (SQLite by default, PostgreSQL-ready format)"
    )
    enable_db_create_all: bool = Field(
        default=False,
        description="Create missing tables on startup (local development only)"
    )

    # Token signing
    jwt_access_secret: str = Field(
        ...,
        description="Secret for signing access tokens (generate with: openssl rand -hex 32)"
    )
    jwt_refresh_secret: str = Field(
        ...,
        description="Secret for signing refresh tokens, distinct from the access secret"
    )
    jwt_access_expiry: str = Field(
        default="15m",
        description="Access token lifetime, e.g. '15m'"
    )
    jwt_refresh_expiry: str = Field(
        default="7d",
        description="Refresh token lifetime, e.g. '7d'"
    )
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=16,
        description="bcrypt cost factor for password and refresh token hashes"
    )

    # CORS
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Public URL of the frontend, always allowed by CORS"
    )
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Additional allowed CORS origins"
    )

    # Rate limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable per-IP rate limiting on login and contact endpoints"
    )
    login_rate_limit: int = Field(default=5, ge=1)
    login_rate_window_seconds: int = Field(default=15 * 60, ge=1)
    contact_rate_limit: int = Field(default=3, ge=1)
    contact_rate_window_seconds: int = Field(default=60 * 60, ge=1)

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | List[str]) -> List[str]:
        """
        Parse cors_origins from JSON string or list.

        Supports comma-separated origins for easier .env configuration.
        """
        if isinstance(v, str):
            if not v.strip():
                return []
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("jwt_access_secret", "jwt_refresh_secret")
    @classmethod
    def validate_secret(cls, v: str, info) -> str:
        """
        Validate that a signing secret is properly configured.

        Raises ValueError if empty, still using a placeholder, or too short.
        """
        name = info.field_name.upper()
        if not v or v.strip() == "":
            raise ValueError(
                f"{name} is required and cannot be empty. "
                "Generate one with: openssl rand -hex 32"
            )
        if v in PLACEHOLDER_SECRETS:
            raise ValueError(
                f"{name} must be set to a secure random value (not placeholder). "
                "Generate one with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError(
                f"{name} must be at least 32 characters long. "
                f"Current length: {len(v)}"
            )
        return v

    @field_validator("jwt_access_expiry", "jwt_refresh_expiry")
    @classmethod
    def validate_expiry(cls, v: str) -> str:
        parse_duration(v)
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """
        Validate database URL format.

        Supports SQLite (default) and PostgreSQL.
        """
        if not v or v.strip() == "":
            raise ValueError("DATABASE_URL is required and cannot be empty")

        valid_schemes = ["sqlite+aiosqlite", "postgresql+asyncpg"]
        if not any(v.startswith(scheme + "://") for scheme in valid_schemes):
            raise ValueError(
                f"DATABASE_URL must start with one of: {', '.join(valid_schemes)}. "
                f"Got: {v[:20]}..."
            )
        return v

    @field_validator("api_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @model_validator(mode="after")
    def check_distinct_secrets(self) -> "Settings":
        # A shared secret would let a refresh token pass as an access token
        if self.jwt_access_secret == self.jwt_refresh_secret:
            raise ValueError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")
        return self

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def access_token_lifetime(self) -> timedelta:
        return parse_duration(self.jwt_access_expiry)

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return parse_duration(self.jwt_refresh_expiry)

    @property
    def allowed_origins(self) -> List[str]:
        origins = [self.frontend_url.rstrip("/")]
        for origin in self.cors_origins:
            origin = origin.rstrip("/")
            if origin not in origins:
                origins.append(origin)
        return origins


def load_settings(**overrides) -> Settings:
    """
    Build the process-wide Settings object.

    Call once at startup. Any missing or invalid value is fatal: the
    pydantic ValidationError is converted to ConfigurationError so the
    process refuses to serve traffic.

    Args:
        **overrides: Explicit values taking precedence over the environment

    Returns:
        Validated Settings instance

    Raises:
        ConfigurationError: If required configuration is missing or invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from exc
