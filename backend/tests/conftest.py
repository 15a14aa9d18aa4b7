"""
Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup for tests
- In-memory database engine and sessions
- Application and HTTP client fixtures
- A provisioned admin account
"""

import os
import sys
from pathlib import Path

import pytest


# Set test environment variables BEFORE any imports
# This must happen first to ensure settings load with test values
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_ACCESS_SECRET"] = "test_access_secret_at_least_32_characters_long"
os.environ["JWT_REFRESH_SECRET"] = "test_refresh_secret_at_least_32_characters_long"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"  # Disable rate limiting for tests
os.environ["LOG_JSON"] = "false"

# Add backend directory to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from httpx import ASGITransport, AsyncClient  # noqa: E402

from portfolio.core.config import Settings, load_settings  # noqa: E402
from portfolio.core.database import get_async_engine, get_session_maker  # noqa: E402
from portfolio.core.security import create_access_token, get_password_hash  # noqa: E402
from portfolio.main import create_app  # noqa: E402
from portfolio.models.base import Base  # noqa: E402
from portfolio.repositories.admin import AdminRepository  # noqa: E402


ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture
def anyio_backend():
    """
    Configure anyio backend for async tests.

    Returns:
        str: Backend name ("asyncio")
    """
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    """Settings built from the test environment above."""
    return load_settings()


@pytest.fixture
async def engine():
    """
    In-memory SQLite engine with all tables created.

    StaticPool keeps one shared connection, so every session in a test
    sees the same database.
    """
    from portfolio import models  # noqa: F401 - Import to register models

    engine = get_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return get_session_maker(engine)


@pytest.fixture
async def db_session(session_maker):
    """
    Provide a database session for tests.
    """
    async with session_maker() as session:
        yield session


@pytest.fixture
async def admin(db_session, settings):
    """
    Create the admin account (ADMIN_EMAIL / ADMIN_PASSWORD).

    Returns:
        Admin instance
    """
    repository = AdminRepository(db_session)
    admin = await repository.create(
        ADMIN_EMAIL,
        get_password_hash(ADMIN_PASSWORD, rounds=settings.bcrypt_rounds),
    )
    await db_session.commit()
    return admin


@pytest.fixture
def make_app(engine, settings):
    """
    Factory building an app wired to the test database.

    Keyword arguments override individual settings, e.g.
    make_app(app_env="production").
    """
    def _make_app(**overrides):
        app_settings = settings.model_copy(update=overrides) if overrides else settings
        return create_app(app_settings, engine=engine)

    return _make_app


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
async def client(app):
    """
    Async HTTP client talking to the app in-process.

    Yields:
        httpx.AsyncClient with base_url http://test
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers(admin, settings):
    """Cookie header carrying a valid access token for the admin."""
    return {"Cookie": f"accessToken={create_access_token(admin.id, settings)}"}
