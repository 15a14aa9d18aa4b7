"""
Database configuration and session management.

Provides SQLAlchemy async engine setup, session factory, and dependency
injection for database sessions in FastAPI routes.

The engine and session factory are built by create_app() from the
Settings object and stored on app.state; nothing here reads configuration
at import time.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from portfolio.core.logging_config import get_logger
from portfolio.models.base import Base


logger = get_logger(__name__)


def get_async_engine(database_url: str) -> AsyncEngine:
    """
    Create and configure the async SQLAlchemy engine.

    For SQLite:
    - Uses StaticPool (single shared connection, required for :memory:)
    - Enables check_same_thread=False for async compatibility
    - Turns on foreign keys and WAL mode per connection

    Args:
        database_url: SQLAlchemy async URL

    Returns:
        Configured AsyncEngine instance
    """
    is_sqlite = database_url.startswith("sqlite")

    engine_kwargs: dict = {"echo": False}
    if is_sqlite:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        engine_kwargs["poolclass"] = StaticPool

    engine = create_async_engine(database_url, **engine_kwargs)

    if is_sqlite:
        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            if ":memory:" not in database_url:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def get_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Build the session factory bound to an engine.

    Objects stay usable after commit (expire_on_commit=False) so handlers
    can serialize them after the unit of work closes.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine, create_all: bool = False) -> None:
    """
    Initialize the database.

    For production, manage the schema out of band. Set
    ENABLE_DB_CREATE_ALL=true to create missing tables for local use.
    """
    # Import models so metadata is populated before create_all()
    from portfolio import models  # noqa: F401

    if create_all:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")


async def close_db(engine: AsyncEngine) -> None:
    """Dispose of all pooled connections at shutdown."""
    await engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function to get database session.

    Commits when the handler returns normally, rolls back on any exception.

    Yields:
        AsyncSession instance for database operations

    Example:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Item))
            return result.scalars().all()
    """
    session_maker = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

