"""
Portfolio API - FastAPI Application Entry Point

This module builds the FastAPI application with all middleware, routes,
exception handlers and lifecycle event handlers.

Run with:
    uvicorn portfolio.main:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from portfolio.api.errors import register_exception_handlers
from portfolio.api.v1 import auth, contact, health, projects, resume, site_settings
from portfolio.core.config import Settings, load_settings
from portfolio.core.database import close_db, get_async_engine, get_session_maker, init_db
from portfolio.core.logging_config import get_logger, setup_logging
from portfolio.middleware.logging import LoggingMiddleware
from portfolio.middleware.rate_limit import RateLimitMiddleware, RateLimitRule
from portfolio.middleware.request_id import RequestIDMiddleware
from portfolio.middleware.security_headers import SecurityHeadersMiddleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Startup:
        - Ensure tables when ENABLE_DB_CREATE_ALL is set

    Shutdown:
        - Close database connections
    """
    settings: Settings = app.state.settings

    await init_db(app.state.engine, create_all=settings.enable_db_create_all)
    logger.info(
        "Application started",
        extra={"app_env": settings.app_env, "api_prefix": settings.api_prefix},
    )

    yield

    await close_db(app.state.engine)
    logger.info("Application stopped")


def build_rate_limit_rules(settings: Settings) -> list[RateLimitRule]:
    return [
        RateLimitRule(
            name="login",
            method="POST",
            path=f"{settings.api_prefix}/auth/login",
            limit=settings.login_rate_limit,
            window_seconds=settings.login_rate_window_seconds,
            message="Too many login attempts, please try again later",
        ),
        RateLimitRule(
            name="contact",
            method="POST",
            path=f"{settings.api_prefix}/contact",
            limit=settings.contact_rate_limit,
            window_seconds=settings.contact_rate_window_seconds,
            message="Too many messages sent, please try again later",
        ),
    ]


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Validated settings; loaded from the environment when omitted
        engine: Database engine to use; built from settings.database_url when omitted

    Returns:
        Configured FastAPI instance

    Raises:
        ConfigurationError: If settings are loaded here and are invalid
    """
    if settings is None:
        settings = load_settings()

    setup_logging(level=settings.log_level, json_format=settings.log_json)

    app = FastAPI(
        title=settings.project_name,
        version="1.0.0",
        description="Portfolio site API with cookie-based admin authentication",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    if engine is None:
        engine = get_async_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = get_session_maker(engine)

    # Configure middleware
    # Note: Middleware is executed in reverse order of registration
    # (last registered = first executed)

    # Security headers middleware (runs last, adds headers to response)
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production)

    app.add_middleware(
        RateLimitMiddleware,
        rules=build_rate_limit_rules(settings),
        enabled=settings.rate_limit_enabled,
    )

    # Logging middleware (runs after RequestID to access request_id)
    app.add_middleware(LoggingMiddleware)

    # Request ID middleware (sets correlation ID)
    app.add_middleware(RequestIDMiddleware)

    # Credentials are required for the auth cookies to cross origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    register_exception_handlers(app)

    prefix = settings.api_prefix
    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(projects.router, prefix=f"{prefix}/projects", tags=["projects"])
    app.include_router(contact.router, prefix=f"{prefix}/contact", tags=["contact"])
    app.include_router(resume.router, prefix=f"{prefix}/resume", tags=["resume"])
    app.include_router(site_settings.router, prefix=f"{prefix}/settings", tags=["settings"])

    return app
