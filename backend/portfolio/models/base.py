"""
Base models and mixins for SQLAlchemy ORM.

Provides the declarative base, mixins for timestamps and UUID keys,
and common utilities for all database models.
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import declarative_base


# SQLAlchemy declarative base for all ORM models
Base = declarative_base()


def utc_now() -> datetime:
    """
    Get current UTC time as a timezone-aware datetime.

    Used as the Python-side default for timestamp columns.
    """
    return datetime.now(timezone.utc)


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at timestamp columns.

    Attributes:
        created_at: When the record was created (immutable)
        updated_at: When the record was last updated (auto-updated)
    """

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        doc="UTC timestamp when record was created"
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        doc="UTC timestamp when record was last updated"
    )


class UUIDMixin:
    """
    Mixin that adds a UUID primary key column.

    UUIDs are stored as strings so the schema ports between SQLite and
    PostgreSQL unchanged.
    """

    id = Column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        doc="UUID primary key"
    )

