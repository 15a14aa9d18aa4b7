"""
SQLAlchemy ORM models for the portfolio service.

This module exports all database models and the declarative base.
Import models from this module to ensure they're registered with SQLAlchemy.
"""

from portfolio.models.base import Base, TimestampMixin, UUIDMixin
from portfolio.models.admin import Admin
from portfolio.models.project import Project
from portfolio.models.contact import ContactMessage
from portfolio.models.resume import Resume
from portfolio.models.site_setting import SiteSetting

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Models
    "Admin",
    "Project",
    "ContactMessage",
    "Resume",
    "SiteSetting",
]
