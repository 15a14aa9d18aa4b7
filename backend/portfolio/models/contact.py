"""
Contact message model for the admin inbox.
"""

from sqlalchemy import Boolean, Column, String, Text

from portfolio.models.base import Base, UUIDMixin, TimestampMixin


class ContactMessage(Base, UUIDMixin, TimestampMixin):
    """Message submitted through the public contact form."""

    __tablename__ = "contact_messages"

    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
