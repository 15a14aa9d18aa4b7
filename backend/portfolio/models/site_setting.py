"""
Key/value site settings (hero text, social links and similar).
"""

from sqlalchemy import Column, String, Text

from portfolio.models.base import Base, UUIDMixin, TimestampMixin


class SiteSetting(Base, UUIDMixin, TimestampMixin):
    """
    Single site setting.

    Attributes:
        key: Unique setting name
        value: String value
        description: Optional note shown in the admin surface
    """

    __tablename__ = "site_settings"

    key = Column(String(255), nullable=False, unique=True, index=True)
    value = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
