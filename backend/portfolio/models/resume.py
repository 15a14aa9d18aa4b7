"""
Resume model. At most one row is kept; uploading replaces it.
"""

from sqlalchemy import Column, DateTime, Text

from portfolio.models.base import Base, UUIDMixin, utc_now


class Resume(Base, UUIDMixin):
    __tablename__ = "resumes"

    file_url = Column(Text, nullable=False, doc="URL or base64 data URI of the file")
    uploaded_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        index=True,
    )
