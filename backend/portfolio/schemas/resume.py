"""
Pydantic schemas for resume endpoints.
"""

from datetime import datetime

from pydantic import Field

from portfolio.schemas.project import CamelModel


class ResumeUpload(CamelModel):
    base64_data: str = Field(..., min_length=1, description="File as a base64 data URI")


class ResumeResponse(CamelModel):
    id: str
    file_url: str
    uploaded_at: datetime
