"""
Pydantic schemas for contact form endpoints.
"""

from datetime import datetime

from pydantic import EmailStr, Field

from portfolio.schemas.project import CamelModel


class ContactCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    message: str = Field(..., min_length=1, max_length=5000)


class ContactResponse(CamelModel):
    id: str
    name: str
    email: str
    message: str
    is_read: bool
    created_at: datetime


class ContactSubmitResponse(CamelModel):
    message: str
    contact: ContactResponse
