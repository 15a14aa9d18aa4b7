"""
Pydantic schemas for authentication endpoints.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator


# Also enforced by scripts/seed_admin.py
MIN_PASSWORD_LENGTH = 6


class LoginRequest(BaseModel):
    """
    Login request body.

    Example:
        {"email": "admin@example.com", "password": "secret123"}
    """
    email: EmailStr = Field(..., description="Admin email")
    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=256,
        description="Admin password",
    )

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class MessageResponse(BaseModel):
    """Generic {"message": ...} acknowledgement."""
    message: str


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""
    error: str


class AdminProfile(BaseModel):
    """Public view of the authenticated admin."""
    id: str
    email: str
