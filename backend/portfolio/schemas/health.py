"""
Pydantic schemas for health check endpoints.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Response model for basic health check.

    Attributes:
        status: Health status ("OK" if service is running)
        timestamp: Current UTC timestamp
    """
    status: Literal["OK"] = Field(description="Health status indicator")
    timestamp: datetime = Field(description="Current UTC timestamp")
