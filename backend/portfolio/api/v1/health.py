"""
Health check endpoint (liveness probe).
"""

from datetime import datetime, timezone

from fastapi import APIRouter, status

from portfolio.schemas.health import HealthResponse


router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
)
async def health_check() -> HealthResponse:
    """
    Basic liveness probe.

    Example response:
        {"status": "OK", "timestamp": "2025-11-24T10:30:00.123456Z"}
    """
    return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc))
