"""
Tests for the /health liveness probe.

Tests follow AAA (Arrange, Act, Assert) pattern.
"""

from datetime import datetime

import pytest


@pytest.mark.asyncio
class TestHealthEndpoint:
    """Tests for /health liveness probe."""

    async def test_health_returns_ok(self, client):
        """
        Arrange: None needed - endpoint should always work
        Act: GET /health
        Assert: Status 200, {"status": "OK", "timestamp": ...}
        """
        # Act
        response = await client.get("/health")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert set(data) == {"status", "timestamp"}

    async def test_health_returns_valid_timestamp(self, client):
        response = await client.get("/health")

        timestamp = datetime.fromisoformat(response.json()["timestamp"].replace("Z", "+00:00"))
        assert timestamp.tzinfo is not None

    async def test_health_not_under_api_prefix(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}
