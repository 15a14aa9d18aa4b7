"""
Tests for security headers middleware.

Validates OWASP-recommended security headers are present in responses.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from portfolio.middleware.security_headers import (
    DEFAULT_CSP,
    DOCS_CSP,
    SecurityHeadersMiddleware,
)


def build_app(**kwargs) -> FastAPI:
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware, **kwargs)

    @app.get("/test")
    async def test_endpoint():
        return {"message": "success"}

    return app


class TestSecurityHeaders:
    """Integration tests for security headers middleware."""

    @pytest.fixture
    def client(self):
        return TestClient(build_app())

    def test_x_content_type_options_header(self, client):
        response = client.get("/test")

        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_x_frame_options_header(self, client):
        response = client.get("/test")

        assert response.headers["X-Frame-Options"] == "DENY"

    def test_referrer_policy_header(self, client):
        response = client.get("/test")

        assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"

    def test_permissions_policy_header(self, client):
        response = client.get("/test")

        assert "geolocation=()" in response.headers["Permissions-Policy"]
        assert "camera=()" in response.headers["Permissions-Policy"]

    def test_api_csp(self, client):
        response = client.get("/test")

        assert response.headers["Content-Security-Policy"] == DEFAULT_CSP
        assert "frame-ancestors 'none'" in DEFAULT_CSP

    def test_docs_csp(self, client):
        response = client.get("/docs")

        assert response.status_code == 200
        assert response.headers["Content-Security-Policy"] == DOCS_CSP

    def test_headers_on_404(self, client):
        response = client.get("/missing")

        assert response.status_code == 404
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_no_hsts_by_default(self, client):
        response = client.get("/test")

        assert "Strict-Transport-Security" not in response.headers

    def test_hsts_when_enabled(self):
        client = TestClient(build_app(enable_hsts=True))

        response = client.get("/test")

        assert "max-age=" in response.headers["Strict-Transport-Security"]

    def test_custom_csp(self):
        client = TestClient(build_app(csp_policy="default-src 'self'"))

        response = client.get("/test")

        assert response.headers["Content-Security-Policy"] == "default-src 'self'"


@pytest.mark.asyncio
class TestApplicationSecurityHeaders:
    """Headers as wired by create_app."""

    async def test_headers_on_api_response(self, client):
        response = await client.get("/api/projects")

        assert response.status_code == 200
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Strict-Transport-Security" not in response.headers

    async def test_hsts_in_production(self, make_app):
        app = make_app(app_env="production")
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")

        assert "Strict-Transport-Security" in response.headers
