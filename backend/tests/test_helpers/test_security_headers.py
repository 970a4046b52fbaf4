"""Tests for security headers middleware."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from helpers.security_headers import BASE_HEADERS, SecurityHeadersMiddleware
from models.config import settings


def _app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware)

    @app.get("/api/thing")
    def thing():
        return {"ok": True}

    @app.get("/uploads/photo.png")
    def photo():
        return {"ok": True}

    return app


class TestSecurityHeaders:
    def test_base_headers_on_api_response(self):
        response = TestClient(_app()).get("/api/thing")

        for name, value in BASE_HEADERS.items():
            assert response.headers[name] == value
        assert response.headers["Cache-Control"] == "no-store, max-age=0"

    def test_uploads_are_cacheable(self):
        response = TestClient(_app()).get("/uploads/photo.png")
        assert response.headers["Cache-Control"] == "public, max-age=86400"

    def test_hsts_only_in_production(self, monkeypatch):
        assert "Strict-Transport-Security" not in TestClient(_app()).get(
            "/api/thing"
        ).headers

        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        response = TestClient(_app()).get("/api/thing")
        assert response.headers["Strict-Transport-Security"].startswith("max-age=")
