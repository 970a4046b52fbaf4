"""
Security headers middleware for FastAPI.

Adds hardening headers to every response. Uploaded complaint photos and
avatars are served from the same origin, so images are allowed from self
and data URIs only.
"""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from models.config import settings

BASE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    # Geolocation stays enabled: the complaint form reads the device position
    "Permissions-Policy": (
        "accelerometer=(), camera=(self), geolocation=(self), "
        "gyroscope=(), magnetometer=(), microphone=(), payment=(), usb=()"
    ),
    "Content-Security-Policy": (
        "default-src 'self'; "
        "img-src 'self' data:; "
        "style-src 'self' 'unsafe-inline'; "
        "script-src 'self'; "
        "frame-ancestors 'none'"
    ),
}

HSTS_VALUE = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach security headers; API responses are marked non-cacheable."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)

        for name, value in BASE_HEADERS.items():
            response.headers[name] = value

        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = HSTS_VALUE

        # Stored uploads never change under the same name
        if request.url.path.startswith(settings.UPLOAD_URL_PREFIX):
            response.headers.setdefault("Cache-Control", "public, max-age=86400")
        elif "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, max-age=0"

        return response
