"""
Security headers middleware.

Adds browser hardening headers to every response. HSTS is only sent in
production, where the service is always reached over HTTPS.
"""

from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' https://js.stripe.com https://connect.stripe.com",
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
        "img-src 'self' data: blob: https://*.stripe.com",
        "font-src 'self' https://fonts.gstatic.com",
        "connect-src 'self' https://*.supabase.co https://api.stripe.com",
        "frame-src https://js.stripe.com https://connect.stripe.com",
        "object-src 'none'",
        "base-uri 'self'",
        "form-action 'self' https://connect.stripe.com",
    ]
)

BASE_HEADERS: dict[str, str] = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-DNS-Prefetch-Control": "on",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
}

HSTS_HEADER = ("Strict-Transport-Security", "max-age=31536000; includeSubDomains")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware that sets security headers on every response.

    Headers already set by a route are left untouched.

    Attributes:
        headers: Headers added to each response
    """

    def __init__(self, app: Any, enable_hsts: bool = False):
        super().__init__(app)
        self.headers = dict(BASE_HEADERS)
        if enable_hsts:
            self.headers[HSTS_HEADER[0]] = HSTS_HEADER[1]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response
