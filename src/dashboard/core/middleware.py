"""
Security headers and session cookies for the server-rendered pages.
"""

import secrets
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses.

    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-Frame-Options: Prevents clickjacking attacks
    - Referrer-Policy: Controls referrer information
    - Content-Security-Policy: Same-origin content and form targets only
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add security headers to response."""
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; form-action 'self'; frame-ancestors 'none'"
        )

        # Pages reflect live store state, never cache them
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"

        return response


class SessionCookieMiddleware(BaseHTTPMiddleware):
    """
    Give every browser a session id cookie.

    The id is exposed as request.state.session_id and keys the per-session
    countries screen state.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        cookie_name = settings.SESSION_COOKIE_NAME
        session_id = request.cookies.get(cookie_name)
        is_new = not session_id
        if is_new:
            session_id = secrets.token_urlsafe(16)

        request.state.session_id = session_id
        response = await call_next(request)

        if is_new:
            response.set_cookie(
                cookie_name,
                session_id,
                httponly=True,
                samesite="lax",
                secure=settings.SESSION_COOKIE_SECURE,
            )
        return response
