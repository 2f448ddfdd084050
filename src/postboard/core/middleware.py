"""
HTTP hardening middleware: security response headers and a request body cap.

Both follow the same BaseHTTPMiddleware shape as RequestIDMiddleware
(core/logging/middleware.py) and are installed by `postboard.main.create_app`.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from postboard.schemas.common import error_response

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Content-Security-Policy": "default-src 'self'; frame-ancestors 'self'; object-src 'none'",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds SECURITY_HEADERS to every response unless a handler already set them."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects requests whose declared Content-Length exceeds `max_bytes` with a
    413 error envelope, before the body is read.
    """

    def __init__(self, app: ASGIApp, max_bytes: int):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content=error_response("Bad Request", "Invalid Content-Length header"),
                )
            if declared > self.max_bytes:
                logger.info(
                    "request.body_too_large",
                    extra={"path": request.url.path, "content_length": declared, "limit": self.max_bytes},
                )
                return JSONResponse(
                    status_code=413,
                    content=error_response(
                        "Payload Too Large",
                        f"Request body exceeds the {self.max_bytes} byte limit",
                    ),
                )
        return await call_next(request)
