"""
Request ID and access-log middleware for FastAPI / Starlette.

For every request:
  1. take `X-Request-ID` from the client when it is a short opaque token,
     otherwise generate a UUID4;
  2. store it in the request-id context var so every log record of this request
     carries it (see RequestIdFilter);
  3. echo it in the `X-Request-ID` response header;
  4. log one `request.completed` event with method, path, status and duration.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import set_request_id, reset_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Rejects newlines and oversized values (log injection)
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")

access_logger = logging.getLogger("postboard.access")


def _incoming_request_id(request: Request) -> str:
    rid = request.headers.get(REQUEST_ID_HEADER)
    if rid and _VALID_REQUEST_ID.match(rid):
        return rid
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Sets a request id for each incoming request and writes the access log.
    """

    async def dispatch(self, request: Request, call_next):
        rid = _incoming_request_id(request)
        token = set_request_id(rid)
        start = time.perf_counter()

        log_extra = {"method": request.method, "path": request.url.path}

        try:
            try:
                response = await call_next(request)
            except Exception:
                # The server error handler answers with 500 after this re-raise
                access_logger.info(
                    "request.completed",
                    extra={**log_extra, "status_code": 500, "duration_ms": _elapsed_ms(start)},
                )
                raise

            response.headers[REQUEST_ID_HEADER] = rid
            access_logger.info(
                "request.completed",
                extra={**log_extra, "status_code": response.status_code, "duration_ms": _elapsed_ms(start)},
            )
            return response
        finally:
            reset_request_id(token)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
