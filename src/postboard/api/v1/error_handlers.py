"""
FastAPI exception handlers that map every error category to the error envelope.

    {"success": false, "error": "...", "message": "...", "details": [...]}   # details only for validation

| Raised                               | Status           | error                    |
| ------------------------------------ | ---------------- | ------------------------ |
| RequestValidationError (pydantic)    | 400              | "Validation Error"       |
| ValidationError / ConflictError      | 400              | exception message        |
| NotFoundError                        | 404              | exception message        |
| DatabaseError                        | 500              | exception message        |
| no route (404) or method (405)       | 404              | "Not Found"              |
| other Starlette HTTPException        | exception status | standard reason phrase   |
| anything else                        | 500              | "Internal Server Error"  |

Routers and services never build error responses themselves; a single translator
is registered for all categories (see `register_exception_handlers`). Unexpected
exceptions are translated by `UnhandledErrorMiddleware` inside the middleware
stack, so the 500 response still carries the request id, CORS and security headers.
"""

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from postboard.exceptions import AppError
from postboard.schemas.common import error_response

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong"


def validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    """
    Flatten pydantic errors into [{field, message}].

    The first `loc` element is the request part ("body", "path", "query"); the rest
    is the field path. A body that is missing altogether is reported as "body".
    """
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        field = ".".join(loc[1:]) or (loc[0] if loc else "body")
        details.append({"field": field, "message": err.get("msg", "Invalid value")})
    return details


def _is_development(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.is_development)


def _build_response(request: Request, exc: Exception) -> tuple[int, dict[str, Any], dict[str, str] | None]:
    if isinstance(exc, AppError):
        return exc.status_code, exc.to_payload(), None

    if isinstance(exc, RequestValidationError):
        return 400, error_response("Validation Error", "Invalid input data", validation_details(exc)), None

    if isinstance(exc, StarletteHTTPException):
        if exc.status_code in (404, 405):
            # No route for this path and method; missing entities are NotFoundError
            message = f"Route {request.method} {request.url.path} not found"
            return 404, error_response("Not Found", message), None
        phrase = HTTPStatus(exc.status_code).phrase
        message = exc.detail if isinstance(exc.detail, str) else phrase
        return exc.status_code, error_response(phrase, message), getattr(exc, "headers", None)

    message = str(exc) if _is_development(request) else GENERIC_ERROR_MESSAGE
    return 500, error_response("Internal Server Error", message), None


async def translate_exception(request: Request, exc: Exception) -> JSONResponse:
    """
    The one exception handler. Logs the failure with its stack trace, path and
    method (ERROR for 5xx, INFO otherwise) and writes the envelope.
    """
    status_code, payload, headers = _build_response(request, exc)

    log_extra = {
        "path": request.url.path,
        "method": request.method,
        "status_code": status_code,
        "error_type": type(exc).__name__,
    }
    if status_code >= 500:
        logger.error("request.failed: %s", exc, exc_info=exc, extra=log_extra)
    else:
        logger.info("request.rejected: %s", payload["message"], exc_info=exc, extra=log_extra)

    return JSONResponse(status_code=status_code, content=payload, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, translate_exception)
    app.add_exception_handler(RequestValidationError, translate_exception)
    app.add_exception_handler(StarletteHTTPException, translate_exception)
    app.add_exception_handler(Exception, translate_exception)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """
    Translates exceptions no handler claimed into the 500 envelope.

    Install it innermost (first `add_middleware` call) so the response still
    passes through the request id, CORS and security header middleware. The
    `Exception` handler registered above only sees errors raised by the
    middleware themselves.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await translate_exception(request, exc)
