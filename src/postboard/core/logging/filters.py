"""
Logging filters.

RequestIdFilter stamps every record with the id of the HTTP request being served.
The id lives in a ContextVar, so it follows the request across awaits; the
RequestIDMiddleware sets it. Records logged outside a request get "-".

RedactFilter masks `extra` fields whose names look sensitive.
"""

import logging
from logging import LogRecord
import contextvars

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

REDACTED = "***REDACTED***"


def set_request_id(request_id: str | None) -> contextvars.Token:
    """
    Set the request id in the current context.

    Returns:
        token to pass to reset_request_id()
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantees every LogRecord has a `request_id` attribute: an explicit
    `extra={"request_id": ...}` wins, then the context value, then "-".
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    """
    Replace the value of any record attribute whose name contains a sensitive
    word (password, secret, token, authorization, cookie). Never drops records.
    """

    SENSITIVE = ("password", "secret", "token", "authorization", "cookie")

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            lowered = key.lower()
            if any(word in lowered for word in self.SENSITIVE):
                record.__dict__[key] = REDACTED
        return True
