"""
Application-level exceptions.

Every error the service layer or the repositories raise on purpose is an `AppError`
tagged with an `ErrorKind`. The HTTP translator (`postboard.api.v1.error_handlers`)
only looks at the kind/status, never at message text or driver error codes.
"""

from enum import Enum
from typing import Iterable


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INFRASTRUCTURE = "infrastructure"


class AppError(Exception):
    """
    Base exception for service/repository errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error (e.g., ['email'])
    - constraint: optional DB constraint name (for logs only, never sent to clients)
    """

    kind: ErrorKind = ErrorKind.INFRASTRUCTURE

    # Map kind -> HTTP status.
    KIND_TO_STATUS = {
        ErrorKind.VALIDATION: 400,
        ErrorKind.CONFLICT: 400,
        ErrorKind.NOT_FOUND: 404,
        ErrorKind.INFRASTRUCTURE: 500,
    }

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    @property
    def status_code(self) -> int:
        return self.KIND_TO_STATUS[self.kind]

    def to_payload(self) -> dict:
        """
        Error envelope for HTTP responses:
            {"success": false, "error": "...", "message": "..."}
        The constraint name is never included.
        """
        return {"success": False, "error": self.message, "message": self.message}


class ValidationError(AppError):
    """Bad input that passed the request schema but breaks a business rule."""
    kind = ErrorKind.VALIDATION


class ConflictError(ValidationError):
    """The store rejected a write because of a uniqueness constraint."""
    kind = ErrorKind.CONFLICT


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields)


class DatabaseError(AppError):
    """Unexpected store failure (connection loss, bad SQL, ...)."""
    kind = ErrorKind.INFRASTRUCTURE


__all__ = [
    "ErrorKind",
    "AppError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "DatabaseError",
]
