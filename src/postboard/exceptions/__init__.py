# exceptions/
# ├── base.py                    # app-level errors (ValidationError, NotFoundError, ...)
# ├── integrity_classifier.py    # DB constraint classification
# └── mapper.py                  # DB errors -> app-level errors

from .base import (
    ErrorKind,
    AppError,
    ValidationError,
    ConflictError,
    NotFoundError,
    DatabaseError,
)

__all__ = [
    "ErrorKind",
    "AppError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "DatabaseError",
]
