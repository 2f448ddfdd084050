import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .integrity_classifier import IntegrityKind, classify_integrity_error
from .base import AppError, ConflictError, DatabaseError

logger = logging.getLogger(__name__)

# -----------------------
# Column extraction helpers
# -----------------------

def _extract_columns_postgres(msg: str) -> list[str] | None:
    """
    Extract column names from a Postgres message such as:
      'DETAIL:  Key (email)=(a@b.com) already exists.'
    """
    if not msg:
        return None

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    return None


def _extract_columns_sqlite(msg: str) -> list[str] | None:
    # SQLite: 'UNIQUE constraint failed: users.email'
    m = re.search(r'UNIQUE constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols"))]
    return None


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of column names from the DB message (Postgres, SQLite).
    """
    orig = exc.orig
    msg = str(orig) if orig is not None else str(exc)
    return _extract_columns_postgres(msg) or _extract_columns_sqlite(msg)


# -----------------------
# Mapper
# -----------------------

def map_integrity_error(
    exc: IntegrityError,
    model_name: str,
    *,
    failure_message: str,
    conflict_message: str | None = None,
) -> AppError:
    """
    Map a SQLAlchemy IntegrityError to the app-level exception to raise.

    Unique violations become ConflictError (a 400 for clients); every other
    integrity failure is reported as a plain DatabaseError.
    """
    kind, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)

    if kind is IntegrityKind.UNIQUE:
        # Expected client-level scenario: INFO, no stack trace
        logger.info(
            "mapper.duplicate_detected",
            extra={"model": model_name, "fields": columns, "constraint": constraint_name},
        )
        return ConflictError(
            conflict_message or f"{model_name} already exists",
            fields=columns,
            constraint=constraint_name,
        )

    logger.warning(
        "mapper.integrity_error",
        extra={"model": model_name, "kind": kind.value, "constraint": constraint_name},
    )
    return DatabaseError(failure_message, fields=columns, constraint=constraint_name)


# -----------------------
# Async context manager to DRY error handling in repositories
# -----------------------
@asynccontextmanager
async def db_error_handler(
    db: AsyncSession,
    model_name: str,
    *,
    failure_message: str,
    conflict_message: str | None = None,
):
    """
    Usage:
        async with db_error_handler(self.db, "User", failure_message="Failed to create user"):
            ... DB ops ...

    On any store error the session is rolled back and an app-level exception is
    raised instead: ConflictError for unique violations, DatabaseError otherwise.
    """
    try:
        yield
    except AppError:
        raise
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise map_integrity_error(
            exc,
            model_name,
            failure_message=failure_message,
            conflict_message=conflict_message,
        ) from exc
    except Exception as exc:
        await _safe_rollback(db, model_name)
        # Unexpected errors are logged with stack trace; callers only see the safe message.
        logger.exception("Unexpected DB error for %s", model_name, extra={"model": model_name})
        raise DatabaseError(failure_message) from exc


async def _safe_rollback(db: AsyncSession, model_name: str) -> None:
    try:
        await db.rollback()
    except Exception:
        logger.exception("Failed to rollback session", extra={"model": model_name})
