"""
Tell unique violations apart from every other IntegrityError.

The only constraint a client can trip is the unique email index; the mapper
turns that into a ConflictError (400) and anything else into a DatabaseError (500).
"""
import logging
from enum import Enum

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

# https://www.postgresql.org/docs/current/errcodes-appendix.html
PG_UNIQUE_VIOLATION = "23505"

# SQLite: "UNIQUE constraint failed: users.email"; Postgres: "duplicate key value ..."
_UNIQUE_MARKERS = ("unique constraint", "duplicate key")


class IntegrityKind(str, Enum):
    UNIQUE = "unique"
    OTHER = "other"


def _sqlstate(orig) -> str | None:
    # psycopg 3 exposes `sqlstate`; psycopg2 and the asyncpg adapter expose `pgcode`
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def classify_integrity_error(exc: IntegrityError) -> tuple[IntegrityKind, str | None]:
    """
    Returns:
        (kind, constraint name when the driver reports one)
    """
    orig = exc.orig
    sqlstate = _sqlstate(orig)

    if sqlstate:
        diag = getattr(orig, "diag", None)
        constraint_name = getattr(diag, "constraint_name", None) if diag else None
        kind = IntegrityKind.UNIQUE if sqlstate == PG_UNIQUE_VIOLATION else IntegrityKind.OTHER
        logger.debug("integrity.classified",
                     extra={"sqlstate": sqlstate, "kind": kind.value, "constraint_name": constraint_name})
        return kind, constraint_name

    message = str(orig).lower()
    if any(marker in message for marker in _UNIQUE_MARKERS):
        return IntegrityKind.UNIQUE, None
    return IntegrityKind.OTHER, None
