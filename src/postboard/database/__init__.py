from .base import Base, TimestampMixin, utcnow
from .session import Database

__all__ = ["Base", "TimestampMixin", "utcnow", "Database"]
