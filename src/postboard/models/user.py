from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from typing import Any

from postboard.database.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """
    SQLAlchemy model for User.

    Represents an application user identified by a unique, lower-cased email.
    """
    __tablename__ = "users"

    # Store-assigned integer id (SERIAL on Postgres)
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    # Email address (unique, always stored lower-cased)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False
    )

    @staticmethod
    def normalize(fields: dict[str, Any]) -> dict[str, Any]:
        """
        Return a copy of `fields` with the name trimmed and the email trimmed and
        lower-cased. Keys that are absent stay absent, so this works for partial updates.
        """
        out = dict(fields)
        if isinstance(out.get("name"), str):
            out["name"] = out["name"].strip()
        if isinstance(out.get("email"), str):
            out["email"] = out["email"].strip().lower()
        return out

    def __repr__(self) -> str:
        # Helpful for debugging/logging
        return f"<User(id={self.id!r}, name={self.name!r}, email={self.email!r})>"
