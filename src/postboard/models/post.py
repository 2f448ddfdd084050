from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from typing import Any

from postboard.database.base import Base, TimestampMixin


class Post(TimestampMixin, Base):
    """
    SQLAlchemy model for a Post.

    Posts stand alone: there is no author relationship to User.
    """
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False
    )

    # Up to 5000 characters, enforced by the request schema
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )

    @staticmethod
    def normalize(fields: dict[str, Any]) -> dict[str, Any]:
        """Trim surrounding whitespace from title and content."""
        out = dict(fields)
        for key in ("title", "content"):
            if isinstance(out.get(key), str):
                out[key] = out[key].strip()
        return out

    def __repr__(self) -> str:
        return f"<Post(id={self.id!r}, title={self.title!r})>"
