r"""
Single import point for the ORM models.

Importing this package registers every table on `Base.metadata`, which is what
`Database.create_schema()` and the test fixtures rely on.

    from postboard.models import User, Post
"""

from .user import User
from .post import Post

__all__ = [
    "User",
    "Post",
]
