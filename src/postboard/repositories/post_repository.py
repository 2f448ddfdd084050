"""
Post repository. Posts need nothing beyond the generic CRUD operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from postboard.models.post import Post
from .base_repository import BaseRepository
from .interfaces import PostRepositoryInterface


class PostRepository(BaseRepository[Post], PostRepositoryInterface):
    """Repository for Post entity operations."""

    label = "post"

    def __init__(self, db: AsyncSession):
        super().__init__(Post, db)
