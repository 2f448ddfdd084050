"""
Use cases for posts. Posts carry no cross-entity rules, so apart from
normalization these are thin pass-throughs that raise NotFoundError.
"""

import logging
from typing import Any

from postboard.exceptions import NotFoundError
from postboard.models.post import Post
from postboard.repositories.interfaces import PostRepositoryInterface

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post not found"


class PostService:
    """Use cases for the Post entity"""

    def __init__(self, repository: PostRepositoryInterface) -> None:
        self.repository = repository

    async def create_post(self, *, title: str, content: str) -> Post:
        post = await self.repository.create(**Post.normalize({"title": title, "content": content}))
        logger.info("post.created", extra={"post_id": post.id})
        return post

    async def get_all_posts(self) -> list[Post]:
        return await self.repository.find_all()

    async def get_post_by_id(self, post_id: int) -> Post:
        post = await self.repository.find_by_id(post_id)
        if post is None:
            raise NotFoundError(POST_NOT_FOUND)
        return post

    async def update_post(self, post_id: int, **changes: Any) -> Post:
        """
        Apply a partial update to `title` and/or `content`.

        Raises:
            NotFoundError: If the post does not exist (or vanished mid-update)
        """
        current = await self.get_post_by_id(post_id)

        fields = Post.normalize({k: v for k, v in changes.items() if v is not None})
        if not fields:
            return current

        updated = await self.repository.update(post_id, **fields)
        if updated is None:
            raise NotFoundError(POST_NOT_FOUND)

        logger.info("post.updated", extra={"post_id": post_id, "fields": sorted(fields)})
        return updated

    async def delete_post(self, post_id: int) -> None:
        if not await self.repository.delete(post_id):
            raise NotFoundError(POST_NOT_FOUND)
        logger.info("post.deleted", extra={"post_id": post_id})
