"""
Post routes, mirroring the user routes.
"""

from typing import Any

from fastapi import APIRouter, Depends, status

from postboard.core.dependencies import get_post_service
from postboard.schemas import PostCreate, PostRead, PostUpdate, success_response
from postboard.services import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    service: PostService = Depends(get_post_service),
) -> dict[str, Any]:
    post = await service.create_post(title=payload.title, content=payload.content)
    return success_response(PostRead.dump(post), "Post created successfully")


@router.get("")
async def list_posts(service: PostService = Depends(get_post_service)) -> dict[str, Any]:
    posts = await service.get_all_posts()
    return success_response(PostRead.dump_many(posts))


@router.get("/{post_id}")
async def get_post(post_id: int, service: PostService = Depends(get_post_service)) -> dict[str, Any]:
    post = await service.get_post_by_id(post_id)
    return success_response(PostRead.dump(post))


@router.patch("/{post_id}")
async def update_post(
    post_id: int,
    payload: PostUpdate,
    service: PostService = Depends(get_post_service),
) -> dict[str, Any]:
    post = await service.update_post(post_id, **payload.model_dump(exclude_unset=True))
    return success_response(PostRead.dump(post), "Post updated successfully")


@router.delete("/{post_id}")
async def delete_post(post_id: int, service: PostService = Depends(get_post_service)) -> dict[str, Any]:
    await service.delete_post(post_id)
    return success_response(None, "Post deleted successfully")
