"""
User routes. Handlers only bind HTTP to the service and wrap results in the
success envelope; every error is left to the exception handlers.
"""

from typing import Any

from fastapi import APIRouter, Depends, status

from postboard.core.dependencies import get_user_service
from postboard.schemas import UserCreate, UserRead, UserUpdate, success_response
from postboard.services import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    user = await service.create_user(name=payload.name, email=payload.email)
    return success_response(UserRead.dump(user), "User created successfully")


@router.get("")
async def list_users(service: UserService = Depends(get_user_service)) -> dict[str, Any]:
    users = await service.get_all_users()
    return success_response(UserRead.dump_many(users))


@router.get("/{user_id}")
async def get_user(user_id: int, service: UserService = Depends(get_user_service)) -> dict[str, Any]:
    user = await service.get_user_by_id(user_id)
    return success_response(UserRead.dump(user))


@router.patch("/{user_id}")
async def update_user(
    user_id: int,
    payload: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    """
    Partial update: only the keys present in the body are applied.
    """
    user = await service.update_user(user_id, **payload.model_dump(exclude_unset=True))
    return success_response(UserRead.dump(user), "User updated successfully")


@router.delete("/{user_id}")
async def delete_user(user_id: int, service: UserService = Depends(get_user_service)) -> dict[str, Any]:
    await service.delete_user(user_id)
    return success_response(None, "User deleted successfully")
