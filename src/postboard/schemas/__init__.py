from .common import EntityRead, error_response, success_response
from .post import PostCreate, PostRead, PostUpdate
from .user import UserCreate, UserRead, UserUpdate

__all__ = [
    "EntityRead",
    "success_response",
    "error_response",
    "UserCreate",
    "UserUpdate",
    "UserRead",
    "PostCreate",
    "PostUpdate",
    "PostRead",
]
