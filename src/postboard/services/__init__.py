from .post_service import PostService
from .user_service import UserService

__all__ = ["UserService", "PostService"]
