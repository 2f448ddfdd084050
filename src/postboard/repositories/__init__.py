"""
Repository layer initialization module.

Usage:
    from postboard.repositories import UserRepository, PostRepository
"""

from .base_repository import BaseRepository
from .interfaces import PostRepositoryInterface, UserRepositoryInterface
from .post_repository import PostRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepositoryInterface",
    "PostRepositoryInterface",
    "UserRepository",
    "PostRepository",
]
