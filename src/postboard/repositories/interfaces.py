"""
Repository contracts, one per entity type.

Services depend on these interfaces only. The SQLAlchemy repositories in this
package implement them; tests swap in in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import Any

from postboard.models import Post, User


class UserRepositoryInterface(ABC):
    """Capability set for persisting users."""

    @abstractmethod
    async def create(self, **fields: Any) -> User:
        """Insert a user; raises ConflictError when the email is taken."""

    @abstractmethod
    async def find_all(self) -> list[User]:
        ...

    @abstractmethod
    async def find_by_id(self, entity_id: int) -> User | None:
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup."""

    @abstractmethod
    async def update(self, entity_id: int, **fields: Any) -> User | None:
        """Partial update; None when no row has this id."""

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        """True when a row was removed."""


class PostRepositoryInterface(ABC):
    """Capability set for persisting posts."""

    @abstractmethod
    async def create(self, **fields: Any) -> Post:
        ...

    @abstractmethod
    async def find_all(self) -> list[Post]:
        ...

    @abstractmethod
    async def find_by_id(self, entity_id: int) -> Post | None:
        ...

    @abstractmethod
    async def update(self, entity_id: int, **fields: Any) -> Post | None:
        ...

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        ...
