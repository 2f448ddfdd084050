"""
User repository for handling user-specific database operations.

Extends BaseRepository with the email lookup the service layer uses to keep
emails unique.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from postboard.models.user import User
from .base_repository import BaseRepository
from .interfaces import UserRepositoryInterface

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User], UserRepositoryInterface):
    """
    Repository for User entity operations.

    Emails are stored lower-cased; a unique violation on insert or update is
    reported as ConflictError("Email already exists").
    """

    label = "user"
    conflict_message = "Email already exists"

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def find_by_email(self, email: str) -> User | None:
        """
        Get a user by their email address.

        Args:
            email: The email address to search for (case-insensitive)

        Returns:
            The User if found, None otherwise

        Raises:
            DatabaseError: If the lookup fails
        """
        normalized_email = email.strip().lower()

        async with self._errors("Failed to fetch user by email"):
            query = select(User).where(func.lower(User.email) == normalized_email)
            result = await self.db.execute(query)
            user = result.scalar_one_or_none()

        if user:
            logger.debug(f"Found user by email: {normalized_email}")
        else:
            logger.debug(f"No user found with email: {normalized_email}")

        return user
