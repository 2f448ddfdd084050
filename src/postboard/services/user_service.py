"""
Use cases for users.

The service enforces the rules that span more than one store call (email
uniqueness, existence before update/delete) and turns absent values from the
repository into NotFoundError. It never touches the session directly.
"""

import logging
from typing import Any

from postboard.exceptions import NotFoundError, ValidationError
from postboard.models.user import User
from postboard.repositories.interfaces import UserRepositoryInterface

logger = logging.getLogger(__name__)

EMAIL_EXISTS = "Email already exists"
USER_NOT_FOUND = "User not found"


class UserService:
    """Use cases for the User entity"""

    def __init__(self, repository: UserRepositoryInterface) -> None:
        self.repository = repository

    async def create_user(self, *, name: str, email: str) -> User:
        """
        Create a user after checking that the (lower-cased) email is free.

        Raises:
            ValidationError: If a user with this email already exists
            DatabaseError: If the store fails
        """
        fields = User.normalize({"name": name, "email": email})

        existing = await self.repository.find_by_email(fields["email"])
        if existing is not None:
            logger.info("user.create.duplicate_email", extra={"user_id": existing.id})
            raise ValidationError(EMAIL_EXISTS, fields=["email"])

        # A concurrent insert can still slip between the lookup and the insert;
        # the unique constraint catches it and the repository raises ConflictError.
        user = await self.repository.create(**fields)
        logger.info("user.created", extra={"user_id": user.id})
        return user

    async def get_all_users(self) -> list[User]:
        return await self.repository.find_all()

    async def get_user_by_id(self, user_id: int) -> User:
        user = await self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    async def update_user(self, user_id: int, **changes: Any) -> User:
        """
        Apply a partial update.

        Args:
            user_id: id of the user to update
            **changes: any of `name`, `email`; keys set to None are ignored

        Returns:
            The updated user (or the current one when there is nothing to change)

        Raises:
            NotFoundError: If the user does not exist (or vanished mid-update)
            ValidationError: If the new email belongs to another user
        """
        current = await self.get_user_by_id(user_id)

        fields = User.normalize({k: v for k, v in changes.items() if v is not None})
        if not fields:
            return current

        new_email = fields.get("email")
        if new_email is not None and new_email != current.email:
            other = await self.repository.find_by_email(new_email)
            if other is not None and other.id != user_id:
                raise ValidationError(EMAIL_EXISTS, fields=["email"])

        updated = await self.repository.update(user_id, **fields)
        if updated is None:
            # Deleted between the existence check and the update
            raise NotFoundError(USER_NOT_FOUND)

        logger.info("user.updated", extra={"user_id": user_id, "fields": sorted(fields)})
        return updated

    async def delete_user(self, user_id: int) -> None:
        deleted = await self.repository.delete(user_id)
        if not deleted:
            raise NotFoundError(USER_NOT_FOUND)
        logger.info("user.deleted", extra={"user_id": user_id})
