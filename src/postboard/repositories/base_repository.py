"""
Base repository class providing the CRUD operations shared by every entity.

Each public method is one round trip to the store (plus the commit) and runs inside
`db_error_handler`, so callers only ever see app-level errors:

| Method                   | Returns                          | Store failure                 |
| ------------------------ | -------------------------------- | ----------------------------- |
| `create(**fields)`       | the created entity               | ConflictError / DatabaseError |
| `find_all()`             | list of entities (by id)         | DatabaseError                 |
| `find_by_id(id)`         | entity or `None`                 | DatabaseError                 |
| `update(id, **fields)`   | updated entity or `None`         | ConflictError / DatabaseError |
| `delete(id)`             | `True` if a row was removed      | DatabaseError                 |

Repositories commit their own writes: every operation stands alone and nothing
spans more than one entity.
"""
from postboard.exceptions.mapper import db_error_handler

import time
from typing import TypeVar, Generic, Type, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
import logging

from postboard.database.base import Base, utcnow

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)

# Columns callers may never write through update()
_PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at"})

# Primary keys are INTEGER columns (32-bit signed on Postgres); no row can have an id outside this range
MIN_ID, MAX_ID = -(2**31), 2**31 - 1


def id_in_range(entity_id: int) -> bool:
    return MIN_ID <= entity_id <= MAX_ID


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.

    Class attributes subclasses may override:
        label: lower-case entity name used in error messages ("user" -> "Failed to fetch user")
        conflict_message: client-facing message for unique violations
    """

    label: str = "record"
    conflict_message: str | None = None

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (User, not User())
            db: The async database session for the current request
        """
        self.model = model
        self.db = db

    def _errors(self, failure_message: str):
        return db_error_handler(
            self.db,
            self.model.__name__,
            failure_message=failure_message,
            conflict_message=self.conflict_message,
        )

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Insert one row and return it with its store-assigned id and timestamps.

        Logging:
        - DEBUG: start event with model name and provided keys (not values).
        - INFO: success event with created id and duration_ms.
        """
        logger.debug(
            "repo.create.start",
            extra={
                "model": self.model.__name__,
                "operation": "create",
                "provided_keys": sorted(kwargs.keys()),
            },
        )

        start = time.perf_counter()
        now = utcnow()

        async with self._errors(f"Failed to create {self.label}"):
            entity = self.model(**kwargs, created_at=now, updated_at=now)
            self.db.add(entity)
            await self.db.flush()
            await self.db.commit()
            await self.db.refresh(entity)

        logger.info(
            "repo.create.success",
            extra={
                "model": self.model.__name__,
                "operation": "create",
                "id": entity.id,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def find_all(self) -> list[ModelType]:
        async with self._errors(f"Failed to fetch {self.label}s"):
            result = await self.db.execute(select(self.model).order_by(self.model.id))
            entities = list(result.scalars().all())

        logger.debug(f"Retrieved {len(entities)} {self.model.__name__} entities")
        return entities

    async def find_by_id(self, entity_id: int) -> ModelType | None:
        """
        Returns:
            The entity if found, otherwise None (a missing row is not an error here)
        """
        if not id_in_range(entity_id):
            logger.debug(f"{self.model.__name__} ID {entity_id} is outside the key range")
            return None

        async with self._errors(f"Failed to fetch {self.label}"):
            result = await self.db.execute(
                select(self.model)
                .where(self.model.id == entity_id)
                # reload attributes even if the object is already in the identity map
                .execution_options(populate_existing=True)
            )
            entity = result.scalar_one_or_none()

        logger.debug(f"Retrieved {self.model.__name__} by ID {entity_id}: found={entity is not None}")
        return entity

    # =================================================================================================================
    # Update
    # =================================================================================================================

    async def update(self, entity_id: int, **kwargs: Any) -> ModelType | None:
        """
        Apply a partial update and refresh `updated_at`.

        Keys with a None value are skipped, so callers can pass optional fields
        straight through. `id`, `created_at` and `updated_at` are never written.

        Returns:
            The updated entity, or None if no row has this id
        """
        if not id_in_range(entity_id):
            logger.warning(f"{self.model.__name__} with ID {entity_id} not found for update")
            return None

        ignored = _PROTECTED_FIELDS.intersection(kwargs)
        if ignored:
            logger.warning(
                "repo.update.protected_fields_ignored",
                extra={"model": self.model.__name__, "fields": sorted(ignored)},
            )

        update_data = {
            k: v for k, v in kwargs.items()
            if v is not None and k not in _PROTECTED_FIELDS
        }

        if not update_data:
            logger.warning(f"No valid data provided for updating {self.model.__name__}")
            return await self.find_by_id(entity_id)

        update_data["updated_at"] = utcnow()

        async with self._errors(f"Failed to update {self.label}"):
            stmt = (
                update(self.model)
                .where(self.model.id == entity_id)
                .values(**update_data)
                .execution_options(synchronize_session="evaluate")
            )
            result = await self.db.execute(stmt)

            if result.rowcount == 0:
                await self.db.rollback()
                logger.warning(f"{self.model.__name__} with ID {entity_id} not found for update")
                return None

            await self.db.commit()

        logger.debug(f"Updated {self.model.__name__} with ID: {entity_id}")
        return await self.find_by_id(entity_id)

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete(self, entity_id: int) -> bool:
        """
        Returns:
            True if entity was deleted, False if not found
        """
        if not id_in_range(entity_id):
            logger.warning(f"{self.model.__name__} with ID {entity_id} not found for deletion")
            return False

        async with self._errors(f"Failed to delete {self.label}"):
            result = await self.db.execute(
                delete(self.model).where(self.model.id == entity_id)
            )
            deleted = result.rowcount > 0
            await self.db.commit()

        if deleted:
            logger.debug(f"Deleted {self.model.__name__} with ID: {entity_id}")
        else:
            logger.warning(f"{self.model.__name__} with ID {entity_id} not found for deletion")
        return deleted
