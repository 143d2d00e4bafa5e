"""
Base Repository.

Base class for all repositories with common CRUD operations.
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from noteshub.backend.core.exceptions import NotFoundError
from noteshub.backend.core.logging import get_logger
from noteshub.backend.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses should set the model class:

        class ProgramRepository(BaseRepository[Program]):
            model = Program

    Reads use populate_existing so that rows reloaded after a write
    carry fresh column values and freshly loaded relationships.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, id: str | UUID) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id)

        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")

        return instance

    async def get_by_id_or_none(self, id: str | UUID) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await self.session.execute(
            select(self.model)
            .where(self.model.id == str(id))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record and return it reloaded from the database."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        return await self.get_by_id(instance.id)

    async def update(self, id: str | UUID, **kwargs: Any) -> ModelType:
        """
        Update an existing record.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        return await self.get_by_id(id)

    async def delete(self, id: str | UUID) -> None:
        """
        Delete a record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)
        await self.session.delete(instance)
        await self.session.flush()

    async def delete_unless_referenced(
        self,
        id: str | UUID,
        referencing_column: InstrumentedAttribute,
    ) -> bool:
        """
        Delete a record in one statement, only if no row references it.

        The existence test and the delete run as a single
        DELETE ... WHERE NOT EXISTS, so no writer can slip a reference in
        between them.

        Args:
            id: Record ID
            referencing_column: Foreign key column of the dependent table

        Returns:
            True if a row was deleted
        """
        result = await self.session.execute(
            delete(self.model)
            .where(self.model.id == str(id))
            .where(~exists().where(referencing_column == str(id)))
            .execution_options(synchronize_session="fetch")
        )
        deleted = result.rowcount > 0
        if not deleted:
            logger.debug(
                "Delete skipped",
                extra={"model": self.model.__name__, "id": str(id)},
            )
        return deleted

    async def exists(self, id: str | UUID) -> bool:
        """Check if a record exists by ID."""
        result = await self.session.execute(
            select(self.model.id).where(self.model.id == str(id))
        )
        return result.scalar_one_or_none() is not None

