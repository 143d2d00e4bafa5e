"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, handle transactions, and implement
business rules.

Usage:
    from noteshub.backend.services.base import BaseService

    class ProgramService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = ProgramRepository(session)

        async def create_program(self, data: ProgramCreate) -> Program:
            if await self.repo.find_conflicting(name=data.name):
                raise ConflictError("Program with this name already exists")

            return await self._execute_db_operation(
                "create_program",
                self.repo.create(**data.model_dump()),
            )
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from noteshub.backend.core.exceptions import (
    ApplicationError,
    ConflictError,
    DatabaseError,
    ValidationError,
)
from noteshub.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _is_foreign_key_violation(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "foreign key" in message


def _is_unique_violation(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


class BaseService:
    """
    Base class for all services.

    Provides:
    - Database session management
    - Logging context
    - Error wrapping for database operations

    Subclasses should:
    - Call super().__init__(session) in their __init__
    - Initialize repositories in __init__
    - Implement business logic methods
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize the service with a database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
        on_integrity_error: ApplicationError | None = None,
    ) -> T:
        """
        Execute a database operation with error handling.

        Storage constraints are the last word on uniqueness and
        references, so a write racing another request surfaces here
        as an IntegrityError and is converted to the matching
        application error.

        Args:
            operation: Description of the operation for logging
            coro: Coroutine to execute
            on_integrity_error: Error to raise instead of the default
                mapping when a constraint is violated

        Returns:
            Result of the coroutine

        Raises:
            ConflictError: For unique constraint violations
            ValidationError: For foreign key violations
            DatabaseError: For other database errors
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e.orig)},
            )
            if on_integrity_error is not None:
                raise on_integrity_error from e
            if _is_unique_violation(e):
                raise ConflictError("Resource already exists") from e
            if _is_foreign_key_violation(e):
                raise ValidationError("Invalid reference") from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
