"""
Errors raised by the NotesHub services.

Each class fixes the ``code`` the API reports as ``errorCode``; the HTTP
status is chosen in exception_handlers.
"""

from typing import Any


class ApplicationError(Exception):
    """Base for catalog errors; ``code`` may be overridden per instance."""

    code = "SYS_INTERNAL_ERROR"
    default_message = "Internal error"

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """No program, semester or note with the requested id."""

    code = "RES_NOT_FOUND"
    default_message = "Resource not found"


class ValidationError(ApplicationError):
    """
    Input that passed schema validation but breaks a catalog rule.

    E.g. ``Invalid program``, ``Start date must be before end date``.
    """

    code = "VAL_VALIDATION_ERROR"
    default_message = "Validation failed"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConflictError(ApplicationError):
    """Duplicate name, code or semester slot, or a delete blocked by notes."""

    code = "RES_CONFLICT"
    default_message = "Resource conflict"


class DatabaseError(ApplicationError):
    """Storage failure not explained by a constraint."""

    code = "SYS_DATABASE_ERROR"
    default_message = "Database error"
