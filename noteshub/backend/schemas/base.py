"""
Base Schemas.

Standard API response schemas. Field names are snake_case in Python and
camelCase on the wire; request bodies accept either spelling.
"""

from datetime import datetime
from typing import Any, ClassVar, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from noteshub.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ResponseMetadata(CamelModel):
    """Metadata included in all API responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ApiResponse(CamelModel, Generic[DataT]):
    """
    Standard API response envelope.

    All API responses use this structure for consistency.
    """

    success: bool = True
    data: DataT | None = None
    error: str | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class ErrorResponse(CamelModel):
    """
    Standard error response.

    ``error`` is the human-readable message; ``error_code`` names the
    kind of failure so clients need not parse the message.
    """

    success: bool = False
    data: None = None
    error: str
    error_code: str
    details: dict[str, Any] | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class PaginationInfo(CamelModel):
    """Page-number pagination metadata."""

    page: int
    limit: int
    total_docs: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class PaginatedResponse(CamelModel, Generic[DataT]):
    """Paginated response with page-number navigation."""

    success: bool = True
    data: list[DataT]
    error: None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
    pagination: PaginationInfo


class DeleteResult(CamelModel):
    """Payload returned by delete endpoints."""

    id: str
    message: str


class PartialUpdate(CamelModel):
    """
    Base for PUT bodies where every field is optional.

    Omitted fields are left untouched. Fields listed in
    ``non_nullable_fields`` may be omitted but not sent as null.
    """

    non_nullable_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> Self:
        nulled = sorted(
            name for name in self.model_fields_set & self.non_nullable_fields
            if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent, by Python name."""
        return self.model_dump(exclude_unset=True)
