"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import ConfigDict, Field, StringConstraints, field_validator

from noteshub.backend.core.utils import dedupe_preserving_order
from noteshub.backend.models.note import FileType
from noteshub.backend.schemas.base import CamelModel, PartialUpdate
from noteshub.backend.schemas.program import ProgramRef
from noteshub.backend.schemas.semester import SemesterRef

FILE_URL_PATTERN = r"^https?://.+"
DEFAULT_AUTHOR = "Anonymous"

Tag = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    if tags is None:
        return None
    return dedupe_preserving_order([tag for tag in tags if tag])


def _blank_url_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _default_author(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_AUTHOR
    return value


class NoteCreate(CamelModel):
    """Schema for creating a new note."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Note title",
        examples=["Limits and continuity"],
    )
    content: str = Field(
        ...,
        min_length=1,
        description="Note content",
    )
    file_url: str | None = Field(
        default=None,
        max_length=2048,
        pattern=FILE_URL_PATTERN,
        description="Link to an attached file (http or https)",
    )
    program: str = Field(..., min_length=1, description="Program ID")
    semester: str = Field(..., min_length=1, description="Semester ID")
    subject: str = Field(..., min_length=1, max_length=200)
    tags: list[Tag] = Field(default_factory=list)
    author: str = Field(default=DEFAULT_AUTHOR, max_length=100)
    is_public: bool = False
    file_type: FileType = FileType.OTHER
    file_size: int = Field(default=0, ge=0, description="File size in bytes")

    _blank_url = field_validator("file_url", mode="before")(_blank_url_to_none)
    _author = field_validator("author", mode="before")(_default_author)

    @field_validator("file_size", mode="before")
    @classmethod
    def _missing_size(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("tags", mode="after")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        return _clean_tags(value)

    def column_values(self) -> dict[str, Any]:
        """Note column values, without tags."""
        fields = self.model_dump(exclude={"tags", "program", "semester"})
        fields["program_id"] = self.program
        fields["semester_id"] = self.semester
        return fields


class NoteUpdate(PartialUpdate):
    """
    Schema for updating an existing note.

    Only sent fields change. ``fileUrl`` may be sent as null to clear it;
    the other fields may be omitted but not nulled.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    non_nullable_fields = frozenset({
        "title",
        "content",
        "program",
        "semester",
        "subject",
        "tags",
        "is_public",
        "file_type",
        "file_size",
    })

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1)
    file_url: str | None = Field(default=None, max_length=2048, pattern=FILE_URL_PATTERN)
    program: str | None = Field(default=None, min_length=1)
    semester: str | None = Field(default=None, min_length=1)
    subject: str | None = Field(default=None, min_length=1, max_length=200)
    tags: list[Tag] | None = None
    author: str | None = Field(default=None, max_length=100)
    is_public: bool | None = None
    file_type: FileType | None = None
    file_size: int | None = Field(default=None, ge=0)

    _blank_url = field_validator("file_url", mode="before")(_blank_url_to_none)
    _author = field_validator("author", mode="before")(_default_author)

    @field_validator("tags", mode="after")
    @classmethod
    def _unique_tags(cls, value: list[str] | None) -> list[str] | None:
        return _clean_tags(value)

    def changes(self) -> dict[str, Any]:
        """Sent fields keyed by column name; ``tags`` is kept as a list."""
        fields = super().changes()
        if "program" in fields:
            fields["program_id"] = fields.pop("program")
        if "semester" in fields:
            fields["semester_id"] = fields.pop("semester")
        return fields


class NoteResponse(CamelModel):
    """Schema for note in API responses, with program and semester populated."""

    id: str = Field(description="Note unique identifier")
    title: str
    content: str
    file_url: str | None
    program: ProgramRef
    semester: SemesterRef
    subject: str
    tags: list[str]
    author: str
    is_public: bool
    file_type: FileType
    file_size: int
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")
