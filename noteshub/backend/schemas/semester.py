"""
Semester Schemas.

Pydantic schemas for semester API request/response validation.
Incoming dates may carry a timezone; they are stored as naive UTC.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, ConfigDict, Field

from noteshub.backend.core.utils import to_naive_utc
from noteshub.backend.schemas.base import CamelModel, PartialUpdate
from noteshub.backend.schemas.program import (
    NoteStatsResponse,
    ProgramRef,
    UpperStr,
)

ACADEMIC_YEAR_PATTERN = r"^\d{4}-\d{4}$"


NaiveUtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


class SubjectSchema(CamelModel):
    """A subject taught in a semester."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, examples=["Calculus I"])
    code: UpperStr = Field(..., min_length=1, examples=["MATH101"])
    credits: int = Field(default=3, ge=1, le=6)


class SemesterCreate(CamelModel):
    """Schema for creating a new semester."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=50, examples=["Semester 1"])
    number: int = Field(..., ge=1, le=12)
    academic_year: str = Field(
        ...,
        pattern=ACADEMIC_YEAR_PATTERN,
        examples=["2024-2025"],
    )
    program: str = Field(..., min_length=1, description="Owning program ID")
    start_date: NaiveUtcDatetime
    end_date: NaiveUtcDatetime
    is_active: bool = True
    subjects: list[SubjectSchema] = Field(default_factory=list)


class SemesterUpdate(PartialUpdate):
    """Schema for updating an existing semester. Only sent fields change."""

    model_config = ConfigDict(str_strip_whitespace=True)

    non_nullable_fields = frozenset({
        "name",
        "number",
        "academic_year",
        "program",
        "start_date",
        "end_date",
        "is_active",
        "subjects",
    })

    name: str | None = Field(default=None, min_length=1, max_length=50)
    number: int | None = Field(default=None, ge=1, le=12)
    academic_year: str | None = Field(default=None, pattern=ACADEMIC_YEAR_PATTERN)
    program: str | None = Field(default=None, min_length=1)
    start_date: NaiveUtcDatetime | None = None
    end_date: NaiveUtcDatetime | None = None
    is_active: bool | None = None
    subjects: list[SubjectSchema] | None = None

    def changes(self) -> dict[str, Any]:
        """Sent fields, with the program reference renamed to its column."""
        fields = super().changes()
        if "program" in fields:
            fields["program_id"] = fields.pop("program")
        return fields


class SemesterRef(CamelModel):
    """Semester summary embedded in note responses."""

    id: str
    name: str
    academic_year: str


class SemesterResponse(CamelModel):
    """Schema for semester in API responses."""

    id: str
    name: str
    number: int
    academic_year: str
    program: ProgramRef
    start_date: datetime
    end_date: datetime
    is_active: bool
    subjects: list[SubjectSchema]
    display_name: str
    created_at: datetime
    updated_at: datetime


class SemesterStatsResponse(CamelModel):
    """Semester together with its note counts."""

    semester: SemesterResponse
    stats: NoteStatsResponse
