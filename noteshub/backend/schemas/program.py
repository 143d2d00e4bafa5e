"""
Program Schemas.

Pydantic schemas for program API request/response validation.
"""

from datetime import datetime

from typing import Annotated

from pydantic import AfterValidator, ConfigDict, Field

from noteshub.backend.schemas.base import CamelModel, PartialUpdate


UpperStr = Annotated[str, AfterValidator(str.upper)]


class ProgramCreate(CamelModel):
    """Schema for creating a new program."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Program name, unique",
        examples=["Computer Science"],
    )
    code: UpperStr = Field(
        ...,
        min_length=1,
        max_length=10,
        description="Short program code, unique, stored upper-case",
        examples=["CS"],
    )
    description: str | None = Field(
        default=None,
        max_length=500,
        description="Program description",
    )
    duration: int = Field(
        default=8,
        ge=1,
        description="Length of the program in semesters",
    )
    is_active: bool = Field(
        default=True,
        description="Whether the program is currently offered",
    )


class ProgramUpdate(PartialUpdate):
    """Schema for updating an existing program. Only sent fields change."""

    model_config = ConfigDict(str_strip_whitespace=True)

    non_nullable_fields = frozenset({"name", "code", "duration", "is_active"})

    name: str | None = Field(default=None, min_length=1, max_length=100)
    code: UpperStr | None = Field(default=None, min_length=1, max_length=10)
    description: str | None = Field(default=None, max_length=500)
    duration: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


class ProgramRef(CamelModel):
    """Program summary embedded in semester and note responses."""

    id: str
    name: str
    code: str


class ProgramResponse(CamelModel):
    """Schema for program in API responses."""

    id: str = Field(description="Program unique identifier")
    name: str
    code: str
    description: str | None
    duration: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class NoteStatsResponse(CamelModel):
    """Note counts for a program or semester."""

    total_notes: int
    public_notes: int
    private_notes: int
    unique_subjects: int


class ProgramStatsResponse(CamelModel):
    """Program together with its note counts."""

    program: ProgramResponse
    stats: NoteStatsResponse
