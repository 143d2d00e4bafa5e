"""
Notes API Endpoints.

REST API endpoints for note management. The scoped listings
(/program/{id}, /semester/{id}, /subject/{name}) are declared before
/{note_id}.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from noteshub.backend.core.dependencies import DbSession, RequestId
from noteshub.backend.core.pagination import (
    PaginationParams,
    create_paginated_response,
    get_pagination_params,
)
from noteshub.backend.core.utils import split_csv
from noteshub.backend.models.note import Note
from noteshub.backend.repositories.note import NoteFilters
from noteshub.backend.schemas.base import ApiResponse, DeleteResult, ResponseMetadata
from noteshub.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from noteshub.backend.services.note import NoteService

router = APIRouter()


def get_note_filters(
    program: str | None = Query(default=None, description="Program ID"),
    semester: str | None = Query(default=None, description="Semester ID"),
    subject: str | None = Query(
        default=None,
        description="Case-insensitive substring of the subject",
    ),
    tags: str | None = Query(
        default=None,
        description="Comma-separated tags; a note matches if it has any of them",
    ),
    search: str | None = Query(
        default=None,
        description="Whitespace-separated terms matched against title and content",
    ),
    is_public: bool | None = Query(default=None, alias="isPublic"),
) -> NoteFilters:
    """FastAPI dependency turning list query parameters into NoteFilters."""
    return NoteFilters(
        program_id=program or None,
        semester_id=semester or None,
        subject=subject or None,
        tags=split_csv(tags),
        search_terms=search.split() if search else [],
        is_public=is_public,
    )


def _note_list(notes: list[Note], request_id: str) -> ApiResponse[list[NoteResponse]]:
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    summary="List notes (paginated)",
    description="Get a page of notes, newest first, with pagination info.",
)
async def list_notes(
    db: DbSession,
    request_id: RequestId,
    pagination: PaginationParams = Depends(get_pagination_params),
    filters: NoteFilters = Depends(get_note_filters),
) -> dict[str, Any]:
    """List notes with filters and page-number pagination."""
    service = NoteService(db)
    page = await service.list_notes(filters, pagination)
    return create_paginated_response(
        result=page,
        item_schema=NoteResponse,
        request_id=request_id,
    )


@router.get(
    "/program/{program_id}",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes of a program",
)
async def list_notes_by_program(
    program_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """All notes of a program, newest first."""
    service = NoteService(db)
    return _note_list(await service.list_by_program(program_id), request_id)


@router.get(
    "/semester/{semester_id}",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes of a semester",
)
async def list_notes_by_semester(
    semester_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """All notes of a semester, newest first."""
    service = NoteService(db)
    return _note_list(await service.list_by_semester(semester_id), request_id)


@router.get(
    "/subject/{subject}",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes by subject",
    description="Notes whose subject contains the given text, ignoring case.",
)
async def list_notes_by_subject(
    subject: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """Notes matching a subject substring, newest first."""
    service = NoteService(db)
    return _note_list(await service.list_by_subject(subject), request_id)


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note in an existing program and semester.",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    service = NoteService(db)
    note = await service.create_note(data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a single note by ID.",
)
async def get_note(
    note_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    service = NoteService(db)
    note = await service.get_note(note_id)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Update an existing note. Only provided fields are updated.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    service = NoteService(db)
    note = await service.update_note(note_id, data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[DeleteResult],
    summary="Delete a note",
    description="Permanently delete a note.",
)
async def delete_note(
    note_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DeleteResult]:
    """Delete a note."""
    service = NoteService(db)
    await service.delete_note(note_id)
    return ApiResponse(
        data=DeleteResult(id=note_id, message="Note deleted successfully"),
        metadata=ResponseMetadata(request_id=request_id),
    )
