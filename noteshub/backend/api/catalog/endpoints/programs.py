"""
Programs API Endpoints.

REST API endpoints for program management.
"""

from fastapi import APIRouter, Query

from noteshub.backend.core.dependencies import DbSession, RequestId
from noteshub.backend.schemas.base import ApiResponse, DeleteResult, ResponseMetadata
from noteshub.backend.schemas.program import (
    NoteStatsResponse,
    ProgramCreate,
    ProgramResponse,
    ProgramStatsResponse,
    ProgramUpdate,
)
from noteshub.backend.services.program import ProgramService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[ProgramResponse]],
    summary="List programs",
    description="Get all programs sorted by name, optionally filtered by active flag.",
)
async def list_programs(
    db: DbSession,
    request_id: RequestId,
    is_active: bool | None = Query(
        default=None,
        alias="isActive",
        description="Only programs with this active flag",
    ),
) -> ApiResponse[list[ProgramResponse]]:
    """List programs."""
    service = ProgramService(db)
    programs = await service.list_programs(is_active=is_active)
    return ApiResponse(
        data=[ProgramResponse.model_validate(program) for program in programs],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[ProgramResponse],
    status_code=201,
    summary="Create a program",
    description="Create a new program. Name and code must be unique.",
)
async def create_program(
    data: ProgramCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ProgramResponse]:
    """Create a new program."""
    service = ProgramService(db)
    program = await service.create_program(data)
    return ApiResponse(
        data=ProgramResponse.model_validate(program),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{program_id}/stats",
    response_model=ApiResponse[ProgramStatsResponse],
    summary="Program statistics",
    description="Note counts for a program: total, public, private and distinct subjects.",
)
async def get_program_stats(
    program_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ProgramStatsResponse]:
    """Get note statistics for a program."""
    service = ProgramService(db)
    program, counts = await service.get_program_stats(program_id)
    stats = ProgramStatsResponse(
        program=ProgramResponse.model_validate(program),
        stats=NoteStatsResponse(
            total_notes=counts.total,
            public_notes=counts.public,
            private_notes=counts.private,
            unique_subjects=counts.unique_subjects,
        ),
    )
    return ApiResponse(data=stats, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "/{program_id}",
    response_model=ApiResponse[ProgramResponse],
    summary="Get a program",
    description="Get a single program by ID.",
)
async def get_program(
    program_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ProgramResponse]:
    """Get a program by ID."""
    service = ProgramService(db)
    program = await service.get_program(program_id)
    return ApiResponse(
        data=ProgramResponse.model_validate(program),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{program_id}",
    response_model=ApiResponse[ProgramResponse],
    summary="Update a program",
    description="Update an existing program. Only provided fields are updated.",
)
async def update_program(
    program_id: str,
    data: ProgramUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ProgramResponse]:
    """Update a program."""
    service = ProgramService(db)
    program = await service.update_program(program_id, data)
    return ApiResponse(
        data=ProgramResponse.model_validate(program),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{program_id}",
    response_model=ApiResponse[DeleteResult],
    summary="Delete a program",
    description="Delete a program and its semesters. Refused while notes reference it.",
)
async def delete_program(
    program_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DeleteResult]:
    """Delete a program."""
    service = ProgramService(db)
    await service.delete_program(program_id)
    return ApiResponse(
        data=DeleteResult(id=program_id, message="Program deleted successfully"),
        metadata=ResponseMetadata(request_id=request_id),
    )
