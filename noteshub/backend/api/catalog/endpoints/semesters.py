"""
Semesters API Endpoints.

REST API endpoints for semester management. The scoped listings
(/program/{id}, /year/{year}) are declared before /{semester_id}.
"""

from fastapi import APIRouter, Path, Query

from noteshub.backend.core.dependencies import DbSession, RequestId
from noteshub.backend.schemas.base import ApiResponse, DeleteResult, ResponseMetadata
from noteshub.backend.schemas.program import NoteStatsResponse
from noteshub.backend.schemas.semester import (
    ACADEMIC_YEAR_PATTERN,
    SemesterCreate,
    SemesterResponse,
    SemesterStatsResponse,
    SemesterUpdate,
)
from noteshub.backend.services.semester import SemesterService

router = APIRouter()


def _semester_list(semesters: list, request_id: str) -> ApiResponse[list[SemesterResponse]]:
    return ApiResponse(
        data=[SemesterResponse.model_validate(semester) for semester in semesters],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[list[SemesterResponse]],
    summary="List semesters",
    description="Get semesters, newest academic year first, then by number.",
)
async def list_semesters(
    db: DbSession,
    request_id: RequestId,
    program: str | None = Query(default=None, description="Program ID"),
    academic_year: str | None = Query(
        default=None,
        alias="academicYear",
        description="Academic year, e.g. 2024-2025",
    ),
    is_active: bool | None = Query(default=None, alias="isActive"),
) -> ApiResponse[list[SemesterResponse]]:
    """List semesters."""
    service = SemesterService(db)
    semesters = await service.list_semesters(
        program_id=program,
        academic_year=academic_year,
        is_active=is_active,
    )
    return _semester_list(semesters, request_id)


@router.get(
    "/program/{program_id}",
    response_model=ApiResponse[list[SemesterResponse]],
    summary="List semesters of a program",
)
async def list_semesters_by_program(
    program_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[SemesterResponse]]:
    """List the semesters of one program."""
    service = SemesterService(db)
    return _semester_list(await service.list_by_program(program_id), request_id)


@router.get(
    "/year/{academic_year}",
    response_model=ApiResponse[list[SemesterResponse]],
    summary="List semesters of an academic year",
)
async def list_semesters_by_year(
    db: DbSession,
    request_id: RequestId,
    academic_year: str = Path(pattern=ACADEMIC_YEAR_PATTERN),
) -> ApiResponse[list[SemesterResponse]]:
    """List the semesters of one academic year, by number."""
    service = SemesterService(db)
    return _semester_list(await service.list_by_year(academic_year), request_id)


@router.post(
    "",
    response_model=ApiResponse[SemesterResponse],
    status_code=201,
    summary="Create a semester",
    description="Create a semester of an existing program.",
)
async def create_semester(
    data: SemesterCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[SemesterResponse]:
    """Create a new semester."""
    service = SemesterService(db)
    semester = await service.create_semester(data)
    return ApiResponse(
        data=SemesterResponse.model_validate(semester),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{semester_id}/stats",
    response_model=ApiResponse[SemesterStatsResponse],
    summary="Semester statistics",
)
async def get_semester_stats(
    semester_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[SemesterStatsResponse]:
    """Get note statistics for a semester."""
    service = SemesterService(db)
    semester, counts = await service.get_semester_stats(semester_id)
    stats = SemesterStatsResponse(
        semester=SemesterResponse.model_validate(semester),
        stats=NoteStatsResponse(
            total_notes=counts.total,
            public_notes=counts.public,
            private_notes=counts.private,
            unique_subjects=counts.unique_subjects,
        ),
    )
    return ApiResponse(data=stats, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "/{semester_id}",
    response_model=ApiResponse[SemesterResponse],
    summary="Get a semester",
)
async def get_semester(
    semester_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[SemesterResponse]:
    """Get a semester by ID."""
    service = SemesterService(db)
    semester = await service.get_semester(semester_id)
    return ApiResponse(
        data=SemesterResponse.model_validate(semester),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{semester_id}",
    response_model=ApiResponse[SemesterResponse],
    summary="Update a semester",
    description="Update an existing semester. Only provided fields are updated.",
)
async def update_semester(
    semester_id: str,
    data: SemesterUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[SemesterResponse]:
    """Update a semester."""
    service = SemesterService(db)
    semester = await service.update_semester(semester_id, data)
    return ApiResponse(
        data=SemesterResponse.model_validate(semester),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{semester_id}",
    response_model=ApiResponse[DeleteResult],
    summary="Delete a semester",
    description="Delete a semester. Refused while notes reference it.",
)
async def delete_semester(
    semester_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DeleteResult]:
    """Delete a semester."""
    service = SemesterService(db)
    await service.delete_semester(semester_id)
    return ApiResponse(
        data=DeleteResult(id=semester_id, message="Semester deleted successfully"),
        metadata=ResponseMetadata(request_id=request_id),
    )
