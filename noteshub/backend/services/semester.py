"""
Semester Service.

Business logic layer for semesters. Orchestrates repositories,
handles validation, and implements business rules.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from noteshub.backend.core.exceptions import ConflictError, NotFoundError, ValidationError
from noteshub.backend.models.note import Note
from noteshub.backend.models.semester import Semester
from noteshub.backend.repositories.note import NoteCounts, NoteRepository
from noteshub.backend.repositories.program import ProgramRepository
from noteshub.backend.repositories.semester import SemesterRepository
from noteshub.backend.schemas.semester import SemesterCreate, SemesterUpdate
from noteshub.backend.services.base import BaseService

DUPLICATE_SEMESTER = (
    "Semester with this number and academic year already exists for this program"
)


def _check_dates(start_date: datetime, end_date: datetime) -> None:
    if start_date >= end_date:
        raise ValidationError(
            "Start date must be before end date",
            details={"startDate": start_date.isoformat(), "endDate": end_date.isoformat()},
        )


class SemesterService(BaseService):
    """
    Service for semester business logic.

    A semester belongs to an existing program, starts before it ends,
    and is the only one with its (program, number, academic year).
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = SemesterRepository(session)
        self.program_repo = ProgramRepository(session)
        self.note_repo = NoteRepository(session)

    async def list_semesters(
        self,
        program_id: str | None = None,
        academic_year: str | None = None,
        is_active: bool | None = None,
    ) -> list[Semester]:
        """List semesters, newest academic year first, then by number."""
        return await self.repo.list_semesters(
            program_id=program_id,
            academic_year=academic_year,
            is_active=is_active,
        )

    async def list_by_program(self, program_id: str) -> list[Semester]:
        """List the semesters of a program."""
        return await self.repo.list_semesters(program_id=program_id)

    async def list_by_year(self, academic_year: str) -> list[Semester]:
        """List the semesters of an academic year ordered by number."""
        return await self.repo.list_by_year(academic_year)

    async def get_semester(self, semester_id: str) -> Semester:
        """
        Get a semester by ID.

        Raises:
            NotFoundError: If semester not found
        """
        return await self.repo.get_by_id(semester_id)

    async def _require_program(self, program_id: str) -> None:
        if not await self.program_repo.exists(program_id):
            raise ValidationError("Invalid program")

    async def create_semester(self, data: SemesterCreate) -> Semester:
        """
        Create a new semester.

        Raises:
            ValidationError: If the program does not exist or the dates are out of order
            ConflictError: If the (program, number, academic year) slot is taken
        """
        self._log_operation(
            "Creating semester",
            program_id=data.program,
            number=data.number,
            academic_year=data.academic_year,
        )

        _check_dates(data.start_date, data.end_date)
        await self._require_program(data.program)

        if await self.repo.find_by_slot(data.program, data.number, data.academic_year):
            raise ConflictError(DUPLICATE_SEMESTER)

        fields = data.model_dump(exclude={"program"})
        semester = await self._execute_db_operation(
            "create_semester",
            self.repo.create(program_id=data.program, **fields),
        )

        self._log_debug("Semester created", semester_id=semester.id)
        return semester

    async def update_semester(self, semester_id: str, data: SemesterUpdate) -> Semester:
        """
        Update a semester with the fields the client sent.

        Date order and slot uniqueness are checked against the merged
        record: stored values overlaid with the incoming ones.

        Raises:
            NotFoundError: If semester not found
            ValidationError: If the new program does not exist or the dates are out of order
            ConflictError: If the merged slot belongs to another semester
        """
        changes = data.changes()
        self._log_operation(
            "Updating semester",
            semester_id=semester_id,
            fields=sorted(changes),
        )

        current = await self.repo.get_by_id(semester_id)

        if "program_id" in changes and changes["program_id"] != current.program_id:
            await self._require_program(changes["program_id"])

        _check_dates(
            changes.get("start_date", current.start_date),
            changes.get("end_date", current.end_date),
        )

        slot_fields = {"program_id", "number", "academic_year"}
        if slot_fields & changes.keys():
            clash = await self.repo.find_by_slot(
                changes.get("program_id", current.program_id),
                changes.get("number", current.number),
                changes.get("academic_year", current.academic_year),
                exclude_id=semester_id,
            )
            if clash is not None:
                raise ConflictError(DUPLICATE_SEMESTER)

        return await self._execute_db_operation(
            "update_semester",
            self.repo.update(semester_id, **changes),
        )

    async def delete_semester(self, semester_id: str) -> None:
        """
        Delete a semester that no note references.

        Raises:
            NotFoundError: If semester not found
            ConflictError: If notes reference the semester
        """
        self._log_operation("Deleting semester", semester_id=semester_id)

        deleted = await self._execute_db_operation(
            "delete_semester",
            self.repo.delete_if_no_notes(semester_id),
        )
        if deleted:
            return

        if not await self.repo.exists(semester_id):
            raise NotFoundError("Semester not found")

        notes_count = await self.note_repo.count_referencing(Note.semester_id, semester_id)
        raise ConflictError(
            f"Cannot delete semester. It has {notes_count} associated notes."
        )

    async def get_semester_stats(self, semester_id: str) -> tuple[Semester, NoteCounts]:
        """
        Get a semester with its note counts.

        Raises:
            NotFoundError: If semester not found
        """
        semester = await self.repo.get_by_id(semester_id)
        counts = await self.note_repo.counts_for(Note.semester_id, semester_id)
        return semester, counts
