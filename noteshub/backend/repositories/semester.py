"""
Semester Repository.

Data access layer for semesters. Handles all database operations
for the Semester model.
"""

from sqlalchemy import select

from noteshub.backend.models.note import Note
from noteshub.backend.models.semester import Semester
from noteshub.backend.repositories.base import BaseRepository


class SemesterRepository(BaseRepository[Semester]):
    """
    Repository for Semester model.

    Program name and code come along with every semester through the
    selectin-loaded ``program`` relationship.
    """

    model = Semester

    async def list_semesters(
        self,
        program_id: str | None = None,
        academic_year: str | None = None,
        is_active: bool | None = None,
    ) -> list[Semester]:
        """
        List semesters, newest academic year first, then by number.

        Args:
            program_id: Only semesters of this program
            academic_year: Only semesters of this year (YYYY-YYYY)
            is_active: Only semesters with this active flag

        Returns:
            List of semesters
        """
        query = select(Semester).order_by(
            Semester.academic_year.desc(),
            Semester.number.asc(),
        )
        if program_id is not None:
            query = query.where(Semester.program_id == program_id)
        if academic_year is not None:
            query = query.where(Semester.academic_year == academic_year)
        if is_active is not None:
            query = query.where(Semester.is_active == is_active)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_year(self, academic_year: str) -> list[Semester]:
        """List the semesters of one academic year ordered by number."""
        result = await self.session.execute(
            select(Semester)
            .where(Semester.academic_year == academic_year)
            .order_by(Semester.number.asc())
        )
        return list(result.scalars().all())

    async def find_by_slot(
        self,
        program_id: str,
        number: int,
        academic_year: str,
        exclude_id: str | None = None,
    ) -> Semester | None:
        """
        Find the semester occupying (program, number, academic year).

        Args:
            program_id: Owning program
            number: Semester number
            academic_year: Academic year
            exclude_id: Semester to ignore, for updates

        Returns:
            The occupying semester, or None
        """
        query = select(Semester).where(
            Semester.program_id == program_id,
            Semester.number == number,
            Semester.academic_year == academic_year,
        )
        if exclude_id is not None:
            query = query.where(Semester.id != exclude_id)

        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def delete_if_no_notes(self, id: str) -> bool:
        """Delete the semester unless a note references it."""
        return await self.delete_unless_referenced(id, Note.semester_id)
