"""
Program Repository.

Data access layer for programs. Handles all database operations
for the Program model.
"""

from sqlalchemy import or_, select

from noteshub.backend.models.note import Note
from noteshub.backend.models.program import Program
from noteshub.backend.repositories.base import BaseRepository


class ProgramRepository(BaseRepository[Program]):
    """
    Repository for Program model.

    Inherits standard CRUD operations from BaseRepository
    and adds program-specific queries.
    """

    model = Program

    async def list_programs(self, is_active: bool | None = None) -> list[Program]:
        """
        List programs sorted by name.

        Args:
            is_active: Only programs with this active flag, when given

        Returns:
            List of programs
        """
        query = select(Program).order_by(Program.name.asc())
        if is_active is not None:
            query = query.where(Program.is_active == is_active)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_conflicting(
        self,
        name: str | None = None,
        code: str | None = None,
        exclude_id: str | None = None,
    ) -> Program | None:
        """
        Find a program that already uses the given name or code.

        Args:
            name: Name to look for (exact, case-sensitive)
            code: Code to look for (already upper-cased)
            exclude_id: Program to ignore, for updates

        Returns:
            The first clashing program, or None
        """
        clauses = []
        if name is not None:
            clauses.append(Program.name == name)
        if code is not None:
            clauses.append(Program.code == code)
        if not clauses:
            return None

        query = select(Program).where(or_(*clauses))
        if exclude_id is not None:
            query = query.where(Program.id != exclude_id)

        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def delete_if_no_notes(self, id: str) -> bool:
        """Delete the program unless a note references it."""
        return await self.delete_unless_referenced(id, Note.program_id)
