"""
Program Service.

Business logic layer for programs. Orchestrates repositories,
handles validation, and implements business rules.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from noteshub.backend.core.exceptions import ConflictError, NotFoundError
from noteshub.backend.models.note import Note
from noteshub.backend.models.program import Program
from noteshub.backend.repositories.note import NoteCounts, NoteRepository
from noteshub.backend.repositories.program import ProgramRepository
from noteshub.backend.schemas.program import ProgramCreate, ProgramUpdate
from noteshub.backend.services.base import BaseService

DUPLICATE_PROGRAM = "Program with this name or code already exists"


class ProgramService(BaseService):
    """
    Service for program business logic.

    Name and code must each be unique; a program referenced by any note
    cannot be deleted.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ProgramRepository(session)
        self.note_repo = NoteRepository(session)

    async def list_programs(self, is_active: bool | None = None) -> list[Program]:
        """List programs sorted by name, optionally by active flag."""
        return await self.repo.list_programs(is_active=is_active)

    async def get_program(self, program_id: str) -> Program:
        """
        Get a program by ID.

        Raises:
            NotFoundError: If program not found
        """
        return await self.repo.get_by_id(program_id)

    async def create_program(self, data: ProgramCreate) -> Program:
        """
        Create a new program.

        Args:
            data: Validated program fields, code already upper-cased

        Returns:
            Created program

        Raises:
            ConflictError: If the name or code is taken
        """
        self._log_operation("Creating program", code=data.code)

        if await self.repo.find_conflicting(name=data.name, code=data.code):
            raise ConflictError(DUPLICATE_PROGRAM)

        program = await self._execute_db_operation(
            "create_program",
            self.repo.create(**data.model_dump()),
            on_integrity_error=ConflictError(DUPLICATE_PROGRAM),
        )

        self._log_debug("Program created", program_id=program.id)
        return program

    async def update_program(self, program_id: str, data: ProgramUpdate) -> Program:
        """
        Update a program with the fields the client sent.

        Raises:
            NotFoundError: If program not found
            ConflictError: If the new name or code belongs to another program
        """
        changes = data.changes()
        self._log_operation(
            "Updating program",
            program_id=program_id,
            fields=sorted(changes),
        )

        await self.repo.get_by_id(program_id)

        if "name" in changes or "code" in changes:
            clash = await self.repo.find_conflicting(
                name=changes.get("name"),
                code=changes.get("code"),
                exclude_id=program_id,
            )
            if clash is not None:
                raise ConflictError(DUPLICATE_PROGRAM)

        return await self._execute_db_operation(
            "update_program",
            self.repo.update(program_id, **changes),
            on_integrity_error=ConflictError(DUPLICATE_PROGRAM),
        )

    async def delete_program(self, program_id: str) -> None:
        """
        Delete a program and, through the storage cascade, its semesters.

        The delete only happens when no note references the program.

        Raises:
            NotFoundError: If program not found
            ConflictError: If notes reference the program or its semesters
        """
        self._log_operation("Deleting program", program_id=program_id)

        deleted = await self._execute_db_operation(
            "delete_program",
            self.repo.delete_if_no_notes(program_id),
            on_integrity_error=ConflictError(
                "Cannot delete program. Its semesters have associated notes."
            ),
        )
        if deleted:
            return

        if not await self.repo.exists(program_id):
            raise NotFoundError("Program not found")

        notes_count = await self.note_repo.count_referencing(Note.program_id, program_id)
        raise ConflictError(
            f"Cannot delete program. It has {notes_count} associated notes."
        )

    async def get_program_stats(self, program_id: str) -> tuple[Program, NoteCounts]:
        """
        Get a program with its note counts.

        Raises:
            NotFoundError: If program not found
        """
        program = await self.repo.get_by_id(program_id)
        counts = await self.note_repo.counts_for(Note.program_id, program_id)
        return program, counts
