"""
Note Service.

Business logic layer for notes. Orchestrates repositories,
handles validation, and implements business rules.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from noteshub.backend.core.exceptions import ValidationError
from noteshub.backend.core.pagination import PagedResult, PaginationParams, paginate_query
from noteshub.backend.models.note import Note
from noteshub.backend.repositories.note import NoteFilters, NoteRepository
from noteshub.backend.schemas.note import NoteCreate, NoteUpdate
from noteshub.backend.services.base import BaseService


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, updates, and retrieval with
    proper validation and error handling. A note's program and semester
    must exist; whether the semester belongs to the program is not checked.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    async def list_notes(
        self,
        filters: NoteFilters,
        pagination: PaginationParams,
    ) -> PagedResult[Note]:
        """
        List one page of notes matching the filters, newest first.

        Args:
            filters: Conjunctive listing filters
            pagination: Page number and page size

        Returns:
            PagedResult with the page and the total match count
        """
        self._log_debug(
            "Listing notes",
            page=pagination.page,
            limit=pagination.limit,
        )
        return await paginate_query(
            query_func=lambda limit, offset: self.repo.search(filters, limit, offset),
            count_func=lambda: self.repo.count_matching(filters),
            params=pagination,
        )

    async def list_by_program(self, program_id: str) -> list[Note]:
        """All notes of a program, newest first."""
        return await self.repo.list_by_program(program_id)

    async def list_by_semester(self, semester_id: str) -> list[Note]:
        """All notes of a semester, newest first."""
        return await self.repo.list_by_semester(semester_id)

    async def list_by_subject(self, subject: str) -> list[Note]:
        """All notes whose subject contains the text, ignoring case."""
        return await self.repo.list_by_subject(subject)

    async def get_note(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Args:
            note_id: Note ID

        Returns:
            Note if found

        Raises:
            NotFoundError: If note not found
        """
        return await self.repo.get_by_id(note_id)

    async def _require_references(
        self,
        program_id: str | None,
        semester_id: str | None,
    ) -> None:
        program_ok, semester_ok = await self.repo.references_exist(program_id, semester_id)
        if not program_ok:
            raise ValidationError("Invalid program")
        if not semester_ok:
            raise ValidationError("Invalid semester")

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new note.

        Args:
            data: Note creation data, tags already deduplicated

        Returns:
            Created note with program and semester populated

        Raises:
            ValidationError: If the program or semester does not exist
        """
        self._log_operation("Creating note", title=data.title)

        await self._require_references(data.program, data.semester)

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create_note(data.tags, **data.column_values()),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def update_note(self, note_id: str, data: NoteUpdate) -> Note:
        """
        Update an existing note with the fields the client sent.

        Args:
            note_id: Note ID
            data: Update data

        Returns:
            Updated note

        Raises:
            NotFoundError: If note not found
            ValidationError: If a changed program or semester does not exist
        """
        changes = data.changes()
        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=sorted(changes),
        )

        tags = changes.pop("tags", None)

        await self.repo.get_by_id(note_id)
        await self._require_references(
            changes.get("program_id"),
            changes.get("semester_id"),
        )

        return await self._execute_db_operation(
            "update_note",
            self.repo.update_note(note_id, tags=tags, **changes),
        )

    async def delete_note(self, note_id: str) -> None:
        """
        Delete a note and its tags.

        Args:
            note_id: Note ID

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Deleting note", note_id=note_id)
        await self._execute_db_operation(
            "delete_note",
            self.repo.delete(note_id),
        )
