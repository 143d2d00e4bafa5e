"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model, including filter composition for the paginated
listing and aggregate counts for program/semester stats.
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import ColumnElement, case, exists, func, or_, select
from sqlalchemy.orm import InstrumentedAttribute

from noteshub.backend.models.note import Note, NoteTag
from noteshub.backend.models.program import Program
from noteshub.backend.models.semester import Semester
from noteshub.backend.repositories.base import BaseRepository

# Ties on created_at fall back to id so offset pages never overlap.
NEWEST_FIRST = (Note.created_at.desc(), Note.id.desc())


@dataclass
class NoteFilters:
    """
    Conjunctive filters for the note listing.

    Empty values mean "no filter". ``tags`` matches notes sharing any of
    the given tags; ``search_terms`` matches notes whose title or content
    contains any of the terms.
    """

    program_id: str | None = None
    semester_id: str | None = None
    subject: str | None = None
    tags: list[str] = field(default_factory=list)
    search_terms: list[str] = field(default_factory=list)
    is_public: bool | None = None


@dataclass
class NoteCounts:
    """Aggregate note counts for a program or semester."""

    total: int
    public: int
    unique_subjects: int

    @property
    def private(self) -> int:
        return self.total - self.public


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds note-specific queries.
    """

    model = Note

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    @staticmethod
    def _conditions(filters: NoteFilters) -> list[ColumnElement[bool]]:
        """Translate filters into WHERE clauses."""
        conditions: list[ColumnElement[bool]] = []

        if filters.program_id:
            conditions.append(Note.program_id == filters.program_id)
        if filters.semester_id:
            conditions.append(Note.semester_id == filters.semester_id)
        if filters.subject:
            conditions.append(Note.subject.icontains(filters.subject, autoescape=True))
        if filters.tags:
            conditions.append(
                Note.id.in_(
                    select(NoteTag.note_id).where(NoteTag.tag.in_(filters.tags))
                )
            )
        if filters.search_terms:
            conditions.append(
                or_(*[
                    or_(
                        Note.title.icontains(term, autoescape=True),
                        Note.content.icontains(term, autoescape=True),
                    )
                    for term in filters.search_terms
                ])
            )
        if filters.is_public is not None:
            conditions.append(Note.is_public == filters.is_public)

        return conditions

    async def search(
        self,
        filters: NoteFilters,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Note]:
        """
        Get one page of notes matching the filters, newest first.

        Args:
            filters: Listing filters
            limit: Maximum number of notes to return
            offset: Number of notes to skip

        Returns:
            List of matching notes
        """
        result = await self.session.execute(
            select(Note)
            .where(*self._conditions(filters))
            .order_by(*NEWEST_FIRST)
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def count_matching(self, filters: NoteFilters) -> int:
        """Count all notes matching the filters."""
        result = await self.session.execute(
            select(func.count())
            .select_from(Note)
            .where(*self._conditions(filters))
        )
        return result.scalar_one()

    async def list_by_program(self, program_id: str) -> list[Note]:
        """All notes of a program, newest first."""
        return await self._list_where(Note.program_id == program_id)

    async def list_by_semester(self, semester_id: str) -> list[Note]:
        """All notes of a semester, newest first."""
        return await self._list_where(Note.semester_id == semester_id)

    async def list_by_subject(self, subject: str) -> list[Note]:
        """All notes whose subject contains the text (case-insensitive), newest first."""
        return await self._list_where(Note.subject.icontains(subject, autoescape=True))

    async def _list_where(self, condition: ColumnElement[bool]) -> list[Note]:
        result = await self.session.execute(
            select(Note).where(condition).order_by(*NEWEST_FIRST)
        )
        return list(result.scalars().all())

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_note(self, tags: list[str], **fields: Any) -> Note:
        """
        Create a note with its tags.

        Args:
            tags: Distinct tags in the order they should be kept
            **fields: Note column values

        Returns:
            Created note, reloaded with program, semester and tags
        """
        tag_links = [NoteTag(tag=tag, position=i) for i, tag in enumerate(tags)]
        return await self.create(tag_links=tag_links, **fields)

    async def update_note(
        self,
        id: str,
        tags: list[str] | None = None,
        **fields: Any,
    ) -> Note:
        """
        Update a note; replace its tags when ``tags`` is given.

        Tags kept from the old set keep their row and get a new position,
        dropped tags are deleted, new tags are inserted.

        Raises:
            NotFoundError: If note not found
        """
        note = await self.get_by_id(id)

        for key, value in fields.items():
            setattr(note, key, value)

        if tags is not None:
            existing = {link.tag: link for link in note.tag_links}
            links = []
            for position, tag in enumerate(tags):
                link = existing.get(tag)
                if link is None:
                    link = NoteTag(tag=tag, position=position)
                else:
                    link.position = position
                links.append(link)
            note.tag_links = links

        await self.session.flush()
        return await self.get_by_id(id)

    # -------------------------------------------------------------------------
    # Reference checks and aggregates
    # -------------------------------------------------------------------------

    async def references_exist(
        self,
        program_id: str | None,
        semester_id: str | None,
    ) -> tuple[bool, bool]:
        """
        Check that a program and a semester exist, in one round trip.

        A None id is reported as existing (nothing to check).

        Returns:
            (program_exists, semester_exists)
        """
        program_check = (
            exists().where(Program.id == program_id) if program_id is not None
            else None
        )
        semester_check = (
            exists().where(Semester.id == semester_id) if semester_id is not None
            else None
        )
        checks = [c for c in (program_check, semester_check) if c is not None]
        if not checks:
            return True, True

        row = (await self.session.execute(select(*checks))).one()
        values = iter(bool(value) for value in row)
        program_ok = next(values) if program_check is not None else True
        semester_ok = next(values) if semester_check is not None else True
        return program_ok, semester_ok

    async def count_referencing(self, column: InstrumentedAttribute, value: str) -> int:
        """Count notes whose ``column`` equals ``value``."""
        result = await self.session.execute(
            select(func.count()).select_from(Note).where(column == value)
        )
        return result.scalar_one()

    async def counts_for(self, column: InstrumentedAttribute, value: str) -> NoteCounts:
        """
        Total, public and distinct-subject counts for notes where column == value.

        Args:
            column: Note.program_id or Note.semester_id
            value: Referenced id

        Returns:
            NoteCounts
        """
        result = await self.session.execute(
            select(
                func.count(Note.id),
                func.coalesce(func.sum(case((Note.is_public.is_(True), 1), else_=0)), 0),
                func.count(func.distinct(Note.subject)),
            ).where(column == value)
        )
        total, public, subjects = result.one()
        return NoteCounts(total=total, public=int(public), unique_subjects=subjects)
