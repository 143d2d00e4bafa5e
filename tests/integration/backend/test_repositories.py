"""
Integration Tests for Repositories.

Exercise the repositories against a real database: constraint
enforcement, cascades, filter composition and aggregates. They also
document how to use the db_session fixture.
"""

from datetime import datetime

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from noteshub.backend.models.note import Note, NoteTag
from noteshub.backend.models.program import Program
from noteshub.backend.models.semester import Semester
from noteshub.backend.repositories.note import NoteFilters, NoteRepository
from noteshub.backend.repositories.program import ProgramRepository
from noteshub.backend.repositories.semester import SemesterRepository


async def _program(session: AsyncSession, code: str = "CS") -> Program:
    return await ProgramRepository(session).create(name=f"Program {code}", code=code)


async def _semester(session: AsyncSession, program_id: str, number: int = 1) -> Semester:
    return await SemesterRepository(session).create(
        name=f"Semester {number}",
        number=number,
        academic_year="2024-2025",
        program_id=program_id,
        start_date=datetime(2024, 9, 1),
        end_date=datetime(2025, 1, 31),
    )


async def _note(
    session: AsyncSession,
    program_id: str,
    semester_id: str,
    tags: list[str] | None = None,
    **fields,
) -> Note:
    values = {
        "title": "Title",
        "content": "Content",
        "subject": "General",
    } | fields
    return await NoteRepository(session).create_note(
        tags or [],
        program_id=program_id,
        semester_id=semester_id,
        **values,
    )


class TestProgramRepository:
    """Tests for ProgramRepository."""

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, db_session: AsyncSession):
        """Should fill id, timestamps, duration and active flag."""
        program = await _program(db_session)

        assert program.id is not None
        assert program.created_at is not None
        assert program.duration == 8
        assert program.is_active is True

    @pytest.mark.asyncio
    async def test_duplicate_code_rejected_by_database(self, db_session: AsyncSession):
        """Should enforce code uniqueness at storage level."""
        await _program(db_session, code="CS")

        with pytest.raises(IntegrityError):
            await ProgramRepository(db_session).create(name="Other", code="CS")

    @pytest.mark.asyncio
    async def test_find_conflicting_ignores_excluded(self, db_session: AsyncSession):
        """Should not report a program as conflicting with itself."""
        repo = ProgramRepository(db_session)
        program = await _program(db_session, code="CS")

        assert (await repo.find_conflicting(code="CS")).id == program.id
        assert await repo.find_conflicting(code="CS", exclude_id=program.id) is None
        assert await repo.find_conflicting() is None

    @pytest.mark.asyncio
    async def test_delete_cascades_to_semesters(self, db_session: AsyncSession):
        """Should remove the program's semesters with it."""
        program = await _program(db_session)
        semester = await _semester(db_session, program.id)

        deleted = await ProgramRepository(db_session).delete_if_no_notes(program.id)

        assert deleted is True
        assert await SemesterRepository(db_session).exists(semester.id) is False

    @pytest.mark.asyncio
    async def test_delete_skipped_when_notes_reference(self, db_session: AsyncSession):
        """Should leave the program in place when a note references it."""
        program = await _program(db_session)
        semester = await _semester(db_session, program.id)
        await _note(db_session, program.id, semester.id)

        repo = ProgramRepository(db_session)

        assert await repo.delete_if_no_notes(program.id) is False
        assert await repo.exists(program.id) is True


class TestSemesterRepository:
    """Tests for SemesterRepository."""

    @pytest.mark.asyncio
    async def test_unknown_program_rejected(self, db_session: AsyncSession):
        """Should enforce the program foreign key."""
        with pytest.raises(IntegrityError):
            await _semester(db_session, "missing")

    @pytest.mark.asyncio
    async def test_slot_uniqueness(self, db_session: AsyncSession):
        """Should reject a second semester in the same slot."""
        program = await _program(db_session)
        await _semester(db_session, program.id, number=1)

        with pytest.raises(IntegrityError):
            await _semester(db_session, program.id, number=1)

    @pytest.mark.asyncio
    async def test_list_orders_year_desc_then_number(self, db_session: AsyncSession):
        """Should list newest years first and numbers ascending within a year."""
        program = await _program(db_session)
        repo = SemesterRepository(db_session)
        second = await _semester(db_session, program.id, number=2)
        first = await _semester(db_session, program.id, number=1)
        newer = await repo.create(
            name="Next",
            number=1,
            academic_year="2025-2026",
            program_id=program.id,
            start_date=datetime(2025, 9, 1),
            end_date=datetime(2026, 1, 31),
        )

        semesters = await repo.list_semesters(program_id=program.id)

        assert [s.id for s in semesters] == [newer.id, first.id, second.id]
        assert semesters[0].program.code == "CS"

    @pytest.mark.asyncio
    async def test_subjects_keep_order(self, db_session: AsyncSession):
        """Should store subjects as an ordered list."""
        program = await _program(db_session)
        subjects = [
            {"name": "Calculus", "code": "MATH1", "credits": 4},
            {"name": "Physics", "code": "PHY1", "credits": 3},
        ]
        semester = await SemesterRepository(db_session).create(
            name="Fall",
            number=1,
            academic_year="2024-2025",
            program_id=program.id,
            start_date=datetime(2024, 9, 1),
            end_date=datetime(2025, 1, 31),
            subjects=subjects,
        )

        assert semester.subjects == subjects


class TestNoteRepository:
    """Tests for NoteRepository."""

    @pytest.mark.asyncio
    async def test_tags_kept_in_order(self, db_session: AsyncSession):
        """Should return tags in the order they were given."""
        program = await _program(db_session)
        semester = await _semester(db_session, program.id)

        note = await _note(db_session, program.id, semester.id, tags=["z", "a", "m"])

        assert note.tags == ["z", "a", "m"]
        assert note.program.id == program.id
        assert note.semester.id == semester.id

    @pytest.mark.asyncio
    async def test_update_replaces_tags(self, db_session: AsyncSession):
        """Should keep shared tags, drop missing ones and add new ones."""
        program = await _program(db_session)
        semester = await _semester(db_session, program.id)
        note = await _note(db_session, program.id, semester.id, tags=["a", "b", "c"])

        updated = await NoteRepository(db_session).update_note(note.id, tags=["c", "d", "a"])

        assert updated.tags == ["c", "d", "a"]
        rows = await db_session.execute(
            select(NoteTag.tag).where(NoteTag.note_id == note.id)
        )
        assert sorted(rows.scalars().all()) == ["a", "c", "d"]

    @pytest.mark.asyncio
    async def test_delete_removes_tags(self, db_session: AsyncSession):
        """Should delete tag rows with their note."""
        program = await _program(db_session)
        semester = await _semester(db_session, program.id)
        note = await _note(db_session, program.id, semester.id, tags=["x"])

        await NoteRepository(db_session).delete(note.id)

        rows = await db_session.execute(select(NoteTag).where(NoteTag.note_id == note.id))
        assert rows.scalars().all() == []

    @pytest.mark.asyncio
    async def test_references_exist(self, db_session: AsyncSession):
        """Should report each reference separately."""
        program = await _program(db_session)
        semester = await _semester(db_session, program.id)
        repo = NoteRepository(db_session)

        assert await repo.references_exist(program.id, semester.id) == (True, True)
        assert await repo.references_exist("missing", semester.id) == (False, True)
        assert await repo.references_exist(program.id, "missing") == (True, False)
        assert await repo.references_exist(None, None) == (True, True)
        assert await repo.references_exist(None, "missing") == (True, False)

    @pytest.mark.asyncio
    async def test_search_filters_compose(self, db_session: AsyncSession):
        """Should AND the filters together and count the same set."""
        program = await _program(db_session)
        semester = await _semester(db_session, program.id)
        wanted = await _note(
            db_session, program.id, semester.id,
            tags=["exam"], subject="Calculus", is_public=True,
        )
        await _note(db_session, program.id, semester.id, tags=["exam"], subject="Calculus")
        await _note(db_session, program.id, semester.id, tags=["misc"], subject="Calculus", is_public=True)

        repo = NoteRepository(db_session)
        filters = NoteFilters(subject="calc", tags=["exam"], is_public=True)

        assert [n.id for n in await repo.search(filters)] == [wanted.id]
        assert await repo.count_matching(filters) == 1
        assert await repo.count_matching(NoteFilters()) == 3

    @pytest.mark.asyncio
    async def test_pages_stable_when_timestamps_tie(self, db_session: AsyncSession):
        """Should break created_at ties by id so pages neither repeat nor skip."""
        program = await _program(db_session)
        semester = await _semester(db_session, program.id)
        same_moment = datetime(2024, 10, 1, 12, 0)
        notes = [
            await _note(db_session, program.id, semester.id, created_at=same_moment)
            for _ in range(5)
        ]

        repo = NoteRepository(db_session)
        pages = [
            await repo.search(NoteFilters(), limit=2, offset=offset)
            for offset in (0, 2, 4)
        ]

        paged_ids = [n.id for page in pages for n in page]
        assert paged_ids == sorted((n.id for n in notes), reverse=True)

    @pytest.mark.asyncio
    async def test_counts_for(self, db_session: AsyncSession):
        """Should count totals, public notes and distinct subjects."""
        program = await _program(db_session)
        semester = await _semester(db_session, program.id)
        await _note(db_session, program.id, semester.id, subject="A", is_public=True)
        await _note(db_session, program.id, semester.id, subject="A")
        await _note(db_session, program.id, semester.id, subject="B")

        counts = await NoteRepository(db_session).counts_for(Note.program_id, program.id)

        assert (counts.total, counts.public, counts.private, counts.unique_subjects) == (3, 1, 2, 2)

    @pytest.mark.asyncio
    async def test_counts_for_no_notes(self, db_session: AsyncSession):
        """Should report zeros when nothing references the value."""
        counts = await NoteRepository(db_session).counts_for(Note.semester_id, "missing")

        assert (counts.total, counts.public, counts.unique_subjects) == (0, 0, 0)
