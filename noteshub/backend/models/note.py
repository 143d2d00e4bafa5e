"""
Note Model.

Database models for notes and their tags. Tags live in their own table
keyed by (note_id, tag), so a note can never hold the same tag twice.
"""

import enum

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from noteshub.backend.models.base import Base, TimestampMixin, UUIDMixin
from noteshub.backend.models.program import Program
from noteshub.backend.models.semester import Semester


class FileType(str, enum.Enum):
    """Kind of file attached to a note."""

    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"
    TXT = "txt"
    IMAGE = "image"
    OTHER = "other"


class NoteTag(Base):
    """A single tag on a note. Position keeps first-seen order."""

    __tablename__ = "note_tags"

    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        index=True,
    )
    position: Mapped[int] = mapped_column(
        default=0,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<NoteTag(note_id={self.note_id}, tag={self.tag!r})>"


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    References one program and one semester. The two references are not
    checked against each other.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    file_url: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
    )
    program_id: Mapped[str] = mapped_column(
        ForeignKey("programs.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    semester_id: Mapped[str] = mapped_column(
        ForeignKey("semesters.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    subject: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )
    author: Mapped[str] = mapped_column(
        String(100),
        default="Anonymous",
        nullable=False,
    )
    is_public: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    file_type: Mapped[FileType] = mapped_column(
        Enum(
            FileType,
            native_enum=False,
            length=10,
            values_callable=lambda kinds: [kind.value for kind in kinds],
        ),
        default=FileType.OTHER,
        nullable=False,
    )
    file_size: Mapped[int] = mapped_column(
        default=0,
        nullable=False,
    )

    program: Mapped[Program] = relationship(lazy="selectin")
    semester: Mapped[Semester] = relationship(lazy="selectin")
    tag_links: Mapped[list[NoteTag]] = relationship(
        order_by=NoteTag.position,
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    @property
    def tags(self) -> list[str]:
        return [link.tag for link in self.tag_links]

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
