"""
Semester Model.

A numbered term of a program in a given academic year, carrying its
ordered list of subjects.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from noteshub.backend.models.base import Base, TimestampMixin, UUIDMixin
from noteshub.backend.models.program import Program


class Semester(UUIDMixin, TimestampMixin, Base):
    """
    Semester database model.

    (program, number, academic_year) is unique. Deleting the owning
    program cascades to its semesters; notes block deletion of both.
    """

    __tablename__ = "semesters"
    __table_args__ = (
        UniqueConstraint("program_id", "number", "academic_year"),
    )

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    number: Mapped[int] = mapped_column(
        nullable=False,
    )
    academic_year: Mapped[str] = mapped_column(
        String(9),
        nullable=False,
        index=True,
    )
    program_id: Mapped[str] = mapped_column(
        ForeignKey("programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
    )
    end_date: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        default=True,
        nullable=False,
    )
    # Ordered list of {"name", "code", "credits"} objects
    subjects: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )

    program: Mapped[Program] = relationship(lazy="selectin")

    @property
    def display_name(self) -> str:
        return f"{self.name} - {self.academic_year}"

    def __repr__(self) -> str:
        return f"<Semester(id={self.id}, number={self.number}, year={self.academic_year!r})>"
