"""
Program Model.

A degree program (e.g. "Computer Science", code "CS"). Semesters and
notes reference it.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from noteshub.backend.models.base import Base, TimestampMixin, UUIDMixin


class Program(UUIDMixin, TimestampMixin, Base):
    """
    Program database model.

    Name and code are each unique at the storage level; the service layer
    pre-checks them only to report a readable conflict message.
    """

    __tablename__ = "programs"

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
    )
    code: Mapped[str] = mapped_column(
        String(10),
        unique=True,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    duration: Mapped[int] = mapped_column(
        default=8,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Program(id={self.id}, code={self.code!r})>"
