"""Create programs, semesters, notes and note_tags tables

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "programs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=10), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_programs")),
        sa.UniqueConstraint("name", name=op.f("uq_programs_name")),
        sa.UniqueConstraint("code", name=op.f("uq_programs_code")),
    )
    op.create_index(op.f("ix_programs_created_at"), "programs", ["created_at"])

    op.create_table(
        "semesters",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("academic_year", sa.String(length=9), nullable=False),
        sa.Column("program_id", sa.String(), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["program_id"],
            ["programs.id"],
            name=op.f("fk_semesters_program_id_programs"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_semesters")),
        sa.UniqueConstraint(
            "program_id",
            "number",
            "academic_year",
            name=op.f("uq_semesters_program_id_number_academic_year"),
        ),
    )
    op.create_index(op.f("ix_semesters_academic_year"), "semesters", ["academic_year"])
    op.create_index(op.f("ix_semesters_program_id"), "semesters", ["program_id"])
    op.create_index(op.f("ix_semesters_created_at"), "semesters", ["created_at"])

    op.create_table(
        "notes",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("file_url", sa.String(length=2048), nullable=True),
        sa.Column("program_id", sa.String(), nullable=False),
        sa.Column("semester_id", sa.String(), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column("author", sa.String(length=100), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column(
            "file_type",
            sa.Enum(
                "pdf", "doc", "docx", "txt", "image", "other",
                name="filetype",
                native_enum=False,
                length=10,
            ),
            nullable=False,
        ),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["program_id"],
            ["programs.id"],
            name=op.f("fk_notes_program_id_programs"),
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["semester_id"],
            ["semesters.id"],
            name=op.f("fk_notes_semester_id_semesters"),
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_notes")),
    )
    op.create_index(op.f("ix_notes_title"), "notes", ["title"])
    op.create_index(op.f("ix_notes_program_id"), "notes", ["program_id"])
    op.create_index(op.f("ix_notes_semester_id"), "notes", ["semester_id"])
    op.create_index(op.f("ix_notes_subject"), "notes", ["subject"])
    op.create_index(op.f("ix_notes_created_at"), "notes", ["created_at"])

    op.create_table(
        "note_tags",
        sa.Column("note_id", sa.String(), nullable=False),
        sa.Column("tag", sa.String(length=100), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["note_id"],
            ["notes.id"],
            name=op.f("fk_note_tags_note_id_notes"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("note_id", "tag", name=op.f("pk_note_tags")),
    )
    op.create_index(op.f("ix_note_tags_tag"), "note_tags", ["tag"])


def downgrade() -> None:
    op.drop_index(op.f("ix_note_tags_tag"), table_name="note_tags")
    op.drop_table("note_tags")

    for index in ("created_at", "subject", "semester_id", "program_id", "title"):
        op.drop_index(op.f(f"ix_notes_{index}"), table_name="notes")
    op.drop_table("notes")

    for index in ("created_at", "program_id", "academic_year"):
        op.drop_index(op.f(f"ix_semesters_{index}"), table_name="semesters")
    op.drop_table("semesters")

    op.drop_index(op.f("ix_programs_created_at"), table_name="programs")
    op.drop_table("programs")
