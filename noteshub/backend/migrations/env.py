"""
Alembic environment for the NotesHub catalog.

Migrations run against the same URL as the app (``get_database_url``), on
an async engine. SQLite has no ALTER for constraints, so revisions there
are rendered in batch mode and run with foreign keys enforced, matching
the app's own SQLite connections.

    alembic upgrade head          # apply
    alembic upgrade head --sql    # print the SQL instead
"""

import asyncio
from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from noteshub.backend.core.config import get_database_url
from noteshub.backend.core.database import enable_sqlite_foreign_keys
from noteshub.backend.models.base import Base

# Registers programs, semesters, notes and note_tags on Base.metadata
from noteshub.backend.models.note import Note, NoteTag  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _configure(is_sqlite: bool, **kwargs: Any) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        render_as_batch=is_sqlite,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit the catalog DDL as SQL without a database connection."""
    url = get_database_url()
    _configure(
        url.startswith("sqlite"),
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_on_connection(connection: Connection) -> None:
    _configure(connection.dialect.name == "sqlite", connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Apply pending revisions through a throwaway async engine."""
    engine = create_async_engine(get_database_url(), poolclass=pool.NullPool)
    enable_sqlite_foreign_keys(engine)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_on_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
