"""
Shared database fixtures for the NotesHub suites.

Every test that asks for ``db_engine`` gets a brand-new catalog schema:
programs, semesters, notes and note_tags are created before the test and
dropped after it. The default target is in-memory SQLite with foreign
keys on; point ``TEST_DATABASE_URL`` at PostgreSQL to run the same
suites there::

    TEST_DATABASE_URL=postgresql+asyncpg://noteshub:pw@localhost/noteshub_test pytest
"""

import os
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from noteshub.backend.core.database import enable_sqlite_foreign_keys
from noteshub.backend.models.base import Base
from noteshub.backend.models.note import Note, NoteTag  # noqa: F401

IN_MEMORY_SQLITE = "sqlite+aiosqlite:///:memory:"


def get_test_database_url() -> str:
    return os.environ.get("TEST_DATABASE_URL", IN_MEMORY_SQLITE)


def is_sqlite() -> bool:
    return get_test_database_url().startswith("sqlite")


def _create_engine(url: str) -> AsyncEngine:
    if not is_sqlite():
        return create_async_engine(url)

    # :memory: lives as long as its connection, so every session shares one
    engine = create_async_engine(
        url,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    return engine


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Engine over a freshly created catalog schema."""
    engine = _create_engine(get_test_database_url())

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Same session options as the app, see core.database
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    One session for repository tests.

    Repositories only flush, so nothing is committed; whatever the test
    wrote is rolled back when it ends.
    """
    async with db_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
