"""
Integration Fixtures.

``client`` drives the real NotesHub app over ASGI against the per-test
database from the root conftest. ``catalog`` seeds programs, semesters
and notes through the public API, and ``api`` checks the response
envelope.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient, Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from noteshub.backend.core.database import get_db_session


@pytest.fixture
async def client(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client for the app, one database session per request.

    Sessions commit when the request succeeds and roll back when it
    raises, the same contract as ``get_db_session``.
    """

    async def request_session() -> AsyncGenerator[AsyncSession, None]:
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from noteshub.backend.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = request_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


class CatalogBuilder:
    """
    Seeds the catalog through POST endpoints.

    Names, codes and semester numbers are numbered per test so repeated
    calls never collide; pass keyword overrides (API spelling) to pin a
    field.
    """

    def __init__(self, client: AsyncClient) -> None:
        self.client = client
        self._counter = 0

    async def _create(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self.client.post(path, json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def program(self, **overrides: Any) -> dict[str, Any]:
        n = self._next()
        return await self._create(
            "/api/programs",
            {"name": f"Program {n}", "code": f"P{n}"} | overrides,
        )

    async def semester(self, program_id: str, **overrides: Any) -> dict[str, Any]:
        n = self._next()
        return await self._create(
            "/api/semesters",
            {
                "name": f"Semester {n}",
                "number": (n % 12) + 1,
                "academicYear": "2024-2025",
                "program": program_id,
                "startDate": "2024-09-01T00:00:00",
                "endDate": "2025-01-31T00:00:00",
            } | overrides,
        )

    async def note(self, program_id: str, semester_id: str, **overrides: Any) -> dict[str, Any]:
        n = self._next()
        return await self._create(
            "/api/notes",
            {
                "title": f"Note {n}",
                "content": f"Content of note {n}",
                "program": program_id,
                "semester": semester_id,
                "subject": "General",
            } | overrides,
        )


@pytest.fixture
def catalog(client: AsyncClient) -> CatalogBuilder:
    return CatalogBuilder(client)


class ApiAssertions:
    """Checks on the NotesHub envelope; each returns the decoded body."""

    @staticmethod
    def _status(response: Response, expected: int) -> dict[str, Any]:
        assert response.status_code == expected, (
            f"Expected {expected}, got {response.status_code}: {response.text}"
        )
        return response.json()

    @staticmethod
    def assert_success(response: Response, expected_status: int = 200) -> dict[str, Any]:
        body = ApiAssertions._status(response, expected_status)
        assert body["success"] is True, body
        assert body["error"] is None, body
        return body

    @staticmethod
    def assert_error(
        response: Response,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """``error`` is the message string; ``errorCode`` names the kind."""
        body = ApiAssertions._status(response, expected_status)
        assert body["success"] is False, body
        assert body["data"] is None, body
        assert isinstance(body["error"], str) and body["error"], body
        if expected_code:
            assert body["errorCode"] == expected_code, body
        return body

    @staticmethod
    def assert_validation_error(response: Response, field: str | None = None) -> dict[str, Any]:
        """A 400 VAL_REQUEST_INVALID, optionally naming ``field`` among the failures."""
        body = ApiAssertions.assert_error(response, 400, "VAL_REQUEST_INVALID")
        if field:
            fields = [e["field"] for e in body["details"]["validation_errors"]]
            assert any(field in f for f in fields), f"{field!r} not in {fields}"
        return body


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()
