"""
Unit test fixtures: mocks for the session, the YAML config and loggers.

Nothing here opens a database; anything that needs one belongs under
tests/integration.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from noteshub.backend.core.config_schema import (
    ApplicationSchema,
    FeaturesSchema,
    ObservabilitySchema,
)


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """AsyncSession stand-in; ``add`` stays synchronous like the real one."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_app_config() -> MagicMock:
    """
    Config with detailed errors on, request logging off and no browser client.

    Patch it in where the code under test calls ``get_app_config``::

        with patch("noteshub.backend.api.health.get_app_config", return_value=mock_app_config):
            ...
    """
    config = MagicMock()
    config.application = ApplicationSchema(
        name="NotesHub Test",
        version="1.0.0",
        description="Catalog of programs, semesters and notes",
        environment="test",
        debug=True,
        api_prefix="/api",
        docs_enabled=False,
        server={"host": "127.0.0.1", "port": 8080},
        cors={"origins": []},
        pagination={"default_limit": 10, "max_limit": 100},
        frontend={"enabled": False},
    )
    config.features = FeaturesSchema(api_detailed_errors=True, api_request_logging=False)
    config.observability = ObservabilitySchema(health_checks={"ready_timeout_seconds": 5})
    return config


@pytest.fixture
def mock_logger() -> MagicMock:
    return MagicMock()
