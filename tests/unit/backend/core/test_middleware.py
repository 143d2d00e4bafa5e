"""
Unit Tests for Request Context Middleware.

Tests the RequestContextMiddleware functionality including:
- Request ID generation and propagation
- Frontend extraction from X-Frontend-ID header
- Response timing headers
- Structlog context binding
"""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request
from starlette.responses import Response

from noteshub.backend.core.middleware import RequestContextMiddleware


class TestRequestContextMiddleware:
    """Tests for RequestContextMiddleware."""

    @pytest.fixture
    def middleware(self):
        """Create middleware instance."""
        return RequestContextMiddleware(MagicMock())

    @pytest.fixture
    def mock_request(self):
        """Create a mock request."""
        request = MagicMock(spec=Request)
        request.headers = {}
        request.method = "GET"
        request.url = MagicMock()
        request.url.path = "/api/programs"
        request.client = MagicMock()
        request.client.host = "127.0.0.1"
        request.state = MagicMock()
        return request

    @staticmethod
    async def ok(request):
        return Response(content="OK", status_code=200)

    # -------------------------------------------------------------------------
    # Frontend (X-Frontend-ID) Tests
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("header", "expected"),
        [("web", "web"), ("CLI", "cli"), ("telegram", "unknown"), (None, "unknown")],
    )
    async def test_frontend_recognized_or_unknown(self, middleware, mock_request, header, expected):
        """Should keep known frontends (any case) and map the rest to unknown."""
        if header is not None:
            mock_request.headers = {"X-Frontend-ID": header}

        with patch("noteshub.backend.core.middleware.structlog.contextvars") as ctx:
            await middleware.dispatch(mock_request, self.ok)

        assert mock_request.state.frontend == expected
        assert ctx.bind_contextvars.call_args.kwargs["frontend"] == expected

    # -------------------------------------------------------------------------
    # Request ID Tests
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_generates_request_id_when_not_provided(self, middleware, mock_request):
        """Should generate a UUID request ID."""
        with patch("noteshub.backend.core.middleware.structlog.contextvars"):
            response = await middleware.dispatch(mock_request, self.ok)

        request_id = response.headers["X-Request-ID"]
        assert len(request_id) == 36
        assert mock_request.state.request_id == request_id

    @pytest.mark.asyncio
    async def test_uses_provided_request_id(self, middleware, mock_request):
        """Should propagate the caller's request ID."""
        mock_request.headers = {"X-Request-ID": "custom-id-123"}

        with patch("noteshub.backend.core.middleware.structlog.contextvars"):
            response = await middleware.dispatch(mock_request, self.ok)

        assert response.headers["X-Request-ID"] == "custom-id-123"

    # -------------------------------------------------------------------------
    # Timing and Context Tests
    # -------------------------------------------------------------------------

    @pytest.mark.asyncio
    async def test_adds_response_time_header(self, middleware, mock_request):
        """Should add X-Response-Time in milliseconds."""
        with patch("noteshub.backend.core.middleware.structlog.contextvars"):
            response = await middleware.dispatch(mock_request, self.ok)

        assert response.headers["X-Response-Time"].endswith("ms")

    @pytest.mark.asyncio
    async def test_binds_context_to_structlog(self, middleware, mock_request):
        """Should bind request fields for every log line of the request."""
        mock_request.headers = {"X-Request-ID": "ctx-1"}

        with patch("noteshub.backend.core.middleware.structlog.contextvars") as ctx:
            await middleware.dispatch(mock_request, self.ok)

        ctx.bind_contextvars.assert_called_once_with(
            request_id="ctx-1",
            frontend="unknown",
            method="GET",
            path="/api/programs",
        )

    @pytest.mark.asyncio
    async def test_clears_context_on_exception(self, middleware, mock_request):
        """Should clear context and re-raise when the handler fails."""

        async def call_next(request):
            raise RuntimeError("boom")

        with patch("noteshub.backend.core.middleware.structlog.contextvars") as ctx:
            with pytest.raises(RuntimeError, match="boom"):
                await middleware.dispatch(mock_request, call_next)

        assert ctx.clear_contextvars.call_count == 2

    @pytest.mark.asyncio
    async def test_handles_missing_client(self, middleware, mock_request):
        """Should not fail when the client address is unknown."""
        mock_request.client = None

        with patch("noteshub.backend.core.middleware.structlog.contextvars"):
            response = await middleware.dispatch(mock_request, self.ok)

        assert response.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("enabled", "level"), [(True, "info"), (False, "debug")])
    async def test_request_logging_level(self, mock_request, mock_logger, enabled, level):
        """Should log request lifecycle at INFO only when enabled."""
        middleware = RequestContextMiddleware(MagicMock(), request_logging=enabled)

        with (
            patch("noteshub.backend.core.middleware.structlog.contextvars"),
            patch("noteshub.backend.core.middleware.logger", mock_logger),
        ):
            await middleware.dispatch(mock_request, self.ok)

        assert getattr(mock_logger, level).call_count == 2
