"""
FastAPI Application Entry Point.

This is the main entry point for the NotesHub backend application.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from noteshub.backend.api import health
from noteshub.backend.api.catalog import router as catalog_router
from noteshub.backend.core.config import get_app_config
from noteshub.backend.core.database import dispose_engine
from noteshub.backend.core.exception_handlers import register_exception_handlers
from noteshub.backend.core.logging import get_logger, setup_logging
from noteshub.backend.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)

FRONTEND_DIR = Path(__file__).resolve().parents[1] / "frontend" / "static"

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging()

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
        },
    )
    yield
    await dispose_engine()
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.docs_enabled else None,
        redoc_url="/redoc" if app_settings.docs_enabled else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        RequestContextMiddleware,
        request_logging=app_config.features.api_request_logging,
    )

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(catalog_router, prefix=app_settings.api_prefix)

    if app_settings.frontend.enabled:
        _mount_frontend(app)

    return app


def _mount_frontend(app: FastAPI) -> None:
    """Serve the browser client: the HTML shell at / and its assets under /static."""
    index_file = FRONTEND_DIR / "index.html"

    @app.get("/", include_in_schema=False)
    async def frontend_index() -> FileResponse:
        return FileResponse(index_file)

    app.mount("/static", StaticFiles(directory=FRONTEND_DIR), name="static")
    logger.debug("Frontend mounted", extra={"directory": str(FRONTEND_DIR)})


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn noteshub.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
