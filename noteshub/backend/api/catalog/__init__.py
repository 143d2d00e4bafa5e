"""
Catalog API Router.

Aggregates the program, semester and note routers under the API prefix
and serves the discovery document at the prefix root.
"""

from typing import Any

from fastapi import APIRouter

from noteshub.backend.api.catalog.endpoints import notes, programs, semesters
from noteshub.backend.core.config import get_app_config

router = APIRouter()


@router.get("", summary="API discovery", tags=["meta"])
async def api_root() -> dict[str, Any]:
    """Describe the API and list its resource endpoints."""
    app_settings = get_app_config().application
    prefix = app_settings.api_prefix
    return {
        "message": f"{app_settings.name} API",
        "version": app_settings.version,
        "endpoints": {
            "programs": f"{prefix}/programs",
            "semesters": f"{prefix}/semesters",
            "notes": f"{prefix}/notes",
        },
    }


router.include_router(programs.router, prefix="/programs", tags=["programs"])
router.include_router(semesters.router, prefix="/semesters", tags=["semesters"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
