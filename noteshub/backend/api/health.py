"""
Health Check Endpoints.

Provides liveness and readiness checks.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (database reachable)
"""

import asyncio
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from noteshub.backend.core.config import get_app_config
from noteshub.backend.core.dependencies import DbSession
from noteshub.backend.core.logging import get_logger
from noteshub.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database(session: AsyncSession) -> dict[str, Any]:
    """
    Check database connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    start = utc_now()
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {
            "status": "unhealthy",
            "error": str(e),
        }

    latency_ms = int((utc_now() - start).total_seconds() * 1000)
    return {
        "status": "healthy",
        "latency_ms": latency_ms,
    }


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running.
    No dependency checks - this endpoint should always respond quickly.
    """
    return {"status": "healthy"}


@router.get("/health/ready", response_model=None)
async def readiness_check(db: DbSession) -> dict[str, Any] | JSONResponse:
    """
    Readiness check.

    Returns 200 if the database answers within the configured timeout,
    503 otherwise.
    """
    timeout = get_app_config().observability.health_checks.ready_timeout_seconds

    try:
        async with asyncio.timeout(timeout):
            db_result = await check_database(db)
    except TimeoutError:
        db_result = {"status": "unhealthy", "error": f"no answer within {timeout}s"}

    checks = {"database": db_result}
    body = {
        "status": db_result["status"],
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }

    if db_result["status"] != "healthy":
        logger.warning("Readiness check failed", extra={"checks": checks})
        return JSONResponse(status_code=503, content=body)

    return body
