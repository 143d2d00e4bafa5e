"""
Exception Handlers.

Turn every failure into the NotesHub error envelope:

    {"success": false, "data": null, "error": "<message>",
     "errorCode": "<KIND>", "details": {...} | null, "metadata": {...}}

``error`` stays a plain message string; ``errorCode`` lets clients branch
on the kind of failure without parsing that message.
"""

import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from noteshub.backend.core.exceptions import (
    ApplicationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from noteshub.backend.core.logging import get_logger
from noteshub.backend.schemas.base import ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

# Conflicts share 400 with validation failures; errorCode tells them apart.
EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    ConflictError: 400,
    DatabaseError: 500,
}


def _get_request_id(request: Request) -> str | None:
    """Request ID set by the middleware, else the incoming header."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _error_response(
    status_code: int,
    code: str,
    message: str,
    request_id: str | None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    response = ErrorResponse(
        error=message,
        error_code=code,
        details=details,
        metadata=ResponseMetadata(request_id=request_id),
    )
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json", by_alias=True),
    )


def _detailed_errors_enabled() -> bool:
    """Whether 500 responses may include exception details."""
    try:
        from noteshub.backend.core.config import get_app_config

        return get_app_config().features.api_detailed_errors
    except (RuntimeError, FileNotFoundError, ValueError):
        return False


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """Render service-level errors (not found, conflict, validation, storage)."""
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    request_id = _get_request_id(request)

    log_extra = {
        "code": exc.code,
        "message": exc.message,
        "status": status_code,
        "path": request.url.path,
        "method": request.method,
    }
    if request_id:
        log_extra["request_id"] = request_id

    if status_code >= 500:
        logger.error("Server error", extra=log_extra)
    else:
        logger.warning("Client error", extra=log_extra)

    details = exc.details if isinstance(exc, ValidationError) and exc.details else None
    return _error_response(status_code, exc.code, exc.message, request_id, details)


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Render body and query validation failures as 400 VAL_REQUEST_INVALID.

    The message names the first offending field, e.g.
    ``Request validation failed: body.code: Field required``.
    """
    request_id = _get_request_id(request)

    errors = exc.errors()
    validation_errors = [
        {
            "field": ".".join(str(loc) for loc in err.get("loc", [])),
            "message": err.get("msg", "Validation error"),
            "type": err.get("type", "unknown"),
        }
        for err in errors
    ]

    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": len(errors),
            "request_id": request_id,
        },
    )

    message = "Request validation failed"
    if validation_errors:
        first = validation_errors[0]
        message = f"{message}: {first['field']}: {first['message']}"

    return _error_response(
        400,
        "VAL_REQUEST_INVALID",
        message,
        request_id,
        {"validation_errors": validation_errors},
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Unknown paths answer 404 "Route not found"; other statuses pass through."""
    request_id = _get_request_id(request)

    if exc.status_code == 404:
        code, message = "RES_ROUTE_NOT_FOUND", "Route not found"
    else:
        code, message = f"HTTP_{exc.status_code}", str(exc.detail)

    logger.warning(
        "HTTP error",
        extra={
            "status": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )

    response = _error_response(exc.status_code, code, message, request_id)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Last-resort 500.

    The exception text, type and traceback reach the client only when
    features.api_detailed_errors is on.
    """
    request_id = _get_request_id(request)

    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "request_id": request_id,
        },
    )

    message = "An unexpected error occurred"
    details = None
    if _detailed_errors_enabled():
        message = str(exc) or message
        details = {
            "exceptionType": type(exc).__name__,
            "traceback": traceback.format_exception(exc),
        }

    return _error_response(500, "SYS_INTERNAL_ERROR", message, request_id, details)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the NotesHub handlers on a FastAPI app."""
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
