# Pydantic schemas package
from noteshub.backend.schemas.base import (
    ApiResponse,
    DeleteResult,
    ErrorResponse,
    PaginatedResponse,
    PaginationInfo,
    ResponseMetadata,
)

__all__ = [
    "ApiResponse",
    "DeleteResult",
    "ErrorResponse",
    "PaginatedResponse",
    "PaginationInfo",
    "ResponseMetadata",
]
