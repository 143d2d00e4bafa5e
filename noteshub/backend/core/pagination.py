"""
Pagination Utilities.

Page-number pagination for list endpoints: query parameter parsing,
result container, and the standard paginated response builder.
"""

import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel

from noteshub.backend.schemas.base import PaginatedResponse, PaginationInfo, ResponseMetadata

T = TypeVar("T")


# =============================================================================
# Pagination Parameters
# =============================================================================


@dataclass
class PaginationParams:
    """Pagination parameters extracted from query string."""

    page: int
    limit: int

    @property
    def offset(self) -> int:
        """Number of items skipped before the current page."""
        return (self.page - 1) * self.limit


def get_pagination_params(
    page: int = Query(
        default=1,
        ge=1,
        description="1-based page number",
    ),
    limit: int | None = Query(
        default=None,
        ge=1,
        description="Maximum number of items per page",
    ),
) -> PaginationParams:
    """
    FastAPI dependency for pagination parameters.

    The default page size and its upper bound come from the pagination
    section of application.yaml. Larger limits are clamped, not rejected.

    Usage:
        @router.get("/items")
        async def list_items(
            pagination: PaginationParams = Depends(get_pagination_params),
        ):
            ...
    """
    from noteshub.backend.core.config import get_app_config

    settings = get_app_config().application.pagination
    effective_limit = min(limit or settings.default_limit, settings.max_limit)
    return PaginationParams(page=page, limit=effective_limit)


# =============================================================================
# Paginated Result Builder
# =============================================================================


@dataclass
class PagedResult(Generic[T]):
    """
    Result container for paginated queries.

    Contains the items and pagination metadata needed to build
    a PaginatedResponse.
    """

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        """Number of pages; an empty result still has one page."""
        return max(1, math.ceil(self.total / self.limit))

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    def to_info(self) -> PaginationInfo:
        """Build the wire pagination block."""
        return PaginationInfo(
            page=self.page,
            limit=self.limit,
            total_docs=self.total,
            total_pages=self.total_pages,
            has_next_page=self.has_next_page,
            has_prev_page=self.has_prev_page,
        )


def create_paginated_response(
    result: PagedResult[Any],
    item_schema: type[BaseModel],
    request_id: str | None = None,
) -> dict[str, Any]:
    """
    Create a standardized paginated response.

    Args:
        result: Page of items plus total count
        item_schema: Pydantic schema to validate items
        request_id: Request ID for metadata

    Returns:
        Dict matching PaginatedResponse structure, camelCase keys

    Usage:
        return create_paginated_response(
            result=page,
            item_schema=NoteResponse,
            request_id=request_id,
        )
    """
    validated_items = [
        item_schema.model_validate(item).model_dump(mode="json", by_alias=True)
        for item in result.items
    ]

    response = PaginatedResponse(
        data=validated_items,
        pagination=result.to_info(),
        metadata=ResponseMetadata(request_id=request_id),
    )

    return response.model_dump(mode="json", by_alias=True)


# =============================================================================
# Pagination Helper for Repositories
# =============================================================================


async def paginate_query(
    query_func: Callable[[int, int], Awaitable[list[T]]],
    count_func: Callable[[], Awaitable[int]],
    params: PaginationParams,
) -> PagedResult[T]:
    """
    Execute a paginated query.

    Args:
        query_func: Async function that takes (limit, offset) and returns items
        count_func: Async function that returns the total matching count
        params: Pagination parameters

    Returns:
        PagedResult with items and pagination metadata

    Usage:
        result = await paginate_query(
            query_func=lambda limit, offset: repo.search(filters, limit, offset),
            count_func=lambda: repo.count_matching(filters),
            params=pagination,
        )
    """
    total = await count_func()
    items = await query_func(params.limit, params.offset)

    return PagedResult(
        items=items,
        total=total,
        page=params.page,
        limit=params.limit,
    )
