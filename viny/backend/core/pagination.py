"""
Pagination Utilities.

Offset pagination for list endpoints.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Query
from pydantic import BaseModel

from viny.backend.core.config import get_app_config
from viny.backend.schemas.base import PaginatedResponse, PaginationInfo, ResponseMetadata

MAX_LIMIT = 100


@dataclass
class PaginationParams:
    """Pagination parameters extracted from query string."""

    limit: int
    offset: int


def get_pagination_params(
    limit: int | None = Query(
        default=None,
        ge=1,
        le=MAX_LIMIT,
        description="Maximum number of items to return (1-100, default 50)",
    ),
    offset: int = Query(
        default=0,
        ge=0,
        description="Number of items to skip",
    ),
) -> PaginationParams:
    """
    FastAPI dependency for pagination parameters.

    Usage:
        @router.get("/items")
        async def list_items(
            pagination: PaginationParams = Depends(get_pagination_params),
        ):
            ...
    """
    if limit is None:
        limit = get_app_config().application.pagination.default_limit
    return PaginationParams(limit=limit, offset=offset)


def create_paginated_response(
    items: list[Any],
    item_schema: type[BaseModel],
    total: int,
    limit: int,
    offset: int,
    request_id: str | None = None,
) -> dict[str, Any]:
    """
    Create a standardized paginated response.

    ``hasMore`` is true while ``offset + limit`` has not reached ``total``.

    Args:
        items: List of items (model instances or dicts)
        item_schema: Pydantic schema to validate items
        total: Total count of matching items
        limit: Page size limit
        offset: Current offset
        request_id: Request ID for metadata

    Returns:
        Dict matching PaginatedResponse structure
    """
    response = PaginatedResponse(
        data=[item_schema.model_validate(item) for item in items],
        pagination=PaginationInfo(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )
    return response.model_dump(mode="json", by_alias=True)
