"""
Pagination helpers shared by the list endpoints.

Pages are zero-based: page 0 with size 10 covers items 0..9.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from newsletter_api.core.config import settings
from newsletter_api.models.base import MAX_RECORD_ID
from newsletter_api.schemas.base import PaginatedResponse

# Offsets must fit a signed 64-bit database integer
MAX_PAGE = MAX_RECORD_ID // settings.MAX_PAGE_SIZE


class PageFilter(BaseModel):
    page: int = Field(0, ge=0)
    size: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1)
    name: Optional[str] = None
    user_id: Optional[int] = None

    @property
    def offset(self) -> int:
        return self.page * self.size


def get_filter(page: Optional[int] = None, size: Optional[int] = None) -> PageFilter:
    """Build a filter from raw query values, clamping the size to MAX_PAGE_SIZE."""
    page = page if page is not None and page >= 0 else 0
    size = size if size is not None and size > 0 else settings.DEFAULT_PAGE_SIZE
    return PageFilter(page=page, size=min(size, settings.MAX_PAGE_SIZE))


def get_paging_data(result: tuple[Sequence[Any], int], page: int, size: int) -> PaginatedResponse:
    rows, total = result
    return PaginatedResponse(
        items=list(rows),
        total_items=total,
        total_pages=math.ceil(total / size) if size else 0,
        current_page=page,
        size=size,
    )


def get_paging_data_for_single(entity: Any, page: int, size: int) -> PaginatedResponse:
    """Wrap one entity as a one-item, one-page result."""
    return PaginatedResponse(
        items=[entity] if page == 0 else [],
        total_items=1,
        total_pages=1,
        current_page=page,
        size=size,
    )
