"""
VidHub Paginator — page/limit windows over a joined select.

The statement is counted as a subquery (so joins and derived columns are
counted exactly as they are fetched), then offset/limited. A page past the
end yields an empty item list rather than an error.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidhub.core.config import get_settings
from vidhub.core.errors import ValidationError
from vidhub.schemas.schemas import Page

settings = get_settings()

T = TypeVar("T")

DEFAULT_PAGE = 1


@dataclass(frozen=True)
class PageWindow:
    page: int
    limit: int
    total_items: int
    total_pages: int
    offset: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: Optional[int]
    next_page: Optional[int]


def resolve_page_args(page: Optional[int], limit: Optional[int]) -> tuple[int, int]:
    page = DEFAULT_PAGE if page is None else page
    limit = settings.default_page_size if limit is None else limit
    if page < 1:
        raise ValidationError("page must be a positive integer")
    if limit < 1:
        raise ValidationError("limit must be a positive integer")
    if limit > settings.max_page_size:
        raise ValidationError(f"limit must be at most {settings.max_page_size}")
    return page, limit


def page_window(total: int, page: int, limit: int) -> PageWindow:
    total_pages = math.ceil(total / limit)
    has_prev = page > 1
    has_next = page < total_pages
    return PageWindow(
        page=page,
        limit=limit,
        total_items=total,
        total_pages=total_pages,
        offset=(page - 1) * limit,
        has_prev_page=has_prev,
        has_next_page=has_next,
        prev_page=page - 1 if has_prev else None,
        next_page=page + 1 if has_next else None,
    )


async def paginate(
    db: AsyncSession,
    stmt: Select,
    page: Optional[int],
    limit: Optional[int],
    transform: Callable[[Any], T],
) -> Page[T]:
    """Run ``stmt`` for one page and map each row through ``transform``."""
    page, limit = resolve_page_args(page, limit)

    total = await db.scalar(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    ) or 0
    window = page_window(total, page, limit)

    items = []
    if window.offset < total:
        result = await db.execute(stmt.offset(window.offset).limit(limit))
        items = [transform(row) for row in result.all()]

    return Page[Any](
        items=items,
        page=window.page,
        limit=window.limit,
        total_items=window.total_items,
        total_pages=window.total_pages,
        has_next_page=window.has_next_page,
        has_prev_page=window.has_prev_page,
        prev_page=window.prev_page,
        next_page=window.next_page,
    )
