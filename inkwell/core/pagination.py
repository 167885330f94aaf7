"""Pagination — page/limit resolution and the pagination envelope.

Invariants:
    - page >= 1, 1 <= limit <= MAX_PAGE_SIZE after resolution
    - offset = (page - 1) * limit
    - total_pages = ceil(total / limit)
"""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from inkwell.core.domain_types import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageMeta:
    total: int
    page: int
    limit: int
    total_pages: int


@dataclass
class Page(Generic[T]):
    """A bounded slice of results plus its envelope."""
    items: list[T]
    meta: PageMeta


def resolve_page(page: int | None = None, limit: int | None = None) -> PageRequest:
    """Apply defaults and clamp out-of-range values."""
    resolved_page = page if page and page > 0 else DEFAULT_PAGE
    resolved_limit = limit if limit and limit > 0 else DEFAULT_PAGE_SIZE
    return PageRequest(resolved_page, min(resolved_limit, MAX_PAGE_SIZE))


def build_page_meta(total: int, request: PageRequest) -> PageMeta:
    return PageMeta(
        total=total,
        page=request.page,
        limit=request.limit,
        total_pages=math.ceil(total / request.limit),
    )
