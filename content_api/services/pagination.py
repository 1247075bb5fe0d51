"""Pagination math for post listings: pure functions, no I/O."""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from content_api.models.blog import PageMeta

T = TypeVar("T")

# Landing-page teaser always shows the newest few posts
TEASER_SIZE = 5


@dataclass
class Page(Generic[T]):
    """The visible window of a listing plus its page metadata."""

    items: list[T] = field(default_factory=list)
    current_page: int = 1
    page_size: int = 1
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size)

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    def meta(self) -> PageMeta:
        return PageMeta(
            page=self.current_page,
            limit=self.page_size,
            total=self.total_items,
            total_pages=self.total_pages,
            has_next=self.has_next,
            has_prev=self.has_prev,
        )


def paginate(items: Sequence[T], page_size: int, current_page: int = 1) -> Page[T]:
    """Slice *items* to the 1-indexed *current_page* of *page_size* entries.

    A page past the end yields an empty window rather than an error.

    Raises:
        ValueError: If page_size or current_page is less than 1.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    if current_page < 1:
        raise ValueError(f"current_page must be >= 1, got {current_page}")

    start = (current_page - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        current_page=current_page,
        page_size=page_size,
        total_items=len(items),
    )


def teaser(items: Sequence[T], size: int = TEASER_SIZE) -> Page[T]:
    """First page of *items* at the teaser size, whatever page the caller is on."""
    return paginate(items, size, 1)
