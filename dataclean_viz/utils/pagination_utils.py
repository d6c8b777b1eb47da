# Pagination helpers for the dashboard table
import math
from typing import Sequence, TypeVar

T = TypeVar("T")


def page_count(total: int, page_size: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / page_size)


def paginate(seq: Sequence[T], page: int, page_size: int) -> Sequence[T]:
    start = max(page, 0) * page_size
    return seq[start:start + page_size]


class Paginator:
    """Page index over a sequence whose length may change between reruns."""

    def __init__(self, page_size: int = 10):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self.page = 0
        self.total = 0

    def bind(self, total: int) -> None:
        """Point at a new result set of length ``total`` and go back to the first page."""
        self.total = total
        self.reset()

    def reset(self) -> None:
        self.page = 0

    @property
    def page_count(self) -> int:
        return page_count(self.total, self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count - 1

    def next(self) -> int:
        self.page = max(0, min(self.page + 1, self.page_count - 1))
        return self.page

    def previous(self) -> int:
        self.page = max(0, self.page - 1)
        return self.page

    def slice(self, seq: Sequence[T]) -> Sequence[T]:
        return paginate(seq, self.page, self.page_size)
