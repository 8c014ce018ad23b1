"""Client-side pagination for the manager tables."""
from __future__ import annotations

import math
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_BUTTONS = 5


def total_pages(total_rows: int, page_size: int) -> int:
    """Return ``max(1, ceil(total_rows / page_size))``."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return max(1, math.ceil(max(total_rows, 0) / page_size))


def page_window(page: int, pages: int, max_buttons: int = MAX_PAGE_BUTTONS) -> List[int]:
    """Return the page numbers to show as buttons, centered on ``page``.

    When the centered window would run past ``pages`` it is shifted left so
    it ends on the last page, never starting before 1.
    """
    start = max(1, page - max_buttons // 2)
    end = start + max_buttons - 1
    if end > pages:
        end = pages
        start = max(1, end - max_buttons + 1)
    return list(range(start, end + 1))


def slice_bounds(page: int, page_size: int, total_rows: int) -> Tuple[int, int]:
    """Return the ``[start, stop)`` row indices of ``page``."""
    start = (page - 1) * page_size
    return start, min(start + page_size, total_rows)


class Paginator:
    """Current-page state for one table.

    The stored page is only changed by :meth:`go_to`; a shrinking row count
    does not reset it. Reads clamp it into ``[1, total_pages]``.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self._page = 1
        self._total = 0

    @property
    def total_rows(self) -> int:
        return self._total

    @property
    def total_pages(self) -> int:
        return total_pages(self._total, self.page_size)

    @property
    def requested_page(self) -> int:
        return self._page

    @property
    def page(self) -> int:
        return min(max(1, self._page), self.total_pages)

    def set_total(self, total_rows: int) -> None:
        self._total = max(0, total_rows)

    def go_to(self, page: int) -> bool:
        """Move to ``page``; out-of-range requests are ignored."""
        if page < 1 or page > self.total_pages:
            return False
        self._page = page
        return True

    def next(self) -> bool:
        return self.go_to(self.page + 1)

    def previous(self) -> bool:
        return self.go_to(self.page - 1)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def window(self) -> List[int]:
        return page_window(self.page, self.total_pages)

    def bounds(self) -> Tuple[int, int]:
        return slice_bounds(self.page, self.page_size, self._total)

    def slice(self, rows: Sequence[T]) -> List[T]:
        self.set_total(len(rows))
        start, stop = self.bounds()
        return list(rows[start:stop])

    def summary(self) -> str:
        if self._total == 0:
            return "0 items"
        start, stop = self.bounds()
        return f"{start + 1}–{stop} of {self._total}"


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_BUTTONS",
    "Paginator",
    "page_window",
    "slice_bounds",
    "total_pages",
]
