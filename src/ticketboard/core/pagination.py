"""Pagination for the agents grid and the one-at-a-time department carousel.

Pages and department indices are 1-based.
"""

from __future__ import annotations

import math
from typing import Sequence, TypeVar

T = TypeVar("T")

PAGE_SIZE = 15


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    if count <= 0:
        return 0
    return math.ceil(count / page_size)


def reset_page(current_page: int, pages: int) -> int:
    """Back to page 1 once the current page falls off the end. Never clamps."""
    if current_page > pages or current_page < 1:
        return 1
    return current_page


def page_bounds(count: int, page: int, page_size: int = PAGE_SIZE) -> tuple[int, int]:
    start = max(page - 1, 0) * page_size
    end = min(start + page_size, count)
    return start, max(end, start)


def page_slice(items: Sequence[T], page: int, page_size: int = PAGE_SIZE) -> list[T]:
    start, end = page_bounds(len(items), page, page_size)
    return list(items[start:end])


def next_page(current_page: int, pages: int) -> int:
    """Advance one page, wrapping from the last page to page 1."""
    return current_page + 1 if current_page < pages else 1


def next_department(index: int, selected_count: int) -> int:
    if selected_count <= 0:
        return 1
    return index + 1 if index < selected_count else 1


def previous_department(index: int, selected_count: int) -> int:
    if selected_count <= 0:
        return 1
    return index - 1 if index > 1 else selected_count


def reset_department_index(index: int, selected_count: int) -> int:
    """Back to 1 when the selection shrinks below the current index."""
    if selected_count > 0 and index > selected_count:
        return 1
    return max(index, 1)


def current_department(selected: Sequence[T], index: int) -> list[T]:
    """The single visible department, as a 0- or 1-element list."""
    if not selected:
        return []
    return list(selected[index - 1:index])
