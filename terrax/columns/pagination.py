"""Page math for column lists.

All helpers are pure and clamp instead of raising. Positions are indices into
whatever list a column currently shows (full or filtered).
"""

from __future__ import annotations


def paginated_range(scroll_offset: int, page_size: int, total_items: int) -> tuple[int, int]:
    """Return the ``[start, end)`` slice of items visible at ``scroll_offset``.

    When the offset is past the end, ``start`` falls back to 0 while ``end``
    keeps the bound derived from the original offset.
    """
    scroll_offset = max(0, scroll_offset)
    start = scroll_offset
    end = min(scroll_offset + max(0, page_size), max(0, total_items))
    if start >= total_items:
        start = 0
    return start, end


def current_page(scroll_offset: int, page_size: int) -> int:
    """Return the 1-based page number that starts at or contains ``scroll_offset``."""
    if page_size <= 0:
        return 1
    return max(0, scroll_offset) // page_size + 1


def total_pages(total_items: int, page_size: int) -> int:
    """Return how many pages ``total_items`` needs (0 for an empty list)."""
    if total_items <= 0:
        return 0
    if page_size <= 0:
        return 1
    return (total_items + page_size - 1) // page_size


def page_start_index(page: int, page_size: int) -> int:
    """Return the first item index of 1-based ``page``."""
    if page <= 1:
        return 0
    return (page - 1) * max(0, page_size)


def page_offset_for(index: int, page_size: int) -> int:
    """Return the scroll offset of the page holding ``index``."""
    if index <= 0 or page_size <= 0:
        return 0
    return (index // page_size) * page_size


def step_selection(
    position: int,
    scroll_offset: int,
    page_size: int,
    total: int,
    direction: int,
) -> tuple[int, int]:
    """Move one item up (``direction < 0``) or down with page-boundary semantics.

    Crossing the edge of the current page jumps to the adjacent page and moves
    the scroll offset with it. Crossing the edge of the whole list wraps to the
    other end.
    """
    if total <= 0 or direction == 0:
        return position, scroll_offset
    page_size = max(1, page_size)
    position = max(0, min(position, total - 1))
    page = current_page(scroll_offset, page_size)
    pages = total_pages(total, page_size)
    page_start = page_start_index(page, page_size)

    if direction < 0:
        if position == 0:
            return total - 1, page_start_index(pages, page_size)
        if position == page_start and page > 1:
            previous_start = page_start_index(page - 1, page_size)
            return min(previous_start + page_size - 1, total - 1), previous_start
        return position - 1, scroll_offset

    if position == total - 1:
        return 0, 0
    page_end = min(page_start + page_size - 1, total - 1)
    if position == page_end and page < pages:
        next_start = page_start_index(page + 1, page_size)
        return next_start, next_start
    return position + 1, scroll_offset


def page_selection(position: int, page_size: int, total: int, direction: int) -> tuple[int, int]:
    """Jump a whole page up or down, clamped to the list; returns ``(position, scroll_offset)``."""
    if total <= 0:
        return 0, 0
    page_size = max(1, page_size)
    step = page_size if direction > 0 else -page_size
    target = max(0, min(total - 1, position + step))
    return target, page_offset_for(target, page_size)
