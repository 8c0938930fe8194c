"""Geometry for the column browser.

The frame is, top to bottom: header, breadcrumb bar, then the columns (title
row, separator row, items, page-indicator row), then the footer. Columns sit
side by side with a two-cell gutter on each side for overflow arrows.
"""

from __future__ import annotations

from dataclasses import dataclass

HEADER_ROWS = 1
BREADCRUMB_ROWS = 1
COLUMN_TITLE_ROWS = 1
COLUMN_SEPARATOR_ROWS = 1
PAGE_INDICATOR_ROWS = 1
FOOTER_ROWS = 1
CHROME_ROWS = (
    HEADER_ROWS
    + BREADCRUMB_ROWS
    + COLUMN_TITLE_ROWS
    + COLUMN_SEPARATOR_ROWS
    + PAGE_INDICATOR_ROWS
    + FOOTER_ROWS
)

OVERFLOW_GUTTER_WIDTH = 2
MIN_COLUMN_WIDTH = 20
CURSOR_WIDTH = 2
MIN_ITEM_TEXT_WIDTH = 10


def compute_column_width(width: int, max_visible_nav_columns: int) -> int:
    """Return the static width shared by the commands column and each nav column."""
    column_count = 1 + max(1, max_visible_nav_columns)
    available = width - 2 * OVERFLOW_GUTTER_WIDTH
    return max(MIN_COLUMN_WIDTH, available // column_count)


def compute_visible_items(height: int) -> int:
    """Return how many list rows fit in a column at terminal ``height``."""
    return max(1, height - CHROME_ROWS)


def max_item_text_width(column_width: int) -> int:
    """Return the room left for item text after the selection cursor."""
    return max(MIN_ITEM_TEXT_WIDTH, column_width - CURSOR_WIDTH - 1)


@dataclass(frozen=True)
class ColumnLayout:
    """Derived layout for one terminal size."""

    width: int = 0
    height: int = 0
    column_width: int = MIN_COLUMN_WIDTH
    visible_items: int = 1

    @classmethod
    def for_size(cls, width: int, height: int, max_visible_nav_columns: int) -> ColumnLayout:
        return cls(
            width=max(0, width),
            height=max(0, height),
            column_width=compute_column_width(width, max_visible_nav_columns),
            visible_items=compute_visible_items(height),
        )

    @property
    def ready(self) -> bool:
        return self.width > 0 and self.height > 0
