"""Column browser engine: pagination, filtering, layout and the state machine."""

from __future__ import annotations

from .filtering import (
    FILTER_CHAR_LIMIT,
    ColumnFilter,
    FilteredView,
    apply_filter,
    filter_positions,
    find_filtered_index,
    find_original_index,
)
from .layout import ColumnLayout, compute_column_width, compute_visible_items
from .model import (
    COMMANDS_COLUMN,
    FILTER_EDITING_KEYS,
    MODE_FILTER_EDITING,
    MODE_NAVIGATING,
    NAVIGATION_KEYS,
    NavigationModel,
    NavigationResult,
    ResizeEvent,
    update,
)
from .pagination import current_page, paginated_range, total_pages

__all__ = [
    "COMMANDS_COLUMN",
    "FILTER_CHAR_LIMIT",
    "FILTER_EDITING_KEYS",
    "MODE_FILTER_EDITING",
    "MODE_NAVIGATING",
    "NAVIGATION_KEYS",
    "ColumnFilter",
    "ColumnLayout",
    "FilteredView",
    "NavigationModel",
    "NavigationResult",
    "ResizeEvent",
    "apply_filter",
    "compute_column_width",
    "compute_visible_items",
    "current_page",
    "filter_positions",
    "find_filtered_index",
    "find_original_index",
    "paginated_range",
    "total_pages",
    "update",
]
