"""Per-column substring filters and full/filtered index remapping.

Matching is a case-insensitive substring test on display labels. Remapping
between the full list and a filtered view uses positions in the backing list,
so two items that share a label never get confused.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Generic, TypeVar

T = TypeVar("T")

FILTER_CHAR_LIMIT = 50


def matches_query(label: str, query: str) -> bool:
    """Return whether ``label`` contains ``query`` ignoring case."""
    if not query:
        return True
    return query.casefold() in label.casefold()


def filter_positions(labels: Sequence[str], query: str) -> list[int]:
    """Return positions of ``labels`` that match ``query`` in original order."""
    return [idx for idx, label in enumerate(labels) if matches_query(label, query)]


def apply_filter(items: Sequence[T], query: str, label: Callable[[T], str] = str) -> list[T]:
    """Return the items whose label matches ``query``; empty query keeps everything."""
    if not query:
        return list(items)
    return [items[idx] for idx in filter_positions([label(item) for item in items], query)]


def find_filtered_index(positions: Sequence[int], full_index: int) -> int:
    """Locate full-list ``full_index`` inside a filtered view, or -1 when filtered out."""
    if full_index < 0:
        return -1
    for filtered_index, position in enumerate(positions):
        if position == full_index:
            return filtered_index
    return -1


def find_original_index(positions: Sequence[int], filtered_index: int) -> int:
    """Map a filtered-view index back to the full list, or -1 when out of range."""
    if 0 <= filtered_index < len(positions):
        return positions[filtered_index]
    return -1


@dataclass(frozen=True)
class FilteredView(Generic[T]):
    """A column's items narrowed by a query, remembering where each came from."""

    items: tuple[T, ...]
    positions: tuple[int, ...]
    query: str = ""

    @classmethod
    def build(
        cls,
        full_items: Sequence[T],
        query: str,
        label: Callable[[T], str] = str,
    ) -> FilteredView[T]:
        positions = tuple(filter_positions([label(item) for item in full_items], query))
        return cls(
            items=tuple(full_items[idx] for idx in positions),
            positions=positions,
            query=query,
        )

    @property
    def is_filtered(self) -> bool:
        return bool(self.query)

    def __len__(self) -> int:
        return len(self.positions)

    def filtered_index_of(self, full_index: int) -> int:
        return find_filtered_index(self.positions, full_index)

    def original_index_of(self, filtered_index: int) -> int:
        return find_original_index(self.positions, filtered_index)


@dataclass(frozen=True)
class ColumnFilter:
    """Editable filter prompt attached to one column.

    Every edit returns a new value; ``cursor`` is a character offset into
    ``query``.
    """

    query: str = ""
    cursor: int = 0
    focused: bool = False
    char_limit: int = FILTER_CHAR_LIMIT

    def focus(self) -> ColumnFilter:
        return replace(self, focused=True)

    def blur(self) -> ColumnFilter:
        return replace(self, focused=False)

    def insert(self, text: str) -> ColumnFilter:
        room = max(0, self.char_limit - len(self.query))
        text = "".join(ch for ch in text if ch.isprintable())[:room]
        if not text:
            return self
        cursor = self._clamped_cursor()
        query = self.query[:cursor] + text + self.query[cursor:]
        return replace(self, query=query, cursor=cursor + len(text))

    def backspace(self) -> ColumnFilter:
        cursor = self._clamped_cursor()
        if cursor == 0:
            return self
        query = self.query[: cursor - 1] + self.query[cursor:]
        return replace(self, query=query, cursor=cursor - 1)

    def delete(self) -> ColumnFilter:
        cursor = self._clamped_cursor()
        if cursor >= len(self.query):
            return self
        query = self.query[:cursor] + self.query[cursor + 1 :]
        return replace(self, query=query, cursor=cursor)

    def clear(self) -> ColumnFilter:
        return replace(self, query="", cursor=0)

    def cursor_home(self) -> ColumnFilter:
        return replace(self, cursor=0)

    def cursor_end(self) -> ColumnFilter:
        return replace(self, cursor=len(self.query))

    def _clamped_cursor(self) -> int:
        return max(0, min(self.cursor, len(self.query)))
