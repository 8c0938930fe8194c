"""Selection-path navigation over an immutable stack tree.

``NavigationState`` holds one selected index per depth plus the sibling nodes
visible at each depth. ``Navigator`` is a stateless helper bound to a tree
root: it recomputes columns after a selection changes and resolves the node
chain a selection path implies. Nothing here raises on malformed state; lookups
degrade to ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .types import StackNode


@dataclass
class NavigationState:
    """Per-session column contents and selected index for each tree depth."""

    columns: list[list[StackNode]] = field(default_factory=list)
    selected_indices: list[int] = field(default_factory=list)

    @classmethod
    def empty(cls, max_depth: int) -> NavigationState:
        depth_count = max(0, max_depth)
        return cls(
            columns=[[] for _ in range(depth_count)],
            selected_indices=[0] * depth_count,
        )

    def copy(self) -> NavigationState:
        """Return an independent copy; nodes themselves are shared (immutable)."""
        return NavigationState(
            columns=[list(column) for column in self.columns],
            selected_indices=list(self.selected_indices),
        )

    @property
    def depth_count(self) -> int:
        return len(self.columns)

    def column(self, depth: int) -> list[StackNode]:
        if 0 <= depth < len(self.columns):
            return self.columns[depth]
        return []

    def selected_index(self, depth: int) -> int:
        if 0 <= depth < len(self.selected_indices):
            return self.selected_indices[depth]
        return 0


class Navigator:
    """Tree traversal and path resolution for a ``NavigationState``."""

    def __init__(self, root: StackNode | None, max_depth: int) -> None:
        self.root = root
        self.max_depth = max(0, max_depth)

    def new_state(self) -> NavigationState:
        """Create a state sized for this tree with depth 0 already populated."""
        state = NavigationState.empty(self.max_depth)
        self.propagate_selection(state)
        return state

    def get_root(self) -> StackNode | None:
        return self.root

    def _clear_columns_from(self, state: NavigationState, start_depth: int) -> None:
        for depth in range(max(0, start_depth), min(self.max_depth, state.depth_count)):
            state.columns[depth] = []
            state.selected_indices[depth] = 0

    def propagate_selection(
        self,
        state: NavigationState,
        changed_depth: int | None = None,
    ) -> StackNode | None:
        """Recompute columns along the selection path and return its deepest node.

        Depths strictly below ``changed_depth`` restart at index 0 because their
        columns were just replaced. Without ``changed_depth`` stale indices are
        only clamped back to 0 when they fall outside their column.
        """
        if self.root is None or self.max_depth == 0:
            return None

        current: StackNode | None = self.root
        depth_limit = min(self.max_depth, state.depth_count)
        for depth in range(depth_limit):
            if current is None or not current.has_children:
                self._clear_columns_from(state, depth)
                return current

            children = list(current.children)
            state.columns[depth] = children
            if changed_depth is not None and depth > changed_depth:
                state.selected_indices[depth] = 0
            elif not (0 <= state.selected_indices[depth] < len(children)):
                state.selected_indices[depth] = 0
            current = children[state.selected_indices[depth]]
        return current

    def get_node_at_depth(self, state: NavigationState, depth: int) -> StackNode | None:
        """Return the selected node at ``depth`` or ``None`` when nothing is selected there."""
        if depth < 0 or depth >= self.max_depth:
            return None
        column = state.column(depth)
        index = state.selected_index(depth)
        if 0 <= index < len(column):
            return column[index]
        return None

    def get_max_visible_depth(self, state: NavigationState) -> int:
        """Return how many navigation columns currently have content (1-based)."""
        for depth in range(min(self.max_depth, state.depth_count) - 1, -1, -1):
            if state.columns[depth]:
                return depth + 1
        return 0

    def can_advance_further(self, state: NavigationState, depth: int) -> bool:
        node = self.get_node_at_depth(state, depth)
        return node is not None and node.has_children

    def get_navigation_path(self, state: NavigationState, depth: int) -> Path | None:
        """Build the breadcrumb path from root through selections up to ``depth``."""
        if self.root is None:
            return None
        path = self.root.path
        if depth < 0 or self.max_depth == 0:
            return path
        for current_depth in range(min(depth + 1, state.depth_count)):
            node = self.get_node_at_depth(state, current_depth)
            if node is None:
                break
            path = path / node.name
        return path
