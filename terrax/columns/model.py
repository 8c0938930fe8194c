"""Column browser state machine.

``update(model, event)`` returns a new model; handlers only ever mutate a
private copy. Column id 0 is the commands column and id ``d + 1`` shows the
stack tree at depth ``d``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Union

from ..defaults import DEFAULT_COMMANDS, DEFAULT_MAX_NAVIGATION_COLUMNS
from ..input.keymap import KeyBinding, KeyMap
from ..stack.navigator import NavigationState, Navigator
from ..stack.types import StackNode, StackTree
from .filtering import ColumnFilter, FilteredView
from .layout import ColumnLayout
from .pagination import page_offset_for, page_selection, step_selection

COMMANDS_COLUMN = 0
NO_ACTIVE_FILTER = -1

MODE_NAVIGATING = "navigating"
MODE_FILTER_EDITING = "filter_editing"

NAVIGATION_KEYS = KeyMap(
    KeyBinding("up", ("UP", "k"), "↑↓/jk move"),
    KeyBinding("down", ("DOWN", "j")),
    KeyBinding("left", ("LEFT", "h"), "←→/hl column"),
    KeyBinding("right", ("RIGHT", "l")),
    KeyBinding("page_up", ("PAGE_UP",), "PgUp/PgDn page"),
    KeyBinding("page_down", ("PAGE_DOWN",)),
    KeyBinding("filter", ("/",), "/ filter"),
    KeyBinding("confirm", ("ENTER",), "Enter run"),
    KeyBinding("quit", ("q", "ESC", "CTRL_C"), "q quit"),
)

# Printable keys not listed here are typed into the filter.
FILTER_EDITING_KEYS = KeyMap(
    KeyBinding("up", ("UP",), "↑↓ move"),
    KeyBinding("down", ("DOWN",)),
    KeyBinding("left", ("LEFT",), "←→ column"),
    KeyBinding("right", ("RIGHT",)),
    KeyBinding("page_up", ("PAGE_UP",)),
    KeyBinding("page_down", ("PAGE_DOWN",)),
    KeyBinding("confirm", ("ENTER",), "Enter run"),
    KeyBinding("clear_filter", ("ESC",), "Esc clear filter"),
    KeyBinding("quit", ("CTRL_C",), "Ctrl+C quit"),
    KeyBinding("backspace", ("BACKSPACE",)),
    KeyBinding("delete", ("DELETE",)),
    KeyBinding("clear_query", ("CTRL_U",)),
    KeyBinding("cursor_home", ("HOME", "CTRL_A")),
    KeyBinding("cursor_end", ("END", "CTRL_E")),
)


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Event = Union[str, ResizeEvent]


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of a finished browsing session."""

    confirmed: bool
    command: str
    stack_path: Path | None = None


def _node_name(node: StackNode) -> str:
    return node.name


@dataclass
class NavigationModel:
    navigator: Navigator
    nav_state: NavigationState
    commands: tuple[str, ...]
    max_visible_nav_columns: int = DEFAULT_MAX_NAVIGATION_COLUMNS
    selected_command: int = 0
    focused_column: int = COMMANDS_COLUMN
    navigation_offset: int = 0
    layout: ColumnLayout = field(default_factory=ColumnLayout)
    scroll_offsets: dict[int, int] = field(default_factory=dict)
    column_filters: dict[int, ColumnFilter] = field(default_factory=dict)
    active_filter_column: int = NO_ACTIVE_FILTER
    confirmed: bool = False
    quit: bool = False
    confirmed_target: StackNode | None = None

    @classmethod
    def create(
        cls,
        tree: StackTree | None,
        commands: tuple[str, ...] | list[str] | None = None,
        max_visible_nav_columns: int = DEFAULT_MAX_NAVIGATION_COLUMNS,
    ) -> NavigationModel:
        """Build the initial model; empty commands or a window below 1 fall back to defaults."""
        command_list = tuple(str(command) for command in (commands or ()) if str(command))
        if not command_list:
            command_list = DEFAULT_COMMANDS
        if not isinstance(max_visible_nav_columns, int) or max_visible_nav_columns < 1:
            max_visible_nav_columns = DEFAULT_MAX_NAVIGATION_COLUMNS

        if tree is None:
            navigator = Navigator(None, 0)
        else:
            navigator = Navigator(tree.root, tree.max_depth)
        return cls(
            navigator=navigator,
            nav_state=navigator.new_state(),
            commands=command_list,
            max_visible_nav_columns=max_visible_nav_columns,
        )

    def copy(self) -> NavigationModel:
        return replace(
            self,
            nav_state=self.nav_state.copy(),
            scroll_offsets=dict(self.scroll_offsets),
            column_filters=dict(self.column_filters),
        )

    # ------------------------------------------------------------------ queries

    @property
    def mode(self) -> str:
        if self.active_filter_column != NO_ACTIVE_FILTER:
            return MODE_FILTER_EDITING
        return MODE_NAVIGATING

    @property
    def done(self) -> bool:
        return self.confirmed or self.quit

    @property
    def page_size(self) -> int:
        return max(1, self.layout.visible_items)

    @property
    def max_visible_depth(self) -> int:
        return self.navigator.get_max_visible_depth(self.nav_state)

    @property
    def column_ids(self) -> list[int]:
        return [COMMANDS_COLUMN] + [depth + 1 for depth in range(self.nav_state.depth_count)]

    @property
    def visible_depths(self) -> range:
        """Navigation depths inside the sliding window that currently have content."""
        end = min(self.navigation_offset + self.max_visible_nav_columns, self.max_visible_depth)
        return range(self.navigation_offset, max(self.navigation_offset, end))

    @property
    def has_left_overflow(self) -> bool:
        return self.navigation_offset > 0

    @property
    def has_right_overflow(self) -> bool:
        """Whether a populated column exists past the right edge of the window."""
        last_depth = self.navigation_offset + self.max_visible_nav_columns - 1
        if last_depth + 1 >= self.navigator.max_depth:
            return False
        return self.navigator.can_advance_further(self.nav_state, last_depth)

    @property
    def selected_command_name(self) -> str:
        if 0 <= self.selected_command < len(self.commands):
            return self.commands[self.selected_command]
        return ""

    def filter_query(self, column_id: int) -> str:
        column_filter = self.column_filters.get(column_id)
        return column_filter.query if column_filter is not None else ""

    def column_nodes(self, column_id: int) -> list[StackNode]:
        if column_id <= COMMANDS_COLUMN:
            return []
        return self.nav_state.column(column_id - 1)

    def filtered_view(self, column_id: int) -> FilteredView:
        """Return the column's items narrowed by its persisted filter."""
        query = self.filter_query(column_id)
        if column_id == COMMANDS_COLUMN:
            return FilteredView.build(self.commands, query)
        return FilteredView.build(self.column_nodes(column_id), query, label=_node_name)

    def selected_full_index(self, column_id: int) -> int:
        if column_id == COMMANDS_COLUMN:
            return self.selected_command
        return self.nav_state.selected_index(column_id - 1)

    def scroll_offset(self, column_id: int) -> int:
        return self.scroll_offsets.get(column_id, 0)

    def current_target(self) -> StackNode | None:
        """Node that Enter would confirm with the current focus."""
        if self.focused_column == COMMANDS_COLUMN:
            return self.navigator.get_root()
        return self.navigator.get_node_at_depth(self.nav_state, self.focused_column - 1)

    def breadcrumb_path(self) -> Path | None:
        """Path from root through the selections up to the focused column."""
        return self.navigator.get_navigation_path(self.nav_state, self.focused_column - 1)

    def result(self) -> NavigationResult:
        target = self.confirmed_target if self.confirmed else None
        return NavigationResult(
            confirmed=self.confirmed,
            command=self.selected_command_name,
            stack_path=target.path if target is not None else None,
        )

    # -------------------------------------------------------------- dispatch

    @property
    def keymap(self) -> KeyMap:
        if self.mode == MODE_FILTER_EDITING:
            return FILTER_EDITING_KEYS
        return NAVIGATION_KEYS

    def handle_key(self, key: str) -> bool:
        """Apply one key token; returns whether the key was consumed."""
        action = self.keymap.action_for(key)
        if action is not None:
            return bool(self._actions()[action]())
        if self.mode == MODE_FILTER_EDITING and len(key) == 1 and key.isprintable():
            return self.edit_filter(lambda column_filter: column_filter.insert(key))
        return False

    def _actions(self) -> dict[str, Callable[[], bool]]:
        return {
            "up": lambda: self.move_vertical(-1),
            "down": lambda: self.move_vertical(1),
            "left": lambda: self.move_horizontal(-1),
            "right": lambda: self.move_horizontal(1),
            "page_up": lambda: self.move_page(-1),
            "page_down": lambda: self.move_page(1),
            "confirm": self.confirm,
            "quit": self.request_quit,
            "filter": self.activate_filter,
            "clear_filter": self.clear_active_filter,
            "backspace": lambda: self.edit_filter(ColumnFilter.backspace),
            "delete": lambda: self.edit_filter(ColumnFilter.delete),
            "clear_query": lambda: self.edit_filter(ColumnFilter.clear),
            "cursor_home": lambda: self.edit_filter(ColumnFilter.cursor_home),
            "cursor_end": lambda: self.edit_filter(ColumnFilter.cursor_end),
        }

    def handle_resize(self, width: int, height: int) -> bool:
        self.layout = ColumnLayout.for_size(width, height, self.max_visible_nav_columns)
        for column_id in self.column_ids:
            self._align_scroll_to_selection(column_id)
        return True

    # ---------------------------------------------------------- transitions

    def move_vertical(self, direction: int) -> bool:
        column_id = self.focused_column
        view = self.filtered_view(column_id)
        if not len(view):
            return False
        selected = self.selected_full_index(column_id)
        if view.is_filtered:
            position = view.filtered_index_of(selected)
            if position < 0:
                self.scroll_offsets[column_id] = 0
                self._select(column_id, view.original_index_of(0))
                return True
        else:
            position = selected

        position, scroll = step_selection(
            position,
            self.scroll_offset(column_id),
            self.page_size,
            len(view),
            direction,
        )
        self.scroll_offsets[column_id] = scroll
        self._select(column_id, view.original_index_of(position))
        return True

    def move_page(self, direction: int) -> bool:
        column_id = self.focused_column
        view = self.filtered_view(column_id)
        if not len(view):
            return False
        position = view.filtered_index_of(self.selected_full_index(column_id))
        position, scroll = page_selection(max(0, position), self.page_size, len(view), direction)
        self.scroll_offsets[column_id] = scroll
        self._select(column_id, view.original_index_of(position))
        return True

    def move_horizontal(self, direction: int) -> bool:
        if self.active_filter_column != NO_ACTIVE_FILTER:
            editing = self.column_filters.get(self.active_filter_column)
            if editing is not None:
                self.column_filters[self.active_filter_column] = editing.blur()
            self.active_filter_column = NO_ACTIVE_FILTER

        if direction < 0:
            self._focus_previous_column()
        else:
            self._focus_next_column()

        persisted = self.column_filters.get(self.focused_column)
        if persisted is not None:
            self.column_filters[self.focused_column] = persisted.focus()
            self.active_filter_column = self.focused_column
        return True

    def _focus_previous_column(self) -> None:
        if self.focused_column > COMMANDS_COLUMN:
            self.focused_column -= 1
            if 0 < self.focused_column < self.navigation_offset + 1:
                self.navigation_offset = max(0, self.navigation_offset - 1)
            return
        max_visible_depth = self.max_visible_depth
        self.focused_column = max_visible_depth
        self.navigation_offset = max(0, max_visible_depth - self.max_visible_nav_columns)

    def _focus_next_column(self) -> None:
        if self.focused_column < self.max_visible_depth:
            self.focused_column += 1
            if self.focused_column - 1 > self.navigation_offset + self.max_visible_nav_columns - 1:
                self.navigation_offset += 1
            return
        self.focused_column = COMMANDS_COLUMN
        self.navigation_offset = 0

    def confirm(self) -> bool:
        target = self.current_target()
        if target is None:
            return False
        self.confirmed = True
        self.confirmed_target = target
        return True

    def request_quit(self) -> bool:
        self.quit = True
        return True

    def activate_filter(self) -> bool:
        column_id = self.focused_column
        column_filter = self.column_filters.get(column_id, ColumnFilter())
        self.column_filters[column_id] = column_filter.focus()
        self.active_filter_column = column_id
        return True

    def clear_active_filter(self) -> bool:
        column_id = self.active_filter_column
        removed = self.column_filters.pop(column_id, None)
        self.active_filter_column = NO_ACTIVE_FILTER
        if removed is not None and removed.query:
            self._align_scroll_to_selection(column_id)
        return True

    def edit_filter(self, edit) -> bool:
        column_id = self.active_filter_column
        before = self.column_filters.get(column_id, ColumnFilter().focus())
        after = edit(before)
        self.column_filters[column_id] = after
        if after.query != before.query:
            self._snap_selection_into_filter(column_id)
        return True

    # ------------------------------------------------------------- helpers

    def _select(self, column_id: int, full_index: int) -> None:
        if full_index < 0:
            return
        if column_id == COMMANDS_COLUMN:
            self.selected_command = full_index
            return
        depth = column_id - 1
        if not 0 <= depth < self.nav_state.depth_count:
            return
        self.nav_state.selected_indices[depth] = full_index
        self.navigator.propagate_selection(self.nav_state, changed_depth=depth)
        self._after_propagation(depth)

    def _after_propagation(self, depth: int) -> None:
        for deeper in range(depth + 1, self.nav_state.depth_count):
            column_id = deeper + 1
            self.scroll_offsets[column_id] = 0
            if not self.filter_query(column_id):
                continue
            view = self.filtered_view(column_id)
            if len(view) and view.filtered_index_of(self.nav_state.selected_indices[deeper]) < 0:
                self.nav_state.selected_indices[deeper] = view.original_index_of(0)
                self.navigator.propagate_selection(self.nav_state, changed_depth=deeper)
        limit = max(0, self.max_visible_depth - self.max_visible_nav_columns)
        self.navigation_offset = max(0, min(self.navigation_offset, limit))

    def _snap_selection_into_filter(self, column_id: int) -> None:
        view = self.filtered_view(column_id)
        if not len(view):
            self.scroll_offsets[column_id] = 0
            return
        position = view.filtered_index_of(self.selected_full_index(column_id))
        if position < 0:
            position = 0
            self._select(column_id, view.original_index_of(0))
        self.scroll_offsets[column_id] = page_offset_for(position, self.page_size)

    def _align_scroll_to_selection(self, column_id: int) -> None:
        view = self.filtered_view(column_id)
        position = view.filtered_index_of(self.selected_full_index(column_id))
        self.scroll_offsets[column_id] = page_offset_for(max(0, position), self.page_size)


def update(model: NavigationModel, event: Event) -> NavigationModel:
    """Return the model that results from applying ``event`` to ``model``.

    Finished models are returned unchanged so later events are ignored.
    """
    if model.done:
        return model
    nxt = model.copy()
    if isinstance(event, ResizeEvent):
        nxt.handle_resize(event.width, event.height)
    else:
        nxt.handle_key(event)
    return nxt
