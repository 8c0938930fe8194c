"""History browser state: a cyclic cursor over past executions."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..columns.model import ResizeEvent
from ..input.keymap import KeyBinding, KeyMap
from .types import ExecutionLogEntry

# Header, column titles, separator, footer.
HISTORY_CHROME_ROWS = 4

HISTORY_KEYS = KeyMap(
    KeyBinding("up", ("UP", "k"), "↑↓/jk move"),
    KeyBinding("down", ("DOWN", "j")),
    KeyBinding("select", ("ENTER",), "Enter re-run"),
    KeyBinding("quit", ("q", "ESC", "CTRL_C"), "q/Esc back"),
)


@dataclass(frozen=True)
class HistoryBrowser:
    entries: tuple[ExecutionLogEntry, ...] = ()
    cursor: int = 0
    scroll_offset: int = 0
    width: int = 0
    height: int = 0
    selected: ExecutionLogEntry | None = None
    quit: bool = False

    @property
    def done(self) -> bool:
        return self.quit or self.selected is not None

    @property
    def visible_rows(self) -> int:
        return max(1, self.height - HISTORY_CHROME_ROWS)

    def current_entry(self) -> ExecutionLogEntry | None:
        if 0 <= self.cursor < len(self.entries):
            return self.entries[self.cursor]
        return None

    def _with_cursor(self, cursor: int) -> HistoryBrowser:
        scroll = self.scroll_offset
        if cursor < scroll:
            scroll = cursor
        elif cursor >= scroll + self.visible_rows:
            scroll = cursor - self.visible_rows + 1
        return replace(self, cursor=cursor, scroll_offset=max(0, scroll))

    def move(self, direction: int) -> HistoryBrowser:
        if not self.entries:
            return self
        return self._with_cursor((self.cursor + direction) % len(self.entries))

    def resize(self, width: int, height: int) -> HistoryBrowser:
        return replace(self, width=width, height=height)._with_cursor(self.cursor)

    def handle_key(self, key: str) -> HistoryBrowser:
        action = HISTORY_KEYS.action_for(key)
        if action == "up":
            return self.move(-1)
        if action == "down":
            return self.move(1)
        if action == "select":
            return replace(self, selected=self.current_entry())
        if action == "quit":
            return replace(self, quit=True)
        return self


def update_history(browser: HistoryBrowser, event: str | ResizeEvent) -> HistoryBrowser:
    """Return the browser that results from applying ``event``; finished browsers are unchanged."""
    if browser.done:
        return browser
    if isinstance(event, ResizeEvent):
        return browser.resize(event.width, event.height)
    return browser.handle_key(event)
