"""Plan review state: a list of changed tree nodes beside a scrollable detail pane."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..columns.model import ResizeEvent
from ..input.keymap import KeyBinding, KeyMap
from .detail import DetailLine, detail_lines
from .tree import build_plan_tree, flatten_tree
from .types import PlanReport, PlanTreeNode, StackStats

FOCUS_LIST = "list"
FOCUS_DETAIL = "detail"

# Header, totals, separator, footer.
PLAN_CHROME_ROWS = 4

PLAN_REVIEW_KEYS = KeyMap(
    KeyBinding("up", ("UP", "k"), "↑↓/jk navigate"),
    KeyBinding("down", ("DOWN", "j")),
    KeyBinding("switch_pane", ("LEFT", "RIGHT", "TAB", "h", "l"), "←→ change pane"),
    KeyBinding("page_up", ("PAGE_UP",), "PgUp/PgDn scroll"),
    KeyBinding("page_down", ("PAGE_DOWN",)),
    KeyBinding("quit", ("q", "ESC", "CTRL_C"), "q/Esc quit"),
)


@dataclass(frozen=True)
class PlanReview:
    report: PlanReport
    items: tuple[PlanTreeNode, ...] = ()
    target_stats: StackStats = StackStats()
    dependency_stats: StackStats = StackStats()
    cursor: int = 0
    detail_offset: int = 0
    focus: str = FOCUS_LIST
    width: int = 0
    height: int = 0
    quit: bool = False

    @classmethod
    def from_report(cls, report: PlanReport) -> PlanReview:
        """Only nodes with changes are listed; totals are split into target and dependencies."""
        items = tuple(node for node in flatten_tree(build_plan_tree(report.stacks)) if node.has_changes)
        target, dependency = report.stats_by_role()
        return cls(report=report, items=items, target_stats=target, dependency_stats=dependency)

    @property
    def done(self) -> bool:
        return self.quit

    @property
    def body_rows(self) -> int:
        return max(1, self.height - PLAN_CHROME_ROWS)

    def current_node(self) -> PlanTreeNode | None:
        if 0 <= self.cursor < len(self.items):
            return self.items[self.cursor]
        return None

    def detail(self) -> list[DetailLine]:
        return detail_lines(self.current_node())

    @property
    def max_detail_offset(self) -> int:
        return max(0, len(self.detail()) - self.body_rows)

    def move_cursor(self, delta: int) -> PlanReview:
        if not self.items:
            return self
        cursor = max(0, min(len(self.items) - 1, self.cursor + delta))
        if cursor == self.cursor:
            return self
        return replace(self, cursor=cursor, detail_offset=0)

    def scroll_detail(self, delta: int) -> PlanReview:
        offset = max(0, min(self.max_detail_offset, self.detail_offset + delta))
        if offset == self.detail_offset:
            return self
        return replace(self, detail_offset=offset)

    def _move(self, delta: int) -> PlanReview:
        if self.focus == FOCUS_LIST:
            return self.move_cursor(delta)
        return self.scroll_detail(delta)

    def resize(self, width: int, height: int) -> PlanReview:
        resized = replace(self, width=width, height=height)
        return replace(resized, detail_offset=min(self.detail_offset, resized.max_detail_offset))

    def handle_key(self, key: str) -> PlanReview:
        action = PLAN_REVIEW_KEYS.action_for(key)
        if action == "up":
            return self._move(-1)
        if action == "down":
            return self._move(1)
        if action == "page_up":
            return self._move(-self.body_rows)
        if action == "page_down":
            return self._move(self.body_rows)
        if action == "switch_pane":
            return replace(self, focus=FOCUS_DETAIL if self.focus == FOCUS_LIST else FOCUS_LIST)
        if action == "quit":
            return replace(self, quit=True)
        return self


def update_plan_review(review: PlanReview, event: str | ResizeEvent) -> PlanReview:
    if review.done:
        return review
    if isinstance(event, ResizeEvent):
        return review.resize(event.width, event.height)
    return review.handle_key(event)
