"""Frame composition for the plan review: node list on the left, diff on the right."""

from __future__ import annotations

from ..ansi import clip_ansi_line, pad_to_width, truncate_text
from ..plan.detail import KIND_ADD, KIND_CHANGE, KIND_DESTROY, KIND_MUTED, KIND_TITLE, stats_kind
from ..plan.review import FOCUS_LIST, PLAN_REVIEW_KEYS, PlanReview
from ..plan.types import PlanTreeNode, StackStats
from ..ui_theme import DEFAULT_THEME, UITheme
from .chrome import build_status_line, selected_with_ansi, styled

PLAN_HEADER = "TerraX  Plan review"
NO_CHANGES_TEXT = "No changes to display."
PANE_DIVIDER = " │ "
LIST_WIDTH_RATIO = 3
MIN_LIST_WIDTH = 16
DEPENDENCY_TAG = " [dep]"


def _kind_style(kind: str, theme: UITheme) -> str:
    return {
        KIND_TITLE: theme.header,
        KIND_ADD: theme.plan_add,
        KIND_CHANGE: theme.plan_change,
        KIND_DESTROY: theme.plan_destroy,
        KIND_MUTED: theme.plan_muted,
    }.get(kind, "")


def _stats_text(stats: StackStats, theme: UITheme) -> str:
    parts = []
    for sign, count, style in (
        ("+", stats.add, theme.plan_add),
        ("~", stats.change, theme.plan_change),
        ("-", stats.destroy, theme.plan_destroy),
    ):
        text = f"{sign}{count}"
        parts.append(styled(text, style) if count > 0 else text)
    return " ".join(parts)


def visible_range(total: int, cursor: int, rows: int) -> tuple[int, int]:
    """Window of ``rows`` items centred on ``cursor`` and clamped to ``[0, total)``."""
    if total <= rows:
        return 0, total
    start = max(0, cursor - rows // 2)
    end = min(total, start + rows)
    return max(0, end - rows), end


def _node_icon(node: PlanTreeNode) -> str:
    stats = node.stats
    if not node.has_changes:
        return " "
    if stats.add > 0 and stats.destroy > 0:
        return "~"
    if stats.add > 0:
        return "+"
    if stats.destroy > 0:
        return "-"
    return "~"


def _list_cell(review: PlanReview, index: int, theme: UITheme, width: int) -> str:
    node = review.items[index]
    label = f"{'  ' * node.depth}{_node_icon(node)} {node.name}"
    if node.stack is not None and node.stack.is_dependency:
        label += DEPENDENCY_TAG
    text = pad_to_width(truncate_text(label, width), width)
    if index == review.cursor:
        if review.focus == FOCUS_LIST:
            return selected_with_ansi(text)
        return styled(text, theme.selected_unfocused)
    style = theme.item if node.stack is None else _kind_style(stats_kind(node.stats), theme)
    return styled(text, style)


def render_plan_review_frame(review: PlanReview, theme: UITheme = DEFAULT_THEME) -> list[str]:
    """Compose the review screen for ``review``; returns one string per row."""
    width = max(1, review.width)
    list_width = max(MIN_LIST_WIDTH, width // LIST_WIDTH_RATIO)
    detail_width = max(1, width - list_width - len(PANE_DIVIDER) - 1)
    rows = review.body_rows

    lines = [clip_ansi_line(styled(PLAN_HEADER, theme.header), width)]
    totals = (
        f"Target: {_stats_text(review.target_stats, theme)} | "
        f"Deps: {_stats_text(review.dependency_stats, theme)}"
    )
    failed = len(review.report.failed)
    if failed:
        totals += styled(f" | {failed} failed", theme.history_failure)
    lines.append(clip_ansi_line(totals, width))
    lines.append(styled("─" * max(0, width - 1), theme.divider))

    start, end = visible_range(len(review.items), review.cursor, rows)
    left = [_list_cell(review, index, theme, list_width) for index in range(start, end)]
    if not review.items:
        left = [pad_to_width(styled(truncate_text(NO_CHANGES_TEXT, list_width), theme.footer), list_width)]
    left += [" " * list_width] * (rows - len(left))

    detail = review.detail()[review.detail_offset : review.detail_offset + rows]
    right = [styled(truncate_text(text, detail_width), _kind_style(kind, theme)) for kind, text in detail]
    right += [""] * (rows - len(right))

    divider = styled(PANE_DIVIDER, theme.divider)
    for left_cell, right_cell in zip(left, right):
        lines.append(clip_ansi_line(left_cell + divider + right_cell, width))

    position = f"{review.cursor + 1}/{len(review.items)} " if review.items else "0/0 "
    lines.append(styled(build_status_line(PLAN_REVIEW_KEYS.hints(), width, position), theme.footer))
    return lines
