"""Text for the detail pane of the plan review.

Lines are ``(kind, text)`` pairs; the renderer maps each kind to a colour so
the review model can measure the pane without knowing about ANSI styles.
"""

from __future__ import annotations

import json

from .types import (
    CHANGE_CREATE,
    CHANGE_DELETE,
    CHANGE_REPLACE,
    CHANGE_UPDATE,
    PlanTreeNode,
    ResourceChange,
    StackStats,
)

KIND_TITLE = "title"
KIND_PLAIN = "plain"
KIND_MUTED = "muted"
KIND_ADD = "add"
KIND_CHANGE = "change"
KIND_DESTROY = "destroy"

KNOWN_AFTER_APPLY = "(known after apply)"
ATTRIBUTE_INDENT = "    "

DetailLine = tuple[str, str]

_CHANGE_MARKERS = {
    CHANGE_CREATE: ("+", KIND_ADD),
    CHANGE_DELETE: ("-", KIND_DESTROY),
    CHANGE_UPDATE: ("~", KIND_CHANGE),
    CHANGE_REPLACE: ("-/+", KIND_CHANGE),
}


def stats_kind(stats: StackStats) -> str:
    if stats.add > 0:
        return KIND_ADD
    if stats.destroy > 0:
        return KIND_DESTROY
    return KIND_CHANGE


def format_value(value: object) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True)


def _as_dict(value: object) -> dict:
    return value if isinstance(value, dict) else {}


def attribute_lines(change: ResourceChange) -> list[DetailLine]:
    """Per-attribute diff of ``change``, sorted by attribute name."""
    before = _as_dict(change.before)
    after = _as_dict(change.after)
    unknown = _as_dict(change.unknown)
    lines: list[DetailLine] = []
    for key in sorted(set(before) | set(after) | set(unknown)):
        if key.startswith("_"):
            continue
        in_before = key in before
        in_after = key in after
        is_unknown = unknown.get(key) is True
        if in_before and is_unknown:
            lines.append((KIND_CHANGE, f"{ATTRIBUTE_INDENT}{key}: {format_value(before[key])} -> {KNOWN_AFTER_APPLY}"))
        elif is_unknown:
            lines.append((KIND_ADD, f"{ATTRIBUTE_INDENT}+ {key}: {KNOWN_AFTER_APPLY}"))
        elif in_before and in_after:
            old, new = format_value(before[key]), format_value(after[key])
            if old != new:
                lines.append((KIND_CHANGE, f"{ATTRIBUTE_INDENT}{key}: {old} -> {new}"))
            else:
                lines.append((KIND_MUTED, f"{ATTRIBUTE_INDENT}{key}: {old}"))
        elif in_after:
            lines.append((KIND_ADD, f"{ATTRIBUTE_INDENT}+ {key}: {format_value(after[key])}"))
        elif in_before:
            lines.append((KIND_DESTROY, f"{ATTRIBUTE_INDENT}- {key}: {format_value(before[key])}"))
    return lines


def detail_lines(node: PlanTreeNode | None) -> list[DetailLine]:
    """Lines describing ``node``: resource diffs for a stack, child totals for a directory."""
    if node is None:
        return [(KIND_MUTED, "Select an item to view details")]
    stats = node.stats
    lines: list[DetailLine] = [
        (KIND_TITLE, f"Plan: {node.path}"),
        (KIND_PLAIN, f"Add: {stats.add}, Change: {stats.change}, Destroy: {stats.destroy}"),
        (KIND_PLAIN, ""),
    ]
    if not node.has_changes:
        lines.append((KIND_MUTED, "No changes."))
        return lines

    if node.stack is not None:
        for change in node.stack.resource_changes:
            marker, kind = _CHANGE_MARKERS.get(change.change_type, ("~", KIND_CHANGE))
            lines.append((kind, f"{marker} {change.address} ({change.type})"))
            attributes = attribute_lines(change)
            if attributes:
                lines.extend(attributes)
                lines.append((KIND_PLAIN, ""))
        return lines

    lines.append((KIND_PLAIN, "Directory Summary:"))
    lines.append((KIND_PLAIN, ""))
    for child in node.children:
        if not child.has_changes:
            continue
        child_stats = child.stats
        lines.append(
            (
                stats_kind(child_stats),
                f"- {child.name} (Add: {child_stats.add}, Change: {child_stats.change}, "
                f"Destroy: {child_stats.destroy})",
            )
        )
    return lines
