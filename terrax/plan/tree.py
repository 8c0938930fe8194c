"""Fold flat stack results into a directory tree with aggregated change counts."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePath

from .types import PlanTreeNode, StackResult, StackStats


def _path_parts(stack_path: str) -> list[str]:
    return [part for part in PurePath(stack_path).parts if part not in ("", "/", ".")]


def _aggregate(node: PlanTreeNode) -> None:
    stats = node.stack.stats if node.stack is not None else StackStats()
    has_changes = node.stack.has_changes if node.stack is not None else False
    for child in node.children:
        _aggregate(child)
        stats += child.stats
        has_changes = has_changes or child.has_changes
    node.stats = stats
    node.has_changes = has_changes


def _sort(nodes: list[PlanTreeNode]) -> None:
    nodes.sort(key=lambda node: node.name)
    for node in nodes:
        _sort(node.children)


def build_plan_tree(stacks: Iterable[StackResult]) -> list[PlanTreeNode]:
    """Return the sorted root nodes for ``stacks``.

    A node that carries a stack may also have children when plans were found
    in nested directories; its stats then include both.
    """
    roots: list[PlanTreeNode] = []
    for stack in stacks:
        parts = _path_parts(stack.stack_path) or ["."]
        siblings = roots
        node: PlanTreeNode | None = None
        for depth, part in enumerate(parts):
            node = next((candidate for candidate in siblings if candidate.name == part), None)
            if node is None:
                node = PlanTreeNode(name=part, path="/".join(parts[: depth + 1]))
                siblings.append(node)
            siblings = node.children
        if node is not None:
            node.stack = stack

    _sort(roots)
    for root in roots:
        _aggregate(root)
    return roots


def flatten_tree(nodes: Iterable[PlanTreeNode]) -> list[PlanTreeNode]:
    """Depth-first, parents before their children."""
    items: list[PlanTreeNode] = []
    for node in nodes:
        items.append(node)
        items.extend(flatten_tree(node.children))
    return items
