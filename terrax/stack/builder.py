"""Filesystem scan that turns a project directory into a ``StackTree``.

Only directories that hold a ``terragrunt.hcl`` file, or have such a
directory somewhere below them, make it into the tree. Hidden directories and
tool caches are never descended into.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .types import StackNode, StackTree

logger = logging.getLogger(__name__)

STACK_MARKER_FILE = "terragrunt.hcl"
SKIPPED_DIRECTORY_NAMES = frozenset(
    {
        ".git",
        ".terraform",
        ".terragrunt-cache",
        "vendor",
        ".idea",
        ".vscode",
    }
)


def is_stack_directory(path: Path) -> bool:
    """Return whether ``path`` holds the stack marker file."""
    return (path / STACK_MARKER_FILE).is_file()


def should_skip_directory(name: str) -> bool:
    """Return whether a directory name is excluded from scanning."""
    return name.startswith(".") or name in SKIPPED_DIRECTORY_NAMES


def _list_subdirectories(path: Path) -> list[Path]:
    """Return visible child directories sorted by name; unreadable dirs yield none."""
    try:
        with os.scandir(path) as it:
            entries = [entry for entry in it if entry.is_dir(follow_symlinks=False)]
    except OSError as exc:
        logger.debug("skipping unreadable directory %s: %s", path, exc)
        return []
    names = sorted(entry.name for entry in entries if not should_skip_directory(entry.name))
    return [path / name for name in names]


def _build_node(path: Path, depth: int) -> tuple[StackNode, int]:
    """Build the subtree rooted at ``path`` and report its deepest kept depth."""
    children: list[StackNode] = []
    deepest = depth
    for child_path in _list_subdirectories(path):
        child, child_deepest = _build_node(child_path, depth + 1)
        if not (child.is_stack or child.children):
            continue
        children.append(child)
        deepest = max(deepest, child_deepest)

    node = StackNode(
        name=path.name or str(path),
        path=path,
        is_stack=is_stack_directory(path),
        depth=depth,
        children=tuple(children),
    )
    return node, deepest


def build_stack_tree(root_dir: Path | str) -> StackTree:
    """Scan ``root_dir`` and return the stack tree below it.

    Raises ``FileNotFoundError`` when the directory does not exist and
    ``NotADirectoryError`` when it points at a file.
    """
    if str(root_dir) == "":
        raise ValueError("root directory cannot be empty")
    root_path = Path(root_dir).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Path not found: {root_path}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"{root_path} is not a directory")

    root, max_depth = _build_node(root_path, 0)
    logger.debug("scanned %s: max depth %d", root_path, max_depth)
    return StackTree(root=root, max_depth=max_depth)
