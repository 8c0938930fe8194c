"""Stack tree model: scanning, immutable node types and selection navigation.

Nothing in this package knows about terminals; it is shared by the column
engine, the renderer and the CLI.
"""

from __future__ import annotations

from .builder import (
    SKIPPED_DIRECTORY_NAMES,
    STACK_MARKER_FILE,
    build_stack_tree,
    is_stack_directory,
    should_skip_directory,
)
from .navigator import NavigationState, Navigator
from .types import STACK_MARKER, StackNode, StackTree

__all__ = [
    "STACK_MARKER",
    "STACK_MARKER_FILE",
    "SKIPPED_DIRECTORY_NAMES",
    "StackNode",
    "StackTree",
    "NavigationState",
    "Navigator",
    "build_stack_tree",
    "is_stack_directory",
    "should_skip_directory",
]
