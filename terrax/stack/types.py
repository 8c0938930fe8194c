"""Stack tree datatypes shared by the scanner, navigator and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

STACK_MARKER = " 📦"


@dataclass(frozen=True)
class StackNode:
    """One directory in the stack tree.

    ``children`` is already in display order; nodes are never mutated after
    the scanner builds them.
    """

    name: str
    path: Path
    is_stack: bool = False
    depth: int = 0
    children: tuple[StackNode, ...] = field(default=(), repr=False)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def label(self) -> str:
        """Column label: directory name plus a marker for stack directories."""
        return self.name + STACK_MARKER if self.is_stack else self.name


@dataclass(frozen=True)
class StackTree:
    """Scanned tree root plus the deepest descendant level below it."""

    root: StackNode
    max_depth: int
