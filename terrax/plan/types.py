"""Plan review data: per-resource changes, per-stack results and the report tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

CHANGE_CREATE = "create"
CHANGE_UPDATE = "update"
CHANGE_DELETE = "delete"
CHANGE_REPLACE = "replace"
CHANGE_NO_OP = "no-op"


@dataclass(frozen=True)
class StackStats:
    add: int = 0
    change: int = 0
    destroy: int = 0

    def __add__(self, other: StackStats) -> StackStats:
        return StackStats(
            add=self.add + other.add,
            change=self.change + other.change,
            destroy=self.destroy + other.destroy,
        )

    @property
    def total(self) -> int:
        return self.add + self.change + self.destroy


@dataclass(frozen=True)
class ResourceChange:
    """One entry of ``resource_changes`` from ``terraform show -json``."""

    address: str
    type: str
    name: str
    change_type: str
    before: object = None
    after: object = None
    unknown: object = None


@dataclass(frozen=True)
class StackResult:
    stack_path: str
    absolute_path: str
    is_dependency: bool = False
    resource_changes: tuple[ResourceChange, ...] = ()
    stats: StackStats = StackStats()

    @property
    def has_changes(self) -> bool:
        return bool(self.resource_changes)


@dataclass(frozen=True)
class PlanSummary:
    total_stacks: int = 0
    stacks_with_changes: int = 0
    total_add: int = 0
    total_change: int = 0
    total_destroy: int = 0


@dataclass(frozen=True)
class PlanReport:
    timestamp: datetime
    stacks: tuple[StackResult, ...] = ()
    failed: tuple[str, ...] = ()

    @property
    def summary(self) -> PlanSummary:
        changed = [stack for stack in self.stacks if stack.has_changes]
        totals = sum((stack.stats for stack in self.stacks), StackStats())
        return PlanSummary(
            total_stacks=len(self.stacks),
            stacks_with_changes=len(changed),
            total_add=totals.add,
            total_change=totals.change,
            total_destroy=totals.destroy,
        )

    def stats_by_role(self) -> tuple[StackStats, StackStats]:
        """Return ``(target, dependency)`` totals over stacks with changes."""
        target = StackStats()
        dependency = StackStats()
        for stack in self.stacks:
            if not stack.has_changes:
                continue
            if stack.is_dependency:
                dependency += stack.stats
            else:
                target += stack.stats
        return target, dependency


@dataclass
class PlanTreeNode:
    """Directory segment of the report tree; ``stack`` is set where a plan was found."""

    name: str
    path: str
    stats: StackStats = StackStats()
    has_changes: bool = False
    children: list[PlanTreeNode] = field(default_factory=list)
    stack: StackResult | None = None

    @property
    def depth(self) -> int:
        return self.path.count("/")
