"""Plan review: collect the plans of one run, fold them into a tree, browse the diff."""

from __future__ import annotations

from .collector import (
    CollectProgress,
    PlanCollector,
    clean_stack_path,
    map_actions_to_change_type,
    parse_plan_json,
    session_plan_filename,
)
from .review import PLAN_REVIEW_KEYS, PlanReview, update_plan_review
from .tree import build_plan_tree, flatten_tree
from .types import PlanReport, PlanSummary, PlanTreeNode, ResourceChange, StackResult, StackStats

__all__ = [
    "CollectProgress",
    "PLAN_REVIEW_KEYS",
    "PlanCollector",
    "PlanReport",
    "PlanReview",
    "PlanSummary",
    "PlanTreeNode",
    "ResourceChange",
    "StackResult",
    "StackStats",
    "build_plan_tree",
    "clean_stack_path",
    "flatten_tree",
    "map_actions_to_change_type",
    "parse_plan_json",
    "session_plan_filename",
    "update_plan_review",
]
