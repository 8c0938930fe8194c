"""Execution history: JSONL persistence, project filtering and the browser model."""

from __future__ import annotations

from .browser import HistoryBrowser, update_history
from .repository import FileRepository
from .service import (
    HistoryService,
    current_user,
    find_project_root,
    has_path_prefix,
    relative_stack_path,
)
from .types import ExecutionLogEntry

__all__ = [
    "ExecutionLogEntry",
    "FileRepository",
    "HistoryBrowser",
    "HistoryService",
    "current_user",
    "find_project_root",
    "has_path_prefix",
    "relative_stack_path",
    "update_history",
]
