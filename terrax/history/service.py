"""Project-aware history queries on top of a ``FileRepository``.

A project root is the nearest ancestor directory holding the root config file
(``root.hcl`` by default). History entries are grouped by that root.
"""

from __future__ import annotations

import getpass
import logging
import os
from pathlib import Path

from .repository import FileRepository
from .types import ExecutionLogEntry

logger = logging.getLogger(__name__)


def find_project_root(start_path: str | Path, root_config_file: str) -> Path | None:
    """Walk up from ``start_path`` to the first directory containing ``root_config_file``."""
    current = Path(os.path.abspath(start_path))
    if current.exists() and not current.is_dir():
        current = current.parent
    while True:
        if (current / root_config_file).exists():
            return current
        if current.parent == current:
            return None
        current = current.parent


def relative_stack_path(absolute_path: str | Path, root_config_file: str) -> str:
    """Return ``absolute_path`` relative to its project root, or unchanged outside a project."""
    absolute = Path(os.path.abspath(absolute_path))
    project_root = find_project_root(absolute, root_config_file)
    if project_root is None:
        return str(absolute_path)
    relative = os.path.relpath(absolute, project_root)
    if relative.startswith(".."):
        return str(absolute_path)
    return relative


def current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def _resolved(path: str | Path) -> Path:
    try:
        return Path(path).resolve()
    except (OSError, RuntimeError):
        return Path(os.path.normpath(path))


def has_path_prefix(path: str | Path, prefix: str | Path) -> bool:
    """Return whether ``path`` equals ``prefix`` or lies below it, after resolving symlinks."""
    resolved_path = _resolved(path)
    resolved_prefix = _resolved(prefix)
    return resolved_path == resolved_prefix or resolved_prefix in resolved_path.parents


class HistoryService:
    def __init__(self, repository: FileRepository, root_config_file: str) -> None:
        self.repository = repository
        self.root_config_file = root_config_file

    def append(self, entry: ExecutionLogEntry) -> None:
        self.repository.append(entry)

    def load_all(self) -> list[ExecutionLogEntry]:
        return self.repository.load_all()

    def trim(self, max_entries: int) -> None:
        self.repository.trim(max_entries)

    def next_id(self) -> int:
        return self.repository.next_id()

    def filter_by_current_project(
        self,
        entries: list[ExecutionLogEntry],
        cwd: Path | None = None,
    ) -> list[ExecutionLogEntry]:
        """Keep entries under the project enclosing ``cwd``; outside a project keep all."""
        start = cwd if cwd is not None else Path.cwd()
        project_root = find_project_root(start, self.root_config_file)
        if project_root is None:
            logger.debug("no %s above %s; history is not filtered", self.root_config_file, start)
            return list(entries)
        return [
            entry
            for entry in entries
            if entry.absolute_path and has_path_prefix(entry.absolute_path, project_root)
        ]

    def last_execution_for_project(self, cwd: Path | None = None) -> ExecutionLogEntry | None:
        entries = self.filter_by_current_project(self.load_all(), cwd)
        return entries[0] if entries else None
