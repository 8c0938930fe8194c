"""Collect the binary plans written by one terrax run and decode them.

``terragrunt run --all -- plan`` is invoked with ``-out=<session plan file>``,
so every stack (and every dependency terragrunt pulled in) leaves a plan
inside its ``.terragrunt-cache``. The collector finds the plans of the
current session, runs ``terraform show -json`` on each of them in parallel
and builds a ``PlanReport``.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ..defaults import DEFAULT_PLAN_PARALLELISM, DEFAULT_ROOT_CONFIG_FILE
from ..history.service import find_project_root, has_path_prefix, relative_stack_path
from .types import (
    CHANGE_CREATE,
    CHANGE_DELETE,
    CHANGE_NO_OP,
    CHANGE_REPLACE,
    CHANGE_UPDATE,
    PlanReport,
    ResourceChange,
    StackResult,
    StackStats,
)

logger = logging.getLogger(__name__)

TERRAFORM_BINARY = "terraform"
TERRAGRUNT_CACHE_DIR = ".terragrunt-cache"
PLAN_FILE_PREFIX = "terrax-tfplan-"
PLAN_FILE_SUFFIX = ".binary"
SKIPPED_DIRS = frozenset({".git", "node_modules", ".idea", ".vscode"})


def session_plan_filename(session_id: int) -> str:
    return f"{PLAN_FILE_PREFIX}{session_id}{PLAN_FILE_SUFFIX}"


def map_actions_to_change_type(actions: list[str] | tuple[str, ...]) -> str:
    """Collapse terraform's ``change.actions`` list into one change kind."""
    if not actions or list(actions) == [CHANGE_NO_OP]:
        return CHANGE_NO_OP
    if CHANGE_CREATE in actions and CHANGE_DELETE in actions:
        return CHANGE_REPLACE
    if CHANGE_CREATE in actions:
        return CHANGE_CREATE
    if CHANGE_DELETE in actions:
        return CHANGE_DELETE
    if CHANGE_UPDATE in actions:
        return CHANGE_UPDATE
    return CHANGE_NO_OP


def clean_stack_path(path: str | Path) -> Path:
    """Drop ``.terragrunt-cache`` and everything below it from ``path``."""
    parts = Path(path).parts
    if TERRAGRUNT_CACHE_DIR in parts:
        return Path(*parts[: parts.index(TERRAGRUNT_CACHE_DIR)])
    return Path(path)


def parse_plan_json(payload: dict, stack_path: str, absolute_path: str, is_dependency: bool) -> StackResult:
    """Build a ``StackResult`` from decoded ``terraform show -json`` output; no-ops are dropped."""
    changes: list[ResourceChange] = []
    stats = StackStats()
    for raw in payload.get("resource_changes") or ():
        change = raw.get("change") or {}
        change_type = map_actions_to_change_type(change.get("actions") or ())
        if change_type == CHANGE_NO_OP:
            continue
        changes.append(
            ResourceChange(
                address=str(raw.get("address", "")),
                type=str(raw.get("type", "")),
                name=str(raw.get("name", "")),
                change_type=change_type,
                before=change.get("before"),
                after=change.get("after"),
                unknown=change.get("after_unknown"),
            )
        )
        if change_type == CHANGE_CREATE:
            stats += StackStats(add=1)
        elif change_type == CHANGE_DELETE:
            stats += StackStats(destroy=1)
        elif change_type == CHANGE_UPDATE:
            stats += StackStats(change=1)
        else:
            stats += StackStats(add=1, destroy=1)
    return StackResult(
        stack_path=stack_path,
        absolute_path=absolute_path,
        is_dependency=is_dependency,
        resource_changes=tuple(changes),
        stats=stats,
    )


def _walk_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=lambda exc: None):
        dirnames[:] = [name for name in dirnames if name not in SKIPPED_DIRS]
        for filename in filenames:
            yield Path(dirpath) / filename


def _inside_cache(path: Path) -> bool:
    return TERRAGRUNT_CACHE_DIR in path.parts


@dataclass(frozen=True)
class CollectProgress:
    """One progress notification; ``total`` is 0 until plan files were found."""

    current: int
    total: int
    message: str


class PlanCollector:
    def __init__(
        self,
        run_dir: str | Path,
        session_id: int,
        root_config_file: str = DEFAULT_ROOT_CONFIG_FILE,
        parallelism: int = 0,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.run_dir = Path(run_dir)
        self.session_id = session_id
        self.root_config_file = root_config_file
        self.parallelism = parallelism if parallelism > 0 else DEFAULT_PLAN_PARALLELISM
        self.runner = runner
        # Dependencies may live outside run_dir, so plans are searched project-wide.
        self.project_root = find_project_root(self.run_dir, root_config_file) or self.run_dir

    @property
    def plan_filename(self) -> str:
        return session_plan_filename(self.session_id)

    def find_plan_files(self) -> list[Path]:
        """Plans of this session that live inside a terragrunt cache, in walk order."""
        return [
            path
            for path in _walk_files(self.project_root)
            if path.name == self.plan_filename and _inside_cache(path)
        ]

    def cleanup_old_plans(self) -> int:
        """Delete cached terrax plans from earlier sessions; returns how many were removed."""
        removed = 0
        for path in _walk_files(self.project_root):
            name = path.name
            if not (name.startswith(PLAN_FILE_PREFIX) and name.endswith(PLAN_FILE_SUFFIX)):
                continue
            if name == self.plan_filename or not _inside_cache(path):
                continue
            try:
                path.unlink()
            except OSError as exc:
                logger.warning("failed to delete old plan %s: %s", path, exc)
                continue
            removed += 1
        return removed

    def process_stack(self, plan_path: Path) -> StackResult:
        """Decode one plan; raises ``RuntimeError`` or ``ValueError`` when it cannot be read."""
        plan_dir = plan_path.parent
        stack_dir = clean_stack_path(plan_dir)
        try:
            completed = self.runner(
                [TERRAFORM_BINARY, "show", "-json", plan_path.name],
                cwd=str(plan_dir),
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise RuntimeError(f"{TERRAFORM_BINARY} not found on PATH") from exc
        if completed.returncode != 0:
            detail = (completed.stderr or "").strip().splitlines()
            raise RuntimeError(f"terraform show failed: {detail[-1] if detail else completed.returncode}")
        try:
            payload = json.loads(completed.stdout)
        except json.JSONDecodeError as exc:
            raise ValueError(f"failed to parse plan json: {exc}") from exc
        if not isinstance(payload, dict):
            raise ValueError("plan json is not an object")
        return parse_plan_json(
            payload,
            stack_path=relative_stack_path(stack_dir, self.root_config_file),
            absolute_path=str(stack_dir),
            is_dependency=not has_path_prefix(stack_dir, self.run_dir),
        )

    def collect(self, progress: Callable[[CollectProgress], None] | None = None) -> PlanReport:
        """Decode every plan of this session; stacks that fail are logged and listed in ``failed``."""
        notify = progress or (lambda update: None)
        notify(CollectProgress(0, 0, "Scanning for plan files..."))
        plan_files = self.find_plan_files()
        started_at = datetime.now(timezone.utc)
        if not plan_files:
            return PlanReport(timestamp=started_at)

        total = len(plan_files)
        notify(CollectProgress(0, total, f"Found {total} plans"))
        stacks: list[StackResult] = []
        failed: list[str] = []
        max_workers = min(self.parallelism, total)
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="terrax-plan") as executor:
            futures = {executor.submit(self.process_stack, path): path for path in plan_files}
            for done, future in enumerate(as_completed(futures), start=1):
                path = futures[future]
                try:
                    result = future.result()
                except (RuntimeError, ValueError, OSError) as exc:
                    logger.warning("process %s: %s", path, exc)
                    failed.append(str(clean_stack_path(path.parent)))
                    notify(CollectProgress(done, total, "Error processing stack"))
                    continue
                stacks.append(result)
                notify(CollectProgress(done, total, f"Processed {result.stack_path}"))

        stacks.sort(key=lambda stack: stack.stack_path)
        return PlanReport(timestamp=started_at, stacks=tuple(stacks), failed=tuple(sorted(failed)))
