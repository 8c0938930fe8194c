"""Run ``terragrunt run --all`` for a selected stack and record the execution.

The argument vector comes entirely from ``TerraxSettings``. History
bookkeeping never changes the command's outcome; failures there are only
logged.
"""

from __future__ import annotations

import logging
import subprocess
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, TextIO

from .defaults import PLAN_COMMAND
from .history.service import HistoryService, current_user, relative_stack_path
from .history.types import ExecutionLogEntry
from .runtime.config import TerraxSettings

logger = logging.getLogger(__name__)

TERRAGRUNT_BINARY = "terragrunt"
COMMAND_NOT_FOUND_EXIT_CODE = 127
SUMMARY_RULE = "═" * 39


def build_terragrunt_args(
    settings: TerraxSettings, stack_path: str | Path, command: str, plan_file: str | None = None
) -> list[str]:
    """Return terragrunt's arguments (without the binary name) for ``command`` on ``stack_path``.

    ``plan_file`` is passed to terraform as ``-out`` when ``command`` is a plan.
    """
    args = ["run", "--all", "--working-dir", str(stack_path)]
    if settings.log_level:
        args += ["--log-level", settings.log_level]
    if settings.log_custom_format:
        args += ["--log-custom-format", settings.log_custom_format]
    elif settings.log_format:
        args += ["--log-format", settings.log_format]

    options = settings.terragrunt
    if options.parallelism > 0:
        args += ["--terragrunt-parallelism", str(options.parallelism)]
    if options.no_color:
        args.append("--terragrunt-no-color")
    if options.non_interactive:
        args.append("--terragrunt-non-interactive")
    if options.ignore_dependency_errors:
        args.append("--terragrunt-ignore-dependency-errors")
    if options.ignore_external_dependencies:
        args.append("--terragrunt-ignore-external-dependencies")
    if options.include_external_dependencies:
        args.append("--terragrunt-include-external-dependencies")
    args.extend(options.extra_flags)
    args += ["--", command]
    if plan_file and command == PLAN_COMMAND:
        args.append(f"-out={plan_file}")
    return args


def print_block(title: str, rows: list[tuple[str, str]], out: TextIO) -> None:
    """Print a ruled summary block of ``label: value`` rows."""
    print(file=out)
    print(SUMMARY_RULE, file=out)
    print(f"  {title}", file=out)
    print(SUMMARY_RULE, file=out)
    for label, value in rows:
        print(f"{label + ':':<12}{value}", file=out)
    print(SUMMARY_RULE, file=out)
    print(file=out)


def _record_execution(
    history: HistoryService,
    settings: TerraxSettings,
    entry_id: int,
    started_at: datetime,
    command: str,
    stack_path: str,
    exit_code: int,
    duration_s: float,
    summary: str,
) -> None:
    entry = ExecutionLogEntry(
        id=entry_id,
        timestamp=started_at,
        user=current_user(),
        stack_path=relative_stack_path(stack_path, settings.root_config_file),
        absolute_path=stack_path,
        command=command,
        exit_code=exit_code,
        duration_s=duration_s,
        summary=summary,
    )
    try:
        history.append(entry)
    except OSError as exc:
        logger.warning("failed to append to history: %s", exc)
        return
    try:
        history.trim(settings.history_max_entries)
    except (OSError, ValueError) as exc:
        logger.warning("failed to trim history: %s", exc)


def run_command(
    settings: TerraxSettings,
    history: HistoryService,
    command: str,
    stack_path: str | Path,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    out: TextIO | None = None,
    plan_file: str | None = None,
) -> int:
    """Execute ``command`` against ``stack_path`` with inherited stdio; returns its exit code."""
    out = out if out is not None else sys.stdout
    stack_path = str(stack_path)
    try:
        entry_id = history.next_id()
    except OSError as exc:
        logger.warning("failed to read history id: %s", exc)
        entry_id = 0

    args = build_terragrunt_args(settings, stack_path, command, plan_file)
    print(f"🚀 Executing: {TERRAGRUNT_BINARY} {' '.join(args)}", file=out)
    print(file=out)
    out.flush()

    started_at = datetime.now(timezone.utc)
    started = time.monotonic()
    try:
        exit_code = runner([TERRAGRUNT_BINARY, *args], check=False).returncode
    except FileNotFoundError:
        logger.error("%s not found on PATH", TERRAGRUNT_BINARY)
        exit_code = COMMAND_NOT_FOUND_EXIT_CODE
        summary = f"Command failed: {TERRAGRUNT_BINARY} not found"
    else:
        if exit_code == 0:
            summary = "Command completed successfully"
            print("\n✅ Command execution completed", file=out)
        else:
            summary = f"Command failed: exit status {exit_code}"
            print(f"\n❌ Command execution failed: exit status {exit_code}", file=out)
    duration_s = time.monotonic() - started

    print_block(
        "📊 Execution Summary",
        [
            ("Command", command),
            ("Stack Path", stack_path),
            ("Duration", f"{duration_s:.2f}s"),
            ("Exit Code", str(exit_code)),
            ("Timestamp", started_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")),
        ],
        out,
    )
    _record_execution(
        history, settings, entry_id, started_at, command, stack_path, exit_code, duration_s, summary
    )
    return exit_code
