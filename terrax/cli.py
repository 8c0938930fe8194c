"""Command-line front door for terrax.

Parses CLI options, loads settings and scans the stack tree. Then dispatches
into the interactive browser, the history browser or a direct re-run, and
hands the chosen command to the executor. A successful plan is followed by
the plan reviewer.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from . import __version__
from .defaults import PLAN_COMMAND
from .executor import print_block, run_command
from .history.repository import FileRepository
from .history.service import HistoryService
from .history.types import ExecutionLogEntry
from .plan import CollectProgress, PlanCollector, session_plan_filename
from .runtime import run_history_session, run_navigation_session, run_plan_review_session
from .runtime.config import TerraxSettings, history_file_path, load_settings
from .stack.builder import build_stack_tree

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _require_tty() -> None:
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise SystemExit("terrax needs an interactive terminal.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="terrax",
        description="Browse Terragrunt stacks in columns and run a command against the selection.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to scan. Defaults to current directory.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--last", action="store_true", help="Re-run the most recent command of this project.")
    mode.add_argument("--history", action="store_true", help="Browse this project's execution history.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug details to stderr.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _history_service(settings: TerraxSettings) -> HistoryService:
    return HistoryService(FileRepository(history_file_path()), settings.root_config_file)


def _finish(exit_code: int) -> None:
    if exit_code != 0:
        raise SystemExit(exit_code)


def _print_progress(update: CollectProgress) -> None:
    if update.total:
        print(f"  [{update.current}/{update.total}] {update.message}")
    else:
        print(f"  {update.message}")


def run_plan_review(settings: TerraxSettings, stack_path: str | Path, session_id: int) -> None:
    """Collect the plans written by this session under ``stack_path`` and open the reviewer."""
    print()
    print("🔍 Collecting plan results...")
    collector = PlanCollector(
        stack_path,
        session_id,
        root_config_file=settings.root_config_file,
        parallelism=settings.terragrunt.parallelism,
    )
    report = collector.collect(_print_progress)
    removed = collector.cleanup_old_plans()
    if removed:
        logger.debug("removed %d plan files of earlier sessions", removed)
    if report.failed:
        print(f"⚠️  {len(report.failed)} stack plans could not be read (run with --verbose for details).")
    if not report.stacks:
        print("⚠️  No plan files found to review.")
        return

    print(f"✅ Found {len(report.stacks)} stack plans. Launching reviewer...")
    _require_tty()
    run_plan_review_session(report)


def _execute(
    settings: TerraxSettings, history: HistoryService, command: str, stack_path: str | Path, session_id: int
) -> None:
    plan_file = session_plan_filename(session_id) if command == PLAN_COMMAND else None
    _finish(run_command(settings, history, command, stack_path, plan_file=plan_file))
    if plan_file is not None:
        run_plan_review(settings, stack_path, session_id)


def _rerun(
    settings: TerraxSettings, history: HistoryService, entry: ExecutionLogEntry, title: str, session_id: int
) -> None:
    print_block(
        title,
        [
            ("Command", entry.command),
            ("Stack Path", entry.stack_path),
            ("Previous", f"{entry.timestamp.astimezone():%Y-%m-%d %H:%M:%S} (exit code: {entry.exit_code})"),
        ],
        sys.stdout,
    )
    _execute(settings, history, entry.command, entry.absolute_path, session_id)


def run_last(settings: TerraxSettings, history: HistoryService, cwd: Path, session_id: int) -> None:
    entry = history.last_execution_for_project(cwd)
    if entry is None:
        print("⚠️  No execution history found for this project")
        print("Run terrax interactively first to build history")
        return
    _rerun(settings, history, entry, "🔄 Re-executing last command", session_id)


def run_history(settings: TerraxSettings, history: HistoryService, cwd: Path, session_id: int) -> None:
    entries = history.filter_by_current_project(history.load_all(), cwd)
    if not entries:
        print("⚠️  No execution history found for this project")
        return
    _require_tty()
    selected = run_history_session(entries)
    if selected is None:
        return
    _rerun(settings, history, selected, "🔄 Re-executing command from history", session_id)


def run_interactive(settings: TerraxSettings, history: HistoryService, path: Path, session_id: int) -> None:
    print(f"🔍 Scanning for stacks in: {path}")
    try:
        tree = build_stack_tree(path)
    except (FileNotFoundError, NotADirectoryError, ValueError) as exc:
        raise SystemExit(f"Cannot scan {path}: {exc}") from exc
    print(f"✅ Found stack tree with max depth: {tree.max_depth}")
    if tree.max_depth == 0:
        print("⚠️  No subdirectories found. Make sure you're in the right directory.")

    _require_tty()
    result = run_navigation_session(tree, settings.commands, settings.max_navigation_columns)
    if not result.confirmed or result.stack_path is None:
        print("⚠️  Selection cancelled")
        return

    print_block(
        "✅ Selection confirmed",
        [("Command", result.command), ("Stack Path", str(result.stack_path))],
        sys.stdout,
    )
    _execute(settings, history, result.command, result.stack_path, session_id)


def main(argv: list[str] | None = None, cwd: Path | None = None) -> None:
    """Parse CLI arguments and run terrax.

    ``cwd`` is primarily for tests; when omitted the current working directory
    is used for config lookup, project detection and the default scan path.
    """
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    cwd = cwd if cwd is not None else Path.cwd()
    settings = load_settings(cwd)
    logger.debug("settings: %s", settings)
    history = _history_service(settings)
    # Plan files written by this run carry this id.
    session_id = int(time.time())

    if args.last:
        run_last(settings, history, cwd, session_id)
        return
    if args.history:
        run_history(settings, history, cwd, session_id)
        return
    run_interactive(settings, history, Path(args.path) if args.path else cwd, session_id)


if __name__ == "__main__":
    main()
