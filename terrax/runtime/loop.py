"""Interactive event loop shared by the column browser and history browser.

The loop polls stdin, turns terminal size changes into ``ResizeEvent``s,
feeds every event to a pure ``update`` function and repaints when the
snapshot changed. It stops as soon as the model reports ``done``.
"""

from __future__ import annotations

import logging
import shutil
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from ..columns.model import NavigationModel, NavigationResult, ResizeEvent, update
from ..history.browser import HistoryBrowser, update_history
from ..history.types import ExecutionLogEntry
from ..input import read_key
from ..plan.review import PlanReview, update_plan_review
from ..plan.types import PlanReport
from ..render import (
    render_history_frame,
    render_navigation_frame,
    render_plan_review_frame,
    write_frame,
)
from ..stack.types import StackTree
from .terminal import TerminalController

logger = logging.getLogger(__name__)

M = TypeVar("M")

POLL_TIMEOUT_MS = 120
FALLBACK_TERMINAL_SIZE = (80, 24)


@dataclass(frozen=True)
class SessionIO:
    """Terminal-facing operations injected into ``run_session``."""

    read_key: Callable[[int, int], str]
    terminal_size: Callable[[], tuple[int, int]]
    write_frame: Callable[[list[str]], None]


def _default_terminal_size() -> tuple[int, int]:
    size = shutil.get_terminal_size(FALLBACK_TERMINAL_SIZE)
    return size.columns, size.lines


DEFAULT_IO = SessionIO(
    read_key=lambda fd, timeout_ms: read_key(fd, timeout_ms=timeout_ms),
    terminal_size=_default_terminal_size,
    write_frame=write_frame,
)


def run_session(
    model: M,
    update_fn: Callable[[M, Any], M],
    render_fn: Callable[[M], list[str]],
    terminal: TerminalController,
    stdin_fd: int,
    io: SessionIO = DEFAULT_IO,
) -> M:
    """Drive ``model`` until it is done and return the final snapshot."""
    last_size: tuple[int, int] | None = None
    dirty = True
    with terminal.raw_mode():
        while not model.done:
            size = io.terminal_size()
            if size != last_size:
                last_size = size
                model = update_fn(model, ResizeEvent(width=size[0], height=size[1]))
                dirty = True
            if dirty:
                io.write_frame(render_fn(model))
                dirty = False

            key = io.read_key(stdin_fd, POLL_TIMEOUT_MS)
            if not key:
                continue
            updated = update_fn(model, key)
            if updated is not model:
                model = updated
                dirty = True
    # Nothing is logged while the terminal is in raw mode.
    logger.debug("session ended at %sx%s", *(last_size or (0, 0)))
    return model


def _open_terminal() -> tuple[TerminalController, int]:
    stdin_fd = sys.stdin.fileno()
    return TerminalController(stdin_fd, sys.stdout.fileno()), stdin_fd


def run_navigation_session(
    tree: StackTree,
    commands: tuple[str, ...],
    max_visible_nav_columns: int,
    io: SessionIO = DEFAULT_IO,
) -> NavigationResult:
    model = NavigationModel.create(tree, commands, max_visible_nav_columns)
    terminal, stdin_fd = _open_terminal()
    final = run_session(model, update, render_navigation_frame, terminal, stdin_fd, io)
    return final.result()


def run_history_session(
    entries: list[ExecutionLogEntry],
    io: SessionIO = DEFAULT_IO,
) -> ExecutionLogEntry | None:
    browser = HistoryBrowser(entries=tuple(entries))
    terminal, stdin_fd = _open_terminal()
    final = run_session(browser, update_history, render_history_frame, terminal, stdin_fd, io)
    return final.selected


def run_plan_review_session(report: PlanReport, io: SessionIO = DEFAULT_IO) -> PlanReview:
    review = PlanReview.from_report(report)
    terminal, stdin_fd = _open_terminal()
    return run_session(review, update_plan_review, render_plan_review_frame, terminal, stdin_fd, io)
