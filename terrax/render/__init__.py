"""Rendering engine for the column browser, history and plan review views.

Frame builders are pure: they read a model snapshot and return styled lines.
``write_frame`` is the only function here that touches the terminal.
"""

from __future__ import annotations

import os
import sys

from .chrome import build_status_line, selected_with_ansi
from .columns import render_navigation_frame
from .history import render_history_frame
from .plan import render_plan_review_frame


def write_frame(lines: list[str], fd: int | None = None) -> None:
    """Paint ``lines`` from the top-left corner, replacing the previous frame."""
    out = "\033[H\033[J" + "\r\n".join(lines)
    target = sys.stdout.fileno() if fd is None else fd
    os.write(target, out.encode("utf-8", errors="replace"))


__all__ = [
    "build_status_line",
    "render_history_frame",
    "render_navigation_frame",
    "render_plan_review_frame",
    "selected_with_ansi",
    "write_frame",
]
