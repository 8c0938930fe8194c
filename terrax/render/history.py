"""Frame composition for the execution history browser."""

from __future__ import annotations

from ..ansi import clip_ansi_line, pad_to_width, truncate_text
from ..history.browser import HISTORY_KEYS, HistoryBrowser
from ..history.types import ExecutionLogEntry
from ..ui_theme import DEFAULT_THEME, UITheme
from .chrome import build_status_line, selected_with_ansi, styled

HISTORY_HEADER = "TerraX  Execution history"
EMPTY_HISTORY_TEXT = "No executions recorded for this project yet."

# (title, width) for the fixed-width columns; the stack path takes the rest.
_FIXED_COLUMNS = (("#", 5), ("When", 17), ("Command", 10), ("Exit", 5), ("Time", 8))


def _format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m{secs:02d}s"


def _entry_cells(entry: ExecutionLogEntry) -> list[str]:
    return [
        str(entry.id),
        entry.timestamp.astimezone().strftime("%Y-%m-%d %H:%M"),
        entry.command,
        str(entry.exit_code),
        _format_duration(entry.duration_s),
    ]


def _row(cells: list[str], path: str, width: int) -> str:
    parts = [pad_to_width(truncate_text(cell, size - 1), size) for cell, (_, size) in zip(cells, _FIXED_COLUMNS)]
    used = sum(size for _, size in _FIXED_COLUMNS)
    parts.append(truncate_text(path, max(1, width - used - 1)))
    return "".join(parts)


def render_history_frame(browser: HistoryBrowser, theme: UITheme = DEFAULT_THEME) -> list[str]:
    """Compose the history table for ``browser``; returns one string per row."""
    width = max(1, browser.width)
    lines = [clip_ansi_line(styled(HISTORY_HEADER, theme.header), width)]
    titles = _row([title for title, _ in _FIXED_COLUMNS], "Stack", width)
    lines.append(clip_ansi_line(styled(titles, theme.column_title), width))
    lines.append(styled("─" * max(0, width - 1), theme.divider))

    rows = browser.visible_rows
    if not browser.entries:
        lines.append(styled(truncate_text(EMPTY_HISTORY_TEXT, width - 1), theme.footer))
        lines.extend([""] * (rows - 1))
    else:
        visible = browser.entries[browser.scroll_offset : browser.scroll_offset + rows]
        for offset, entry in enumerate(visible):
            index = browser.scroll_offset + offset
            text = _row(_entry_cells(entry), entry.stack_path, width)
            if index == browser.cursor:
                lines.append(selected_with_ansi(pad_to_width(text, width - 1)))
                continue
            style = theme.history_success if entry.succeeded else theme.history_failure
            lines.append(styled(text, style))
        lines.extend([""] * (rows - len(visible)))

    total = len(browser.entries)
    position = f"{browser.cursor + 1}/{total} " if total else "0/0 "
    lines.append(styled(build_status_line(HISTORY_KEYS.hints(), width, position), theme.footer))
    return lines
