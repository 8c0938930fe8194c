"""Shared line-shaping helpers for frame builders."""

from __future__ import annotations

from ..ansi import clip_ansi_line, display_width


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text

    # Keep reverse video active even when the text contains internal resets.
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def build_status_line(left_text: str, width: int, right_text: str = "") -> str:
    """Place ``left_text`` and ``right_text`` at opposite ends of one row."""
    usable = max(1, width - 1)
    right_width = display_width(right_text)
    if usable <= right_width:
        return clip_ansi_line(right_text, usable)
    left = clip_ansi_line(left_text, max(0, usable - right_width - 1))
    gap = " " * (usable - display_width(left) - right_width)
    return f"{left}{gap}{right_text}"


def styled(text: str, style: str, reset: str = "\033[0m") -> str:
    if not text or not style:
        return text
    return f"{style}{text}{reset}"
