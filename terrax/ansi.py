"""Cell-width arithmetic for styled terminal text.

Escape sequences occupy no cells, combining marks and variation selectors
occupy none either, and wide characters (CJK, the 📦 and 📁 glyphs) take two.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
ELLIPSIS = "…"
_ZERO_WIDTH = {"\u200d", "\ufe0e", "\ufe0f"}


def char_display_width(ch: str) -> int:
    if ch in _ZERO_WIDTH or unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _segments(text: str) -> Iterator[tuple[bool, str]]:
    """Yield ``(is_escape, chunk)`` pairs covering ``text`` in order."""
    cursor = 0
    for match in ANSI_ESCAPE_RE.finditer(text):
        if match.start() > cursor:
            yield False, text[cursor : match.start()]
        yield True, match.group(0)
        cursor = match.end()
    if cursor < len(text):
        yield False, text[cursor:]


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Number of terminal cells ``text`` covers once painted."""
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` after ``max_cols`` cells, keeping every escape sequence it carries.

    Escapes past the cut are kept too, so a trailing reset still closes the
    style that was open when the text was clipped.
    """
    if max_cols <= 0:
        return ""
    kept: list[str] = []
    used = 0
    full = False
    for is_escape, chunk in _segments(text):
        if is_escape:
            kept.append(chunk)
            continue
        if full:
            continue
        for ch in chunk:
            width = char_display_width(ch)
            if used + width > max_cols:
                full = True
                break
            kept.append(ch)
            used += width
    return "".join(kept)


def truncate_text(text: str, max_cols: int) -> str:
    """Fit plain ``text`` into ``max_cols`` cells, marking a cut with an ellipsis."""
    if max_cols <= 0:
        return ""
    if display_width(text) <= max_cols:
        return text
    return clip_ansi_line(text, max_cols - 1) + ELLIPSIS


def pad_to_width(text: str, width: int) -> str:
    return text + " " * max(0, width - display_width(text))
