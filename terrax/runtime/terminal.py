"""Raw-mode lifecycle for one browser session.

While a session is active the terminal is in raw mode on the alternate
screen, with the cursor hidden and auto-wrap off (every frame row is clipped
to the terminal width already). ``restore`` undoes all of it exactly once.
"""

from __future__ import annotations

import contextlib
import logging
import os
import termios
import tty
from collections.abc import Iterator

logger = logging.getLogger(__name__)

ENTER_SEQUENCE = b"\x1b[?1049h\x1b[?25l\x1b[?7l"
LEAVE_SEQUENCE = b"\x1b[?7h\x1b[?25h\x1b[?1049l"


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_attrs: list | None = None

    @property
    def active(self) -> bool:
        return self._saved_attrs is not None

    def enter(self) -> None:
        """Switch to raw mode and the alternate screen; a second call is a no-op."""
        if self.active:
            return
        logger.debug("entering raw mode on fd %d", self.stdin_fd)
        self._saved_attrs = termios.tcgetattr(self.stdin_fd)
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_SEQUENCE)

    def restore(self) -> None:
        if not self.active:
            return
        saved, self._saved_attrs = self._saved_attrs, None
        os.write(self.stdout_fd, LEAVE_SEQUENCE)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, saved)
        logger.debug("terminal restored on fd %d", self.stdin_fd)

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[TerminalController]:
        self.enter()
        try:
            yield self
        finally:
            self.restore()
