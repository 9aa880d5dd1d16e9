"""Terminal control helpers for the browser session.

Owns raw-mode lifecycle and alternate-screen switching. The terminal is
restored on every exit path of ``raw_mode``.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import termios
import tty

logger = logging.getLogger(__name__)

ENTER_TUI_SEQUENCE = b"\x1b[?1049h\x1b[?25l"
EXIT_TUI_SEQUENCE = b"\x1b[?25h\x1b[?1049l"


def terminal_size() -> tuple[int, int]:
    """Return ``(columns, lines)`` of the controlling terminal."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns), max(1, term.lines)


class TerminalController:
    """Manage terminal mode transitions for the interactive session."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw mode and the alternate screen with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_TUI_SEQUENCE)

    def disable_tui_mode(self) -> None:
        """Show the cursor, leave the alternate screen, and restore tty attributes."""
        try:
            os.write(self.stdout_fd, EXIT_TUI_SEQUENCE)
        finally:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
            logger.debug("terminal restored")
