"""Terminal control helpers for the search session.

Owns raw-mode lifecycle, cursor visibility and alternate-screen switching.
Also redraws the inline region used by the shell-widget mode.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_SCREEN = "\x1b[2J\x1b[H"
CLEAR_LINE = "\x1b[2K"
MOVE_UP = "\x1b[1A"
ENTER_ALTERNATE_SCREEN = "\x1b[?1049h"
LEAVE_ALTERNATE_SCREEN = "\x1b[?1049l"


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int, *, alternate_screen: bool = True) -> None:
        """Capture tty state and bind stdin/output file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.alternate_screen = alternate_screen
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._inline_line_count = 0

    def write(self, text: str) -> None:
        os.write(self.stdout_fd, text.encode("utf-8", errors="replace"))

    def enable_tui_mode(self) -> None:
        """Enter raw mode and hide the cursor."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        prefix = ENTER_ALTERNATE_SCREEN if self.alternate_screen else ""
        self.write(prefix + HIDE_CURSOR)

    def disable_tui_mode(self) -> None:
        """Show the cursor, leave the session screen and restore the tty."""
        if self.alternate_screen:
            self.write(SHOW_CURSOR + CLEAR_SCREEN + LEAVE_ALTERNATE_SCREEN)
        else:
            self.clear_inline()
            self.write(SHOW_CURSOR)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def draw_screen(self, lines: list[str]) -> None:
        """Repaint the whole screen; raw mode needs explicit carriage returns."""
        self.write(CLEAR_SCREEN + "\r\n".join(lines))

    def draw_inline(self, lines: list[str]) -> None:
        """Replace the previously drawn inline block below the cursor line."""
        self.clear_inline()
        self.write("".join(f"\r\n{line}" for line in lines))
        self._inline_line_count = len(lines)

    def clear_inline(self) -> None:
        if self._inline_line_count:
            self.write((MOVE_UP + CLEAR_LINE) * self._inline_line_count + "\r")
            self._inline_line_count = 0

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
