"""ANSI console control and single-key terminal input."""

from __future__ import annotations

import math
import os
import sys
from contextlib import contextmanager
from enum import IntEnum

BLINK = 128


class Color(IntEnum):
    """The sixteen console colours."""

    BLACK = 0
    BLUE = 1
    GREEN = 2
    CYAN = 3
    RED = 4
    MAGENTA = 5
    BROWN = 6
    LIGHTGRAY = 7
    DARKGRAY = 8
    LIGHTBLUE = 9
    LIGHTGREEN = 10
    LIGHTCYAN = 11
    LIGHTRED = 12
    LIGHTMAGENTA = 13
    YELLOW = 14
    WHITE = 15


# ANSI colour code offsets for the eight base colours; bright variants reuse them.
_ANSI_OFFSET = {
    Color.BLACK: 0,
    Color.BLUE: 4,
    Color.GREEN: 2,
    Color.CYAN: 6,
    Color.RED: 1,
    Color.MAGENTA: 5,
    Color.BROWN: 3,
    Color.LIGHTGRAY: 7,
}


def _color_slot(color: int) -> int | None:
    """Colour index modulo 16 with truncating semantics; None when it is negative."""
    slot = int(math.fmod(int(color), 16))
    return slot if slot >= 0 else None


@contextmanager
def _key_mode(fd: int, echo: bool):
    """Switch a terminal to non-canonical input for the duration of the block."""
    if not os.isatty(fd):
        yield
        return
    import termios

    old = termios.tcgetattr(fd)
    new = termios.tcgetattr(fd)
    new[3] &= ~termios.ICANON
    if echo:
        new[3] |= termios.ECHO
    else:
        new[3] &= ~termios.ECHO
    termios.tcsetattr(fd, termios.TCSANOW, new)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, old)


@contextmanager
def _non_blocking(fd: int):
    import fcntl

    flags = fcntl.fcntl(fd, fcntl.F_GETFL)
    fcntl.fcntl(fd, fcntl.F_SETFL, flags | os.O_NONBLOCK)
    try:
        yield
    finally:
        fcntl.fcntl(fd, fcntl.F_SETFL, flags)


class Console:
    """Writes ANSI control sequences to a stream and reads single keys from a descriptor."""

    def __init__(self, stream=None, input_fd: int | None = None):
        self._stream = stream
        self._input_fd = input_fd
        self._background = 40
        self._pending: list[int] = []

    def __enter__(self) -> "Console":
        return self

    def __exit__(self, *exc_info) -> None:
        self.reset()

    @property
    def background(self) -> int:
        """ANSI code of the current background colour."""
        return self._background

    def _write(self, text: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(text)
        stream.flush()

    def _fd(self) -> int:
        return self._input_fd if self._input_fd is not None else sys.stdin.fileno()

    def clreol(self) -> None:
        """Clear from the cursor to the end of the line."""
        self._write("\033[K")

    def insline(self) -> None:
        """Insert a blank line at the cursor."""
        self._write("\x1b[1L")

    def delline(self) -> None:
        """Delete the line at the cursor."""
        self._write("\033[1M")

    def gotoxy(self, x: int, y: int) -> None:
        """Move the cursor to column x, row y (1-based)."""
        self._write(f"\033[{y};{x}f")

    def clrscr(self) -> None:
        """Clear the screen with the current background and home the cursor."""
        self._write(f"\033[{self._background}m\033[2J\033[1;1f")

    def textbackground(self, color: int) -> None:
        """Select the background colour used by later output."""
        slot = _color_slot(color)
        if slot is None:
            return
        self._background = 40 + _ANSI_OFFSET[Color(slot % 8)]

    def textcolor(self, color: int) -> None:
        """Select the foreground colour; colours 8-15 are the bold variants."""
        slot = _color_slot(color)
        if slot is None:
            return
        bold = 1 if slot >= 8 else 0
        foreground = 30 + _ANSI_OFFSET[Color(slot % 8)]
        self._write(f"\033[{bold};{foreground};{self._background}m")

    def putch(self, c: str) -> int:
        """Write one character and return its code."""
        self._write(c)
        return ord(c)

    def cputs(self, text: str) -> int:
        """Write a string."""
        self._write(text)
        return 0

    def reset(self) -> None:
        """Restore default text attributes."""
        self._write("\033[m")

    def _read_key(self, echo: bool) -> int:
        if self._pending:
            return self._pending.pop()
        fd = self._fd()
        with _key_mode(fd, echo):
            data = os.read(fd, 1)
        return data[0] if data else -1

    def getch(self) -> int:
        """Read one key without echo; -1 at end of input."""
        return self._read_key(echo=False)

    def getche(self) -> int:
        """Read one key with echo; -1 at end of input."""
        return self._read_key(echo=True)

    def kbhit(self) -> bool:
        """True when a key is waiting; the key stays available to getch."""
        if self._pending:
            return True
        fd = self._fd()
        with _key_mode(fd, echo=False), _non_blocking(fd):
            try:
                data = os.read(fd, 1)
            except BlockingIOError:
                data = b""
        if data:
            self._pending.append(data[0])
            return True
        return False