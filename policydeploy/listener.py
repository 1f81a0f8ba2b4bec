"""Keyboard listener that records the most recent key press."""

from __future__ import annotations

import threading
import time

from . import logger
from .terminal import Console

EXIT_KEY = "z"


class KeyState:
    """Thread-safe holder of the last pressed key; empty string when none."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._key = ""

    def get(self) -> str:
        with self._lock:
            return self._key

    def set(self, key: str) -> None:
        if not isinstance(key, str) or len(key) != 1:
            raise ValueError(f"key must be a single character, got {key!r}")
        with self._lock:
            self._key = key

    def clear(self) -> None:
        with self._lock:
            self._key = ""


class Listener:
    """Polls a console for key presses and publishes them through a KeyState."""

    def __init__(self, key_state: KeyState | None = None, console: Console | None = None,
                 poll_interval: float = 0.01):
        self.key_state = key_state if key_state is not None else KeyState()
        self.console = console if console is not None else Console()
        self.poll_interval = poll_interval
        self._stopped = threading.Event()

    def handle_char(self, c) -> str | None:
        """Record one character; returns the recorded key, or None for a newline."""
        if isinstance(c, int):
            c = chr(c)
        if "A" < c < "Z":
            c = c.lower()
        if c == "\n":
            return None
        self.key_state.set(c)
        logger.info(f"[Manager.kbd] Pressed Button: {ord(c)}, {c}")
        if c == EXIT_KEY:
            self.stop()
        return c

    def listen_keyboard(self) -> None:
        """Read keys until stopped or the exit key is pressed."""
        logger.info(f"[Manager.kbd] Press '{EXIT_KEY}' to exit after saving run-time data.")
        while self.is_running():
            if self.console.kbhit():
                code = self.console.getch()
                if code >= 0:
                    self.handle_char(code)
            else:
                time.sleep(self.poll_interval)
        logger.info("[Manager.kbd] Keyboard listening thread terminated.")

    def stop(self) -> None:
        self._stopped.set()

    def is_running(self) -> bool:
        return not self._stopped.is_set()