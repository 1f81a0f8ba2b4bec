"""Coloured, prefixed console logging."""

from __future__ import annotations

import os
import sys
import time

COLOR_RESET = "\033[0m"
LEVEL_COLORS = {
    "INFO": "\033[1;32m",
    "WARN": "\033[1;33m",
    "ERROR": "\033[1;31m",
    "DEBUG": "\033[1;34m",
}

USE_COLOR = True
USE_PREFIX = True
DEBUG_ENV_VAR = "PRINT_INFO"


def current_time_str() -> str:
    """Local wall-clock time as HH:MM:SS."""
    return time.strftime("%H:%M:%S", time.localtime())


def format_message(level: str, message, use_color: bool = True, use_prefix: bool = True) -> str:
    """Build one log line for the given level."""
    try:
        color = LEVEL_COLORS[level]
    except KeyError:
        raise ValueError(f"unknown log level: {level!r}") from None
    start = color if use_color else ""
    reset = COLOR_RESET if use_color else ""
    prefix = f"[{level} {current_time_str()}] " if use_prefix else ""
    return f"{start}{prefix}{message}{reset}"


def _emit(level: str, message, stream) -> None:
    print(format_message(level, message, USE_COLOR, USE_PREFIX), file=stream, flush=True)


def info(message) -> None:
    """Write an INFO line to standard output."""
    _emit("INFO", message, sys.stdout)


def warn(message) -> None:
    """Write a WARN line to standard output."""
    _emit("WARN", message, sys.stdout)


def error(message) -> None:
    """Write an ERROR line to standard error."""
    _emit("ERROR", message, sys.stderr)


def debug(message) -> None:
    """Write a DEBUG line to standard output when PRINT_INFO is set."""
    if os.environ.get(DEBUG_ENV_VAR):
        _emit("DEBUG", message, sys.stdout)