"""Small numeric helpers."""

from __future__ import annotations

import re

import numpy as np

_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


def square(a):
    """Return a * a."""
    return a * a


def clip(a, max_value, min_value):
    """Limit a to the range [min_value, max_value]."""
    if a > max_value:
        return max_value
    if a < min_value:
        return min_value
    return a


def almost_equal(a, b, tol) -> bool:
    """True when every element of a and b differs by less than tol."""
    a = np.asarray(a)
    b = np.asarray(b)
    if a.shape != b.shape:
        raise ValueError(f"shape mismatch: {a.shape} vs {b.shape}")
    return bool(np.all(np.abs(a - b) < tol))


def _leading_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def read_csv(path, rows: int, cols: int, skiprows: int = 0) -> np.ndarray:
    """Read up to rows x cols numbers from a comma-separated file.

    Missing cells and unreadable fields are zero; a file that cannot be
    opened yields an all-zero matrix.
    """
    result = np.zeros((rows, cols), dtype=np.float64)
    if rows <= 0 or cols <= 0:
        return result
    try:
        handle = open(path, encoding="utf-8", errors="replace")
    except OSError:
        return result
    with handle:
        for _ in range(skiprows):
            if not handle.readline():
                return result
        for row, line in enumerate(handle):
            fields = line.rstrip("\n").split(",")[:cols]
            result[row, : len(fields)] = [_leading_float(f) for f in fields]
            if row + 1 == rows:
                break
    return result