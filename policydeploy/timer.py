"""Monotonic timing and fixed-period waiting."""

from __future__ import annotations

import time


class Timer:
    """Measures time since start and sleeps one period per wait()."""

    def __init__(self, period: float | None = None):
        self.period = 0.0 if period is None else float(period)
        self._start_ns = 0
        self.tick_ns = 0
        if period is not None:
            self.start()

    def start(self) -> None:
        """Reset the reference time to now."""
        self._start_ns = time.monotonic_ns()
        self.tick_ns = self.ns()

    def wait(self) -> None:
        """Sleep for one period."""
        if self.period > 0:
            time.sleep(self.period)

    def elapsed(self) -> float:
        """Seconds since the previous tick; starts a new tick."""
        now = self.ns()
        delta = (now - self.tick_ns) * 1e-9
        self.tick_ns = now
        return delta

    def elapsed_us(self) -> float:
        """Microseconds since the previous tick; starts a new tick."""
        now = self.ns()
        delta = (now - self.tick_ns) * 1e-3
        self.tick_ns = now
        return delta

    def ns(self) -> int:
        """Nanoseconds since start."""
        return time.monotonic_ns() - self._start_ns

    def ms(self) -> float:
        return self.ns() / 1e6

    def us(self) -> float:
        return self.ns() / 1e3

    def seconds(self) -> float:
        return self.ns() / 1e9


def time_since_epoch_us() -> int:
    """Current wall-clock time in microseconds since the Unix epoch."""
    return time.time_ns() // 1000