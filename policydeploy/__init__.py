"""Homing, policy control, keyboard commands and a fixed-rate state machine for legged robots."""

__version__ = "0.1.0"

__all__ = [
    "types",
    "mathutil",
    "cubic",
    "logger",
    "timer",
    "orientation",
    "config",
    "controller",
    "neural",
    "terminal",
    "listener",
    "state_machine",
    "runner",
]