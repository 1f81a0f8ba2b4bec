"""Cubic polynomial interpolation between two states."""

from __future__ import annotations

import numpy as np


class CubicInterp:
    """Per-dimension cubic x(t) = a t^3 + b t^2 + c t + d matching end positions and velocities."""

    _FIELDS = ("_a", "_b", "_c", "_d", "_x0", "_xf", "_v0", "_vf")

    def __init__(self, dim: int = 1, dtype=np.float64):
        self._dtype = np.dtype(dtype)
        self._dim = 0
        for name in self._FIELDS:
            setattr(self, name, np.zeros(0, dtype=self._dtype))
        self._final_time = self._dtype.type(0)
        self.set_dimension(dim)

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def final_time(self) -> float:
        return float(self._final_time)

    def set_dimension(self, dim: int) -> None:
        """Resize every coefficient vector, keeping existing values and padding with zeros."""
        if dim < 0:
            raise ValueError("dimension must be non-negative")
        for name in self._FIELDS:
            old = getattr(self, name)
            new = np.zeros(dim, dtype=self._dtype)
            keep = min(dim, old.size)
            new[:keep] = old[:keep]
            setattr(self, name, new)
        self._dim = dim

    def _take(self, values, label: str) -> np.ndarray:
        arr = np.asarray(values, dtype=self._dtype).ravel()
        if arr.size < self._dim:
            raise ValueError(f"{label} has {arr.size} elements, need {self._dim}")
        return arr[: self._dim].copy()

    def set_param(self, x0, v0, xf, vf, final_time) -> None:
        """Fit the cubic from start/end positions and velocities over final_time."""
        x0 = self._take(x0, "x0")
        v0 = self._take(v0, "v0")
        xf = self._take(xf, "xf")
        vf = self._take(vf, "vf")
        tf = self._dtype.type(final_time)
        self._final_time = tf
        self._x0, self._v0, self._xf, self._vf = x0, v0, xf, vf
        self._d = x0.copy()
        self._c = v0.copy()
        with np.errstate(divide="ignore", invalid="ignore"):
            tf2 = tf * tf
            tf3 = tf2 * tf
            dv = vf - v0
            dx = xf - x0
            self._b = (3 * dx / tf2 - 3 * v0 / tf - dv / tf).astype(self._dtype)
            self._a = (dv / tf2 + 2 * v0 / tf2 - 2 * dx / tf3).astype(self._dtype)

    def curve_point(self, t) -> np.ndarray:
        """Position on the curve at time t."""
        t = self._dtype.type(t)
        t2 = t * t
        t3 = t2 * t
        return self._a * t3 + self._b * t2 + self._c * t + self._d

    def curve_derivative(self, t) -> np.ndarray:
        """Velocity on the curve at time t."""
        t = self._dtype.type(t)
        return 3 * self._a * (t * t) + 2 * self._b * t + self._c