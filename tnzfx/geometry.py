"""Rectangles and vector helpers for ray-style effects."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its origin and size."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_bounds(cls, x0, y0, x1, y1):
        """Build a rectangle from its corner coordinates."""
        return cls(x0, y0, x1 - x0, y1 - y0)

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    def is_finite(self):
        """True when every coordinate is a finite number."""
        return all(math.isfinite(v) for v in (self.x, self.y, self.width, self.height))

    def is_empty(self):
        """True when the rectangle covers no area."""
        return self.width <= 0.0 or self.height <= 0.0


def make_infinite_rect():
    """A rectangle that stands for the whole plane."""
    return Rect(-math.inf, -math.inf, math.inf, math.inf)


def _vec(value):
    return np.asarray(value, dtype=np.float64)


def meet(origin, direction, t):
    """Point reached from origin after travelling t along direction."""
    return _vec(origin) + _vec(direction) * t


def reflect(incident, normal):
    """Reflect an incident vector about a unit normal."""
    i = _vec(incident)
    n = _vec(normal)
    return i + n * (-2.0 * float(np.dot(n, i)))


def refract(incident, normal, eta):
    """Refract an incident vector through a surface with the given index ratio.

    Under total internal reflection the result is NaN.
    """
    i = _vec(incident)
    n = _vec(normal)
    c = float(np.dot(n, i))
    k = 1.0 - eta * eta * (1.0 - c * c)
    root = math.sqrt(k) if k >= 0.0 else math.nan
    return i * eta - n * (eta * c + root)