"""Colour-space conversions and small numeric helpers shared by the effects."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

# Rows act on (blue, green, red).
_BGR_TO_XYZ = np.array(
    [
        [0.2003, 0.1735, 0.6069],
        [0.1145, 0.5866, 0.2989],
        [1.1162, 0.0661, 0.0000],
    ]
)

# Rows produce (blue, green, red) from (X, Y, Z).
_XYZ_TO_BGR = np.array(
    [
        [+0.0585, -0.1187, +0.9017],
        [-0.9844, +1.9985, -0.0279],
        [+1.9104, -0.5338, -0.2891],
    ]
)


def to_linear_color_space(nonlinear_color, exposure, gamma):
    """Map a display (non-linear) colour value into linear power space."""
    return -np.log(1.0 - np.power(nonlinear_color, gamma)) / exposure


def to_nonlinear_color_space(linear_color, exposure, gamma):
    """Map a linear power-space value back into display colour space."""
    return np.power(1.0 - np.exp(-exposure * linear_color), 1.0 / gamma)


class LinearColorSpaceConverter:
    """Lookup table from quantised display values to linear values."""

    def __init__(self, bit_depth, exposure, gamma):
        if bit_depth < 0:
            raise ValueError("bit_depth must not be negative")
        size = 1 << bit_depth
        samples = (np.arange(size, dtype=np.float64) + 0.5) / size
        self._table = to_linear_color_space(samples, exposure, gamma)

    def __getitem__(self, value):
        if isinstance(value, (int, np.integer)) and not 0 <= value < len(self._table):
            raise IndexError(f"value {value} outside the table")
        result = self._table[value]
        return float(result) if np.ndim(result) == 0 else result

    def __len__(self):
        return len(self._table)


def lerp(a, b, t):
    """Linear interpolation; sequences are interpolated element by element."""
    if isinstance(a, Sequence) and not isinstance(a, str):
        return tuple(lerp(x, y, t) for x, y in zip(a, b, strict=True))
    return a + (b - a) * t


def normalize_cast(value, dtype):
    """Scale a normalised value by the type's maximum and saturate to it."""
    dtype = np.dtype(dtype)
    scaled = np.asarray(value, dtype=np.float64)
    if dtype.kind in "iu":
        info = np.iinfo(dtype)
        result = np.clip(np.rint(scaled * info.max), info.min, info.max).astype(dtype)
    else:
        result = (scaled * np.finfo(dtype).max).astype(dtype)
    return result[()]


def to_radian(degree):
    """Convert degrees to radians."""
    return degree * (math.pi / 180)


def to_degree(radian):
    """Convert radians to degrees."""
    return radian * (180 / math.pi)


def square(x):
    """Return x multiplied by itself."""
    return x * x


def _as_result(array):
    return float(array) if np.ndim(array) == 0 else array


def to_gray(bgra):
    """Luminance of a BGR(A) pixel or of an array whose last axis holds channels."""
    v = np.asarray(bgra, dtype=np.float64)
    gray = 0.306 * v[..., 2] + 0.601 * v[..., 1] + 0.117 * v[..., 0]
    return _as_result(gray)


def _mix(vector, matrix):
    v = np.asarray(vector, dtype=np.float64)
    if v.shape[-1] < 3:
        raise ValueError("at least three channels are required")
    out = np.zeros_like(v)
    out[..., :3] = v[..., :3] @ matrix.T
    return out


def to_xyz(bgr):
    """Convert BGR to XYZ; channels beyond the third are set to zero."""
    return _mix(bgr, _BGR_TO_XYZ)


def to_bgr(xyz):
    """Convert XYZ to BGR; channels beyond the third are set to zero."""
    return _mix(xyz, _XYZ_TO_BGR)