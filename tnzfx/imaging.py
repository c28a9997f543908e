"""Image helpers: hashing, noise, resampling, blurring, bloom and compositing.

Images are numpy arrays shaped (rows, cols) or (rows, cols, channels).
"""

from __future__ import annotations

import math

import numpy as np
from scipy.ndimage import correlate1d

_U64 = (1 << 64) - 1
_FNV_OFFSET_BASIS = 14695981039346656037
_FNV_PRIME = 1099511628211
_SAMPLE_SIZE = 256
_TWO_POW_64 = float(1 << 64)

_SMALL_GAUSSIAN = {
    1: (1.0,),
    3: (0.25, 0.5, 0.25),
    5: (0.0625, 0.25, 0.375, 0.25, 0.0625),
    7: (0.03125, 0.109375, 0.21875, 0.28125, 0.21875, 0.109375, 0.03125),
}

_CUBIC_A = -0.75


def bit_reverse(x):
    """Reverse the order of the 64 bits of x."""
    return int(format(x & _U64, "064b")[::-1], 2)


def file_exists(file_name):
    """True if the file can be opened for reading."""
    try:
        with open(file_name, "rb"):
            return True
    except OSError:
        return False


def image_hash(image):
    """FNV-style hash of 256 bytes sampled along a Van der Corput sequence."""
    data = np.ascontiguousarray(image).tobytes()
    size = len(data)
    if size == 0:
        raise ValueError("cannot hash an empty image")
    h = _FNV_OFFSET_BASIS
    for i in range(1, _SAMPLE_SIZE + 1):
        k = int(bit_reverse(i) / _TWO_POW_64 * size)
        h = ((h * _FNV_PRIME) & _U64) ^ data[k]
    return h


def _default_rng(rng):
    return np.random.default_rng() if rng is None else rng


def make_snp_noise(shape, low, high, rng=None):
    """Uniform noise in [low, high) as float32."""
    rng = _default_rng(rng)
    return rng.uniform(low, high, size=tuple(shape)).astype(np.float32)


def make_perlin_noise(shape, amplitudes, rng=None):
    """Sum of octaves of uniform noise upsampled with cubic interpolation."""
    rng = _default_rng(rng)
    height, width, *channels = shape
    noise = np.zeros(tuple(shape), dtype=np.float32)
    for octave, amplitude in enumerate(amplitudes):
        side = 2 << octave
        field = make_snp_noise((side, side, *channels), -amplitude, amplitude, rng)
        noise += resize(field, (height, width), "cubic")
    return noise


def _to_dtype(values, dtype):
    dtype = np.dtype(dtype)
    if dtype.kind in "iu":
        info = np.iinfo(dtype)
        return np.clip(np.rint(values), info.min, info.max).astype(dtype)
    return np.asarray(values).astype(dtype)


def _source_positions(src_n, dst_n):
    scale = src_n / dst_n
    fx = (np.arange(dst_n) + 0.5) * scale - 0.5
    sx = np.floor(fx).astype(np.int64)
    return sx, fx - sx


def _linear_weights(src_n, dst_n):
    sx, frac = _source_positions(src_n, dst_n)
    low = sx < 0
    frac[low] = 0.0
    sx[low] = 0
    high = sx >= src_n - 1
    frac[high] = 0.0
    sx[high] = src_n - 1
    rows = np.arange(dst_n)
    weights = np.zeros((dst_n, src_n))
    np.add.at(weights, (rows, sx), 1.0 - frac)
    np.add.at(weights, (rows, np.minimum(sx + 1, src_n - 1)), frac)
    return weights


def _cubic_weights(src_n, dst_n):
    sx, x = _source_positions(src_n, dst_n)
    a = _CUBIC_A
    w0 = ((a * (x + 1) - 5 * a) * (x + 1) + 8 * a) * (x + 1) - 4 * a
    w1 = ((a + 2) * x - (a + 3)) * x * x + 1
    w2 = ((a + 2) * (1 - x) - (a + 3)) * (1 - x) * (1 - x) + 1
    w3 = 1.0 - w0 - w1 - w2
    rows = np.arange(dst_n)
    weights = np.zeros((dst_n, src_n))
    for offset, w in zip((-1, 0, 1, 2), (w0, w1, w2, w3)):
        np.add.at(weights, (rows, np.clip(sx + offset, 0, src_n - 1)), w)
    return weights


def _area_weights(src_n, dst_n):
    if dst_n >= src_n:
        return _linear_weights(src_n, dst_n)
    scale = src_n / dst_n
    start = (np.arange(dst_n) * scale)[:, None]
    end = start + scale
    left = np.arange(src_n)[None, :]
    overlap = np.minimum(end, left + 1) - np.maximum(start, left)
    return np.clip(overlap, 0.0, None) / scale


_WEIGHT_BUILDERS = {
    "linear": _linear_weights,
    "cubic": _cubic_weights,
    "area": _area_weights,
}


def resize(image, size, interpolation="linear"):
    """Resample an image to size (rows, cols).

    interpolation is "linear", "cubic" or "area"; area averaging applies
    when shrinking and falls back to linear when enlarging.
    """
    src = np.asarray(image)
    height, width = size
    if height <= 0 or width <= 0:
        raise ValueError("target size must be positive")
    if src.ndim < 2 or src.shape[0] == 0 or src.shape[1] == 0:
        raise ValueError("source image is empty")
    try:
        builder = _WEIGHT_BUILDERS[interpolation]
    except KeyError:
        raise ValueError(f"unknown interpolation {interpolation!r}") from None
    wy = builder(src.shape[0], height)
    wx = builder(src.shape[1], width)
    rows = np.tensordot(wy, src.astype(np.float64), axes=(1, 0))
    out = np.moveaxis(np.tensordot(wx, rows, axes=(1, 1)), 0, 1)
    return _to_dtype(out, src.dtype)


def _gaussian_kernel(n, sigma):
    if sigma <= 0 and n in _SMALL_GAUSSIAN:
        return np.array(_SMALL_GAUSSIAN[n])
    if sigma <= 0:
        sigma = 0.3 * ((n - 1) * 0.5 - 1) + 0.8
    x = np.arange(n) - (n - 1) / 2
    kernel = np.exp(-(x * x) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()


def _kernel_size(ksize, sigma, dtype):
    if ksize <= 0 and sigma > 0:
        factor = 3 if np.dtype(dtype) == np.uint8 else 4
        return round(sigma * factor * 2 + 1) | 1
    return ksize


def gaussian_blur(image, ksize, sigma_x, sigma_y=0.0):
    """Gaussian blur with kernel size (width, height) and reflected borders.

    A non-positive sigma is derived from the kernel size; a non-positive
    kernel size is derived from sigma. sigma_y defaults to sigma_x.
    """
    src = np.asarray(image)
    if sigma_y <= 0:
        sigma_y = sigma_x
    kw = _kernel_size(ksize[0], sigma_x, src.dtype)
    kh = _kernel_size(ksize[1], sigma_y, src.dtype)
    if kw <= 0 or kh <= 0 or kw % 2 == 0 or kh % 2 == 0:
        raise ValueError("kernel size must be positive and odd")
    data = src.astype(np.float64)
    data = correlate1d(data, _gaussian_kernel(kw, sigma_x), axis=1, mode="mirror")
    data = correlate1d(data, _gaussian_kernel(kh, sigma_y), axis=0, mode="mirror")
    return _to_dtype(data, src.dtype)


def _saturating_add(a, b):
    if a.dtype.kind in "iu":
        info = np.iinfo(a.dtype)
        total = a.astype(np.int64) + b.astype(np.int64)
        return np.clip(total, info.min, info.max).astype(a.dtype)
    return a + b


def generate_bloom(image, level, radius=1):
    """Blur a pyramid of halved images and sum it back at full size."""
    current = np.asarray(image)
    if level < 0:
        raise ValueError("level must not be negative")
    if current.ndim < 2 or current.shape[0] == 0 or current.shape[1] == 0:
        raise ValueError("image is empty")
    ksize = (radius * 2 + 1, radius * 2 + 1)
    pyramid = []
    for step in range(level + 1):
        if step:
            rows, cols = current.shape[:2]
            current = resize(current, (rows // 2, cols // 2), "area")
        pyramid.append(gaussian_blur(current, ksize, 0.0))
        rows, cols = current.shape[:2]
        if rows <= 1 or cols <= 1:
            break
    accumulated = pyramid[-1]
    for finer in reversed(pyramid[:-1]):
        accumulated = _saturating_add(finer, resize(accumulated, finer.shape[:2]))
    return accumulated


def draw_image(canvas, image, pos):
    """Composite a premultiplied RGBA image onto canvas in place at (x, y).

    Only 8- and 16-bit four-channel images of matching type are drawn;
    anything else leaves the canvas untouched.
    """
    if canvas.dtype != image.dtype or canvas.dtype not in (np.uint8, np.uint16):
        return
    if canvas.ndim != 3 or image.ndim != 3 or canvas.shape[2] != 4 or image.shape[2] != 4:
        return
    dst_rows, dst_cols = canvas.shape[:2]
    src_rows, src_cols = image.shape[:2]
    dx = math.floor(pos[0])
    dy = math.floor(pos[1])
    if dx >= dst_cols or dx + src_cols <= 0 or dy >= dst_rows or dy + src_rows <= 0:
        return
    sx = max(0, -dx)
    sy = max(0, -dy)
    dx = max(0, dx)
    dy = max(0, dy)
    width = min(src_cols - sx, dst_cols - dx)
    height = min(src_rows - sy, dst_rows - dy)
    if width <= 0 or height <= 0:
        return
    max_value = np.iinfo(canvas.dtype).max
    src = image[sy:sy + height, sx:sx + width].astype(np.int64)
    region = canvas[dy:dy + height, dx:dx + width]
    blended = region.astype(np.int64) * (max_value - src[..., 3:4]) // max_value + src
    region[...] = blended.astype(canvas.dtype)


def _lerp_texel(a, b, t, dtype):
    value = a.astype(np.float64) + (b.astype(np.float64) - a) * t
    return value.astype(dtype)


def tap_texel(image, pos):
    """Bilinearly sample a pixel at (x, y), wrapping the far neighbours."""
    src = np.asarray(image)
    rows, cols = src.shape[:2]
    x0 = math.floor(pos[0])
    y0 = math.floor(pos[1])
    if not (0 <= x0 < cols and 0 <= y0 < rows):
        raise IndexError(f"position {tuple(pos)} outside the image")
    x1 = (x0 + 1) % cols
    y1 = (y0 + 1) % rows
    sx = pos[0] - x0
    sy = pos[1] - y0
    top = _lerp_texel(src[y0, x0], src[y0, x1], sx, src.dtype)
    bottom = _lerp_texel(src[y1, x0], src[y1, x1], sx, src.dtype)
    return _lerp_texel(top, bottom, sy, src.dtype)