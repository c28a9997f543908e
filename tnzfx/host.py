"""Drives an effect the way a compositing host does: gather inputs, size, render into a tile."""

from __future__ import annotations

import math
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .fx import Args, Params
from .geometry import Rect

_FLOAT_MAX = sys.float_info.max
_FULL_SCREEN = Rect.from_bounds(-_FLOAT_MAX, -_FLOAT_MAX, _FLOAT_MAX, _FLOAT_MAX)


class PixelType(Enum):
    """Tile pixel formats: four channels of 8 or 16 bits."""

    RGBM32 = "rgbm32"
    RGBM64 = "rgbm64"

    @property
    def dtype(self):
        return np.dtype(np.uint8) if self is PixelType.RGBM32 else np.dtype(np.uint16)


@dataclass(frozen=True)
class InputLayer:
    """An upstream node connected to a port.

    bbox is None when the upstream node cannot report its extent; render
    produces the image covering a requested rectangle.
    """

    bbox: Rect | None
    render: Callable[[Rect, PixelType], np.ndarray]

    @classmethod
    def from_image(cls, image, x=0.0, y=0.0):
        """An input that always delivers image placed at (x, y)."""
        rows, cols = image.shape[:2]
        return cls(Rect(float(x), float(y), float(cols), float(rows)), lambda rect, pixel_type: image)


def _is_fullscreen(rect):
    bounds = (rect.x, rect.y, rect.right, rect.bottom)
    return any(not math.isfinite(v) or abs(v) >= _FLOAT_MAX for v in bounds)


def _union(rects):
    x0 = min((r.x for r in rects), default=math.inf)
    y0 = min((r.y for r in rects), default=math.inf)
    x1 = max((r.right for r in rects), default=-math.inf)
    y1 = max((r.bottom for r in rects), default=-math.inf)
    return Rect.from_bounds(x0, y0, x1, y1)


def _saturate(image, dtype):
    array = np.asarray(image)
    if array.dtype == dtype:
        return array
    info = np.iinfo(dtype)
    return np.clip(np.rint(array), info.min, info.max).astype(dtype)


def _paste(tile, tile_rect, image, bbox):
    x0 = max(tile_rect.x, bbox.x)
    y0 = max(tile_rect.y, bbox.y)
    x1 = min(tile_rect.right, bbox.right)
    y1 = min(tile_rect.bottom, bbox.bottom)
    width = int(x1 - x0)
    height = int(y1 - y0)
    if width <= 0 or height <= 0:
        return
    sx = max(0, int(x0 - bbox.x))
    sy = max(0, int(y0 - bbox.y))
    dx = max(0, int(x0 - tile_rect.x))
    dy = max(0, int(y0 - tile_rect.y))
    src = image[sy:sy + height, sx:sx + width]
    region = tile[dy:dy + src.shape[0], dx:dx + src.shape[1]]
    region[...] = src[: region.shape[0], : region.shape[1]]


class Node:
    """An effect placed in a compositing graph."""

    def __init__(self, fx):
        self.fx = fx
        fx.init()

    def params(self, values=None):
        """Parameter values by name; names not given take their defaults."""
        values = dict(values or {})
        known = {p.name for p in self.fx.parameters}
        unknown = set(values) - known
        if unknown:
            raise KeyError(f"unknown parameters: {sorted(unknown)}")
        return Params(values.get(p.name, p.default) for p in self.fx.parameters)

    def _layers(self, inputs):
        inputs = list(inputs)
        if len(inputs) != len(self.fx.ports):
            raise ValueError(
                f"expected {len(self.fx.ports)} inputs, got {len(inputs)}"
            )
        return inputs

    def bounding_box(self, config, values, inputs):
        """Area the output covers, the whole plane for full-screen output, or None if empty."""
        params = self.params(values)
        boxes = [
            layer.bbox
            for layer in self._layers(inputs)
            if layer is not None and layer.bbox is not None
        ]
        rect = self.fx.enlarge(config, params, _union(boxes))
        if rect.is_empty():
            return None
        if not rect.is_finite():
            return _FULL_SCREEN
        return rect

    def render(self, config, values, inputs, tile_rect, pixel_type=PixelType.RGBM32):
        """Render the effect into a new tile covering tile_rect and return it."""
        pixel_type = PixelType(pixel_type)
        dtype = pixel_type.dtype
        tile = np.zeros((int(tile_rect.height), int(tile_rect.width), 4), dtype=dtype)
        params = self.params(values)
        args = Args(len(self.fx.ports))
        boxes = []
        for i, layer in enumerate(self._layers(inputs)):
            if layer is None or layer.bbox is None:
                continue
            box = tile_rect if _is_fullscreen(layer.bbox) else layer.bbox
            image = np.asarray(layer.render(box, pixel_type))
            expected = (int(box.height), int(box.width), 4)
            if image.shape != expected:
                raise ValueError(
                    f"input {self.fx.ports[i]!r} has shape {image.shape}, expected {expected}"
                )
            boxes.append(box)
            args.set(i, _saturate(image, dtype), (box.x, box.y))

        rect = self.fx.enlarge(config, params, _union(boxes))
        if rect.is_empty():
            return tile
        if not rect.is_finite():
            rect = tile_rect
        args.shift_offsets(-rect.x, -rect.y)

        canvas = np.zeros((math.ceil(rect.height), math.ceil(rect.width), 4), dtype=dtype)
        result = self.fx.compute(config, params, args, canvas)
        if result is None:
            result = canvas
        _paste(tile, tile_rect, _saturate(result, dtype), rect)
        return tile

    def start_render(self):
        return self.fx.begin_render()

    def end_render(self):
        return self.fx.end_render()

    def on_new_frame(self):
        return self.fx.begin_frame()

    def on_end_frame(self):
        return self.fx.end_frame()