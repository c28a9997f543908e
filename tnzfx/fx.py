"""Effect interface: plugin metadata, parameters, input arguments and the Fx base class."""

from __future__ import annotations

import functools
import math
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

from .color import to_radian
from .geometry import Rect
from .rng import Mt19937_64

_REGISTRY_KEY = "SOFTWARE\\OpenToonz\\OpenToonz\\1.1"
_REGISTRY_VALUE = "TOONZROOT"
_PAGE_LABEL = "Properties"


@dataclass(frozen=True)
class PluginInfo:
    """Name, vendor and description under which an effect is published."""

    name: str
    vendor: str
    note: str = ""
    helpurl: str = ""
    identifier: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "identifier", f"{self.vendor}_{self.name}")


@dataclass(frozen=True)
class ParamPrototype:
    """Declaration of one numeric parameter of an effect."""

    name: str
    group: int
    default: float
    minimum: float
    maximum: float


def _round_half_away(value):
    magnitude = math.floor(abs(value) + 0.5)
    return int(-magnitude if value < 0 else magnitude)


class Params:
    """Current values of an effect's parameters, in declaration order."""

    def __init__(self, values):
        self._values = [float(v) for v in values]

    def __getitem__(self, i):
        return self._values[i]

    def __setitem__(self, i, value):
        self._values[i] = float(value)

    def __len__(self):
        return len(self._values)

    def get_float(self, i, scale=1.0):
        """The value multiplied by scale."""
        return self._values[i] * scale

    def get_int(self, i, scale=1.0):
        """The scaled value rounded to the nearest integer, halves away from zero."""
        return _round_half_away(self._values[i] * scale)

    def get_bool(self, i):
        """True when the value is at least one half."""
        return self._values[i] >= 0.5

    def radian(self, i):
        """The value, read as degrees, converted to radians."""
        return to_radian(self._values[i])

    def seed(self, i, bits=64):
        """The value scaled to the range of an unsigned integer of the given width."""
        limit = (1 << bits) - 1
        scaled = self._values[i] * float(limit)
        if math.isnan(scaled):
            raise ValueError("cannot derive a seed from NaN")
        if scaled <= 0.0:
            return 0
        if scaled >= limit:
            return limit
        return int(scaled)

    def rng(self, i):
        """A random generator seeded from the value."""
        return Mt19937_64(self.seed(i))


class Args:
    """Input images of an effect, one slot per port, with their offsets."""

    def __init__(self, count):
        self._images = [None] * count
        self._offsets = [(0.0, 0.0)] * count

    def set(self, i, image, offset):
        """Store the image delivered to port i and its position."""
        self._images[i] = image
        self._offsets[i] = (float(offset[0]), float(offset[1]))

    def valid(self, i):
        return self._images[i] is not None

    def invalid(self, i):
        return self._images[i] is None

    def get(self, i):
        """The image on port i, or None when the port delivered nothing."""
        return self._images[i]

    def offset(self, i):
        """Position (x, y) of the image on port i."""
        return self._offsets[i]

    def shift_offsets(self, dx, dy):
        """Move every offset by (dx, dy)."""
        self._offsets = [(x + dx, y + dy) for x, y in self._offsets]

    def size(self, i):
        """Size (width, height) of the image on port i."""
        image = self._images[i]
        if image is None:
            return (0, 0)
        rows, cols = image.shape[:2]
        return (cols, rows)

    def rect(self, i):
        """Rectangle covered by the image on port i."""
        x, y = self._offsets[i]
        width, height = self.size(i)
        return Rect(x, y, width, height)

    def __len__(self):
        return len(self._images)


@dataclass(frozen=True)
class Config:
    """Rendering settings handed to an effect."""

    affine: tuple = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)
    gamma: float = 1.0
    time_stretch_from: float = 1.0
    time_stretch_to: float = 1.0
    stereo_scopic_shift: float = 0.0
    bpp: int = 32
    max_tile_size: int = 0
    quality: int = 0
    field_prevalence: int = 0
    stereoscopic: int = 0
    is_swatch: int = 0
    user_cachable: int = 0
    apply_shrink_to_viewer: int = 0
    frame: int = 0


@functools.cache
def _registry_stuff_dir():
    import winreg

    try:
        with winreg.OpenKey(
            winreg.HKEY_LOCAL_MACHINE, _REGISTRY_KEY, 0, winreg.KEY_QUERY_VALUE
        ) as key:
            value, _ = winreg.QueryValueEx(key, _REGISTRY_VALUE)
    except OSError:
        return "."
    return str(value)


class Fx(ABC):
    """Base class of an image effect.

    Subclasses declare their ports, parameter groups and parameters as class
    attributes and implement compute(). The lifecycle hooks record where the
    effect stands; subclasses overriding them should call the base version.
    """

    info: ClassVar[PluginInfo | None] = None
    ports: ClassVar[tuple] = ()
    param_groups: ClassVar[tuple] = ()
    parameters: ClassVar[tuple] = ()

    initialized = False
    rendering = False
    in_frame = False

    @staticmethod
    def stuff_dir():
        """Directory holding the host application's shared resources."""
        if sys.platform != "win32":
            return "."
        return _registry_stuff_dir()

    def init(self):
        """Called once when the effect is attached to a node."""
        self.initialized = True

    def begin_render(self):
        """Called before a rendering session starts."""
        self.rendering = True

    def end_render(self):
        """Called after a rendering session ends."""
        self.rendering = False

    def begin_frame(self):
        """Called before a frame is rendered."""
        self.in_frame = True

    def end_frame(self):
        """Called after a frame is rendered."""
        self.in_frame = False

    def enlarge(self, config, params, rect):
        """Return the area the output covers given the union of the inputs."""
        return rect

    @abstractmethod
    def compute(self, config, params, args, image):
        """Render into image, a zeroed canvas, and return the result."""


def build_param_pages(fx):
    """Layout of the effect's parameters: page label -> group label -> prototypes."""
    groups = [[] for _ in fx.param_groups]
    for prototype in fx.parameters:
        if not 0 <= prototype.group < len(groups):
            raise IndexError(
                f"parameter {prototype.name!r} refers to unknown group {prototype.group}"
            )
        groups[prototype.group].append(prototype)
    return {_PAGE_LABEL: dict(zip(fx.param_groups, groups))}