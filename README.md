# tnzfx

A small toolkit for writing raster effects on RGBA images held as NumPy
arrays. An image is shaped `(rows, cols, 4)`. Its channels are in B, G, R, A
order with premultiplied alpha. Each channel is either 8-bit (`uint8`) or
16-bit (`uint16`).

## Modules

- `tnzfx.color` has the colour and numeric helpers:
  - `to_linear_color_space` and `to_nonlinear_color_space`
  - `LinearColorSpaceConverter`, a lookup table indexed by quantised value
  - `lerp`, which works on numbers and element-wise on sequences
  - `normalize_cast`, which scales by the type's maximum and saturates
  - `to_gray`, `to_xyz`, `to_bgr`, `to_radian`, `to_degree` and `square`
- `tnzfx.geometry` has the frozen `Rect` dataclass (`x`, `y`, `width`,
  `height`, `from_bounds`, `right`, `bottom`, `is_finite`, `is_empty`).
  It also has `make_infinite_rect` and the vector helpers `meet`, `reflect`
  and `refract`. Under total internal reflection, `refract` gives NaN.
- `tnzfx.rng` has `Mt19937_64`, a 64-bit Mersenne Twister. It gives the
  standard output sequence for a seed, and the default seed is 5489. Use
  `next()` for a 64-bit integer, `canonical()` for a float in [0, 1) and
  `bernoulli(p)` for a coin flip. Iterating over it yields raw outputs.
- `tnzfx.imaging` has the image operations:
  - `image_hash`, an FNV-style hash of 256 bytes sampled along a Van der
    Corput sequence
  - `make_snp_noise` and `make_perlin_noise`, which take an optional NumPy
    `Generator`
  - `resize`, with `"linear"`, `"cubic"` or `"area"` interpolation
  - `gaussian_blur`, which uses mirrored borders and derives sigma from the
    kernel size (or the other way round) when one is not positive
  - `generate_bloom`, which blurs a pyramid of halved images and sums it
    back to full size
  - `draw_image`, which alpha-composites a premultiplied 8- or 16-bit RGBA
    image onto a canvas in place; the position is floored to whole pixels
    and the image is clipped to the canvas
  - `tap_texel`, which samples bilinearly and wraps the far neighbours
  - `bit_reverse` and `file_exists`
- `tnzfx.fx` has the effect framework:
  - the abstract `Fx` base class
  - `Params`, with `get_float`, `get_int`, `get_bool`, `radian`, `seed` and
    `rng`
  - `Args`, which holds the per-port input images and their offsets
  - `Config`, which holds the rendering settings
  - `ParamPrototype` and `PluginInfo`
  - `build_param_pages`, which returns
    `{"Properties": {group label: [prototypes]}}`
- `tnzfx.host` has `Node`, which drives an `Fx`:
  - It calls `init()` when it is created.
  - `params()` fills in defaults for any parameter values that are missing.
  - `bounding_box()` gives the output extent. It returns `None` when the
    extent is empty, and a full-plane rectangle when the output is
    full-screen.
  - `render()` gathers the `InputLayer`s, lets the effect enlarge the area,
    runs `compute` and copies the result into a tile of the given
    `PixelType` (`RGBM32` or `RGBM64`).
  - `start_render`, `end_render`, `on_new_frame` and `on_end_frame` forward
    to the effect's lifecycle hooks.
- `tnzfx.amp`, `tnzfx.blur` and `tnzfx.snp` hold three ready-made effects:
  - `AmpFx` multiplies the input by `gain`.
  - `BlurFx` applies a Gaussian blur with half-sizes `ksize_width` and
    `ksize_height` and the sigmas `sigmaX` and `sigmaY`, and grows the output
    by the kernel size.
  - `SaltAndPepperFx` inverts each pixel with probability `p`, driven by
    `seed`, and covers the whole tile.

## Running an effect

```python
import numpy as np

from tnzfx.amp import AmpFx
from tnzfx.fx import Config
from tnzfx.geometry import Rect
from tnzfx.host import InputLayer, Node, PixelType

image = np.full((4, 4, 4), 200, dtype=np.uint8)
node = Node(AmpFx())
tile = node.render(
    Config(),
    {"gain": 0.5},
    [InputLayer.from_image(image)],
    Rect(0, 0, 4, 4),
    PixelType.RGBM32,
)
# every channel of tile is now 100
```

## Writing an effect

To write an effect:

1. Subclass `Fx`.
2. Set `info`, `ports`, `param_groups` and `parameters` as class attributes.
3. Implement `compute(config, params, args, image)`. It receives a zeroed
   canvas and returns the rendered image; returning `None` keeps the canvas.
4. Override `enlarge(config, params, rect)` only if the effect draws outside
   the union of its inputs. Return a non-finite rectangle to cover the whole
   tile.

## What it does not do

This is a library only. It has no command-line tool. It does not load
effects into any host application, read or write image files, or talk to a
plugin interface. Rendering happens through `Node.render` on arrays you
supply.

## Installing

```
pip install .
pip install .[test]   # with the test tools
pytest
```