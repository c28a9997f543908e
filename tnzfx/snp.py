"""Salt-and-pepper effect: inverts randomly chosen pixels of the input."""

from __future__ import annotations

import numpy as np

from .fx import Fx, ParamPrototype, PluginInfo
from .geometry import make_infinite_rect
from .imaging import draw_image

PORT_INPUT = 0
PARAM_P = 0
PARAM_SEED = 1


class SaltAndPepperFx(Fx):
    """Inverts each pixel's colour with probability p; covers the whole plane."""

    info = PluginInfo("OpenCV_SNP", "DWANGO")
    ports = ("Input",)
    param_groups = ("Default",)
    parameters = (
        ParamPrototype("p", 0, 0.5, 0.0, 1.0),
        ParamPrototype("seed", 0, 0.5, 0.0, 1.0),
    )

    def enlarge(self, config, params, rect):
        return make_infinite_rect()

    def compute(self, config, params, args, image):
        if args.invalid(PORT_INPUT):
            return image
        p = params.get_float(PARAM_P)
        rng = params.rng(PARAM_SEED)

        draw_image(image, args.get(PORT_INPUT), args.offset(PORT_INPUT))

        rows, cols = image.shape[:2]
        mask = np.fromiter(
            (rng.bernoulli(p) for _ in range(rows * cols)), dtype=bool, count=rows * cols
        ).reshape(rows, cols)
        if not mask.any():
            return image

        info = np.iinfo(image.dtype)
        chosen = image[mask].astype(np.int64)
        # Colours are premultiplied, so inversion is relative to alpha.
        chosen[:, :3] = np.clip(chosen[:, 3:4] - chosen[:, :3], info.min, info.max)
        image[mask] = chosen.astype(image.dtype)
        return image