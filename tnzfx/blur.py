"""Effect that applies a Gaussian blur, growing the output by the kernel size."""

from __future__ import annotations

import numpy as np

from .fx import Fx, ParamPrototype, PluginInfo
from .geometry import Rect
from .imaging import gaussian_blur

PORT_INPUT = 0
PARAM_KSIZE_WIDTH = 0
PARAM_KSIZE_HEIGHT = 1
PARAM_SIGMA_X = 2
PARAM_SIGMA_Y = 3


def _kernel_size(params):
    return (
        params.get_int(PARAM_KSIZE_WIDTH) * 2 + 1,
        params.get_int(PARAM_KSIZE_HEIGHT) * 2 + 1,
    )


class BlurFx(Fx):
    """Gaussian blur whose kernel half-sizes and sigmas are parameters."""

    info = PluginInfo("OpenCV_Blur", "DWANGO")
    ports = ("Input",)
    param_groups = ("Default",)
    parameters = (
        ParamPrototype("ksize_width", 0, 50.0, 0.0, 100.0),
        ParamPrototype("ksize_height", 0, 50.0, 0.0, 100.0),
        ParamPrototype("sigmaX", 0, 0.0, 0.0, 100.0),
        ParamPrototype("sigmaY", 0, 0.0, 0.0, 100.0),
    )

    def enlarge(self, config, params, rect):
        kw, kh = _kernel_size(params)
        return Rect(rect.x - kw // 2, rect.y - kh // 2, rect.width + kw, rect.height + kh)

    def compute(self, config, params, args, image):
        if args.invalid(PORT_INPUT):
            return image
        ksize = _kernel_size(params)
        sigma_x = params.get_float(PARAM_SIGMA_X)
        sigma_y = params.get_float(PARAM_SIGMA_Y)

        source = np.asarray(args.get(PORT_INPUT))
        area = args.rect(PORT_INPUT)
        x, y = round(area.x), round(area.y)
        rows, cols = source.shape[:2]
        if x < 0 or y < 0 or y + rows > image.shape[0] or x + cols > image.shape[1]:
            raise ValueError("input does not fit inside the output image")
        image[y:y + rows, x:x + cols] = source
        return gaussian_blur(image, ksize, sigma_x, sigma_y)