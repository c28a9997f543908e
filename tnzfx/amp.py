"""Effect that scales every channel of its input by a gain factor."""

from __future__ import annotations

import numpy as np

from .fx import Fx, ParamPrototype, PluginInfo

PORT_INPUT = 0
PARAM_GAIN = 0


def _saturate(values, dtype):
    dtype = np.dtype(dtype)
    if dtype.kind in "iu":
        info = np.iinfo(dtype)
        return np.clip(np.rint(values), info.min, info.max).astype(dtype)
    return np.asarray(values).astype(dtype)


class AmpFx(Fx):
    """Multiplies the input image by a gain, saturating to the pixel range."""

    info = PluginInfo("OpenCV_Amp", "DWANGO")
    ports = ("Input",)
    param_groups = ("Default",)
    parameters = (ParamPrototype("gain", 0, 1.0, 0.0, 1.0),)

    def compute(self, config, params, args, image):
        if args.invalid(PORT_INPUT):
            return image
        gain = params.get_float(PARAM_GAIN)
        source = np.asarray(args.get(PORT_INPUT))
        return _saturate(source.astype(np.float64) * gain, source.dtype)