import numpy as np
import pytest

from tnzfx.amp import AmpFx
from tnzfx.fx import Args, Config, Params
from tnzfx.geometry import Rect
from tnzfx.host import InputLayer, Node, PixelType


def _image(dtype=np.uint8):
    rng = np.random.default_rng(7)
    high = np.iinfo(dtype).max
    return rng.integers(0, high, size=(3, 4, 4), endpoint=True).astype(dtype)


def _args(image):
    args = Args(1)
    args.set(0, image, (0.0, 0.0))
    return args


def test_unit_gain_is_identity():
    img = _image()
    out = AmpFx().compute(Config(), Params([1.0]), _args(img), np.zeros_like(img))
    assert np.array_equal(out, img)
    assert out.dtype == img.dtype


def test_zero_gain_clears_image():
    img = _image()
    out = AmpFx().compute(Config(), Params([0.0]), _args(img), np.zeros_like(img))
    assert not out.any()


def test_half_gain_halves_values():
    img = np.full((2, 2, 4), 200, dtype=np.uint8)
    out = AmpFx().compute(Config(), Params([0.5]), _args(img), np.zeros_like(img))
    assert np.all(out == 100)


def test_gain_above_one_saturates():
    img = np.full((2, 2, 4), 200, dtype=np.uint8)
    out = AmpFx().compute(Config(), Params([2.0]), _args(img), np.zeros_like(img))
    assert np.all(out == np.iinfo(np.uint8).max)


def test_sixteen_bit_image_keeps_type():
    img = _image(np.uint16)
    out = AmpFx().compute(Config(), Params([1.0]), _args(img), np.zeros_like(img))
    assert out.dtype == np.uint16
    assert np.array_equal(out, img)


def test_missing_input_returns_canvas():
    canvas = np.zeros((2, 3, 4), dtype=np.uint8)
    out = AmpFx().compute(Config(), Params([1.0]), Args(1), canvas)
    assert out is canvas


def test_declared_parameters():
    node = Node(AmpFx())
    params = node.params()
    assert params.get_float(0) == 1.0
    assert AmpFx.info.identifier == "DWANGO_OpenCV_Amp"


def test_render_through_node_matches_input():
    img = _image()
    node = Node(AmpFx())
    tile = node.render(
        Config(), {"gain": 1.0}, [InputLayer.from_image(img)], Rect(0, 0, 4, 3), PixelType.RGBM32
    )
    assert np.array_equal(tile, img)


def test_render_rejects_unknown_parameter():
    node = Node(AmpFx())
    with pytest.raises(KeyError):
        node.render(Config(), {"volume": 1.0}, [None], Rect(0, 0, 1, 1))