import numpy as np
import pytest

from tnzfx.blur import BlurFx
from tnzfx.fx import Args, Config, Params
from tnzfx.geometry import Rect
from tnzfx.host import InputLayer, Node


def _args(image, offset):
    args = Args(1)
    args.set(0, image, offset)
    return args


def test_enlarge_grows_by_kernel_size():
    fx = BlurFx()
    rect = Rect(10.0, 20.0, 5.0, 6.0)
    w, h = 2, 3
    grown = fx.enlarge(Config(), Params([w, h, 0, 0]), rect)
    assert grown.x == rect.x - w
    assert grown.y == rect.y - h
    assert grown.width == rect.width + 2 * w + 1
    assert grown.height == rect.height + 2 * h + 1


def test_enlarge_with_zero_kernel_adds_one_pixel():
    rect = Rect(0.0, 0.0, 4.0, 4.0)
    grown = BlurFx().enlarge(Config(), Params([0, 0, 0, 0]), rect)
    assert grown.x == rect.x and grown.y == rect.y
    assert grown.width == rect.width + 1


def test_zero_kernel_copies_input_into_place():
    img = np.arange(2 * 3 * 4, dtype=np.uint8).reshape(2, 3, 4)
    canvas = np.zeros((4, 5, 4), dtype=np.uint8)
    out = BlurFx().compute(Config(), Params([0, 0, 0, 0]), _args(img, (1.0, 2.0)), canvas)
    assert np.array_equal(out[2:4, 1:4], img)
    assert not out[:2].any()
    assert not out[:, 0].any()


def test_blur_spreads_a_point_symmetrically():
    img = np.zeros((5, 5, 4), dtype=np.uint8)
    img[2, 2] = 255
    canvas = np.zeros((7, 7, 4), dtype=np.uint8)
    out = BlurFx().compute(Config(), Params([1, 1, 0, 0]), _args(img, (1.0, 1.0)), canvas)
    centre = out[3, 3, 0]
    assert 0 < centre < 255
    assert out[2, 3, 0] == out[4, 3, 0] == out[3, 2, 0] == out[3, 4, 0]
    assert 0 < out[2, 3, 0] < centre
    assert not out[0, 0].any()


def test_constant_image_stays_constant():
    img = np.full((6, 6, 4), 90, dtype=np.uint16)
    canvas = np.zeros((6, 6, 4), dtype=np.uint16)
    out = BlurFx().compute(Config(), Params([1, 1, 0.8, 0.8]), _args(img, (0.0, 0.0)), canvas)
    assert np.array_equal(out, img)


def test_input_outside_canvas_is_rejected():
    img = np.zeros((3, 3, 4), dtype=np.uint8)
    canvas = np.zeros((3, 3, 4), dtype=np.uint8)
    with pytest.raises(ValueError):
        BlurFx().compute(Config(), Params([0, 0, 0, 0]), _args(img, (1.0, 0.0)), canvas)


def test_missing_input_returns_canvas():
    canvas = np.zeros((3, 3, 4), dtype=np.uint8)
    out = BlurFx().compute(Config(), Params([1, 1, 0, 0]), Args(1), canvas)
    assert out is canvas


def test_default_parameters():
    params = Node(BlurFx()).params()
    assert params.get_int(0) == 50
    assert params.get_int(1) == 50
    assert params.get_float(2) == 0.0


def test_node_bounding_box_includes_margin():
    node = Node(BlurFx())
    img = np.zeros((4, 4, 4), dtype=np.uint8)
    box = node.bounding_box(
        Config(), {"ksize_width": 1, "ksize_height": 1}, [InputLayer.from_image(img)]
    )
    assert box.x == -1 and box.y == -1
    assert box.width == img.shape[1] + 3


def test_node_render_blurs_within_tile():
    node = Node(BlurFx())
    img = np.zeros((5, 5, 4), dtype=np.uint8)
    img[2, 2] = 255
    values = {"ksize_width": 1, "ksize_height": 1}
    tile = node.render(Config(), values, [InputLayer.from_image(img)], Rect(0, 0, 5, 5))
    assert tile.shape == img.shape
    assert 0 < tile[2, 2, 3] < 255
    assert tile[1, 2, 3] == tile[3, 2, 3]