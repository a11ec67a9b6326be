"""Linear blending of two frames.

Run:
    pytest tests/test_blend.py -v
"""
import numpy as np
import pytest

from conftest import rgb_buffer
from sketchcam.blend import blend
from sketchcam.errors import DimensionMismatch
from sketchcam.pixel_buffer import PixelBuffer


@pytest.fixture
def pair():
    rng = np.random.default_rng(99)
    a = rgb_buffer(rng.integers(0, 256, size=(6, 8, 3)))
    b = rgb_buffer(rng.integers(0, 256, size=(6, 8, 3)))
    return a, b


@pytest.mark.parametrize("t", [0.0, 0.1, 0.3, 0.5, 0.77, 1.0, -0.5, 1.8])
def test_blend_with_itself_is_identity(pair, t):
    a, _ = pair
    np.testing.assert_array_equal(blend(a, a, t).data, a.data)


def test_blend_endpoints(pair):
    a, b = pair
    np.testing.assert_array_equal(blend(a, b, 0.0).data, a.data)
    np.testing.assert_array_equal(blend(a, b, 1.0).data, b.data)


def test_blend_midpoint_truncates():
    a = PixelBuffer.solid(2, 2, (0, 10, 255))
    b = PixelBuffer.solid(2, 2, (255, 11, 0))
    out = blend(a, b, 0.5)
    # 127.5, 10.5, 127.5
    assert tuple(out.data[0, 0]) == (127, 10, 127, 255)


def test_blend_extrapolation_is_clamped():
    a = PixelBuffer.solid(3, 3, (100, 100, 100))
    b = PixelBuffer.solid(3, 3, (200, 0, 100))
    assert tuple(blend(a, b, 2.0).data[1, 1]) == (255, 0, 100, 255)
    assert tuple(blend(a, b, -1.0).data[1, 1]) == (0, 200, 100, 255)


def test_blend_forces_opaque_alpha():
    a = PixelBuffer.solid(2, 3, (1, 2, 3, 0))
    b = PixelBuffer.solid(2, 3, (4, 5, 6, 17))
    out = blend(a, b, 0.25)
    assert np.all(out.data[..., 3] == 255)


@pytest.mark.parametrize("size", [(8, 5), (7, 6), (1, 1)])
def test_blend_rejects_mismatched_sizes(pair, size):
    a, _ = pair
    other = PixelBuffer.solid(size[0], size[1], (0, 0, 0))
    with pytest.raises(DimensionMismatch) as exc:
        blend(a, other, 0.5)
    assert exc.value.a_size == (8, 6)
    assert exc.value.b_size == size
    assert isinstance(exc.value, ValueError)


def test_blend_returns_new_buffer(pair):
    a, b = pair
    before = a.data.copy()
    out = blend(a, b, 0.4)
    assert out is not a and out is not b
    np.testing.assert_array_equal(a.data, before)
