import cv2
import numpy as np
import pytest

from sketchcam.pixel_buffer import PixelBuffer


class ConstantRandom:
    """Stand-in for numpy.random.Generator returning one fixed value."""

    def __init__(self, value):
        self.value = value
        self.calls = []

    def random(self, size=None):
        self.calls.append(size)
        return np.full(size, self.value, dtype=np.float64)


def rgb_buffer(rgb):
    """Opaque PixelBuffer from an (H, W, 3) array-like of RGB values."""
    rgb = np.asarray(rgb, dtype=np.uint8)
    h, w = rgb.shape[:2]
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[..., :3] = rgb
    rgba[..., 3] = 255
    return PixelBuffer(w, h, rgba)


def split_buffer(width=5, height=5, split=2):
    """Black for x < split, white elsewhere."""
    rgb = np.full((height, width, 3), 255, dtype=np.uint8)
    rgb[:, :split] = 0
    return rgb_buffer(rgb)


@pytest.fixture
def noisy_buffer():
    rng = np.random.default_rng(1234)
    return rgb_buffer(rng.integers(0, 256, size=(24, 32, 3)))


@pytest.fixture
def white_5x5():
    return PixelBuffer.solid(5, 5, (255, 255, 255, 255))


def write_video(path, frames=4, width=32, height=24, fps=10.0):
    """Short MJPG clip with a moving white bar; returns the path as str."""
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), fps, (width, height))
    assert writer.isOpened()
    for i in range(frames):
        frame = np.zeros((height, width, 3), dtype=np.uint8)
        frame[:, 4 * i:4 * i + 8] = 255
        writer.write(frame)
    writer.release()
    return str(path)
