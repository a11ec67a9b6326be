"""
Per-frame artistic filters.

Each filter takes a PixelBuffer and a strength multiplier and returns a new,
fully opaque PixelBuffer of the same size. Sketch and Charcoal only draw the
interior; their one-pixel border stays black.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np

from .edges import edge_maps
from .pixel_buffer import PixelBuffer

DEFAULT_STRENGTH = 1.5

SKETCH_GAIN = 1.1

CARTOON_LEVELS = 6
CARTOON_BRIGHTEN = 4
CARTOON_EDGE_THRESHOLD = 80

CHARCOAL_GAIN = 1.4
CHARCOAL_DARKEN = 0.8
CHARCOAL_NOISE = 40.0


class FilterMode(enum.Enum):
    SKETCH = "sketch"
    CARTOON = "cartoon"
    CHARCOAL = "charcoal"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class FilterParameters:
    """
    Per-frame knobs from the control surface. Not clamped here.
    """
    strength: float = DEFAULT_STRENGTH
    blend_factor: float = 1.0   # 0 = original, 1 = fully filtered


def _grayscale_interior(values: np.ndarray, width: int, height: int) -> PixelBuffer:
    """Opaque buffer with R=G=B=values inside a black one-pixel frame."""
    out = np.zeros((height, width, 4), dtype=np.uint8)
    out[..., 3] = 255
    if width >= 3 and height >= 3:
        gray = values[1:-1, 1:-1].astype(np.uint8)
        out[1:-1, 1:-1, :3] = gray[..., None]
    return PixelBuffer(width, height, out)


def sketch(buffer: PixelBuffer, strength: float = DEFAULT_STRENGTH) -> PixelBuffer:
    """
    Pencil sketch: inverted Sobel edges, dark strokes on white.

    Args:
        buffer (PixelBuffer): Source frame.
        strength (float): Edge intensity multiplier.

    Returns:
        PixelBuffer: Grayscale frame.
    """
    _lum, magnitude = edge_maps(buffer)
    edge = 255.0 - np.clip(magnitude * strength * SKETCH_GAIN, 0, 255)
    return _grayscale_interior(edge, buffer.width, buffer.height)


def quantize_channels(rgb: np.ndarray, levels: int = CARTOON_LEVELS) -> np.ndarray:
    # Posterize each channel to `levels` evenly spaced values, round half up
    step = 255.0 / float(levels - 1)
    quant = np.floor(rgb.astype(np.float64) / step + 0.5) * step
    return quant.clip(0, 255)


def cartoon(buffer: PixelBuffer, strength: float = DEFAULT_STRENGTH) -> PixelBuffer:
    """
    Posterized colors with black outlines where the scaled gradient exceeds
    the edge threshold. Outline detection works on the unquantized luma so
    silhouettes stay crisp however flat the colors get.
    """
    _lum, magnitude = edge_maps(buffer)

    quant = quantize_channels(buffer.data[..., :3], CARTOON_LEVELS)
    quant = np.minimum(255, quant + CARTOON_BRIGHTEN).astype(np.uint8)

    outline = magnitude * strength > CARTOON_EDGE_THRESHOLD
    quant[outline] = 0

    out = np.empty((buffer.height, buffer.width, 4), dtype=np.uint8)
    out[..., :3] = quant
    out[..., 3] = 255
    return PixelBuffer(buffer.width, buffer.height, out)


def charcoal(buffer: PixelBuffer, strength: float = DEFAULT_STRENGTH, rng=None) -> PixelBuffer:
    """
    Harsh, darkened edges with grain.

    Args:
        buffer (PixelBuffer): Source frame.
        strength (float): Edge intensity multiplier.
        rng: Source of uniform reals in [0, 1) exposing ``random(size)``, as
            ``numpy.random.Generator`` does. A fresh default generator is used
            when omitted, so two calls normally differ.

    Returns:
        PixelBuffer: Grayscale frame.
    """
    if rng is None:
        rng = np.random.default_rng()

    _lum, magnitude = edge_maps(buffer, precise=True)
    h, w = buffer.height, buffer.width
    v = np.zeros((h, w), dtype=np.float64)
    if w >= 3 and h >= 3:
        mag = magnitude[1:-1, 1:-1] * strength * CHARCOAL_GAIN
        inner = (255.0 - np.minimum(255.0, mag)) * CHARCOAL_DARKEN
        noise = (np.asarray(rng.random((h - 2, w - 2)), dtype=np.float64) - 0.5) * CHARCOAL_NOISE
        v[1:-1, 1:-1] = np.clip(inner + noise, 0, 255)
    return _grayscale_interior(v, w, h)


_FILTERS = {
    FilterMode.SKETCH: sketch,
    FilterMode.CARTOON: cartoon,
    FilterMode.CHARCOAL: charcoal,
}


def apply_filter(mode: FilterMode, buffer: PixelBuffer, strength: float = DEFAULT_STRENGTH,
                 rng=None) -> PixelBuffer:
    """Run the filter selected by ``mode``. ``rng`` only affects Charcoal."""
    mode = FilterMode(mode)
    if mode is FilterMode.CHARCOAL:
        return charcoal(buffer, strength, rng=rng)
    return _FILTERS[mode](buffer, strength)
