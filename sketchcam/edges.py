"""
Grayscale and Sobel gradient maps.

Both maps share the source buffer's (height, width). The gradient is only
computed where a full 3x3 neighbourhood exists; the outermost ring of the
map is left at 0.
"""
import numpy as np
import cv2

from .pixel_buffer import PixelBuffer

# BT.601 luma weights
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114
# Exact weighted sums of 8-bit inputs are multiples of 0.001
LUMA_EPSILON = 1e-6

# Row-major 3x3 kernels, centre aligned with the output pixel.
SOBEL_X = np.array([[-1, 0, 1],
                    [-2, 0, 2],
                    [-1, 0, 1]], dtype=np.float64)
SOBEL_Y = np.array([[-1, -2, -1],
                    [0, 0, 0],
                    [1, 2, 1]], dtype=np.float64)


def compute_luminance(buffer: PixelBuffer, precise: bool = False) -> np.ndarray:
    """
    Per-pixel grayscale value of a buffer.

    Args:
        buffer (PixelBuffer): Source frame.
        precise (bool): Return the raw float64 luma instead of the 8-bit map.

    Returns:
        np.ndarray: (height, width) map. uint8 (truncated, clamped to
        [0, 255]) by default, float64 when ``precise`` is set.
    """
    rgb = buffer.data[..., :3].astype(np.float64)
    gray = LUMA_R * rgb[..., 0] + LUMA_G * rgb[..., 1] + LUMA_B * rgb[..., 2]
    if precise:
        return gray
    # The weights sum to 1, so a neutral gray (v, v, v) must come back as v;
    # nudge past float error before truncating.
    return np.clip(gray + LUMA_EPSILON, 0, 255).astype(np.uint8)


def compute_gradient(luminance, width: int, height: int) -> np.ndarray:
    """
    Sobel gradient magnitude sqrt(gx^2 + gy^2) of a luminance map.

    ``luminance`` may be a (height, width) array or a flat sequence of
    width*height samples. Returns a float64 (height, width) map whose
    border ring is 0; maps narrower or shorter than 3 pixels are all 0.
    """
    lum = np.asarray(luminance, dtype=np.float64).reshape(height, width)
    magnitude = np.zeros((height, width), dtype=np.float64)
    if width < 3 or height < 3:
        return magnitude

    # filter2D correlates (no kernel flip), matching the kernel layout above
    gx = cv2.filter2D(lum, cv2.CV_64F, SOBEL_X)
    gy = cv2.filter2D(lum, cv2.CV_64F, SOBEL_Y)
    gx = gx[1:-1, 1:-1]
    gy = gy[1:-1, 1:-1]
    magnitude[1:-1, 1:-1] = np.sqrt(gx * gx + gy * gy)
    return magnitude


def edge_maps(buffer: PixelBuffer, precise: bool = False):
    """Luminance and gradient of a buffer in one call."""
    lum = compute_luminance(buffer, precise=precise)
    return lum, compute_gradient(lum, buffer.width, buffer.height)
