import numpy as np

from .errors import DimensionMismatch
from .pixel_buffer import PixelBuffer


def blend(original: PixelBuffer, effect: PixelBuffer, t: float) -> PixelBuffer:
    """
    Linear mix of two same-sized buffers: original*(1-t) + effect*t.

    Only RGB is mixed; alpha is forced opaque. ``t`` is not range checked.
    Results outside [0, 255] are clamped and fractions truncated.

    Raises:
        DimensionMismatch: if the buffers differ in width or height.
    """
    if not original.same_size(effect):
        raise DimensionMismatch((original.width, original.height),
                                (effect.width, effect.height))

    src = original.data[..., :3].astype(np.float64)
    dst = effect.data[..., :3].astype(np.float64)
    # a + (b - a)*t: exact at t=0, t=1 and when a == b
    mixed = src + (dst - src) * float(t)

    out = np.empty_like(original.data)
    out[..., :3] = np.clip(mixed, 0, 255).astype(np.uint8)
    out[..., 3] = 255
    return PixelBuffer(original.width, original.height, out)
