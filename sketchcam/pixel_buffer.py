from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import cv2
import numpy as np


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    One frame of interleaved RGBA pixels.

    The backing array has shape (height, width, 4), dtype uint8. It is a
    private copy of the array passed in, flagged read-only. Pipeline stages
    never mutate a buffer; they allocate a new one.
    """
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid buffer size {self.width}x{self.height}")
        data = np.asarray(self.data)
        if data.dtype != np.uint8:
            raise ValueError(f"Pixel data must be uint8, got {data.dtype}")
        if data.shape != (self.height, self.width, 4):
            raise ValueError(
                f"Pixel data shape {data.shape} does not match "
                f"{self.width}x{self.height} RGBA"
            )
        data = np.array(data, copy=True, order="C")
        data.setflags(write=False)
        object.__setattr__(self, "data", data)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def flat(self) -> np.ndarray:
        """R,G,B,A,R,G,B,A,... view of length width*height*4."""
        return self.data.reshape(-1)

    @classmethod
    def from_flat(cls, width: int, height: int, values: Sequence[int]) -> PixelBuffer:
        arr = np.asarray(values)
        if arr.size != width * height * 4:
            raise ValueError(
                f"Expected {width * height * 4} channel values, got {arr.size}"
            )
        return cls(width, height, arr.astype(np.uint8).reshape(height, width, 4))

    @classmethod
    def from_rgba(cls, pixels: np.ndarray) -> PixelBuffer:
        h, w = pixels.shape[:2]
        return cls(w, h, pixels)

    @classmethod
    def from_bgr(cls, frame: np.ndarray) -> PixelBuffer:
        """Wrap an OpenCV BGR (or grayscale) frame, adding an opaque alpha."""
        if frame.ndim == 2:
            rgba = cv2.cvtColor(frame, cv2.COLOR_GRAY2RGBA)
        elif frame.shape[2] == 4:
            rgba = cv2.cvtColor(frame, cv2.COLOR_BGRA2RGBA)
        else:
            rgba = cv2.cvtColor(frame, cv2.COLOR_BGR2RGBA)
        return cls.from_rgba(rgba)

    @classmethod
    def solid(cls, width: int, height: int, color: Sequence[int]) -> PixelBuffer:
        """A buffer filled with one RGB or RGBA color (alpha defaults to 255)."""
        rgba = tuple(color) + (255,) * (4 - len(color))
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[...] = np.asarray(rgba, dtype=np.uint8)
        return cls(width, height, pixels)

    def to_bgr(self) -> np.ndarray:
        """Writable BGR copy for OpenCV display or encoding."""
        return cv2.cvtColor(self.data, cv2.COLOR_RGBA2BGR)

    def same_size(self, other: PixelBuffer) -> bool:
        return self.width == other.width and self.height == other.height
