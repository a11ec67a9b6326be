from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import cv2

from .errors import EmptyExport
from .pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_NAME = "camera-drawing.png"


def encode_png(buffer: Optional[PixelBuffer]) -> bytes:
    """
    Lossless PNG encoding of a buffer (alpha is kept).

    Raises:
        EmptyExport: if there is no buffer to encode.
    """
    if buffer is None:
        raise EmptyExport("Nothing to save yet. Start the camera first.")
    bgra = cv2.cvtColor(buffer.data, cv2.COLOR_RGBA2BGRA)
    ok, encoded = cv2.imencode(".png", bgra)
    if not ok:
        raise RuntimeError("cv2.imencode failed to produce a PNG")
    return encoded.tobytes()


def save_png(buffer: Optional[PixelBuffer], path: Union[str, Path] = DEFAULT_SNAPSHOT_NAME) -> Path:
    """Write ``buffer`` to ``path`` as PNG and return the path."""
    path = Path(path)
    data = encode_png(buffer)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    logger.info("Saved %dx%d frame to %s", buffer.width, buffer.height, path)
    return path
