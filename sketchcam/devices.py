"""
OpenCV adapters for the render loop: camera/file capture, a preview window
and a video file writer.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Union

import cv2
import numpy as np

from .errors import AcquisitionFailure, EndOfStream
from .pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class CameraSource:
    """
    Frame source over ``cv2.VideoCapture``.

    ``source`` is a device index (webcam) or a path to a video file. Frame
    size is locked to the first frame read; a later frame of another size
    is reported as an acquisition failure.
    """

    def __init__(self, source: Union[int, str] = 0, width: int = 0, height: int = 0,
                 mirror: bool = True):
        self.source = source
        self.mirror = mirror
        self.is_file = not isinstance(source, int)
        self.size = None

        self.cap = cv2.VideoCapture(source if self.is_file else int(source))
        if not self.cap.isOpened():
            raise AcquisitionFailure(f"Cannot open video source: {source}")

        # Try setting capture resolution if provided
        if width > 0:
            self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, int(width))
        if height > 0:
            self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, int(height))

        logger.info("Opened video source %s", source)

    @property
    def fps(self) -> float:
        return self.cap.get(cv2.CAP_PROP_FPS) or 30.0

    def read(self) -> PixelBuffer:
        ret, frame = self.cap.read()
        if not ret:
            if self.is_file:
                raise EndOfStream(f"No more frames in {self.source}")
            raise AcquisitionFailure("Cannot read frame from camera")

        # Horizontal flip for a "mirror" view
        if self.mirror:
            frame = cv2.flip(frame, 1)

        buffer = PixelBuffer.from_bgr(frame)
        if self.size is None:
            self.size = (buffer.width, buffer.height)
            logger.info("Capture size %dx%d", *self.size)
        elif self.size != (buffer.width, buffer.height):
            raise AcquisitionFailure(
                f"Frame size changed from {self.size[0]}x{self.size[1]} "
                f"to {buffer.width}x{buffer.height}"
            )
        return buffer

    def close(self) -> None:
        self.cap.release()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class WindowSink:
    """
    Shows frames in an OpenCV window and forwards key presses.

    With ``side_by_side`` the original and processed frames are shown next to
    each other, original on the left.
    """

    def __init__(self, title: str = "Camera Drawing", side_by_side: bool = False,
                 on_key: Optional[Callable[[int], None]] = None):
        self.title = title
        self.side_by_side = side_by_side
        self.on_key = on_key
        self._opened = False

    def show(self, buffer: PixelBuffer, original: Optional[PixelBuffer] = None) -> None:
        output = buffer.to_bgr()
        if self.side_by_side and original is not None:
            h, w = output.shape[:2]
            combined = np.zeros((h, w * 2, 3), dtype=np.uint8)
            combined[0:h, 0:w] = original.to_bgr()
            combined[0:h, w:w * 2] = output
            output = combined
        cv2.imshow(self.title, output)
        self._opened = True

        key = cv2.waitKey(1) & 0xFF
        if key != 0xFF and self.on_key is not None:
            self.on_key(key)

    def close(self) -> None:
        if self._opened:
            cv2.destroyWindow(self.title)
            self._opened = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class VideoFileSink:
    """Writes frames to a video file; the writer opens on the first frame."""

    def __init__(self, path: str, fps: float = 30.0, fourcc: str = "mp4v"):
        self.path = str(path)
        self.fps = float(fps)
        self.fourcc = cv2.VideoWriter_fourcc(*fourcc)
        self.writer = None
        self.frames_written = 0

    def show(self, buffer: PixelBuffer, original: Optional[PixelBuffer] = None) -> None:
        if self.writer is None:
            self.writer = cv2.VideoWriter(self.path, self.fourcc, self.fps,
                                          (buffer.width, buffer.height))
            if not self.writer.isOpened():
                raise RuntimeError(f"Cannot open video writer: {self.path}")
        self.writer.write(buffer.to_bgr())
        self.frames_written += 1

    def close(self) -> None:
        if self.writer is not None:
            self.writer.release()
            logger.info("Wrote %d frames to %s", self.frames_written, self.path)
            self.writer = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
