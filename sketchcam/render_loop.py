"""
Per-frame render loop: capture -> filter -> blend -> display.

The loop is pull based. One tick runs the whole pipeline for a single frame
and the next tick starts only after it returns, so exactly one frame is ever
in flight. ``run`` iterates instead of rescheduling itself recursively;
``stop`` just ends the iteration.

Collaborators (duck typed):
    source.read() -> PixelBuffer        raises AcquisitionFailure
    controls.read() -> (FilterMode, FilterParameters)
    controls.set_status(message)
    sink.show(buffer, original=None)
"""
from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Optional, Union

import cv2

from .blend import blend
from .errors import AcquisitionFailure, DimensionMismatch, EmptyExport, EndOfStream
from .export import DEFAULT_SNAPSHOT_NAME, save_png
from .filters import apply_filter
from .pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

FPS_LOG_INTERVAL = 60

STATUS_STARTED = "Camera started. Filters are live."
STATUS_NO_CAMERA = "Could not access camera. Check the device and permissions."
STATUS_STREAM_ENDED = "Stream ended."


class LoopState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


class RenderLoop:
    def __init__(self, source, sink, controls, rng=None):
        """
        Args:
            source: Frame capture collaborator.
            sink: Display collaborator.
            controls: Control surface, read once at the start of each tick.
            rng: Random source handed to the Charcoal filter.
        """
        self.source = source
        self.sink = sink
        self.controls = controls
        self.rng = rng

        self.state = LoopState.IDLE
        self.last_frame: Optional[PixelBuffer] = None
        self.frames_rendered = 0
        self.frames_skipped = 0
        self.fps = 0.0

        self._tick_freq = cv2.getTickFrequency()
        self._prev_tick = None

    @property
    def running(self) -> bool:
        return self.state is LoopState.RUNNING

    def start(self) -> None:
        if self.running:
            return
        self.state = LoopState.RUNNING
        self._prev_tick = None
        self.controls.set_status(STATUS_STARTED)

    def stop(self) -> None:
        if self.running:
            logger.info("Render loop stopped after %d frames", self.frames_rendered)
        self.state = LoopState.IDLE

    def tick(self) -> Optional[PixelBuffer]:
        """
        Process one frame.

        Returns:
            The displayed buffer, or None when the loop is idle or the frame
            was skipped.

        Raises:
            AcquisitionFailure: the source could not deliver a frame. The loop
                is back in IDLE when this propagates.
        """
        if not self.running:
            return None

        try:
            frame = self.source.read()
        except EndOfStream:
            self.state = LoopState.IDLE
            self.controls.set_status(STATUS_STREAM_ENDED)
            raise
        except AcquisitionFailure as err:
            self.state = LoopState.IDLE
            logger.error("Frame acquisition failed: %s", err)
            self.controls.set_status(STATUS_NO_CAMERA)
            raise

        mode, params = self.controls.read()
        filtered = apply_filter(mode, frame, params.strength, rng=self.rng)
        try:
            output = blend(frame, filtered, params.blend_factor)
        except DimensionMismatch as err:
            self.frames_skipped += 1
            logger.warning("Skipping frame: %s", err)
            return None

        # Recorded before display: the sink may dispatch a snapshot key from show()
        self.last_frame = output
        self.sink.show(output, original=frame)
        self.frames_rendered += 1
        self._update_fps()
        return output

    def run(self, max_frames: Optional[int] = None) -> int:
        """
        Tick until stopped, the stream ends or ``max_frames`` ticks have run.

        Returns:
            Number of frames displayed.
        """
        self.start()
        shown = 0
        ticks = 0
        while self.running and (max_frames is None or ticks < max_frames):
            ticks += 1
            try:
                out = self.tick()
            except EndOfStream:
                logger.info("End of stream after %d frames", self.frames_rendered)
                break
            if out is not None:
                shown += 1
        return shown

    def save_snapshot(self, path: Union[str, Path] = DEFAULT_SNAPSHOT_NAME) -> Optional[Path]:
        """Export the last displayed frame; reports and returns None if there is none."""
        try:
            saved = save_png(self.last_frame, path)
        except EmptyExport as err:
            logger.warning("Snapshot skipped: %s", err)
            self.controls.set_status(str(err))
            return None
        self.controls.set_status(f"Image saved ({saved.name}).")
        return saved

    def _update_fps(self) -> None:
        cur_tick = cv2.getTickCount()
        if self._prev_tick is not None:
            dt = (cur_tick - self._prev_tick) / self._tick_freq
            if dt > 0:
                inst = 1.0 / dt
                self.fps = inst if self.fps == 0.0 else self.fps * 0.9 + inst * 0.1
        self._prev_tick = cur_tick

        if self.frames_rendered % FPS_LOG_INTERVAL == 0:
            logger.debug("%d frames, %.1f fps", self.frames_rendered, self.fps)
