class SketchCamError(Exception):
    """Base class for pipeline and device errors."""


class DimensionMismatch(SketchCamError, ValueError):
    """Two buffers that must share a size do not."""

    def __init__(self, a_size, b_size):
        self.a_size = a_size
        self.b_size = b_size
        super().__init__(
            f"Buffer sizes differ: {a_size[0]}x{a_size[1]} vs {b_size[0]}x{b_size[1]}"
        )


class AcquisitionFailure(SketchCamError):
    """The capture device could not deliver a frame."""


class EndOfStream(AcquisitionFailure):
    """A finite source (e.g. a video file) has no more frames."""


class EmptyExport(SketchCamError):
    """Export was requested before any frame was produced."""
