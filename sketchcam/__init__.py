"""Live camera drawing filters: sketch, cartoon and charcoal."""

from .blend import blend
from .controls import ControlPanel
from .edges import compute_gradient, compute_luminance
from .errors import (AcquisitionFailure, DimensionMismatch, EmptyExport,
                     EndOfStream, SketchCamError)
from .filters import (FilterMode, FilterParameters, apply_filter, cartoon,
                      charcoal, sketch)
from .pixel_buffer import PixelBuffer
from .render_loop import LoopState, RenderLoop

__version__ = "1.0.0"

__all__ = [
    "AcquisitionFailure",
    "ControlPanel",
    "DimensionMismatch",
    "EmptyExport",
    "EndOfStream",
    "FilterMode",
    "FilterParameters",
    "LoopState",
    "PixelBuffer",
    "RenderLoop",
    "SketchCamError",
    "apply_filter",
    "blend",
    "cartoon",
    "charcoal",
    "compute_gradient",
    "compute_luminance",
    "sketch",
]
