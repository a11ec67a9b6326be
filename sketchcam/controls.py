"""
Control surface state: active filter mode, strength and blend factor.

The render loop reads one snapshot per tick through ``read()``. Setters clamp
to the slider ranges of the UI; the pipeline itself never clamps.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from .filters import DEFAULT_STRENGTH, FilterMode, FilterParameters

logger = logging.getLogger(__name__)

STRENGTH_MIN = 0.1
STRENGTH_MAX = 5.0
STRENGTH_STEP = 0.1

DEFAULT_BLEND = 1.0
BLEND_MIN = 0.0
BLEND_MAX = 1.0
BLEND_STEP = 0.05

DEFAULT_MODE = FilterMode.SKETCH

# Keyboard bindings for the OpenCV window
MODE_KEYS = {
    ord("1"): FilterMode.SKETCH,
    ord("s"): FilterMode.SKETCH,
    ord("2"): FilterMode.CARTOON,
    ord("c"): FilterMode.CARTOON,
    ord("3"): FilterMode.CHARCOAL,
    ord("h"): FilterMode.CHARCOAL,
}
KEY_STRENGTH_UP = (ord("+"), ord("="))
KEY_STRENGTH_DOWN = (ord("-"), ord("_"))
KEY_BLEND_UP = (ord("]"),)
KEY_BLEND_DOWN = (ord("["),)
KEY_SAVE = (ord("p"),)
KEY_QUIT = (ord("q"), 27)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(value)))


class ControlPanel:
    """
    Mutable stand-in for the on-screen sliders and mode buttons.

    Also carries the single-line ``status`` message shown to the user.
    """

    def __init__(self,
                 mode: FilterMode = DEFAULT_MODE,
                 strength: float = DEFAULT_STRENGTH,
                 blend_factor: float = DEFAULT_BLEND):
        self.mode = FilterMode(mode)
        self.strength = _clamp(strength, STRENGTH_MIN, STRENGTH_MAX)
        self.blend_factor = _clamp(blend_factor, BLEND_MIN, BLEND_MAX)
        self.status = ""

    def read(self) -> Tuple[FilterMode, FilterParameters]:
        return self.mode, FilterParameters(self.strength, self.blend_factor)

    def set_status(self, message: str) -> None:
        self.status = message
        logger.info(message)

    def set_mode(self, mode: FilterMode) -> None:
        self.mode = FilterMode(mode)
        self.set_status(f"Mode: {self.mode.label}")

    def set_strength(self, value: float) -> float:
        self.strength = round(_clamp(value, STRENGTH_MIN, STRENGTH_MAX), 2)
        return self.strength

    def set_blend(self, value: float) -> float:
        self.blend_factor = round(_clamp(value, BLEND_MIN, BLEND_MAX), 2)
        return self.blend_factor

    def handle_key(self, key: int) -> Optional[str]:
        """
        Apply a key press.

        Returns:
            "save" or "quit" for keys the caller has to act on, else None.
        """
        if key in MODE_KEYS:
            self.set_mode(MODE_KEYS[key])
        elif key in KEY_STRENGTH_UP:
            self.set_strength(self.strength + STRENGTH_STEP)
            logger.debug("strength=%.2f", self.strength)
        elif key in KEY_STRENGTH_DOWN:
            self.set_strength(self.strength - STRENGTH_STEP)
            logger.debug("strength=%.2f", self.strength)
        elif key in KEY_BLEND_UP:
            self.set_blend(self.blend_factor + BLEND_STEP)
            logger.debug("blend=%.2f", self.blend_factor)
        elif key in KEY_BLEND_DOWN:
            self.set_blend(self.blend_factor - BLEND_STEP)
            logger.debug("blend=%.2f", self.blend_factor)
        elif key in KEY_SAVE:
            return "save"
        elif key in KEY_QUIT:
            return "quit"
        return None
