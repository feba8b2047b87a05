# conditioner.py
# Turns raw sensor readings into the two scalars the loop consumes:
#   mic amplitude → sound level (gain + clamp), absent → None
#   face keypoint → smoothed secondary cursor, sticky once set
# =============================================================================

from typing import Optional, Tuple

from .config import SketchConfig
from .easing import clamp, lerp


class SecondaryCursor:
    """Smoothed canvas-space position derived from the tracked face keypoint."""
    __slots__ = ("x", "y")

    def __init__(self, x: float, y: float):
        self.x = x; self.y = y

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self):
        return f"SecondaryCursor(x={self.x:.1f}, y={self.y:.1f})"


class SignalConditioner:
    """
    Owns the secondary cursor. A lost face is a normal state, not an error:
    the last smoothed cursor simply stays where it was.
    """

    def __init__(self, config: SketchConfig):
        self._cfg   = config
        self.level: Optional[float] = None
        self.cursor: Optional[SecondaryCursor] = None

    def condition_level(self, raw: Optional[float]) -> Optional[float]:
        """Gain and clamp the mic amplitude; None means no mic yet."""
        if raw is None:
            self.level = None
        else:
            self.level = clamp(raw * self._cfg.mic_gain, 0.0, 1.0)
        return self.level

    def update_cursor(self, keypoint: Optional[Tuple[float, float]]) -> Optional[SecondaryCursor]:
        """Fold one keypoint sample (already in canvas space) into the cursor."""
        if keypoint is None:
            return self.cursor
        kx, ky = keypoint
        if self.cursor is None:
            self.cursor = SecondaryCursor(float(kx), float(ky))
        else:
            k = self._cfg.nose_smoothing
            self.cursor.x = lerp(self.cursor.x, kx, k)
            self.cursor.y = lerp(self.cursor.y, ky, k)
        return self.cursor
