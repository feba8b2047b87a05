# introversion.py
# Comfort score: quiet frames build it up slowly, loud frames tear it down.
# Everything else (speed, breathing cadence) is read off the score.
# =============================================================================

from typing import Optional

from .config import SCORE_MAX, SCORE_MIN, SketchConfig
from .easing import clamp, map_range


class IntroversionState:
    """
    Bounded comfort score in [0, 100], created once per session and never reset.

    Low score = stressed: faster movement, faster animation playback.
    High score = calm: slow walk, slow breathing.
    """

    def __init__(self, config: SketchConfig):
        self._cfg  = config
        self.score = float(config.score_initial)

    def update(self, level: Optional[float]) -> float:
        """Integrate one frame of conditioned sound level. None leaves the score alone."""
        if level is None:
            return self.score
        if level > self._cfg.sound_threshold:
            self.score -= self._cfg.loss_rate
        else:
            self.score += self._cfg.gain_rate
        self.score = clamp(self.score, SCORE_MIN, SCORE_MAX)
        return self.score

    @property
    def movement_speed(self) -> float:
        return map_range(self.score, SCORE_MIN, SCORE_MAX,
                         self._cfg.speed_stressed, self._cfg.speed_calm)

    @property
    def walk_frame_delay(self) -> int:
        return int(map_range(self.score, SCORE_MIN, SCORE_MAX,
                             self._cfg.walk_delay_stressed, self._cfg.walk_delay_calm))

    @property
    def idle_frame_delay(self) -> int:
        return int(map_range(self.score, SCORE_MIN, SCORE_MAX,
                             self._cfg.idle_delay_stressed, self._cfg.idle_delay_calm))
