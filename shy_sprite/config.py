# config.py
# Tunables for the shy sprite, all in one place.
# Sections mirror the per-frame pipeline:
#   canvas | sound | introversion | behaviour | depth | cadence | nose
# =============================================================================

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# 1. CANVAS
# ---------------------------------------------------------------------------
CANVAS_W               = 405      # portrait, phone-like 9:16
CANVAS_H               = 720
FPS_TARGET             = 60

# ---------------------------------------------------------------------------
# 2. SOUND
# ---------------------------------------------------------------------------
MIC_GAIN               = 3.0      # raw mic level is quiet; boost before thresholding
SOUND_THRESHOLD        = 0.09     # conditioned level above this counts as "loud"

# ---------------------------------------------------------------------------
# 3. INTROVERSION
# ---------------------------------------------------------------------------
SCORE_MIN              = 0.0
SCORE_MAX              = 100.0
SCORE_INITIAL          = 100.0    # starts fully comfortable
SCORE_GAIN_RATE        = 0.2      # per quiet frame
SCORE_LOSS_RATE        = 1.0      # per loud frame

# ---------------------------------------------------------------------------
# 4. BEHAVIOUR THRESHOLDS
# ---------------------------------------------------------------------------
PANIC_THRESHOLD        = 30.0     # below this, loud noise → retreat
COMFORT_THRESHOLD      = 70.0     # above this, quiet → approach
# 30..70 is a dead zone: the sprite holds whatever the noise

# ---------------------------------------------------------------------------
# 5. MOVEMENT & DEPTH
# ---------------------------------------------------------------------------
SPEED_STRESSED         = 2.0      # px/frame at score 0
SPEED_CALM             = 0.3      # px/frame at score 100
ARRIVE_EPSILON         = 5.0      # px; closer than this counts as arrived
MIN_Y                  = 100.0    # far (top of corridor)
MAX_Y_MARGIN           = 150.0    # close bound sits this far above the bottom edge
MIN_SCALE              = 0.05     # tiny, far away
MAX_SCALE              = 1.5      # large, close up

# ---------------------------------------------------------------------------
# 6. ANIMATION CADENCE  (frame delay = render frames per sprite frame)
# ---------------------------------------------------------------------------
WALK_DELAY_STRESSED    = 2
WALK_DELAY_CALM        = 8
IDLE_DELAY_STRESSED    = 2        # fast, agitated breathing
IDLE_DELAY_CALM        = 12       # slow, calm breathing

# ---------------------------------------------------------------------------
# 7. NOSE CONTROL
# ---------------------------------------------------------------------------
NOSE_KEYPOINT_INDEX    = 1        # which face keypoint steers the sprite
NOSE_SMOOTHING         = 0.12     # lerp speed of the smoothed cursor
NOSE_FOLLOW_X          = 0.12     # horizontal blend toward the cursor
NOSE_NUDGE_RANGE       = 20.0     # ± px of vertical influence
NOSE_NUDGE_BLEND       = 0.06


class ConfigError(ValueError):
    """Raised at start-up when the tunables describe a degenerate sketch."""


@dataclass(frozen=True)
class SketchConfig:
    """
    Immutable tunables handed to a session. Defaults come from the module
    constants above; validate() runs on construction. For a non-default
    canvas use for_canvas(), which moves the close bound with the height.
    """
    canvas_w: float          = CANVAS_W
    canvas_h: float          = CANVAS_H
    mic_gain: float          = MIC_GAIN
    sound_threshold: float   = SOUND_THRESHOLD
    score_initial: float     = SCORE_INITIAL
    gain_rate: float         = SCORE_GAIN_RATE
    loss_rate: float         = SCORE_LOSS_RATE
    panic_threshold: float   = PANIC_THRESHOLD
    comfort_threshold: float = COMFORT_THRESHOLD
    speed_stressed: float    = SPEED_STRESSED
    speed_calm: float        = SPEED_CALM
    walk_delay_stressed: int = WALK_DELAY_STRESSED
    walk_delay_calm: int     = WALK_DELAY_CALM
    idle_delay_stressed: int = IDLE_DELAY_STRESSED
    idle_delay_calm: int     = IDLE_DELAY_CALM
    arrive_epsilon: float    = ARRIVE_EPSILON
    min_y: float             = MIN_Y
    max_y: float             = CANVAS_H - MAX_Y_MARGIN
    min_scale: float         = MIN_SCALE
    max_scale: float         = MAX_SCALE
    nose_smoothing: float    = NOSE_SMOOTHING
    nose_follow_x: float     = NOSE_FOLLOW_X
    nose_nudge_range: float  = NOSE_NUDGE_RANGE
    nose_nudge_blend: float  = NOSE_NUDGE_BLEND

    def __post_init__(self):
        self.validate()

    @classmethod
    def for_canvas(cls, width: float, height: float, **overrides) -> "SketchConfig":
        """Config whose close bound follows the canvas height."""
        overrides.setdefault("max_y", height - MAX_Y_MARGIN)
        return cls(canvas_w=width, canvas_h=height, **overrides)

    def validate(self):
        if self.canvas_w <= 0 or self.canvas_h <= 0:
            raise ConfigError(f"canvas must be positive, got {self.canvas_w}×{self.canvas_h}")
        if self.min_y >= self.max_y:
            raise ConfigError(f"depth bounds collapse: min_y={self.min_y} max_y={self.max_y}")
        if self.max_y > self.canvas_h:
            raise ConfigError(f"close bound max_y={self.max_y} is off the bottom of the canvas "
                              f"(height {self.canvas_h}); use SketchConfig.for_canvas")
        if self.min_scale == self.max_scale:
            raise ConfigError(f"scale bounds collapse at {self.min_scale}")
        if not SCORE_MIN <= self.score_initial <= SCORE_MAX:
            raise ConfigError(f"initial score {self.score_initial} outside "
                              f"[{SCORE_MIN}, {SCORE_MAX}]")
        if self.gain_rate <= 0 or self.loss_rate <= 0:
            raise ConfigError("gain and loss rates must be positive")
        if self.panic_threshold > self.comfort_threshold:
            raise ConfigError(f"panic threshold {self.panic_threshold} above "
                              f"comfort threshold {self.comfort_threshold}")
        if self.arrive_epsilon < 0:
            raise ConfigError("arrive epsilon must not be negative")
        for name in ("nose_smoothing", "nose_follow_x", "nose_nudge_blend"):
            v = getattr(self, name)
            if not 0.0 < v <= 1.0:
                raise ConfigError(f"{name}={v} must be in (0, 1]")
