# behavior.py
# Stateless behaviour selector. Re-evaluated from scratch every frame from
# (sound level, introversion score); the only memory is the score itself.
#
#                    │ score < panic │ panic..comfort │ score > comfort
#   ─────────────────┼───────────────┼────────────────┼────────────────
#   loud             │  RETREATING   │    HOLDING     │    HOLDING
#   quiet            │   HOLDING     │    HOLDING     │  APPROACHING
#   no mic           │   HOLDING     │    HOLDING     │    HOLDING
# =============================================================================

from enum import Enum
from typing import Optional

from .config import SketchConfig


class BehaviorState(Enum):
    APPROACHING = "approaching"    # walk toward the close bound
    RETREATING  = "retreating"     # walk back toward the far bound
    HOLDING     = "holding"        # stay put, idle


# Comfort bands, relative to the panic/comfort thresholds
PANICKED    = "panicked"
UNEASY      = "uneasy"
COMFORTABLE = "comfortable"

# (loud?, band) → state. Loud uses "score < panic", quiet uses
# "score > comfort"; the band function below encodes both edges.
_DECISION_TABLE = {
    (True,  PANICKED):    BehaviorState.RETREATING,
    (True,  UNEASY):      BehaviorState.HOLDING,
    (True,  COMFORTABLE): BehaviorState.HOLDING,
    (False, PANICKED):    BehaviorState.HOLDING,
    (False, UNEASY):      BehaviorState.HOLDING,
    (False, COMFORTABLE): BehaviorState.APPROACHING,
}


def comfort_band(score: float, config: SketchConfig) -> str:
    # score == panic is not panicked; score == comfort is not comfortable
    if score < config.panic_threshold:
        return PANICKED
    if score > config.comfort_threshold:
        return COMFORTABLE
    return UNEASY


def select_behavior(level: Optional[float], score: float,
                    config: SketchConfig) -> BehaviorState:
    """Pick this frame's behaviour. No mic signal is treated as a quiet hold."""
    if level is None:
        return BehaviorState.HOLDING
    loud = level > config.sound_threshold
    return _DECISION_TABLE[(loud, comfort_band(score, config))]


def target_depth(state: BehaviorState, config: SketchConfig) -> Optional[float]:
    if state is BehaviorState.APPROACHING:
        return config.max_y
    if state is BehaviorState.RETREATING:
        return config.min_y
    return None
