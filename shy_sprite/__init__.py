"""Shy Sprite: a character that walks toward you in the quiet and retreats from noise."""

from .behavior import BehaviorState, select_behavior, target_depth
from .conditioner import SecondaryCursor, SignalConditioner
from .config import ConfigError, SketchConfig
from .introversion import IntroversionState
from .projector import ActorPose, DepthProjector
from .session import FrameResult, SketchSession

__version__ = "0.1.0"
