# session.py
# One sketch session = one sprite, one comfort score, one nose cursor.
# step() is the whole per-frame control loop, in this order:
#   condition → integrate score → select behaviour → move → clamp → nose → scale
# Same input sequence in, same (depth, scale, state) sequence out.
# =============================================================================

from dataclasses import dataclass
from typing import Optional, Tuple

from .behavior import BehaviorState, select_behavior, target_depth
from .conditioner import SignalConditioner
from .config import NOSE_KEYPOINT_INDEX, SketchConfig
from .introversion import IntroversionState
from .projector import ANIM_IDLE, DepthProjector


@dataclass(frozen=True)
class FrameResult:
    """Snapshot of one frame, for the HUD and for tests."""
    state: BehaviorState
    level: Optional[float]
    score: float
    x: float
    depth_y: float
    scale: float
    animation: str
    frame_delay: int
    nose_applied: bool


class SketchSession:
    """
    Owns all mutable sketch state. The actor, when given, is any object with
    set_position(x, y), set_scale(s), set_animation(name, frame_delay) and
    set_mirror(flag); it is written after every step.
    """

    def __init__(self, config: Optional[SketchConfig] = None, actor=None,
                 keypoint_index: int = NOSE_KEYPOINT_INDEX,
                 nose_control: bool = True):
        self.config       = config or SketchConfig()
        self.actor        = actor
        self.keypoint_index = keypoint_index
        self.nose_control = nose_control

        self.introversion = IntroversionState(self.config)
        self.conditioner  = SignalConditioner(self.config)
        self.projector    = DepthProjector(self.config)
        self.pose         = self.projector.initial_pose()
        self.state        = BehaviorState.HOLDING
        self.frames       = 0
        self._push_to_actor()

    @property
    def score(self) -> float:
        return self.introversion.score

    @property
    def cursor(self):
        return self.conditioner.cursor

    # ── per-frame ─────────────────────────────────────────────────────────
    def poll(self, audio, face) -> FrameResult:
        """
        Read both services and step once. Either may be None (not started).
        audio: is_available() / get_level();  face: get_keypoint(index).
        """
        raw = None
        if audio is not None and audio.is_available():
            raw = audio.get_level()
        keypoint = face.get_keypoint(self.keypoint_index) if face is not None else None
        return self.step(raw, keypoint)

    def step(self, raw_level: Optional[float],
             keypoint: Optional[Tuple[float, float]] = None) -> FrameResult:
        cfg, intro, pose = self.config, self.introversion, self.pose

        level  = self.conditioner.condition_level(raw_level)
        cursor = self.conditioner.update_cursor(keypoint)

        intro.update(level)
        self.state = select_behavior(level, intro.score, cfg)

        target = target_depth(self.state, cfg)
        if target is None:
            self.projector.hold(pose)
        else:
            self.projector.move_toward(pose, target, intro.movement_speed)

        if level is not None:
            pose.frame_delay = (intro.idle_frame_delay if pose.animation == ANIM_IDLE
                                else intro.walk_frame_delay)

        pose.depth_y = self.projector.clamp_depth(pose.depth_y)

        nose_applied = False
        if self.nose_control:
            nose_applied = self.projector.apply_nose(pose, cursor)

        pose.scale = self.projector.depth_scale(pose.depth_y)
        self.frames += 1
        self._push_to_actor()

        return FrameResult(state=self.state, level=level, score=intro.score,
                           x=pose.x, depth_y=pose.depth_y, scale=pose.scale,
                           animation=pose.animation, frame_delay=pose.frame_delay,
                           nose_applied=nose_applied)

    def _push_to_actor(self):
        if self.actor is None:
            return
        p = self.pose
        self.actor.set_position(p.x, p.depth_y)
        self.actor.set_scale(p.scale)
        self.actor.set_animation(p.animation, p.frame_delay)
        self.actor.set_mirror(p.mirrored)
