# projector.py
# Moves the sprite in depth, maps depth → scale, layers the nose nudge on top.
#
# Depth is the vertical screen position: min_y is far (top, tiny sprite),
# max_y is close (bottom, large sprite).
# =============================================================================

from typing import Optional

from .conditioner import SecondaryCursor
from .config import SketchConfig
from .easing import clamp, lerp, map_range

# Animation names understood by the actor
ANIM_IDLE     = "idle"
ANIM_FORWARD  = "forward"     # walking toward the viewer
ANIM_BACKWARD = "backward"    # walking away from the viewer


class ActorPose:
    """Mutable pose of the single sprite. Owned by the session."""
    __slots__ = ("x", "depth_y", "scale", "mirrored", "animation",
                 "frame_delay", "velocity_y")

    def __init__(self, x: float, depth_y: float, scale: float):
        self.x           = x
        self.depth_y     = depth_y
        self.scale       = scale
        self.mirrored    = False
        self.animation   = ANIM_IDLE
        self.frame_delay = 8          # calm breathing until the first update
        self.velocity_y  = 0.0

    @property
    def moving(self) -> bool:
        return self.animation != ANIM_IDLE

    def __repr__(self):
        return (f"ActorPose(x={self.x:.1f}, depth_y={self.depth_y:.1f}, "
                f"scale={self.scale:.3f}, animation={self.animation!r})")


class DepthProjector:
    """
    Position / scale / secondary-control projector.

    Mirroring is never applied: both walk cycles face forward, and the
    backward cycle already shows the sprite's back.
    """

    def __init__(self, config: SketchConfig):
        self._cfg = config

    def initial_pose(self) -> ActorPose:
        """Centred horizontally, at the close bound, full size."""
        c = self._cfg
        return ActorPose(c.canvas_w / 2, c.max_y, self.depth_scale(c.max_y))

    # ── motion ────────────────────────────────────────────────────────────
    def move_toward(self, pose: ActorPose, target: float, speed: float):
        distance = target - pose.depth_y
        if abs(distance) <= self._cfg.arrive_epsilon:
            self.hold(pose)
            return
        if distance > 0:
            # Toward the viewer. Already at the close bound → nowhere to go.
            if pose.depth_y >= self._cfg.max_y:
                self.hold(pose)
                return
            pose.depth_y   += speed
            pose.velocity_y = speed
            pose.animation  = ANIM_FORWARD
        else:
            pose.depth_y   -= speed
            pose.velocity_y = -speed
            pose.animation  = ANIM_BACKWARD
        pose.mirrored = False

    def hold(self, pose: ActorPose):
        pose.velocity_y = 0.0
        pose.animation  = ANIM_IDLE
        pose.mirrored   = False

    # ── depth → scale ─────────────────────────────────────────────────────
    def clamp_depth(self, y: float) -> float:
        return clamp(y, self._cfg.min_y, self._cfg.max_y)

    def depth_scale(self, y: float) -> float:
        c = self._cfg
        return map_range(y, c.min_y, c.max_y, c.min_scale, c.max_scale)

    # ── secondary nose control ────────────────────────────────────────────
    def apply_nose(self, pose: ActorPose, cursor: Optional[SecondaryCursor]) -> bool:
        """
        Nudge the pose toward the cursor. Runs on top of whatever the
        behaviour did this frame; returns False when there is no cursor yet.
        """
        if cursor is None:
            return False
        c = self._cfg
        target_x = clamp(cursor.x, 0.0, c.canvas_w)
        pose.x = lerp(pose.x, target_x, c.nose_follow_x)

        nudge = map_range(cursor.y, 0.0, c.canvas_h,
                          -c.nose_nudge_range, c.nose_nudge_range)
        pose.depth_y = self.clamp_depth(
            lerp(pose.depth_y, pose.depth_y + nudge, c.nose_nudge_blend))
        return True
