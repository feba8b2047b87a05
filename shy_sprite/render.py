# render.py
# pygame side of the sketch: the sprite actor, the fake-3D corridor, the
# debug HUD and the nose cursor. Nothing here feeds back into the control loop.
# =============================================================================

import glob
import math
import os

import numpy as np
import pygame

from .config import SOUND_THRESHOLD
from .easing import clamp, map_range
from .projector import ANIM_BACKWARD, ANIM_FORWARD, ANIM_IDLE

# ---------------------------------------------------------------------------
# 1. CONSTANTS
# ---------------------------------------------------------------------------
BG_COLOR        = (100, 150, 200)     # sky blue
LINE_COLOR      = (255, 255, 255, 150)
TEXT_COLOR      = (255, 255, 255)
HINT_COLOR      = (255, 255, 255, 200)
SCORE_BAR_COLOR = (100, 200, 100)
SOUND_BAR_COLOR = (200, 100, 100)
CURSOR_COLOR    = (255, 50, 50)
CURSOR_SIZE     = 30                  # diameter of the nose dot
KEYPOINT_SIZE   = 3
KEYPOINT_COLOR  = (0, 255, 120)

SPRITE_W        = 120                 # procedural sprite size at scale 1
SPRITE_H        = 200

# Frame folders inside the package (shipped as package data); one PNG per frame, sorted by name
_ANIM_FOLDER = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                            "assets", "animations")
_ANIM_DIRS = {ANIM_IDLE: "idle", ANIM_FORWARD: "walk", ANIM_BACKWARD: "walkBack"}
_PROCEDURAL_FRAMES = {ANIM_IDLE: 9, ANIM_FORWARD: 13, ANIM_BACKWARD: 13}


# ---------------------------------------------------------------------------
# 2. FRAME SOURCES
# ---------------------------------------------------------------------------
def load_frames(folder: str):
    """Load every *.png in folder, sorted. Empty list when there is nothing."""
    frames = []
    for path in sorted(glob.glob(os.path.join(folder, "*.png"))):
        try:
            frames.append(pygame.image.load(path).convert_alpha())
        except pygame.error as exc:
            print(f"[WARNING] Skipping {path}: {exc}")
    return frames


def _draw_figure(surf, phase: float, walking: bool, facing_viewer: bool):
    """A round-headed little figure. phase in [0, 1) drives breathing / stride."""
    w, h   = surf.get_size()
    cx     = w // 2
    swing  = math.sin(phase * math.tau)
    breath = 0.0 if walking else 0.03 * swing
    bob    = int(abs(swing) * 4) if walking else 0

    body_h = int(h * (0.42 + breath))
    body   = pygame.Rect(0, 0, int(w * 0.56), body_h)
    body.midbottom = (cx, int(h * 0.80) - bob)
    pygame.draw.ellipse(surf, (240, 170, 60), body)

    head_r = int(w * 0.26)
    head_c = (cx, body.top - head_r + 8)
    pygame.draw.circle(surf, (250, 215, 160), head_c, head_r)

    # legs: alternate while walking, together while idle
    stride = int(swing * w * 0.10) if walking else 0
    for sx, off in ((-1, stride), (1, -stride)):
        top = (cx + sx * int(w * 0.12), body.bottom - 6)
        foot = (top[0] + off, h - 6)
        pygame.draw.line(surf, (60, 60, 80), top, foot, 7)

    if facing_viewer:
        ey = head_c[1] - 4
        for ex in (head_c[0] - head_r // 3, head_c[0] + head_r // 3):
            pygame.draw.circle(surf, (30, 30, 40), (ex, ey), 4)
        pygame.draw.arc(surf, (30, 30, 40),
                        (head_c[0] - 9, head_c[1] + 2, 18, 10), math.pi, math.tau, 2)
    else:
        # back of the head: hair
        pygame.draw.circle(surf, (90, 60, 40), head_c, head_r - 4)


def procedural_frames(name: str):
    n = _PROCEDURAL_FRAMES[name]
    frames = []
    for i in range(n):
        surf = pygame.Surface((SPRITE_W, SPRITE_H), pygame.SRCALPHA)
        _draw_figure(surf, i / n, walking=(name != ANIM_IDLE),
                     facing_viewer=(name != ANIM_BACKWARD))
        frames.append(surf)
    return frames


class Animation:
    """Looping frame sequence; advances one frame every frame_delay ticks."""
    __slots__ = ("name", "frames", "frame_delay", "_index", "_ticks")

    def __init__(self, name: str, frames):
        if not frames:
            raise ValueError(f"animation {name!r} has no frames")
        self.name        = name
        self.frames      = frames
        self.frame_delay = 4
        self._index      = 0
        self._ticks      = 0

    def rewind(self):
        self._index = 0; self._ticks = 0

    def tick(self):
        self._ticks += 1
        if self._ticks >= max(1, self.frame_delay):
            self._ticks = 0
            self._index = (self._index + 1) % len(self.frames)

    @property
    def image(self):
        return self.frames[self._index]


# ---------------------------------------------------------------------------
# 3. SPRITE ACTOR  (the actor service the session writes into)
# ---------------------------------------------------------------------------
class SpriteActor:
    """Position, scale, mirror flag and a named-animation switch."""

    def __init__(self, animations: dict):
        self.animations = animations
        self.x, self.y  = 0.0, 0.0
        self.scale      = 1.0
        self.mirror_x   = False
        self.ani        = animations[ANIM_IDLE]

    @classmethod
    def load(cls, folder: str = _ANIM_FOLDER):
        """Frames from disk where present, drawn procedurally otherwise."""
        anims = {}
        for name, sub in _ANIM_DIRS.items():
            frames = load_frames(os.path.join(folder, sub))
            if not frames:
                print(f"[INFO] No frames for '{name}' in {sub}/ — using procedural sprite")
                frames = procedural_frames(name)
            anims[name] = Animation(name, frames)
        return cls(anims)

    # ── actor service ─────────────────────────────────────────────────────
    def set_position(self, x, y):
        self.x, self.y = x, y

    def get_position(self):
        return (self.x, self.y)

    def set_scale(self, s):
        self.scale = s

    def set_mirror(self, flag):
        self.mirror_x = bool(flag)

    def set_animation(self, name, frame_delay=None):
        if self.ani.name != name:
            self.ani = self.animations[name]
            self.ani.rewind()
        if frame_delay is not None:
            self.ani.frame_delay = frame_delay

    # ── drawing ───────────────────────────────────────────────────────────
    def draw(self, surface):
        img = self.ani.image
        w = max(1, int(img.get_width()  * self.scale))
        h = max(1, int(img.get_height() * self.scale))
        img = pygame.transform.smoothscale(img, (w, h))
        if self.mirror_x:
            img = pygame.transform.flip(img, True, False)
        surface.blit(img, img.get_rect(center=(int(self.x), int(self.y))))
        self.ani.tick()


# ---------------------------------------------------------------------------
# 4. SCENE
# ---------------------------------------------------------------------------
def draw_video(surface, frame):
    """Draw an RGB camera frame (H×W×3, already mirrored) fit-to-height."""
    if frame is None:
        return
    cw, ch = surface.get_size()
    fh, fw = frame.shape[:2]
    s = ch / fh
    img = pygame.surfarray.make_surface(np.transpose(frame, (1, 0, 2)))
    img = pygame.transform.scale(img, (int(fw * s), ch))
    surface.blit(img, ((cw - img.get_width()) // 2, 0))


def draw_perspective(surface, min_y: float):
    """Corridor: two walls converging on a back line at min_y, then straight up."""
    w, h = surface.get_size()
    layer = pygame.Surface((w, h), pygame.SRCALPHA)
    l, r = w * 0.4, w * 0.6
    for a, b in (((0, h), (l, min_y)),
                 ((w, h), (r, min_y)),
                 ((l, min_y), (r, min_y)),
                 ((l, min_y), (l, 0)),
                 ((r, min_y), (r, 0))):
        pygame.draw.line(layer, LINE_COLOR, a, b, 2)
    surface.blit(layer, (0, 0))


def draw_cursor(surface, cursor):
    if cursor is None:
        return
    layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    pygame.draw.circle(layer, (*CURSOR_COLOR, 220),
                       (int(cursor.x), int(cursor.y)), CURSOR_SIZE // 2)
    surface.blit(layer, (0, 0))


def draw_keypoints(surface, keypoints: dict):
    for x, y in keypoints.values():
        pygame.draw.circle(surface, KEYPOINT_COLOR, (int(x), int(y)), KEYPOINT_SIZE)


class Hud:
    """Debug readout: sound level, threshold, introversion, two bars."""

    def __init__(self):
        self.font  = pygame.font.Font(None, 22)
        self.small = pygame.font.Font(None, 17)

    def draw(self, surface, frame, threshold: float = SOUND_THRESHOLD):
        level = frame.level if frame.level is not None else 0.0
        mic   = "" if frame.level is not None else "  (mic off)"
        lines = [(f"Sound Level: {level:.3f}{mic}", 10),
                 (f"Threshold: {threshold}", 30),
                 (f"Introversion: {frame.score:.1f}   [{frame.state.value}]", 60)]
        for text, y in lines:
            surface.blit(self.font.render(text, True, TEXT_COLOR), (10, y))

        bar = map_range(frame.score, 0, 100, 0, 200)
        pygame.draw.rect(surface, SCORE_BAR_COLOR, (10, 85, int(bar), 15))
        sbar = clamp(map_range(level, 0, 0.5, 0, 200), 0, 200)
        pygame.draw.rect(surface, SOUND_BAR_COLOR, (10, 110, int(sbar), 15))

        hint = self.small.render("Click to hide/show info", True, HINT_COLOR)
        surface.blit(hint, (10, 135))
