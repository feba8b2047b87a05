# app.py
# Window + main loop: poll sensors → session.step → draw.
#
# Controls:
#   LEFT CLICK   show / hide debug info
#   RIGHT CLICK  show / hide camera backdrop   (also V)
#   K            show / hide all face keypoints
#   N            nose control on / off
#   ESC          quit
# =============================================================================

import os

import pygame

from .config import CANVAS_H, CANVAS_W, FPS_TARGET, SketchConfig
from .render import (BG_COLOR, Hud, SpriteActor, draw_cursor, draw_keypoints,
                     draw_perspective, draw_video)
from .sensors import CAM_INDEX, FaceTracker, MicMonitor
from .session import SketchSession


def _env_device(name: str, default=None):
    """Env override: integer index when numeric, device name otherwise."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return int(raw) if raw.lstrip("-").isdigit() else raw


def main():
    pygame.init()
    screen = pygame.display.set_mode((CANVAS_W, CANVAS_H))

    print("\n=== Shy Sprite — sound-driven introversion ===")
    print("LEFT CLICK: debug info  |  RIGHT CLICK / V: camera backdrop")
    print("K: keypoints  |  N: nose control  |  ESC: quit")
    pygame.display.set_caption("Shy Sprite  |  click=info  V=video  K=keypoints  N=nose")

    clock   = pygame.time.Clock()
    config  = SketchConfig.for_canvas(CANVAS_W, CANVAS_H)
    actor   = SpriteActor.load()
    session = SketchSession(config, actor=actor)
    hud     = Hud()

    mic     = MicMonitor(device=_env_device("SHY_MIC_DEVICE"))
    tracker = FaceTracker(CANVAS_W, CANVAS_H,
                          cam_index=_env_device("SHY_CAM_INDEX", CAM_INDEX))

    show_info      = True
    show_video     = True
    show_keypoints = True

    running = True
    try:
        while running:
            clock.tick(FPS_TARGET)

            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False

                elif ev.type == pygame.MOUSEBUTTONDOWN:
                    if ev.button == 1:
                        show_info = not show_info
                    elif ev.button == 3:
                        show_video = not show_video

                elif ev.type == pygame.KEYDOWN:
                    if ev.key == pygame.K_ESCAPE:
                        running = False
                    elif ev.key == pygame.K_v:
                        show_video = not show_video
                    elif ev.key == pygame.K_k:
                        show_keypoints = not show_keypoints
                    elif ev.key == pygame.K_n:
                        session.nose_control = not session.nose_control
                        print(f"Nose control: {'ON' if session.nose_control else 'OFF'}")

            tracker.keep_frames = show_video
            frame = session.poll(mic, tracker)

            screen.fill(BG_COLOR)
            if show_video:
                draw_video(screen, tracker.read_frame())
            if show_keypoints:
                draw_keypoints(screen, tracker.all_keypoints())
            actor.draw(screen)
            draw_cursor(screen, session.cursor)
            draw_perspective(screen, config.min_y)
            if show_info:
                hud.draw(screen, frame, config.sound_threshold)
            pygame.display.flip()

    finally:
        tracker.stop()
        mic.stop()
        pygame.quit()


if __name__ == "__main__":
    main()
