"""
Sensor service and actor playback tests.

Tests the pure pieces of the camera/mic services and the sprite actor's
animation switching. No camera, microphone or display is opened.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest
from unittest.mock import MagicMock, patch

import numpy as np

from shy_sprite import sensors
from shy_sprite.sensors import (FaceTracker, MicMonitor, estimate_keypoints,
                                map_keypoint)


class TestKeypointMapping(unittest.TestCase):
    """Test camera → canvas mapping and keypoint estimation."""

    def test_frame_centre_maps_to_canvas_centre(self):
        x, y = map_keypoint(160, 120, 320, 240, 405, 720)
        self.assertAlmostEqual(x, 202.5)
        self.assertAlmostEqual(y, 360.0)

    def test_fit_height_overflows_and_mirrors(self):
        # 320x240 scaled x3 is 960 wide, centred → left edge at -277.5
        x, _ = map_keypoint(0, 0, 320, 240, 405, 720, mirror=False)
        self.assertAlmostEqual(x, -277.5)
        x, _ = map_keypoint(0, 0, 320, 240, 405, 720)
        self.assertAlmostEqual(x, 682.5)

    def test_nose_sits_below_face_centre(self):
        kps = estimate_keypoints((100, 50, 80, 100))
        self.assertEqual(kps[0], (140.0, 100.0))
        self.assertEqual(kps[1], (140.0, 110.0))
        self.assertLess(kps[2][1], kps[0][1])


class TestServicesWithoutDevices(unittest.TestCase):
    """Test service state when capture threads are never started."""

    def test_face_tracker_reports_nothing(self):
        tracker = FaceTracker(405, 720, autostart=False)
        self.assertIsNone(tracker.get_keypoint(1))
        self.assertEqual(tracker.all_keypoints(), {})
        self.assertIsNone(tracker.read_frame())
        tracker.stop()

    def test_mic_unavailable_until_samples_arrive(self):
        mic = MicMonitor(autostart=False)
        self.assertFalse(mic.is_available())
        self.assertEqual(mic.get_level(), 0.0)

    def test_mic_level_is_rolling_mean(self):
        mic = MicMonitor(autostart=False)
        for rms in (0.1, 0.2, 0.3):
            mic._push(rms)
        self.assertTrue(mic.is_available())
        self.assertAlmostEqual(mic.get_level(), 0.2)
        mic._push(0.6)
        self.assertAlmostEqual(mic.get_level(), (0.2 + 0.3 + 0.6) / 3)

    def test_capture_error_retries_instead_of_disabling(self):
        """A failing read is reported once and capture carries on."""
        mic = MicMonitor(autostart=False)
        chunk = np.full((512, 1), 0.5, dtype=np.float32)
        calls = []

        def rec(*args, **kwargs):
            calls.append(1)
            if len(calls) <= 3:
                raise OSError("input overflow")
            mic.running = False
            return chunk

        fake_sd = MagicMock()
        fake_sd.rec.side_effect = rec
        mic.running = True
        with patch.object(sensors, "sd", fake_sd, create=True), \
                patch.object(sensors.time, "sleep") as sleep, \
                patch("builtins.print") as printed:
            mic._loop()

        self.assertEqual(len(calls), 4)
        self.assertEqual(sleep.call_count, 3)
        self.assertEqual(printed.call_count, 1)
        self.assertIn("Capture error", printed.call_args[0][0])
        self.assertTrue(mic.is_available())
        self.assertAlmostEqual(mic.get_level(), 0.5)


class TestSpriteActor(unittest.TestCase):
    """Test animation switching and frame-delay playback."""

    def setUp(self):
        from shy_sprite.render import Animation, SpriteActor
        self.Animation = Animation
        self.actor = SpriteActor({
            "idle":     Animation("idle", ["i0", "i1", "i2"]),
            "forward":  Animation("forward", ["f0", "f1"]),
            "backward": Animation("backward", ["b0", "b1"]),
        })

    def test_frame_delay_controls_playback(self):
        self.actor.set_animation("idle", 2)
        seen = []
        for _ in range(6):
            seen.append(self.actor.ani.image)
            self.actor.ani.tick()
        self.assertEqual(seen, ["i0", "i0", "i1", "i1", "i2", "i2"])

    def test_switching_rewinds_new_animation(self):
        self.actor.set_animation("forward", 1)
        self.actor.ani.tick()
        self.assertEqual(self.actor.ani.image, "f1")
        self.actor.set_animation("idle", 3)
        self.actor.set_animation("forward", 1)
        self.assertEqual(self.actor.ani.image, "f0")

    def test_same_animation_keeps_playing(self):
        self.actor.set_animation("forward", 1)
        self.actor.ani.tick()
        self.actor.set_animation("forward", 4)
        self.assertEqual(self.actor.ani.image, "f1")
        self.assertEqual(self.actor.ani.frame_delay, 4)

    def test_actor_service_setters(self):
        self.actor.set_position(10, 20)
        self.actor.set_scale(0.5)
        self.actor.set_mirror(0)
        self.assertEqual(self.actor.get_position(), (10, 20))
        self.assertEqual(self.actor.scale, 0.5)
        self.assertIs(self.actor.mirror_x, False)

    def test_frame_folder_ships_inside_package(self):
        from shy_sprite import render
        pkg = os.path.dirname(os.path.abspath(render.__file__))
        folder = os.path.abspath(render._ANIM_FOLDER)
        self.assertEqual(os.path.commonpath([pkg, folder]), pkg)
        self.assertTrue(os.path.isdir(folder))

    def test_empty_animation_rejected(self):
        with self.assertRaises(ValueError):
            self.Animation("idle", [])


if __name__ == "__main__":
    unittest.main()
