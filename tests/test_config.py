"""
Configuration and numeric helper tests.

Tests defaults, start-up validation, and the easing helpers.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import dataclasses
import unittest

from shy_sprite.config import ConfigError, SketchConfig
from shy_sprite.easing import clamp, lerp, map_range


class TestSketchConfig(unittest.TestCase):
    """Test SketchConfig defaults and validation."""

    def test_defaults_match_portrait_canvas(self):
        """Close bound sits 150 px above the bottom of the 405x720 canvas."""
        cfg = SketchConfig()
        self.assertEqual(cfg.canvas_w, 405)
        self.assertEqual(cfg.canvas_h, 720)
        self.assertEqual(cfg.min_y, 100)
        self.assertEqual(cfg.max_y, 570)
        self.assertEqual(cfg.sound_threshold, 0.09)
        self.assertEqual((cfg.panic_threshold, cfg.comfort_threshold), (30, 70))
        self.assertLess(cfg.gain_rate, cfg.loss_rate)

    def test_for_canvas_derives_close_bound(self):
        cfg = SketchConfig.for_canvas(400, 800)
        self.assertEqual(cfg.max_y, 650)
        self.assertEqual(cfg.canvas_w, 400)

    def test_for_canvas_respects_explicit_bound(self):
        cfg = SketchConfig.for_canvas(400, 800, max_y=500)
        self.assertEqual(cfg.max_y, 500)

    def test_collapsed_depth_bounds_rejected(self):
        with self.assertRaises(ConfigError):
            SketchConfig(min_y=300, max_y=300)

    def test_inverted_depth_bounds_rejected(self):
        with self.assertRaises(ConfigError):
            SketchConfig(min_y=600, max_y=300)

    def test_close_bound_off_canvas_rejected(self):
        """A short canvas with the default close bound must use for_canvas."""
        with self.assertRaises(ConfigError):
            SketchConfig(canvas_h=300)
        cfg = SketchConfig.for_canvas(405, 300)
        self.assertEqual(cfg.max_y, 150)

    def test_close_bound_on_bottom_edge_allowed(self):
        cfg = SketchConfig(max_y=720)
        self.assertEqual(cfg.max_y, cfg.canvas_h)

    def test_collapsed_scale_bounds_rejected(self):
        with self.assertRaises(ConfigError):
            SketchConfig(min_scale=1.0, max_scale=1.0)

    def test_panic_above_comfort_rejected(self):
        with self.assertRaises(ConfigError):
            SketchConfig(panic_threshold=80, comfort_threshold=70)

    def test_blend_factor_out_of_range_rejected(self):
        with self.assertRaises(ConfigError):
            SketchConfig(nose_smoothing=0.0)
        with self.assertRaises(ConfigError):
            SketchConfig(nose_nudge_blend=1.5)

    def test_non_positive_rates_rejected(self):
        with self.assertRaises(ConfigError):
            SketchConfig(gain_rate=0.0)

    def test_config_error_is_value_error(self):
        self.assertTrue(issubclass(ConfigError, ValueError))

    def test_config_is_frozen(self):
        cfg = SketchConfig()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            cfg.sound_threshold = 0.5


class TestEasing(unittest.TestCase):
    """Test clamp, lerp and map_range."""

    def test_clamp(self):
        self.assertEqual(clamp(-1, 0, 1), 0)
        self.assertEqual(clamp(2, 0, 1), 1)
        self.assertEqual(clamp(0.4, 0, 1), 0.4)

    def test_lerp(self):
        self.assertAlmostEqual(lerp(10, 20, 0.25), 12.5)

    def test_map_range_inverse(self):
        """Score 20 maps to roughly 1.66 px/frame on the inverted speed range."""
        self.assertAlmostEqual(map_range(20, 0, 100, 2.0, 0.3), 1.66)
        self.assertAlmostEqual(map_range(0, 0, 100, 2.0, 0.3), 2.0)
        self.assertAlmostEqual(map_range(100, 0, 100, 2.0, 0.3), 0.3)

    def test_map_range_is_unclamped(self):
        self.assertAlmostEqual(map_range(150, 0, 100, 0, 10), 15)

    def test_map_range_empty_source_raises(self):
        with self.assertRaises(ValueError):
            map_range(5, 3, 3, 0, 1)


if __name__ == "__main__":
    unittest.main()
