"""
Test cases for the gesture to camera-motion mapping.
"""
import math
import unittest
import sys
from pathlib import Path

import numpy as np
from numpy.testing import assert_allclose

sys.path.insert(0, str(Path(__file__).parent.parent))

from handorbit.config import load_config
from handorbit.controller_mock import MockCamera
from handorbit.navigation import CameraNavigator, orbit_y, screen_axes
from handorbit.types import GestureEvent, GestureType


def event(gesture: GestureType, delta=(0.0, 0.0, 0.0), velocity: float = 0.0) -> GestureEvent:
    return GestureEvent(gesture, np.array(delta, dtype=float), velocity)


class TestCameraNavigator(unittest.TestCase):
    """Test tween planning for each gesture."""

    def setUp(self):
        self.cfg = load_config().navigation
        self.navigator = CameraNavigator(self.cfg)
        self.camera = MockCamera(position=(0.0, 0.0, 1000.0))

    def test_distance_factor(self):
        self.assertAlmostEqual(self.navigator.distance_factor(self.camera), 5.0)

    def test_pinch_dollies_along_view_axis(self):
        tween = self.navigator.apply(event(GestureType.PINCH, (0, 0, 0.01)), self.camera, focused=False)

        # 0.01 * (1000 * 0.005) * 350
        assert_allclose(tween.position, [0.0, 0.0, 1017.5])
        self.assertAlmostEqual(tween.fov, 65.2)
        self.assertAlmostEqual(tween.duration, 0.15)
        self.assertIs(self.camera.tweens[-1], tween)

    def test_zoom_step_scales_with_distance(self):
        near = MockCamera(position=(0.0, 0.0, 200.0))
        far = MockCamera(position=(0.0, 0.0, 2000.0))
        zoom = event(GestureType.PINCH, (0, 0, -0.01))

        near_step = 200.0 - self.navigator.plan(zoom, near, False).position[2]
        far_step = 2000.0 - self.navigator.plan(zoom, far, False).position[2]
        self.assertAlmostEqual(far_step / near_step, 10.0)

    def test_pinch_allowed_while_focused(self):
        tween = self.navigator.plan(event(GestureType.PINCH, (0, 0, 0.01)), self.camera, focused=True)
        self.assertIsNotNone(tween.position)

    def test_pan_translates_in_screen_plane(self):
        tween = self.navigator.plan(event(GestureType.PAN, (0.01, 0.02, 0.0)), self.camera, focused=False)

        # factor = 5 * 1200; x is mirrored
        assert_allclose(tween.position, [-60.0, 120.0, 1000.0])
        assert_allclose(tween.target, [-60.0, 120.0, 0.0])
        self.assertEqual(tween.ease, "power2.out")
        self.assertAlmostEqual(tween.duration, 0.25)

    def test_rotate_orbits_origin(self):
        dx = -(math.pi / 2) / self.cfg.orbit_speed
        tween = self.navigator.plan(event(GestureType.ROTATE, (dx, 0.0, 0.0)), self.camera, focused=False)

        assert_allclose(tween.position, [-1000.0, 0.0, 0.0], atol=1e-9)
        assert_allclose(tween.target, [0.0, 0.0, 0.0])
        self.assertAlmostEqual(tween.duration, 0.2)

    def test_pan_and_rotate_suppressed_while_focused(self):
        for gesture in (GestureType.PAN, GestureType.ROTATE):
            tween = self.navigator.plan(event(gesture, (0.05, 0.05, 0.0)), self.camera, focused=True)
            self.assertIsNone(tween)

    def test_fov_relaxes_to_base(self):
        warped = MockCamera(position=(0.0, 0.0, 1000.0), fov=70.0)
        for gesture in (GestureType.NONE, GestureType.POINT):
            tween = self.navigator.plan(event(gesture), warped, focused=False)
            self.assertIsNone(tween.position)
            self.assertEqual(tween.fov, 65.0)
            self.assertAlmostEqual(tween.duration, 0.5)

    def test_no_tween_when_fov_at_base(self):
        self.assertIsNone(self.navigator.apply(event(GestureType.NONE), self.camera, focused=False))
        self.assertEqual(self.camera.tweens, [])


class TestCameraGeometry(unittest.TestCase):

    def test_screen_axes_front_view(self):
        right, up = screen_axes(np.array([0.0, 0.0, 10.0]), np.zeros(3))
        assert_allclose(right, [1.0, 0.0, 0.0])
        assert_allclose(up, [0.0, 1.0, 0.0])

    def test_screen_axes_looking_straight_down(self):
        right, up = screen_axes(np.array([0.0, 10.0, 0.0]), np.zeros(3))
        assert_allclose(right, [1.0, 0.0, 0.0])
        self.assertAlmostEqual(float(np.linalg.norm(up)), 1.0)

    def test_orbit_preserves_height_and_radius(self):
        position = np.array([300.0, 800.0, 2000.0])
        rotated = orbit_y(position, 0.7)
        self.assertAlmostEqual(rotated[1], 800.0)
        self.assertAlmostEqual(np.hypot(rotated[0], rotated[2]), np.hypot(300.0, 2000.0))


if __name__ == '__main__':
    unittest.main()
