"""
Test cases for the headless demo scene: tweening camera, orbits and picking.
"""
import math
import unittest
import sys
from pathlib import Path

import numpy as np
from numpy.testing import assert_allclose

sys.path.insert(0, str(Path(__file__).parent.parent))

from handorbit.scene import (
    DEFAULT_BODIES,
    OrbitScene,
    OrbitingBody,
    TweenCamera,
    ease_power2_out,
    ease_power3_in_out,
    ray_sphere,
)
from handorbit.types import CameraProto, CameraTween, SceneProto


class TestEasing(unittest.TestCase):

    def test_endpoints(self):
        for ease in (ease_power2_out, ease_power3_in_out):
            self.assertAlmostEqual(ease(0.0), 0.0)
            self.assertAlmostEqual(ease(1.0), 1.0)

    def test_midpoints(self):
        self.assertAlmostEqual(ease_power2_out(0.5), 0.875)
        self.assertAlmostEqual(ease_power3_in_out(0.5), 0.5)


class TestTweenCamera(unittest.TestCase):

    def setUp(self):
        self.camera = TweenCamera(position=(0.0, 0.0, 1000.0))

    def test_implements_protocol(self):
        self.assertIsInstance(self.camera, CameraProto)

    def test_linear_tween(self):
        self.camera.animate(CameraTween(duration=1.0, position=np.array([100.0, 0.0, 1000.0]), fov=75.0))
        self.camera.update(0.5)

        assert_allclose(self.camera.position, [50.0, 0.0, 1000.0])
        self.assertAlmostEqual(self.camera.fov, 70.0)
        self.assertTrue(self.camera.animating)

        self.camera.update(0.6)
        assert_allclose(self.camera.position, [100.0, 0.0, 1000.0])
        self.assertFalse(self.camera.animating)

    def test_untouched_fields_keep_value(self):
        self.camera.animate(CameraTween(duration=0.2, fov=80.0))
        self.camera.update(1.0)

        assert_allclose(self.camera.position, [0.0, 0.0, 1000.0])
        assert_allclose(self.camera.target, [0.0, 0.0, 0.0])
        self.assertAlmostEqual(self.camera.fov, 80.0)

    def test_new_tween_replaces_running_one(self):
        self.camera.animate(CameraTween(duration=1.0, position=np.array([100.0, 0.0, 1000.0])))
        self.camera.update(0.5)
        self.camera.animate(CameraTween(duration=1.0, position=np.array([50.0, 0.0, 0.0])))
        self.camera.update(1.0)

        assert_allclose(self.camera.position, [50.0, 0.0, 0.0])

    def test_running_tween_owns_animated_fields(self):
        self.camera.animate(CameraTween(duration=1.0, position=np.array([100.0, 0.0, 1000.0])))
        self.camera.set_pose(np.array([0.0, 500.0, 0.0]), np.array([5.0, 5.0, 5.0]))
        self.camera.update(0.5)

        assert_allclose(self.camera.position, [50.0, 0.0, 1000.0])
        assert_allclose(self.camera.target, [5.0, 5.0, 5.0])

    def test_set_pose_sticks_once_tween_finished(self):
        self.camera.animate(CameraTween(duration=0.2, position=np.array([100.0, 0.0, 1000.0])))
        self.camera.update(0.3)
        self.camera.set_pose(np.array([0.0, 500.0, 0.0]), np.array([5.0, 5.0, 5.0]))
        self.camera.update(0.1)

        assert_allclose(self.camera.position, [0.0, 500.0, 0.0])

    def test_on_update_called(self):
        calls = []
        self.camera.animate(CameraTween(duration=0.2, fov=70.0, on_update=lambda: calls.append(1)))
        self.camera.update(0.1)
        self.camera.update(0.1)
        self.assertEqual(len(calls), 2)

    def test_zero_duration_applies_immediately(self):
        self.camera.animate(CameraTween(duration=0.0, position=np.array([1.0, 2.0, 3.0])))
        assert_allclose(self.camera.position, [1.0, 2.0, 3.0])
        self.assertFalse(self.camera.animating)

    def test_unknown_ease(self):
        with self.assertRaises(ValueError):
            self.camera.animate(CameraTween(duration=1.0, fov=70.0, ease="bounce"))

    def test_center_ray_points_at_target(self):
        origin, direction = self.camera.ray((0.0, 0.0))
        assert_allclose(origin, [0.0, 0.0, 1000.0])
        assert_allclose(direction, [0.0, 0.0, -1.0], atol=1e-12)

    def test_project_inverts_ray(self):
        point = np.array([120.0, -40.0, 200.0])
        ndc = self.camera.project(point)
        origin, direction = self.camera.ray(ndc)

        to_point = (point - origin) / np.linalg.norm(point - origin)
        assert_allclose(direction, to_point, atol=1e-9)

    def test_project_behind_camera(self):
        self.assertIsNone(self.camera.project(np.array([0.0, 0.0, 2000.0])))


class TestRaySphere(unittest.TestCase):

    def test_hit_front_surface(self):
        t = ray_sphere(np.zeros(3), np.array([0.0, 0.0, 1.0]), np.array([0.0, 0.0, 10.0]), 2.0)
        self.assertAlmostEqual(t, 8.0)

    def test_origin_inside_sphere(self):
        t = ray_sphere(np.zeros(3), np.array([1.0, 0.0, 0.0]), np.zeros(3), 3.0)
        self.assertAlmostEqual(t, 3.0)

    def test_miss(self):
        self.assertIsNone(ray_sphere(np.zeros(3), np.array([0.0, 0.0, 1.0]), np.array([5.0, 0.0, 10.0]), 2.0))

    def test_sphere_behind(self):
        self.assertIsNone(ray_sphere(np.zeros(3), np.array([0.0, 0.0, 1.0]), np.array([0.0, 0.0, -10.0]), 2.0))


class TestOrbitScene(unittest.TestCase):

    def setUp(self):
        self.camera = TweenCamera(position=(0.0, 0.0, 1000.0))
        self.near = OrbitingBody("Near", radius=10.0, distance=300.0, speed=0.1, angle=math.pi / 2)
        self.far = OrbitingBody("Far", radius=10.0, distance=100.0, speed=0.2, angle=math.pi / 2)
        self.side = OrbitingBody("Side", radius=10.0, distance=340.0, speed=0.03)
        self.scene = OrbitScene(self.camera, [self.far, self.near, self.side])

    def test_implements_protocol(self):
        self.assertIsInstance(self.scene, SceneProto)

    def test_default_bodies(self):
        scene = OrbitScene(self.camera, seed=7)
        self.assertEqual([b.name for b in scene.bodies], [b[0] for b in DEFAULT_BODIES])
        self.assertEqual(scene.bodies[0].name, "Mercury")
        self.assertEqual(scene.time_scale, 2.5)

    def test_nearest_body_wins(self):
        self.assertIs(self.scene.raycast((0.0, 0.0)), self.near)

    def test_pick_projected_body(self):
        ndc = self.camera.project(self.side.position)
        self.assertIs(self.scene.raycast(ndc), self.side)

    def test_empty_space(self):
        self.assertIsNone(self.scene.raycast((0.9, 0.9)))

    def test_time_scale_drives_orbits(self):
        self.scene.set_time_scale(2.5)
        self.scene.update(2.0)
        self.assertAlmostEqual(self.side.angle, 0.03 * 5.0)

        self.scene.set_time_scale(0.01)
        before = self.side.angle
        self.scene.update(1.0)
        self.assertAlmostEqual(self.side.angle - before, 0.03 * 0.01)

    def test_world_position_tracks_orbit(self):
        assert_allclose(self.scene.world_position(self.side), [340.0, 0.0, 0.0])
        self.side.angle = math.pi
        assert_allclose(self.scene.world_position(self.side), [-340.0, 0.0, 0.0], atol=1e-9)

    def test_highlight(self):
        self.scene.set_highlight([self.side])
        self.assertEqual(self.scene.highlighted, [self.side])
        self.scene.set_highlight([])
        self.assertEqual(self.scene.highlighted, [])


if __name__ == '__main__':
    unittest.main()
