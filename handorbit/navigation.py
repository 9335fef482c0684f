"""
Camera navigation policy: maps classified gestures to eased camera moves.

Only target values and durations are decided here; the camera collaborator
performs the interpolation.
"""
import math
from typing import Optional, Tuple

import numpy as np
from scipy.spatial.transform import Rotation

from .config import NavigationConfig
from .types import CameraProto, CameraTween, GestureEvent, GestureType

WORLD_UP = np.array([0.0, 1.0, 0.0])
ORIGIN = np.zeros(3)


def screen_axes(position: np.ndarray, target: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Camera right and up vectors for a camera at ``position`` looking at ``target``.

    Falls back to world X/Y when the view direction is parallel to world up.
    """
    forward = np.asarray(target, dtype=float) - np.asarray(position, dtype=float)
    norm = np.linalg.norm(forward)
    if norm == 0:
        return np.array([1.0, 0.0, 0.0]), WORLD_UP.copy()
    forward = forward / norm

    right = np.cross(forward, WORLD_UP)
    right_norm = np.linalg.norm(right)
    if right_norm < 1e-9:
        return np.array([1.0, 0.0, 0.0]), np.array([0.0, 0.0, -math.copysign(1.0, forward[1])])
    right = right / right_norm
    up = np.cross(right, forward)
    return right, up


def orbit_y(position: np.ndarray, angle: float) -> np.ndarray:
    """
    Rotate ``position`` around the world vertical axis through the origin.

    Positive angles turn +X towards +Z.
    """
    return Rotation.from_euler('y', -angle).apply(np.asarray(position, dtype=float))


class CameraNavigator:
    """
    Converts gesture events into camera tweens.
    
    Features:
    - Distance-adaptive sensitivity so zoom and pan feel constant at any range
    - Field-of-view warp while pinching, relaxing back to the base FOV
    - Pan and orbit suppressed while a target is focused
    """
    
    def __init__(self, cfg: NavigationConfig):
        """Initialize navigator with configuration."""
        self.cfg = cfg

    def distance_factor(self, camera: CameraProto) -> float:
        """Sensitivity multiplier proportional to the camera's distance from the origin."""
        return float(np.linalg.norm(camera.position)) * self.cfg.distance_gain

    def plan(self, event: GestureEvent, camera: CameraProto, focused: bool) -> Optional[CameraTween]:
        """
        Build the tween for one gesture event without issuing it.
        
        Args:
            event: Classified gesture
            camera: Camera collaborator (read for its current pose)
            focused: Whether a target is focused (suppresses pan and orbit)
            
        Returns:
            CameraTween, or None if the camera should not be touched
        """
        if event.type is GestureType.PINCH:
            return self._zoom(event, camera)
        if event.type is GestureType.PAN and not focused:
            return self._pan(event, camera)
        if event.type is GestureType.ROTATE and not focused:
            return self._orbit(event, camera)
        return self._relax_fov(camera)

    def apply(self, event: GestureEvent, camera: CameraProto, focused: bool) -> Optional[CameraTween]:
        """Plan and issue the tween for one gesture event."""
        tween = self.plan(event, camera, focused)
        if tween is not None:
            camera.animate(tween)
        return tween

    def _zoom(self, event: GestureEvent, camera: CameraProto) -> CameraTween:
        position = np.asarray(camera.position, dtype=float)
        target = np.asarray(camera.target, dtype=float)
        axis = position - target
        length = np.linalg.norm(axis)
        axis = axis / length if length > 0 else np.array([0.0, 0.0, 1.0])

        # Positive delta.z moves away from the target (zoom out)
        amount = event.delta[2] * self.distance_factor(camera) * self.cfg.zoom_gain
        fov = self.cfg.base_fov + abs(event.delta[2]) * self.cfg.fov_warp_gain
        return CameraTween(
            duration=self.cfg.zoom_duration_s,
            position=position + axis * amount,
            fov=fov,
        )

    def _pan(self, event: GestureEvent, camera: CameraProto) -> CameraTween:
        position = np.asarray(camera.position, dtype=float)
        target = np.asarray(camera.target, dtype=float)
        right, up = screen_axes(position, target)

        factor = self.distance_factor(camera) * self.cfg.pan_gain
        offset = right * (-event.delta[0] * factor) + up * (event.delta[1] * factor)
        return CameraTween(
            duration=self.cfg.pan_duration_s,
            position=position + offset,
            target=target + offset,
            ease="power2.out",
        )

    def _orbit(self, event: GestureEvent, camera: CameraProto) -> CameraTween:
        angle = -event.delta[0] * self.cfg.orbit_speed
        return CameraTween(
            duration=self.cfg.orbit_duration_s,
            position=orbit_y(np.asarray(camera.position, dtype=float), angle),
            target=ORIGIN.copy(),
        )

    def _relax_fov(self, camera: CameraProto) -> Optional[CameraTween]:
        if camera.fov == self.cfg.base_fov:
            return None
        return CameraTween(duration=self.cfg.fov_relax_duration_s, fov=self.cfg.base_fov)
