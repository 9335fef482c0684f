"""
Headless demo scene: bodies orbiting the origin, a tweening perspective
camera and ray picking. Implements the camera and scene collaborator
protocols so the controller can run without a 3D renderer.
"""
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .types import CameraTween


def ease_linear(t: float) -> float:
    return t


def ease_power2_out(t: float) -> float:
    return 1.0 - (1.0 - t) ** 3


def ease_power3_in_out(t: float) -> float:
    if t < 0.5:
        return 8.0 * t ** 4
    return 1.0 - ((-2.0 * t + 2.0) ** 4) / 2.0


EASINGS: Dict[str, Callable[[float], float]] = {
    "linear": ease_linear,
    "power2.out": ease_power2_out,
    "power3.inOut": ease_power3_in_out,
}


@dataclass
class _ActiveTween:
    tween: CameraTween
    start_position: np.ndarray
    start_target: np.ndarray
    start_fov: float
    elapsed: float = 0.0


class TweenCamera:
    """
    Perspective camera that interpolates towards tween targets.

    A new tween replaces any running one, starting from the current pose.
    ``set_pose`` applies immediately, but a running tween owns the fields it
    animates: the next ``update`` recomputes them from the tween's start pose.
    Fields the tween leaves as None keep the value set by ``set_pose``, so the
    focus follow steers the look-at target during a fly-in and takes over the
    position once the fly-in ends.
    """

    def __init__(self, position=(0.0, 800.0, 2000.0), target=(0.0, 0.0, 0.0),
                 fov: float = 65.0, aspect: float = 16 / 9):
        self._position = np.array(position, dtype=float)
        self._target = np.array(target, dtype=float)
        self._fov = float(fov)
        self.aspect = aspect
        self._active: Optional[_ActiveTween] = None

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def target(self) -> np.ndarray:
        return self._target.copy()

    @property
    def fov(self) -> float:
        return self._fov

    @property
    def animating(self) -> bool:
        return self._active is not None

    def animate(self, tween: CameraTween) -> None:
        if tween.ease not in EASINGS:
            raise ValueError(f"Unknown ease: {tween.ease}")
        self._active = _ActiveTween(tween, self._position.copy(), self._target.copy(), self._fov)
        if tween.duration <= 0:
            self.update(0.0)

    def set_pose(self, position: np.ndarray, target: np.ndarray) -> None:
        self._position = np.array(position, dtype=float)
        self._target = np.array(target, dtype=float)

    def update(self, dt: float) -> None:
        """Advance the running tween by ``dt`` seconds."""
        active = self._active
        if active is None:
            return
        tween = active.tween
        active.elapsed += dt
        progress = 1.0 if tween.duration <= 0 else min(active.elapsed / tween.duration, 1.0)
        k = EASINGS[tween.ease](progress)

        if tween.position is not None:
            self._position = active.start_position + (np.asarray(tween.position) - active.start_position) * k
        if tween.target is not None:
            self._target = active.start_target + (np.asarray(tween.target) - active.start_target) * k
        if tween.fov is not None:
            self._fov = active.start_fov + (tween.fov - active.start_fov) * k
        if tween.on_update is not None:
            tween.on_update()

        if progress >= 1.0:
            self._active = None

    def basis(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Forward, right and up unit vectors."""
        forward = self._target - self._position
        forward = forward / np.linalg.norm(forward)
        right = np.cross(forward, [0.0, 1.0, 0.0])
        if np.linalg.norm(right) < 1e-9:
            right = np.array([1.0, 0.0, 0.0])
        right = right / np.linalg.norm(right)
        up = np.cross(right, forward)
        return forward, right, up

    def ray(self, ndc: Tuple[float, float]) -> Tuple[np.ndarray, np.ndarray]:
        """World-space ray (origin, unit direction) through normalized device coordinates."""
        forward, right, up = self.basis()
        half_h = math.tan(math.radians(self._fov) / 2.0)
        half_w = half_h * self.aspect
        direction = forward + right * (ndc[0] * half_w) + up * (ndc[1] * half_h)
        return self._position.copy(), direction / np.linalg.norm(direction)

    def project(self, point: np.ndarray) -> Optional[Tuple[float, float]]:
        """Normalized device coordinates of a world point, or None if behind the camera."""
        forward, right, up = self.basis()
        rel = np.asarray(point, dtype=float) - self._position
        depth = float(np.dot(rel, forward))
        if depth <= 0:
            return None
        half_h = math.tan(math.radians(self._fov) / 2.0)
        half_w = half_h * self.aspect
        return (float(np.dot(rel, right)) / (depth * half_w),
                float(np.dot(rel, up)) / (depth * half_h))


@dataclass(eq=False)
class OrbitingBody:
    """Sphere on a circular orbit in the XZ plane."""
    name: str
    radius: float
    distance: float
    speed: float  # radians per second at time scale 1
    angle: float = 0.0
    color: Tuple[int, int, int] = (200, 200, 200)

    @property
    def position(self) -> np.ndarray:
        return np.array([math.cos(self.angle) * self.distance, 0.0,
                         math.sin(self.angle) * self.distance])

    def update(self, dt: float) -> None:
        self.angle += self.speed * dt


# BGR colors for the OpenCV overlay
DEFAULT_BODIES = (
    ("Mercury", 4, 100, 0.05, (170, 170, 170)),
    ("Venus", 8, 180, 0.04, (153, 204, 255)),
    ("Earth", 9, 260, 0.035, (255, 102, 51)),
    ("Mars", 6, 340, 0.03, (0, 51, 255)),
    ("Jupiter", 25, 580, 0.015, (102, 204, 255)),
    ("Saturn", 22, 750, 0.012, (102, 153, 204)),
    ("Uranus", 15, 900, 0.008, (255, 255, 102)),
    ("Neptune", 14, 1050, 0.006, (255, 51, 51)),
)


def ray_sphere(origin: np.ndarray, direction: np.ndarray,
               center: np.ndarray, radius: float) -> Optional[float]:
    """Distance along a unit ray to the first sphere intersection, if any."""
    oc = origin - center
    b = float(np.dot(oc, direction))
    c = float(np.dot(oc, oc)) - radius * radius
    disc = b * b - c
    if disc < 0:
        return None
    root = math.sqrt(disc)
    t = -b - root
    if t < 0:
        t = -b + root
    return t if t >= 0 else None


class OrbitScene:
    """
    Bodies orbiting the origin with a global simulation time scale.
    
    Features:
    - Ray picking through the camera (nearest body wins)
    - Highlight set for the overlay renderer
    - Time scale shared by every body
    """

    def __init__(self, camera: TweenCamera, bodies: Optional[Sequence[OrbitingBody]] = None,
                 time_scale: float = 2.5, pick_margin: float = 1.0, seed: Optional[int] = None):
        """
        Initialize the scene.

        Args:
            camera: Camera used to build pick rays
            bodies: Bodies to simulate (the default planets if omitted)
            time_scale: Initial simulation speed multiplier
            pick_margin: Multiplier on body radius for picking
            seed: Seed for the random starting angles of the default bodies
        """
        self.camera = camera
        if bodies is None:
            rng = np.random.default_rng(seed)
            bodies = [OrbitingBody(name, radius, distance, speed,
                                   angle=float(rng.uniform(0.0, 2.0 * math.pi)), color=color)
                      for name, radius, distance, speed, color in DEFAULT_BODIES]
        self.bodies: List[OrbitingBody] = list(bodies)
        self.time_scale = time_scale
        self.pick_margin = pick_margin
        self.highlighted: List[OrbitingBody] = []

    def update(self, dt: float) -> None:
        scaled = dt * self.time_scale
        for body in self.bodies:
            body.update(scaled)

    def raycast(self, ndc: Tuple[float, float]) -> Optional[OrbitingBody]:
        origin, direction = self.camera.ray(ndc)
        best: Optional[OrbitingBody] = None
        best_t = math.inf
        for body in self.bodies:
            t = ray_sphere(origin, direction, body.position, body.radius * self.pick_margin)
            if t is not None and t < best_t:
                best, best_t = body, t
        return best

    def set_highlight(self, targets: Sequence[OrbitingBody]) -> None:
        self.highlighted = list(targets)

    def set_time_scale(self, scale: float) -> None:
        self.time_scale = scale

    def world_position(self, target: OrbitingBody) -> np.ndarray:
        return target.position
