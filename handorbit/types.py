"""
Type definitions for the hand-orbit gesture navigation core.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np


class GestureType(Enum):
    """The mutually exclusive gesture classes recognized per frame."""
    NONE = "none"
    PINCH = "pinch"
    PAN = "pan"
    ROTATE = "rotate"
    POINT = "point"


# Status indicator labels for the presentation layer
GESTURE_LABELS = {
    GestureType.PINCH: "ZOOM",
    GestureType.PAN: "THRUST",
    GestureType.ROTATE: "OBSERVE",
    GestureType.POINT: "TARGET",
}


def zero_vector() -> np.ndarray:
    return np.zeros(3, dtype=float)


@dataclass(eq=False)
class GestureEvent:
    """Classified gesture for one detection frame."""
    type: GestureType
    delta: np.ndarray = field(default_factory=zero_vector)
    velocity: float = 0.0  # 2D wrist speed in normalized units per frame

    @classmethod
    def idle(cls) -> "GestureEvent":
        """Neutral event returned when no hand is visible."""
        return cls(GestureType.NONE, zero_vector(), 0.0)

    @property
    def label(self) -> str:
        return GESTURE_LABELS.get(self.type, self.type.value.upper())


class SelectionPhase(Enum):
    """Derived phase of the selection/focus state machine."""
    IDLE = "idle"
    HOVERING = "hovering"
    FOCUSED = "focused"


class ExitReason(Enum):
    """Where a request to leave focus mode came from."""
    USER = "user"            # explicit UI action
    ZOOM_OUT = "zoom_out"    # strong zoom-out pinch
    FAST_PAN = "fast_pan"    # high-velocity pan
    HAND_LOST = "hand_lost"  # only with clear_focus_on_hand_loss
    RETARGET = "retarget"    # another target was focused


@dataclass
class CameraTween:
    """
    Eased camera transition request.

    The core only describes the target values; the camera collaborator
    interpolates them over ``duration`` seconds.
    """
    duration: float
    position: Optional[np.ndarray] = None
    target: Optional[np.ndarray] = None  # look-at point
    fov: Optional[float] = None
    ease: str = "linear"
    on_update: Optional[Callable[[], None]] = None


@runtime_checkable
class Selectable(Protocol):
    """Anything the scene can return from a ray intersection query."""
    name: str


@runtime_checkable
class CameraProto(Protocol):
    """Camera pose collaborator."""

    @property
    def position(self) -> np.ndarray:
        ...

    @property
    def target(self) -> np.ndarray:
        ...

    @property
    def fov(self) -> float:
        ...

    def animate(self, tween: CameraTween) -> None:
        """Start an eased transition towards the tween's target values."""
        ...

    def set_pose(self, position: np.ndarray, target: np.ndarray) -> None:
        """Move the camera immediately and look at ``target``."""
        ...


@runtime_checkable
class SceneProto(Protocol):
    """Scene collaborator: picking, highlighting and simulation speed."""

    def raycast(self, ndc: Tuple[float, float]) -> Optional[Selectable]:
        """Return the nearest selectable hit by a ray through ``ndc``."""
        ...

    def set_highlight(self, targets: Sequence[Selectable]) -> None:
        ...

    def set_time_scale(self, scale: float) -> None:
        ...

    def world_position(self, target: Selectable) -> np.ndarray:
        ...


@runtime_checkable
class PresenterProto(Protocol):
    """Presentation layer sink for discrete notifications."""

    def show_gesture(self, label: str) -> None:
        ...

    def set_hand_visible(self, visible: bool) -> None:
        ...

    def show_tooltip(self, name: str, anchor_px: Tuple[float, float], hint: str) -> None:
        ...

    def hide_tooltip(self) -> None:
        ...

    def show_detail_panel(self, target: Selectable) -> None:
        ...

    def hide_detail_panel(self, reason: ExitReason) -> None:
        ...
