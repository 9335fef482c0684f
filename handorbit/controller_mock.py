"""
Mock collaborators that record requests instead of rendering anything.
"""
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .types import CameraTween, ExitReason, Selectable


class MockCamera:
    """Camera that jumps straight to each tween's target values."""
    
    def __init__(self, position=(0.0, 800.0, 2000.0), target=(0.0, 0.0, 0.0), fov: float = 65.0):
        """Initialize the mock camera pose."""
        self._position = np.array(position, dtype=float)
        self._target = np.array(target, dtype=float)
        self._fov = float(fov)
        self.tweens: List[CameraTween] = []
        self.pose_count = 0

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def target(self) -> np.ndarray:
        return self._target.copy()

    @property
    def fov(self) -> float:
        return self._fov

    def animate(self, tween: CameraTween) -> None:
        """Record the tween and apply its end state immediately."""
        self.tweens.append(tween)
        if tween.position is not None:
            self._position = np.array(tween.position, dtype=float)
        if tween.target is not None:
            self._target = np.array(tween.target, dtype=float)
        if tween.fov is not None:
            self._fov = float(tween.fov)
        if tween.on_update is not None:
            tween.on_update()

    def set_pose(self, position: np.ndarray, target: np.ndarray) -> None:
        self.pose_count += 1
        self._position = np.array(position, dtype=float)
        self._target = np.array(target, dtype=float)


class MockTarget:
    """Named selectable with a fixed world position."""

    def __init__(self, name: str, position=(0.0, 0.0, 0.0)):
        self.name = name
        self.position = np.array(position, dtype=float)

    def __repr__(self) -> str:
        return f"MockTarget({self.name!r})"


class MockScene:
    """Scene whose ray query returns whatever ``hit`` is set to."""
    
    def __init__(self, hit: Optional[Selectable] = None):
        self.hit = hit
        self.raycasts: List[Tuple[float, float]] = []
        self.highlighted: List[Selectable] = []
        self.time_scales: List[float] = []

    @property
    def time_scale(self) -> Optional[float]:
        return self.time_scales[-1] if self.time_scales else None

    def raycast(self, ndc: Tuple[float, float]) -> Optional[Selectable]:
        self.raycasts.append(ndc)
        return self.hit

    def set_highlight(self, targets: Sequence[Selectable]) -> None:
        self.highlighted = list(targets)

    def set_time_scale(self, scale: float) -> None:
        self.time_scales.append(scale)

    def world_position(self, target: Selectable) -> np.ndarray:
        return np.array(getattr(target, 'position', np.zeros(3)), dtype=float)


class MockPresenter:
    """Presenter that prints notifications and keeps a log of them."""
    
    def __init__(self, verbose: bool = False):
        """Initialize the mock presenter."""
        self.verbose = verbose
        self.events: List[tuple] = []
        self.gesture_label: Optional[str] = None
        self.hand_visible = False
        self.tooltip: Optional[Tuple[str, Tuple[float, float], str]] = None
        self.panel: Optional[Selectable] = None
        self.exit_reasons: List[ExitReason] = []

    def _log(self, *event) -> None:
        self.events.append(event)
        if self.verbose:
            print(f"[MockPresenter] {event}")

    def show_gesture(self, label: str) -> None:
        self.gesture_label = label
        self._log("gesture", label)

    def set_hand_visible(self, visible: bool) -> None:
        self.hand_visible = visible
        self._log("hand", visible)

    def show_tooltip(self, name: str, anchor_px: Tuple[float, float], hint: str) -> None:
        self.tooltip = (name, anchor_px, hint)
        self._log("tooltip", name, hint)

    def hide_tooltip(self) -> None:
        self.tooltip = None

    def show_detail_panel(self, target: Selectable) -> None:
        self.panel = target
        self._log("panel", target.name)

    def hide_detail_panel(self, reason: ExitReason) -> None:
        self.panel = None
        self.exit_reasons.append(reason)
        self._log("panel_closed", reason.value)

    def reset_counters(self) -> None:
        """Reset recorded notifications for testing."""
        self.events.clear()
        self.exit_reasons.clear()
