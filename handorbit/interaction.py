"""
Interaction controller: drives the camera from gestures and runs the
pointer-based hover / dwell / focus state machine.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .config import Cfg
from .gestures import GestureClassifier
from .landmarks import first_hand, pointer_ndc, pointer_pixels
from .navigation import CameraNavigator
from .types import (
    CameraProto,
    CameraTween,
    ExitReason,
    GestureEvent,
    GestureType,
    PresenterProto,
    SceneProto,
    Selectable,
    SelectionPhase,
)

logger = logging.getLogger(__name__)

# Sentinel for render ticks without a fresh detection result
NO_DETECTION = object()

HINT_ACQUIRED = "TARGET ACQUIRED"
HINT_IDLE = "Point to lock / dwell to focus"


@dataclass
class SelectionState:
    """Hover and focus bookkeeping."""
    hovered: Optional[Selectable] = None
    focused: Optional[Selectable] = None
    hover_elapsed: float = 0.0  # seconds spent hovering ``hovered``
    released: Optional[Selectable] = None  # ignored until the pointer leaves it

    @property
    def phase(self) -> SelectionPhase:
        if self.focused is not None:
            return SelectionPhase.FOCUSED
        if self.hovered is not None:
            return SelectionPhase.HOVERING
        return SelectionPhase.IDLE


class InteractionController:
    """
    Maps classified gestures to camera commands and selection transitions.
    
    Features:
    - Distance-adaptive zoom, pan and orbit through CameraNavigator
    - Dwell selection driven by an explicit per-frame time accumulator
    - Point gesture as immediate confirm
    - Focus mode that freezes the simulation, follows the target and is
      released by an explicit exit, a zoom-out pinch or a fast pan
    """
    
    def __init__(self, cfg: Cfg, camera: CameraProto, scene: SceneProto,
                 presenter: PresenterProto, classifier: Optional[GestureClassifier] = None):
        """
        Initialize the controller.

        Args:
            cfg: Full configuration
            camera: Camera pose collaborator
            scene: Picking / highlight / time-scale collaborator
            presenter: Notification sink
            classifier: Classifier for the tracked hand (created if omitted)
        """
        self.cfg = cfg
        self.camera = camera
        self.scene = scene
        self.presenter = presenter
        self.classifier = classifier or GestureClassifier(cfg.classifier)
        self.navigator = CameraNavigator(cfg.navigation)

        self.state = SelectionState()
        self.last_event = GestureEvent.idle()
        self.hand_visible = False

    @property
    def phase(self) -> SelectionPhase:
        return self.state.phase

    @property
    def focused(self) -> Optional[Selectable]:
        return self.state.focused

    @property
    def hovered(self) -> Optional[Selectable]:
        return self.state.hovered

    def step(self, dt: float, hands: Any = NO_DETECTION) -> GestureEvent:
        """
        Advance one rendered frame.

        Time is advanced first, against the selection state as of the previous
        detection; the fresh result (if any) is applied afterwards, so a hover
        that starts on this frame has zero elapsed dwell.

        Args:
            dt: Seconds since the previous rendered frame
            hands: Fresh detection result, or NO_DETECTION to carry state over

        Returns:
            The latest gesture event (unchanged on frames without a detection)
        """
        self.tick(dt)
        if hands is not NO_DETECTION:
            self.on_detection(hands)
        return self.last_event

    def on_detection(self, hands: Any) -> GestureEvent:
        """
        Process a fresh detection result.
        
        Args:
            hands: Sequence of detected hands; empty or None when no hand is visible
            
        Returns:
            The classified gesture event
        """
        event = self.classifier.process(hands)
        self.last_event = event
        frame = first_hand(hands)

        if frame is None:
            self._on_hand_lost()
            return event

        self._set_hand_visible(True)
        self._update_selection(frame, event)

        if self.state.focused is not None:
            self._check_disqualifiers(event)

        self.navigator.apply(event, self.camera, focused=self.state.focused is not None)

        if event.type is not GestureType.NONE:
            self.presenter.show_gesture(f"SYSTEM OPS: {event.label}")
        return event

    def tick(self, dt: float) -> None:
        """
        Per-frame update independent of detections: dwell timing and focus follow.
        
        Args:
            dt: Seconds since the previous rendered frame
        """
        state = self.state
        if state.hovered is not None and state.hovered is not state.focused:
            state.hover_elapsed += dt
            if state.hover_elapsed >= self.cfg.selection.dwell_s:
                logger.debug(f"Dwell reached on {state.hovered.name} ({state.hover_elapsed:.3f}s)")
                self.focus(state.hovered)

        if state.focused is not None:
            self._follow(state.focused)

    def focus(self, target: Selectable) -> None:
        """Lock ``target`` as the camera subject."""
        if self.state.focused is target:
            return
        if self.state.focused is not None:
            self.exit_focus(ExitReason.RETARGET)

        self.state.focused = target
        self.state.hover_elapsed = 0.0
        self.state.released = None
        logger.info(f"Focused on {target.name}")

        self.scene.set_time_scale(self.cfg.simulation.focused_time_scale)
        self.presenter.hide_tooltip()
        self.presenter.show_detail_panel(target)

        destination = np.asarray(self.scene.world_position(target), dtype=float) + self.cfg.fly_in_offset
        self.camera.animate(CameraTween(
            duration=self.cfg.selection.fly_in_duration_s,
            position=destination,
            ease="power3.inOut",
        ))

    def exit_focus(self, reason: ExitReason = ExitReason.USER) -> None:
        """
        Release the focused target, if any, and return to idle.

        The released target is ignored by hover, dwell and point until the
        pointer leaves it.
        """
        target = self.state.focused
        if target is None:
            return
        self.state.focused = None
        if reason is not ExitReason.RETARGET:
            self.state.released = target
            self._clear_hover()
        logger.info(f"Released {target.name} ({reason.value})")

        self.scene.set_time_scale(self.cfg.simulation.normal_time_scale)
        self.presenter.hide_detail_panel(reason)

    def _update_selection(self, frame: np.ndarray, event: GestureEvent) -> None:
        display = self.cfg.display
        hit = self.scene.raycast(pointer_ndc(frame, display.mirror_x))

        if hit is not self.state.released:
            self.state.released = None

        if hit is None:
            if self.state.hovered is not None:
                logger.debug(f"Hover cleared ({self.state.hovered.name})")
            self._clear_hover()
            return

        if hit is self.state.released:
            return

        if hit is not self.state.hovered:
            logger.debug(f"Hovering {hit.name}")
            self.state.hovered = hit
            self.state.hover_elapsed = 0.0

        pointing = event.type is GestureType.POINT
        self.scene.set_highlight([hit])
        if hit is not self.state.focused:
            anchor = pointer_pixels(frame, (display.viewport_width, display.viewport_height),
                                    display.mirror_x)
            self.presenter.show_tooltip(hit.name, anchor, HINT_ACQUIRED if pointing else HINT_IDLE)

        if pointing and self.cfg.selection.point_confirms and hit is not self.state.focused:
            self.focus(hit)

    def _check_disqualifiers(self, event: GestureEvent) -> None:
        sel = self.cfg.selection
        if event.type is GestureType.PINCH and event.delta[2] > sel.exit_zoom_threshold:
            self.exit_focus(ExitReason.ZOOM_OUT)
        elif event.type is GestureType.PAN and event.velocity > sel.exit_pan_velocity:
            self.exit_focus(ExitReason.FAST_PAN)

    def _follow(self, target: Selectable) -> None:
        target_pos = np.asarray(self.scene.world_position(target), dtype=float)
        goal = target_pos + self.cfg.follow_offset
        position = np.asarray(self.camera.position, dtype=float)
        position = position + (goal - position) * self.cfg.selection.follow_lerp
        self.camera.set_pose(position, target_pos)

    def _clear_hover(self) -> None:
        self.state.hovered = None
        self.state.hover_elapsed = 0.0
        self.scene.set_highlight([])
        self.presenter.hide_tooltip()

    def _set_hand_visible(self, visible: bool) -> None:
        if visible != self.hand_visible:
            self.hand_visible = visible
            self.presenter.set_hand_visible(visible)

    def _on_hand_lost(self) -> None:
        self._set_hand_visible(False)
        self._clear_hover()
        if self.cfg.selection.clear_focus_on_hand_loss:
            self.exit_focus(ExitReason.HAND_LOST)
        self.navigator.apply(self.last_event, self.camera, focused=self.state.focused is not None)
