"""
Hand Orbit Navigation

Turns a stream of hand landmarks into camera controls for an interactive 3D
scene: gesture classification (pinch/pan/rotate/point), temporal smoothing and
a dwell/point-based focus state machine.
"""

__version__ = "0.1.0"

from .types import (
    GestureType,
    GestureEvent,
    CameraTween,
    ExitReason,
    SelectionPhase,
    CameraProto,
    SceneProto,
    PresenterProto,
    Selectable,
)
from .config import load_config, Cfg
from .gestures import GestureClassifier, FrameHistory, GESTURE_RULES
from .navigation import CameraNavigator
from .interaction import InteractionController, SelectionState, NO_DETECTION
from .controller_mock import MockCamera, MockScene, MockPresenter, MockTarget

__all__ = [
    "GestureType",
    "GestureEvent",
    "CameraTween",
    "ExitReason",
    "SelectionPhase",
    "CameraProto",
    "SceneProto",
    "PresenterProto",
    "Selectable",
    "load_config",
    "Cfg",
    "GestureClassifier",
    "FrameHistory",
    "GESTURE_RULES",
    "CameraNavigator",
    "InteractionController",
    "SelectionState",
    "NO_DETECTION",
    "MockCamera",
    "MockScene",
    "MockPresenter",
    "MockTarget",
]
