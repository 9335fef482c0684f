"""
Gesture classification: turns landmark frames into pinch/pan/rotate/point
events with a smoothed motion delta and a wrist velocity.
"""
import logging
from collections import deque
from typing import Any, Callable, Optional, Tuple

import numpy as np

from .config import ClassifierConfig
from .landmarks import HandMeasurements, INDEX_TIP, WRIST, first_hand, measure
from .types import GestureEvent, GestureType, zero_vector

logger = logging.getLogger(__name__)


class FrameHistory:
    """
    Fixed-capacity ring buffer of landmark frames.

    The oldest frame is evicted first once ``capacity`` is reached. Only the
    latest and previous frames feed the finite differences.
    """

    def __init__(self, capacity: int):
        if capacity < 2:
            raise ValueError(f"History capacity must be >= 2, got {capacity}")
        self._frames: deque = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._frames.maxlen

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self):
        return iter(self._frames)

    def push(self, frame: np.ndarray) -> None:
        self._frames.append(frame)

    def clear(self) -> None:
        self._frames.clear()

    @property
    def latest(self) -> Optional[np.ndarray]:
        return self._frames[-1] if self._frames else None

    @property
    def previous(self) -> Optional[np.ndarray]:
        return self._frames[-2] if len(self._frames) >= 2 else None

    def delta(self, landmark: int) -> np.ndarray:
        """
        Finite difference of one landmark between the two newest frames.
        
        Args:
            landmark: Landmark index
            
        Returns:
            (dx, dy, dz), or zeros if fewer than two frames are stored
        """
        if len(self._frames) < 2:
            return zero_vector()
        return np.array(self._frames[-1][landmark] - self._frames[-2][landmark], dtype=float)


# Predicates over one frame's measurements. All distances are planar (x, y).

def is_point(m: HandMeasurements, cfg: ClassifierConfig) -> bool:
    """Index extended while middle and ring are curled."""
    return (m.index_reach > cfg.extended_threshold and
            m.middle_reach < cfg.curled_threshold and
            m.ring_reach < cfg.curled_threshold)


def is_pinch(m: HandMeasurements, cfg: ClassifierConfig) -> bool:
    """Thumb tip touching the index tip."""
    return m.pinch_gap < cfg.pinch_threshold


def is_pan(m: HandMeasurements, cfg: ClassifierConfig) -> bool:
    """Closed fist: every fingertip curled towards the wrist."""
    curled = cfg.curled_threshold
    fist = (m.index_reach < curled and
            m.middle_reach < curled and
            m.ring_reach < curled)
    if cfg.pan_requires_pinky:
        fist = fist and m.pinky_reach < curled
    return fist


def is_rotate(m: HandMeasurements, cfg: ClassifierConfig) -> bool:
    """Open palm: index, middle and ring extended."""
    extended = cfg.extended_threshold
    return (m.index_reach > extended and
            m.middle_reach > extended and
            m.ring_reach > extended)


Predicate = Callable[[HandMeasurements, ClassifierConfig], bool]

# Evaluated top to bottom; the first match wins.
GESTURE_RULES: Tuple[Tuple[GestureType, Predicate], ...] = (
    (GestureType.POINT, is_point),
    (GestureType.PINCH, is_pinch),
    (GestureType.PAN, is_pan),
    (GestureType.ROTATE, is_rotate),
)


def match_gesture(m: HandMeasurements, cfg: ClassifierConfig,
                  rules: Tuple[Tuple[GestureType, Predicate], ...] = GESTURE_RULES) -> GestureType:
    """Return the first gesture whose predicate holds, or NONE."""
    for gesture, predicate in rules:
        if predicate(m, cfg):
            return gesture
    return GestureType.NONE


class GestureClassifier:
    """
    Per-hand gesture classifier.
    
    Features:
    - Ordered, mutually exclusive pose predicates (point > pinch > pan > rotate)
    - Finite-difference deltas over a bounded frame history
    - Exponential smoothing of continuous manipulation deltas
    - Hand loss returns a neutral event so manipulation stops immediately

    Construct one instance per tracked hand.
    """
    
    def __init__(self, cfg: ClassifierConfig):
        """Initialize classifier state for one hand."""
        self.cfg = cfg
        self.history = FrameHistory(cfg.history_size)
        self.smoothed_delta = zero_vector()
        self.last_type = GestureType.NONE
    
    def process(self, hands: Any) -> GestureEvent:
        """
        Classify the newest detection result.
        
        Args:
            hands: Sequence of detected hands (only the first is used), a single
                (21, k) array, or None when no hand is visible
            
        Returns:
            GestureEvent with the gesture type, delta and wrist velocity
        """
        frame = first_hand(hands)
        if frame is None:
            if self.last_type is not GestureType.NONE:
                logger.debug(f"Hand lost during {self.last_type.value}, releasing")
            self.last_type = GestureType.NONE
            return GestureEvent.idle()

        self.history.push(frame)

        wrist_delta = self.history.delta(WRIST)
        velocity = float(np.hypot(wrist_delta[0], wrist_delta[1]))

        gesture = match_gesture(measure(frame), self.cfg)

        if gesture is GestureType.PINCH:
            self._smooth(self.history.delta(INDEX_TIP))
            # Vertical index motion drives the dolly axis
            delta = np.array([0.0, 0.0, self.smoothed_delta[1]])
        elif gesture in (GestureType.PAN, GestureType.ROTATE):
            self._smooth(wrist_delta)
            delta = self.smoothed_delta.copy()
        else:
            delta = zero_vector()

        if gesture is not self.last_type:
            logger.debug(f"Gesture {self.last_type.value} -> {gesture.value}")
        self.last_type = gesture

        return GestureEvent(gesture, delta, velocity)

    def _smooth(self, raw: np.ndarray) -> None:
        """Exponentially blend the raw delta into the running delta."""
        alpha = self.cfg.smoothing_alpha
        self.smoothed_delta = self.smoothed_delta * (1.0 - alpha) + raw * alpha

    def reset(self) -> None:
        """Forget history and smoothing, e.g. when the hand is re-assigned."""
        self.history.clear()
        self.smoothed_delta = zero_vector()
        self.last_type = GestureType.NONE
