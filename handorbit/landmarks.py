"""
Hand landmark helpers: frame validation and the 2D geometry used by the
gesture predicates.
"""
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import numpy as np

NUM_LANDMARKS = 21

# MediaPipe hand landmark indices
WRIST = 0
THUMB_TIP = 4
INDEX_TIP = 8
MIDDLE_TIP = 12
RING_TIP = 16
PINKY_TIP = 20


def to_frame(hand: Any) -> Optional[np.ndarray]:
    """
    Convert one detected hand into a read-only (21, 3) landmark frame.

    Accepts array-likes of (x, y) or (x, y, z) rows and sequences of
    objects exposing ``.x``, ``.y`` and ``.z`` (MediaPipe landmarks).
    
    Args:
        hand: Landmarks for a single hand
        
    Returns:
        (21, 3) float array, or None if the input is not a usable hand
    """
    if hand is None:
        return None

    if hasattr(hand, 'landmark'):
        hand = hand.landmark
    try:
        if len(hand) > 0 and hasattr(hand[0], 'x'):
            hand = [(p.x, p.y, getattr(p, 'z', 0.0)) for p in hand]
        points = np.asarray(hand, dtype=float)
    except (TypeError, ValueError):
        return None

    if points.ndim != 2 or points.shape[0] < NUM_LANDMARKS or points.shape[1] < 2:
        return None

    frame = np.zeros((NUM_LANDMARKS, 3), dtype=float)
    cols = min(points.shape[1], 3)
    frame[:, :cols] = points[:NUM_LANDMARKS, :cols]
    frame.setflags(write=False)
    return frame


def first_hand(hands: Any) -> Optional[np.ndarray]:
    """
    Pick the first hand of a detection result.

    A bare (N, k) array is treated as a single hand; ``None`` or an empty
    sequence means no hand is visible.
    """
    if hands is None:
        return None
    if isinstance(hands, np.ndarray) and hands.ndim == 2:
        return to_frame(hands)
    if len(hands) == 0:
        return None
    return to_frame(hands[0])


def planar_distance(frame: np.ndarray, a: int, b: int) -> float:
    """Euclidean distance between two landmarks using x and y only."""
    return float(np.hypot(*(frame[a, :2] - frame[b, :2])))


@dataclass(frozen=True)
class HandMeasurements:
    """2D distances the gesture predicates are defined over."""
    index_reach: float
    middle_reach: float
    ring_reach: float
    pinky_reach: float
    pinch_gap: float


def measure(frame: np.ndarray) -> HandMeasurements:
    """Compute fingertip-to-wrist reaches and the thumb/index pinch gap."""
    return HandMeasurements(
        index_reach=planar_distance(frame, INDEX_TIP, WRIST),
        middle_reach=planar_distance(frame, MIDDLE_TIP, WRIST),
        ring_reach=planar_distance(frame, RING_TIP, WRIST),
        pinky_reach=planar_distance(frame, PINKY_TIP, WRIST),
        pinch_gap=planar_distance(frame, THUMB_TIP, INDEX_TIP),
    )


def pointer_ndc(frame: np.ndarray, mirror_x: bool = True) -> Tuple[float, float]:
    """
    Map the index fingertip to normalized device coordinates in [-1, 1].

    The front-facing camera image is mirrored, so x is flipped by default.
    """
    x, y = frame[INDEX_TIP, 0], frame[INDEX_TIP, 1]
    if mirror_x:
        x = 1.0 - x
    return (float(x * 2.0 - 1.0), float(-(y * 2.0 - 1.0)))


def pointer_pixels(frame: np.ndarray, viewport: Sequence[int],
                   mirror_x: bool = True) -> Tuple[float, float]:
    """Screen-space anchor of the index fingertip for tooltips."""
    width, height = viewport
    x, y = frame[INDEX_TIP, 0], frame[INDEX_TIP, 1]
    if mirror_x:
        x = 1.0 - x
    return (float(x * width), float(y * height))
