"""
MediaPipe Hands adapter: camera frames in, per-hand landmark arrays out.
"""
from typing import List

import cv2
import mediapipe as mp
import numpy as np

from .landmarks import INDEX_TIP, MIDDLE_TIP, PINKY_TIP, RING_TIP, THUMB_TIP

FINGERTIPS = (THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)

BONE_COLOR = (255, 229, 0)
JOINT_COLOR = (0, 255, 0)
TIP_COLOR = (255, 255, 255)


class HandsTracker:
    """Video-mode hand landmark detector."""

    def __init__(self, max_num_hands: int = 1, model_complexity: int = 1,
                 min_detection_conf: float = 0.7, min_tracking_conf: float = 0.7):
        """
        Create the MediaPipe solution.

        Args:
            max_num_hands: Upper bound on hands reported per frame
            model_complexity: 0 = lite model, 1 = full model
            min_detection_conf: Palm detector confidence needed to start a track
            min_tracking_conf: Landmark confidence needed to keep a track
        """
        solution = mp.solutions.hands
        self.connections = tuple(solution.HAND_CONNECTIONS)
        self.hands = solution.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf,
        )

    def process(self, frame_bgr: np.ndarray) -> List[np.ndarray]:
        """
        Detect hands in one BGR frame.

        Safe to call from a worker thread; the render loop never touches
        the solution object concurrently.

        Returns:
            One (21, 3) array of normalized (x, y, z) per detected hand;
            empty if no hand is visible
        """
        results = self.hands.process(cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB))
        detected = results.multi_hand_landmarks or []
        return [
            np.array([(p.x, p.y, p.z) for p in hand.landmark], dtype=float)
            for hand in detected
        ]

    def draw_landmarks(self, frame: np.ndarray, landmarks: np.ndarray) -> np.ndarray:
        """Overlay the hand skeleton (normalized coordinates) onto ``frame`` in place."""
        height, width = frame.shape[:2]
        points = [(int(x * width), int(y * height)) for x, y, _ in landmarks]

        for a, b in self.connections:
            cv2.line(frame, points[a], points[b], BONE_COLOR, 1)
        for i, point in enumerate(points):
            if i in FINGERTIPS:
                cv2.circle(frame, point, 5, TIP_COLOR, -1)
            else:
                cv2.circle(frame, point, 3, JOINT_COLOR, -1)
        return frame

    def close(self) -> None:
        self.hands.close()
