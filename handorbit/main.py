"""
Demo application: webcam hand tracking driving the orbit scene camera.
"""
import asyncio
import logging
import math
import os
import sys
import time
from typing import Optional, Tuple

import cv2
import numpy as np
from dotenv import load_dotenv

from .config import load_config
from .interaction import InteractionController, NO_DETECTION
from .scene import OrbitScene, TweenCamera
from .tracker import HandsTracker
from .types import ExitReason, Selectable

logger = logging.getLogger(__name__)

CYAN = (255, 229, 0)
WHITE = (255, 255, 255)


class OverlayPresenter:
    """Keeps presentation state for the OpenCV overlay and logs notifications."""

    def __init__(self):
        self.gesture_label = ""
        self.hand_visible = False
        self.tooltip: Optional[Tuple[str, Tuple[float, float], str]] = None
        self.panel: Optional[Selectable] = None

    def show_gesture(self, label: str) -> None:
        if label != self.gesture_label:
            logger.debug(label)
        self.gesture_label = label

    def set_hand_visible(self, visible: bool) -> None:
        logger.info("Hand tracking %s", "active" if visible else "lost")
        self.hand_visible = visible

    def show_tooltip(self, name: str, anchor_px: Tuple[float, float], hint: str) -> None:
        self.tooltip = (name, anchor_px, hint)

    def hide_tooltip(self) -> None:
        self.tooltip = None

    def show_detail_panel(self, target: Selectable) -> None:
        logger.info("Detail panel: %s", target.name)
        self.panel = target

    def hide_detail_panel(self, reason: ExitReason) -> None:
        logger.info("Detail panel closed (%s)", reason.value)
        self.panel = None


class GestureNavigationApp:
    """Main application class for gesture-driven scene navigation."""
    
    def __init__(self, config_path: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        mp_cfg = self.config.mediapipe
        self.tracker = HandsTracker(
            max_num_hands=mp_cfg.max_num_hands,
            model_complexity=mp_cfg.model_complexity,
            min_detection_conf=mp_cfg.min_detection_confidence,
            min_tracking_conf=mp_cfg.min_tracking_confidence
        )

        display = self.config.display
        self.camera = TweenCamera(
            fov=self.config.navigation.base_fov,
            aspect=display.viewport_width / display.viewport_height
        )
        self.scene = OrbitScene(self.camera, time_scale=self.config.simulation.normal_time_scale)
        self.presenter = OverlayPresenter()
        self.controller = InteractionController(self.config, self.camera, self.scene, self.presenter)

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)
        
        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")
    
    async def run(self):
        """Run the main application loop."""
        logger.info(f"Starting {self.config.display.window_name}")
        print("🎯 Gestures:")
        print("  - Pinch + Vertical Motion = Zoom")
        print("  - Fist + Move = Pan")
        print("  - Open Palm + Horizontal Motion = Orbit")
        print("  - Point / Dwell on a planet = Focus")
        print("Press 'x' to release focus, 'q' to quit")

        loop = asyncio.get_running_loop()
        pending: Optional[asyncio.Future] = None
        last_hands = []
        last_tick = time.perf_counter()
        
        while True:
            ret, frame = self.cap.read()
            if not ret:
                logger.error("Failed to read frame from camera")
                break

            # Consume a finished inference, then queue the next one
            detection = NO_DETECTION
            if pending is not None and pending.done():
                detection = pending.result()
                last_hands = detection
                pending = None
            if pending is None:
                pending = loop.run_in_executor(None, self.tracker.process, frame.copy())

            now = time.perf_counter()
            dt = now - last_tick
            last_tick = now

            self.scene.update(dt)
            self.camera.update(dt)
            event = self.controller.step(dt, detection)

            view = cv2.flip(frame, 1)
            if last_hands and self.config.display.show_landmarks:
                mirrored = last_hands[0].copy()
                mirrored[:, 0] = 1.0 - mirrored[:, 0]
                view = self.tracker.draw_landmarks(view, mirrored)
            self._draw_scene(view)
            self._draw_status(view, event.velocity)

            cv2.imshow(self.config.display.window_name, view)
            
            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            if key == ord('x'):
                self.controller.exit_focus(ExitReason.USER)

            await asyncio.sleep(0)
        
        if pending is not None:
            await pending
        self.close()

    def _to_pixels(self, ndc: Tuple[float, float], size: Tuple[int, int]) -> Tuple[int, int]:
        width, height = size
        return (int((ndc[0] * 0.5 + 0.5) * width), int((-ndc[1] * 0.5 + 0.5) * height))

    def _draw_scene(self, frame: np.ndarray) -> None:
        height, width = frame.shape[:2]
        focal = 1.0 / math.tan(math.radians(self.camera.fov) / 2.0)

        sun = self.camera.project(np.zeros(3))
        if sun is not None:
            cv2.circle(frame, self._to_pixels(sun, (width, height)), 6, (0, 170, 255), -1)

        for body in self.scene.bodies:
            ndc = self.camera.project(body.position)
            if ndc is None or abs(ndc[0]) > 1.2 or abs(ndc[1]) > 1.2:
                continue
            depth = float(np.linalg.norm(body.position - self.camera.position))
            radius = max(2, int(body.radius * focal / depth * height / 2))
            center = self._to_pixels(ndc, (width, height))
            cv2.circle(frame, center, radius, body.color, -1)
            if body in self.scene.highlighted:
                cv2.circle(frame, center, radius + 4, CYAN, 2)

    def _draw_status(self, frame: np.ndarray, velocity: float) -> None:
        height, width = frame.shape[:2]
        display = self.config.display
        presenter = self.presenter

        status = "Hand: tracking" if presenter.hand_visible else "No hand detected"
        cv2.putText(frame, status, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, WHITE, 2)
        cv2.putText(frame, presenter.gesture_label, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.6, CYAN, 2)
        cv2.putText(frame, f"Vel: {velocity:.3f}  Phase: {self.controller.phase.value}",
                    (10, 90), cv2.FONT_HERSHEY_SIMPLEX, 0.5, WHITE, 1)

        if presenter.tooltip is not None:
            name, (ax, ay), hint = presenter.tooltip
            px = int(ax * width / display.viewport_width)
            py = int(ay * height / display.viewport_height)
            cv2.putText(frame, name, (px + 12, py), cv2.FONT_HERSHEY_SIMPLEX, 0.6, WHITE, 2)
            cv2.putText(frame, hint, (px + 12, py + 20), cv2.FONT_HERSHEY_SIMPLEX, 0.4, CYAN, 1)

        if presenter.panel is not None:
            cv2.rectangle(frame, (width - 230, 10), (width - 10, 90), (0, 0, 0), -1)
            cv2.rectangle(frame, (width - 230, 10), (width - 10, 90), CYAN, 1)
            cv2.putText(frame, presenter.panel.name.upper(), (width - 220, 40),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, WHITE, 2)
            cv2.putText(frame, "ORBITAL LOCK ACTIVE - x to release", (width - 220, 70),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.35, CYAN, 1)

    def close(self):
        """Release the capture device, tracker and windows."""
        if self.cap.isOpened():
            self.cap.release()
        self.tracker.close()
        cv2.destroyAllWindows()


async def main():
    """Entry point for the application."""
    load_dotenv()
    debug = "--debug" in sys.argv
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S"
    )

    app = None
    try:
        app = GestureNavigationApp(config_path=os.getenv("HANDORBIT_CONFIG") or None)
        await app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user")
        if app is not None:
            app.close()
    except RuntimeError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
