"""
Configuration management for the hand-orbit gesture navigation core.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, Tuple
from dataclasses import dataclass

import numpy as np


@dataclass
class CameraConfig:
    """Capture device settings (demo application only)."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    model_complexity: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class ClassifierConfig:
    """Gesture classifier thresholds and smoothing."""
    history_size: int
    smoothing_alpha: float
    pinch_threshold: float
    extended_threshold: float  # fingertip-to-wrist distance for an extended finger
    curled_threshold: float    # fingertip-to-wrist distance for a curled finger
    pan_requires_pinky: bool


@dataclass
class NavigationConfig:
    """Gesture to camera-motion mapping."""
    base_fov: float
    distance_gain: float
    zoom_gain: float
    pan_gain: float
    orbit_speed: float
    fov_warp_gain: float
    zoom_duration_s: float
    pan_duration_s: float
    orbit_duration_s: float
    fov_relax_duration_s: float


@dataclass
class SelectionConfig:
    """Dwell/point selection and focus behaviour."""
    dwell_s: float
    point_confirms: bool
    exit_zoom_threshold: float
    exit_pan_velocity: float
    clear_focus_on_hand_loss: bool
    follow_offset: Tuple[float, float, float]
    follow_lerp: float
    fly_in_offset: Tuple[float, float, float]
    fly_in_duration_s: float


@dataclass
class SimulationConfig:
    """Time scales applied to the wider simulation."""
    normal_time_scale: float
    focused_time_scale: float


@dataclass
class DisplayConfig:
    """Display and pointer mapping settings."""
    show_landmarks: bool
    window_name: str
    viewport_width: int
    viewport_height: int
    mirror_x: bool


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    classifier: ClassifierConfig
    navigation: NavigationConfig
    selection: SelectionConfig
    simulation: SimulationConfig
    display: DisplayConfig

    @property
    def follow_offset(self) -> np.ndarray:
        return np.array(self.selection.follow_offset, dtype=float)

    @property
    def fly_in_offset(self) -> np.ndarray:
        return np.array(self.selection.fly_in_offset, dtype=float)


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.
    
    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml
        
    Returns:
        Configuration object with all settings

    Raises:
        FileNotFoundError: If the config file does not exist
        KeyError: If a section or key is missing
        ValueError: If a value is out of range
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)
    
    cfg = _dict_to_config(data)
    validate_config(cfg)
    return cfg


def _triple(values) -> Tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {values!r}")
    return (float(values[0]), float(values[1]), float(values[2]))


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps']
    )
    
    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        model_complexity=mp_data['model_complexity'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )
    
    cls_data = data['classifier']
    classifier = ClassifierConfig(
        history_size=int(cls_data['history_size']),
        smoothing_alpha=float(cls_data['smoothing_alpha']),
        pinch_threshold=float(cls_data['pinch_threshold']),
        extended_threshold=float(cls_data['extended_threshold']),
        curled_threshold=float(cls_data['curled_threshold']),
        pan_requires_pinky=bool(cls_data['pan_requires_pinky'])
    )

    nav_data = data['navigation']
    navigation = NavigationConfig(
        base_fov=float(nav_data['base_fov']),
        distance_gain=float(nav_data['distance_gain']),
        zoom_gain=float(nav_data['zoom_gain']),
        pan_gain=float(nav_data['pan_gain']),
        orbit_speed=float(nav_data['orbit_speed']),
        fov_warp_gain=float(nav_data['fov_warp_gain']),
        zoom_duration_s=float(nav_data['zoom_duration_s']),
        pan_duration_s=float(nav_data['pan_duration_s']),
        orbit_duration_s=float(nav_data['orbit_duration_s']),
        fov_relax_duration_s=float(nav_data['fov_relax_duration_s'])
    )

    sel_data = data['selection']
    selection = SelectionConfig(
        dwell_s=float(sel_data['dwell_s']),
        point_confirms=bool(sel_data['point_confirms']),
        exit_zoom_threshold=float(sel_data['exit_zoom_threshold']),
        exit_pan_velocity=float(sel_data['exit_pan_velocity']),
        clear_focus_on_hand_loss=bool(sel_data['clear_focus_on_hand_loss']),
        follow_offset=_triple(sel_data['follow_offset']),
        follow_lerp=float(sel_data['follow_lerp']),
        fly_in_offset=_triple(sel_data['fly_in_offset']),
        fly_in_duration_s=float(sel_data['fly_in_duration_s'])
    )

    sim_data = data['simulation']
    simulation = SimulationConfig(
        normal_time_scale=float(sim_data['normal_time_scale']),
        focused_time_scale=float(sim_data['focused_time_scale'])
    )
    
    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        window_name=display_data['window_name'],
        viewport_width=int(display_data['viewport_width']),
        viewport_height=int(display_data['viewport_height']),
        mirror_x=bool(display_data['mirror_x'])
    )
    
    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        classifier=classifier,
        navigation=navigation,
        selection=selection,
        simulation=simulation,
        display=display
    )


def validate_config(cfg: Cfg) -> None:
    """Reject values the classifier and controller cannot work with."""
    c = cfg.classifier
    if c.history_size < 2:
        raise ValueError(f"classifier.history_size must be >= 2, got {c.history_size}")
    if not 0.0 < c.smoothing_alpha <= 1.0:
        raise ValueError(f"classifier.smoothing_alpha must be in (0, 1], got {c.smoothing_alpha}")
    for name in ('pinch_threshold', 'extended_threshold', 'curled_threshold'):
        if getattr(c, name) <= 0:
            raise ValueError(f"classifier.{name} must be positive")
    if c.curled_threshold >= c.extended_threshold:
        raise ValueError("classifier.curled_threshold must be below extended_threshold")

    n = cfg.navigation
    for name in ('zoom_duration_s', 'pan_duration_s', 'orbit_duration_s', 'fov_relax_duration_s'):
        if getattr(n, name) <= 0:
            raise ValueError(f"navigation.{name} must be positive")
    if n.base_fov <= 0 or n.base_fov >= 180:
        raise ValueError(f"navigation.base_fov must be in (0, 180), got {n.base_fov}")

    s = cfg.selection
    if s.dwell_s <= 0:
        raise ValueError(f"selection.dwell_s must be positive, got {s.dwell_s}")
    if not 0.0 < s.follow_lerp <= 1.0:
        raise ValueError(f"selection.follow_lerp must be in (0, 1], got {s.follow_lerp}")

    d = cfg.display
    if d.viewport_width <= 0 or d.viewport_height <= 0:
        raise ValueError("display viewport size must be positive")
