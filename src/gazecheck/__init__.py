from gazecheck.config import GazeConfig
from gazecheck.constants import LEFT_EYE_INDICES, RIGHT_EYE_INDICES
from gazecheck.geometry import (
    FrameDimensions,
    Point2D,
    eye_center,
    eyes_midpoint,
    is_looking_at_camera,
)
from gazecheck.monitor import DetectionResult, GazeMonitor

__all__ = [
    "DetectionResult",
    "FrameDimensions",
    "GazeConfig",
    "GazeMonitor",
    "LEFT_EYE_INDICES",
    "Point2D",
    "RIGHT_EYE_INDICES",
    "eye_center",
    "eyes_midpoint",
    "is_looking_at_camera",
]
