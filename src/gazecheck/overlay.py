from __future__ import annotations

import cv2
import numpy as np

from gazecheck.monitor import DetectionResult

_BOX_COLOR = (200, 200, 200)
_MATCH_COLOR = (0, 200, 0)
_LEFT_COLOR = (255, 0, 0)
_RIGHT_COLOR = (0, 0, 255)


def draw_overlay(frame: np.ndarray, result: DetectionResult, threshold: float) -> np.ndarray:
    """Draw the acceptance box and eye centers onto a copy of `frame`."""
    out = frame.copy()
    center = result.frame.center
    box_color = _MATCH_COLOR if result.looking else _BOX_COLOR
    cv2.rectangle(
        out,
        (int(center.x - threshold), int(center.y - threshold)),
        (int(center.x + threshold), int(center.y + threshold)),
        box_color,
        2,
    )

    if result.left is not None:
        cv2.circle(out, (int(result.left.x), int(result.left.y)), 3, _LEFT_COLOR, -1)
    if result.right is not None:
        cv2.circle(out, (int(result.right.x), int(result.right.y)), 3, _RIGHT_COLOR, -1)

    label = "no face" if result.face_count == 0 else ("LOOKING" if result.looking else "AWAY")
    cv2.putText(out, label, (20, 40), cv2.FONT_HERSHEY_SIMPLEX, 1.0, box_color, 2, cv2.LINE_AA)
    return out
