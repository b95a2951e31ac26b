from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float


@dataclass(frozen=True)
class FrameDimensions:
    width: float
    height: float

    @property
    def center(self) -> Point2D:
        return Point2D(self.width / 2, self.height / 2)


def eye_center(landmarks, eye_indices: Sequence[int]) -> Point2D:
    """
    Average the (x, y) of the given landmarks into one point.

    `landmarks` is an (N, 2+) array-like in pixel units. Out-of-range indices
    raise IndexError.
    """
    if len(eye_indices) == 0:
        raise ValueError("eye_indices must not be empty")

    points = np.asarray(landmarks, dtype=np.float64)
    n = points.shape[0]
    for i in eye_indices:
        if not 0 <= i < n:
            raise IndexError(f"landmark index {i} out of range for {n} landmarks")

    xy = points[list(eye_indices), :2]
    cx, cy = xy.mean(axis=0)
    return Point2D(float(cx), float(cy))


def eyes_midpoint(left: Point2D, right: Point2D) -> Point2D:
    return Point2D((left.x + right.x) / 2, (left.y + right.y) / 2)


def is_looking_at_camera(
    left: Point2D,
    right: Point2D,
    frame: FrameDimensions,
    threshold: float,
) -> bool:
    """
    True when both eye centers sit inside the square of half-width
    `threshold` around the frame center. Edges are excluded.
    """
    center = frame.center
    return (
        abs(left.x - center.x) < threshold
        and abs(left.y - center.y) < threshold
        and abs(right.x - center.x) < threshold
        and abs(right.y - center.y) < threshold
    )
