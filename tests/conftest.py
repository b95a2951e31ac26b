import numpy as np
import pytest

from gazecheck.constants import LEFT_EYE_INDICES, RIGHT_EYE_INDICES


def make_landmarks(left_xy, right_xy, n=468):
    """Face mesh with every left-eye point at left_xy and right-eye point at right_xy."""
    points = np.zeros((n, 3), dtype=np.float64)
    points[list(LEFT_EYE_INDICES), :2] = left_xy
    points[list(RIGHT_EYE_INDICES), :2] = right_xy
    return points


def blank_frame(width=640, height=480):
    return np.zeros((height, width, 3), dtype=np.uint8)


class FakeEstimator:
    """Returns queued predictions one frame at a time."""

    def __init__(self, predictions):
        self.predictions = list(predictions)
        self.calls = 0

    def estimate_faces(self, frame):
        self.calls += 1
        item = self.predictions.pop(0) if self.predictions else []
        if isinstance(item, Exception):
            raise item
        return item


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, message):
        self.messages.append(message)


@pytest.fixture
def notifier():
    return RecordingNotifier()
