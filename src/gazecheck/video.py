from __future__ import annotations

from contextlib import contextmanager
import threading

import cv2
import numpy as np

from gazecheck.geometry import FrameDimensions


def open_camera(index: int = 0) -> cv2.VideoCapture:
    """
    Open a camera by index.

    Compatibility fallback: if camera 0 fails to open, try camera 1.
    """
    cap = cv2.VideoCapture(index)
    if cap.isOpened():
        return cap

    cap.release()
    if index == 0:
        cap = cv2.VideoCapture(1)
        if cap.isOpened():
            return cap
        cap.release()
        raise RuntimeError("cannot open camera 0 (fallback to camera 1 also failed)")

    raise RuntimeError(f"cannot open camera {index}")


@contextmanager
def camera(index: int = 0):
    """
    Context manager returning an opened VideoCapture
    """
    cap = open_camera(index)
    try:
        yield cap
    finally:
        cap.release()


def iter_frames(cap, stop_event: threading.Event | None = None):
    """
    Yield successive frames until `stop_event` is set.

    Failed reads are skipped.
    """
    while stop_event is None or not stop_event.is_set():
        ok, frame = cap.read()
        if not ok:
            continue
        yield frame


def frame_dimensions(frame: np.ndarray) -> FrameDimensions:
    h, w = frame.shape[:2]
    return FrameDimensions(width=w, height=h)
