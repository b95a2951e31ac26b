from __future__ import annotations

from dataclasses import asdict, dataclass
import logging
import threading

import numpy as np

from gazecheck.config import GazeConfig
from gazecheck.constants import LEFT_EYE_INDICES, RIGHT_EYE_INDICES
from gazecheck.geometry import (
    FrameDimensions,
    Point2D,
    eye_center,
    eyes_midpoint,
    is_looking_at_camera,
)
from gazecheck.landmarks import LandmarkEstimator
from gazecheck.notify import Notifier
from gazecheck.video import frame_dimensions, iter_frames

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionResult:
    frame: FrameDimensions
    face_count: int
    left: Point2D | None = None
    right: Point2D | None = None
    midpoint: Point2D | None = None
    looking: bool = False
    notified: bool = False


class GazeMonitor:
    """
    Per-frame gaze check driven by a landmark estimator.

    Each pass uses the first detected face only. When both eye centers fall
    inside the threshold box around the frame center the notifier is called.
    """

    def __init__(
        self,
        estimator: LandmarkEstimator,
        notifier: Notifier,
        config: GazeConfig | None = None,
    ):
        self.estimator = estimator
        self.notifier = notifier
        self.config = config or GazeConfig()

        self.error: BaseException | None = None
        self._in_episode = False
        self._frames = 0
        self._matches = 0
        self._last: DetectionResult | None = None

        self._worker: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

    def detect(self, frame: np.ndarray) -> DetectionResult:
        dims = frame_dimensions(frame)
        faces = self.estimator.estimate_faces(frame)

        if len(faces) == 0:
            self._in_episode = False
            result = DetectionResult(frame=dims, face_count=0)
            self._record(result)
            return result

        landmarks = faces[0]
        left = eye_center(landmarks, LEFT_EYE_INDICES)
        right = eye_center(landmarks, RIGHT_EYE_INDICES)
        midpoint = eyes_midpoint(left, right)
        logger.debug("left eye center: %s", left)
        logger.debug("right eye center: %s", right)
        logger.debug("eyes center: %s", midpoint)

        looking = is_looking_at_camera(left, right, dims, self.config.threshold)
        notified = False
        if looking:
            if self.config.notify_policy == "every_frame" or not self._in_episode:
                logger.info("gaze met the camera at %s", midpoint)
                self.notifier.notify(self.config.message)
                notified = True
        self._in_episode = looking

        result = DetectionResult(
            frame=dims,
            face_count=len(faces),
            left=left,
            right=right,
            midpoint=midpoint,
            looking=looking,
            notified=notified,
        )
        self._record(result)
        return result

    def _record(self, result: DetectionResult) -> None:
        with self._lock:
            self._frames += 1
            if result.looking:
                self._matches += 1
            self._last = result

    def run(self, frames) -> None:
        """
        Process frames until the source ends or stop() is called.

        Exceptions from the estimator propagate and end the loop. A direct
        call starts fresh after an earlier stop().
        """
        if threading.current_thread() is not self._worker:
            self._stop_event.clear()
        for frame in frames:
            if self._stop_event.is_set():
                break
            self.detect(frame)

    def run_camera(self, cap) -> None:
        self.run(iter_frames(cap, self._stop_event))

    def start_camera(self, cap) -> bool:
        return self.start(iter_frames(cap, self._stop_event))

    def start(self, frames) -> bool:
        """Run the loop on a worker thread. Returns False if already running."""
        if self.running:
            return False

        self._stop_event.clear()
        self.error = None
        self._worker = threading.Thread(target=self._work, args=(frames,), daemon=True)
        self._worker.start()
        return True

    def _work(self, frames) -> None:
        try:
            self.run(frames)
        except Exception as e:
            logger.exception("detection loop stopped")
            self.error = e

    def stop(self, timeout: float | None = 2.5) -> None:
        self._stop_event.set()
        self.join(timeout)

    def join(self, timeout: float | None = None) -> None:
        worker = self._worker
        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout=timeout)
        if worker is not None and not worker.is_alive():
            self._worker = None
        if self.error is not None:
            raise self.error

    @property
    def running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def status(self) -> dict:
        with self._lock:
            last = None if self._last is None else asdict(self._last)
            return {
                "running": self.running,
                "frames": self._frames,
                "matches": self._matches,
                "threshold": self.config.threshold,
                "notify_policy": self.config.notify_policy,
                "last": last,
                "error": None if self.error is None else repr(self.error),
            }
