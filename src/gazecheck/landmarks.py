from __future__ import annotations

import os
from pathlib import Path
import shutil
import sys
import time
from typing import Protocol
import urllib.request

import cv2
import numpy as np


FACE_LANDMARKER_URL = (
    "https://storage.googleapis.com/mediapipe-models/"
    "face_landmarker/face_landmarker/float16/1/face_landmarker.task"
)
MODEL_ENV = "GAZECHECK_FACE_LANDMARKER_MODEL"


class LandmarkEstimator(Protocol):
    def estimate_faces(self, frame: np.ndarray) -> list[np.ndarray]:
        """Return one (N, 3) pixel-space landmark array per detected face."""
        ...


def _download_file(url: str, dst: Path) -> None:
    # write beside the target so a partial file never looks like a cached model
    dst.parent.mkdir(parents=True, exist_ok=True)
    partial = dst.with_name(dst.name + ".part")
    try:
        req = urllib.request.Request(url, headers={"User-Agent": "gazecheck"})
        with urllib.request.urlopen(req, timeout=30) as resp, partial.open("wb") as fh:
            shutil.copyfileobj(resp, fh)
        partial.replace(dst)
    finally:
        partial.unlink(missing_ok=True)


def resolve_face_model(
    model_path: str | os.PathLike[str] | None,
    cache_dir: Path | None = None,
) -> Path:
    """
    Find the FaceLandmarker task file.

    An explicit path wins, then $GAZECHECK_FACE_LANDMARKER_MODEL, then the
    user cache. The cached copy is downloaded when absent.
    """
    for source, value in (("FaceLandmarker model", model_path), (MODEL_ENV, os.environ.get(MODEL_ENV))):
        if value:
            path = Path(value).expanduser().resolve()
            if not path.exists():
                raise FileNotFoundError(f"{source} not found: {path}")
            return path

    cache_dir = cache_dir or Path.home() / ".cache" / "gazecheck" / "mediapipe"
    cached = cache_dir / "face_landmarker.task"
    if cached.exists():
        return cached

    print(f"[gazecheck] downloading FaceLandmarker model to {cached}", file=sys.stderr)
    try:
        _download_file(FACE_LANDMARKER_URL, cached)
    except Exception as e:
        raise RuntimeError(
            f"could not download the FaceLandmarker model; pass --face-model or set {MODEL_ENV}"
        ) from e
    return cached


def _create_face_landmarker(task_path: Path, max_faces: int):
    # mediapipe is slow to import; load it only when a real estimator is built
    import mediapipe as mp
    from mediapipe.tasks.python import vision
    from mediapipe.tasks.python.core.base_options import BaseOptions

    options = vision.FaceLandmarkerOptions(
        base_options=BaseOptions(model_asset_path=str(task_path)),
        running_mode=vision.RunningMode.VIDEO,
        num_faces=max_faces,
    )
    return mp, vision.FaceLandmarker.create_from_options(options)


def to_pixel_landmarks(normalized, width: int, height: int) -> np.ndarray:
    """
    Scale normalized MediaPipe landmarks to pixel space.

    z is scaled by width, which is how MediaPipe defines its depth unit.
    """
    points = np.array([(lm.x, lm.y, lm.z) for lm in normalized], dtype=np.float64)
    if points.size == 0:
        return points.reshape(0, 3)
    return points * np.array([width, height, width], dtype=np.float64)


class FaceMeshEstimator:
    """Runs the MediaPipe FaceLandmarker on BGR frames."""

    def __init__(
        self,
        face_landmarker_model: str | os.PathLike[str] | None = None,
        max_faces: int = 1,
    ):
        task_path = resolve_face_model(face_landmarker_model)
        self._mp, self._face_landmarker = _create_face_landmarker(task_path, max_faces)
        self._mp_last_ts_ms = 0

    def estimate_faces(self, frame: np.ndarray) -> list[np.ndarray]:
        h, w = frame.shape[:2]
        image_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        image_rgb = np.ascontiguousarray(image_rgb)
        mp_image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=image_rgb)

        # VIDEO mode rejects non-increasing timestamps
        ts_ms = int(time.time() * 1000)
        if ts_ms <= self._mp_last_ts_ms:
            ts_ms = self._mp_last_ts_ms + 1
        self._mp_last_ts_ms = ts_ms

        result = self._face_landmarker.detect_for_video(mp_image, ts_ms)
        return [to_pixel_landmarks(face, w, h) for face in result.face_landmarks]

    def close(self) -> None:
        if getattr(self, "_face_landmarker", None) is not None:
            self._face_landmarker.close()
            self._face_landmarker = None

    def __del__(self):
        try:
            self.close()
        except Exception:
            pass
