from __future__ import annotations

from dataclasses import dataclass, replace
import math
import os
from pathlib import Path

from gazecheck.constants import DEFAULT_MESSAGE, DEFAULT_THRESHOLD

NOTIFY_POLICIES = ("every_frame", "once_per_episode")


@dataclass(frozen=True)
class GazeConfig:
    threshold: float = DEFAULT_THRESHOLD
    camera_index: int = 0
    face_model: Path | None = None
    notify_policy: str = "every_frame"
    message: str = DEFAULT_MESSAGE
    sound_path: Path | None = None

    def __post_init__(self):
        if not math.isfinite(self.threshold) or self.threshold < 0:
            raise ValueError(f"threshold must be a finite number >= 0, got {self.threshold}")
        if self.notify_policy not in NOTIFY_POLICIES:
            raise ValueError(
                f"notify_policy must be one of {NOTIFY_POLICIES}, "
                f"got {self.notify_policy!r}"
            )

    @classmethod
    def from_env(cls, environ=None) -> "GazeConfig":
        """
        Build a config from GAZECHECK_* environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        kwargs = {}

        raw = env.get("GAZECHECK_THRESHOLD")
        if raw:
            try:
                kwargs["threshold"] = float(raw)
            except ValueError as e:
                raise ValueError(f"GAZECHECK_THRESHOLD is not a number: {raw!r}") from e

        raw = env.get("GAZECHECK_CAMERA")
        if raw:
            try:
                kwargs["camera_index"] = int(raw)
            except ValueError as e:
                raise ValueError(f"GAZECHECK_CAMERA is not an integer: {raw!r}") from e

        raw = env.get("GAZECHECK_FACE_LANDMARKER_MODEL")
        if raw:
            kwargs["face_model"] = Path(raw).expanduser()

        raw = env.get("GAZECHECK_NOTIFY_POLICY")
        if raw:
            kwargs["notify_policy"] = raw

        raw = env.get("GAZECHECK_SOUND")
        if raw:
            kwargs["sound_path"] = Path(raw).expanduser()

        return cls(**kwargs)

    def with_overrides(self, **overrides) -> "GazeConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
