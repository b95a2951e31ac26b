from pathlib import Path

import pytest

from gazecheck.config import GazeConfig


def test_defaults():
    config = GazeConfig()
    assert config.threshold == 50
    assert config.camera_index == 0
    assert config.notify_policy == "every_frame"


def test_from_env():
    config = GazeConfig.from_env(
        {
            "GAZECHECK_THRESHOLD": "35.5",
            "GAZECHECK_CAMERA": "2",
            "GAZECHECK_NOTIFY_POLICY": "once_per_episode",
            "GAZECHECK_SOUND": "/tmp/ding.wav",
        }
    )
    assert config.threshold == 35.5
    assert config.camera_index == 2
    assert config.notify_policy == "once_per_episode"
    assert config.sound_path == Path("/tmp/ding.wav")
    assert config.face_model is None


def test_from_env_ignores_empty_values():
    assert GazeConfig.from_env({"GAZECHECK_THRESHOLD": ""}) == GazeConfig()


@pytest.mark.parametrize(
    "env",
    [
        {"GAZECHECK_THRESHOLD": "wide"},
        {"GAZECHECK_THRESHOLD": "-1"},
        {"GAZECHECK_THRESHOLD": "nan"},
        {"GAZECHECK_THRESHOLD": "inf"},
        {"GAZECHECK_CAMERA": "front"},
        {"GAZECHECK_NOTIFY_POLICY": "sometimes"},
    ],
)
def test_from_env_rejects_bad_values(env):
    with pytest.raises(ValueError):
        GazeConfig.from_env(env)


def test_overrides_skip_none():
    config = GazeConfig(threshold=20).with_overrides(threshold=None, camera_index=3)
    assert config.threshold == 20
    assert config.camera_index == 3


@pytest.mark.parametrize("threshold", [float("nan"), float("inf"), -0.5])
def test_rejects_non_finite_or_negative_threshold(threshold):
    with pytest.raises(ValueError):
        GazeConfig(threshold=threshold)
