from __future__ import annotations

import argparse
from contextlib import closing
import logging
from pathlib import Path

import cv2

from gazecheck.config import NOTIFY_POLICIES, GazeConfig
from gazecheck.landmarks import FaceMeshEstimator
from gazecheck.monitor import GazeMonitor
from gazecheck.notify import PrintNotifier, SoundNotifier
from gazecheck.overlay import draw_overlay
from gazecheck.server import create_app, shutdown
from gazecheck.video import camera, iter_frames, open_camera


def parse_args(argv=None):
    """Parse input arguments."""
    parser = argparse.ArgumentParser(
        description="Notify when the user's eyes are centered on the camera."
    )
    parser.add_argument("--camera", dest="camera_index", type=int, default=None,
                        help="Camera device id [0]")
    parser.add_argument("--threshold", type=float, default=None,
                        help="Max per-axis pixel offset from frame center [50]")
    parser.add_argument("--face-model", dest="face_model", default=None,
                        help="Path to a MediaPipe face_landmarker.task file")
    parser.add_argument("--notify-policy", dest="notify_policy", choices=NOTIFY_POLICIES,
                        default=None, help="When to notify on a sustained gaze")
    parser.add_argument("--sound", dest="sound_path", default=None,
                        help="Play this sound file on every notification")
    parser.add_argument("--preview", action="store_true",
                        help="Show the camera feed with the detection overlay")
    parser.add_argument("--serve", action="store_true",
                        help="Expose /status, /start and /stop over HTTP")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log eye centers for every frame")
    args = parser.parse_args(argv)
    if args.serve and args.preview:
        parser.error("--preview cannot be combined with --serve")
    return args


def build_config(args) -> GazeConfig:
    return GazeConfig.from_env().with_overrides(
        camera_index=args.camera_index,
        threshold=args.threshold,
        face_model=Path(args.face_model) if args.face_model else None,
        notify_policy=args.notify_policy,
        sound_path=Path(args.sound_path) if args.sound_path else None,
    )


def _run_preview(monitor: GazeMonitor, cap) -> None:
    try:
        for frame in iter_frames(cap):
            result = monitor.detect(frame)
            cv2.imshow("gazecheck", draw_overlay(frame, result, monitor.config.threshold))
            key = cv2.waitKey(1) & 0xFF
            if key in (ord("q"), 27):
                break
    finally:
        cv2.destroyAllWindows()


def _serve(monitor: GazeMonitor, config: GazeConfig, host: str, port: int) -> None:
    app = create_app(monitor, lambda: open_camera(config.camera_index))
    try:
        app.run(host=host, port=port)
    finally:
        shutdown(app)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[gazecheck] %(levelname)s %(message)s",
    )
    config = build_config(args)

    notifier = SoundNotifier(config.sound_path) if config.sound_path else PrintNotifier()
    try:
        with closing(FaceMeshEstimator(config.face_model)) as estimator:
            monitor = GazeMonitor(estimator, notifier, config)
            if args.serve:
                _serve(monitor, config, args.host, args.port)
            else:
                with camera(config.camera_index) as cap:
                    if args.preview:
                        _run_preview(monitor, cap)
                    else:
                        monitor.run_camera(cap)
    except KeyboardInterrupt:
        pass
    finally:
        if isinstance(notifier, SoundNotifier):
            notifier.close()
    return 0
