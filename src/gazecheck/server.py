from __future__ import annotations

import logging
from typing import Callable

from flask import Flask, jsonify

from gazecheck.monitor import GazeMonitor

logger = logging.getLogger(__name__)


def create_app(monitor: GazeMonitor, open_capture: Callable[[], object]) -> Flask:
    """
    HTTP controls for a running monitor.

    `open_capture` returns an object with read() and release(), usually an
    opened cv2.VideoCapture. It is called on every start. Call shutdown(app)
    when the server exits.
    """
    app = Flask(__name__)
    state = {"cap": None}

    def release_capture():
        cap = state["cap"]
        state["cap"] = None
        if cap is not None:
            cap.release()

    def stop_monitor() -> str | None:
        try:
            monitor.stop()
        except Exception as e:
            logger.error("detection loop had failed: %r", e)
            return repr(e)
        finally:
            release_capture()
        return None

    app.extensions["gazecheck"] = {"monitor": monitor, "stop": stop_monitor}

    @app.route("/status")
    def status():
        return jsonify(monitor.status())

    @app.route("/start", methods=["POST"])
    def start():
        if monitor.running:
            return jsonify({"message": "Already running", "running": True}), 200

        release_capture()
        try:
            state["cap"] = open_capture()
        except RuntimeError as e:
            return jsonify({"error": str(e)}), 503

        monitor.start_camera(state["cap"])
        return jsonify({"message": "Monitor started", "running": True}), 201

    @app.route("/stop", methods=["POST"])
    def stop():
        body = {"message": "Monitor stopped", "running": False}
        error = stop_monitor()
        if error is not None:
            body["error"] = error
        return jsonify(body), 200

    return app


def shutdown(app: Flask) -> str | None:
    """Stop the monitor and release its capture. Returns the loop error, if any."""
    return app.extensions["gazecheck"]["stop"]()
