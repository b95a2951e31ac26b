import time

from gazecheck.monitor import GazeMonitor
from gazecheck.server import create_app, shutdown

from conftest import FakeEstimator, RecordingNotifier, blank_frame


class FakeCapture:
    def __init__(self):
        self.released = False

    def read(self):
        return True, blank_frame()

    def release(self):
        self.released = True


def make_client():
    captures = []

    def open_capture():
        cap = FakeCapture()
        captures.append(cap)
        return cap

    monitor = GazeMonitor(FakeEstimator([]), RecordingNotifier())
    app = create_app(monitor, open_capture)
    app.config["TESTING"] = True
    return app.test_client(), monitor, captures


def test_status_before_start():
    client, _, _ = make_client()
    body = client.get("/status").get_json()
    assert body["running"] is False
    assert body["frames"] == 0
    assert body["last"] is None


def test_start_then_stop_releases_capture():
    client, monitor, captures = make_client()

    resp = client.post("/start")
    assert resp.status_code == 201
    assert client.post("/start").status_code == 200
    assert len(captures) == 1

    resp = client.post("/stop")
    assert resp.status_code == 200
    assert resp.get_json()["running"] is False
    assert captures[0].released
    assert not monitor.running


def test_start_reports_camera_failure():
    monitor = GazeMonitor(FakeEstimator([]), RecordingNotifier())

    def open_capture():
        raise RuntimeError("cannot open camera 0")

    client = create_app(monitor, open_capture).test_client()
    resp = client.post("/start")
    assert resp.status_code == 503
    assert "camera" in resp.get_json()["error"]


def test_shutdown_releases_capture_and_reports_failure():
    captures = []

    def open_capture():
        cap = FakeCapture()
        captures.append(cap)
        return cap

    monitor = GazeMonitor(FakeEstimator([RuntimeError("model gone")]), RecordingNotifier())
    app = create_app(monitor, open_capture)
    assert app.test_client().post("/start").status_code == 201
    deadline = time.monotonic() + 2.0
    while monitor.error is None and time.monotonic() < deadline:
        time.sleep(0.01)

    error = shutdown(app)

    assert "model gone" in error
    assert captures[0].released
    assert not monitor.running
