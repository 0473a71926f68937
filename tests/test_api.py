import io
import time
import zipfile

import pytest
from fastapi.testclient import TestClient

from media_slicer.app import create_app

from fakes import BrokenEngine, FakeEngine

pytestmark = pytest.mark.integration


def build_client(settings, engine) -> TestClient:
    settings.reset_delay_seconds = 30
    return TestClient(create_app(settings, engine=engine))


def wait_for_terminal(client: TestClient, timeout: float = 5.0) -> dict:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        run = client.get("/api/runs/current").json()
        if run["phase"] in ("succeeded", "failed"):
            return run
        time.sleep(0.01)
    raise AssertionError("run did not settle")


def test_select_run_and_download(settings):
    engine = FakeEngine(outputs=["out_00.mov", "out_01.mov", "out_02.mov"])
    with build_client(settings, engine) as client:
        assert client.post("/api/engine/load").json()["loaded"] is True

        resp = client.post(
            "/api/selection",
            files={"file": ("My Clip (2024).mov", b"movie-bytes", "video/quicktime")},
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "My Clip (2024).mov"
        assert client.get("/api/selection").json()["size"] == len(b"movie-bytes")

        resp = client.post("/api/runs", json={"segment_length": 30})
        assert resp.status_code == 202
        run_id = resp.json()["id"]

        run = wait_for_terminal(client)
        assert run["phase"] == "succeeded"
        assert run["segment_count"] == 3
        assert run["archive_name"] == "My_Clip_2024_segments.zip"

        resp = client.get(f"/api/downloads/{run_id}")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/zip"
        assert 'filename="My_Clip_2024_segments.zip"' in resp.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(resp.content)) as zf:
            assert zf.namelist() == [
                "My_Clip_2024_segment_01.mov",
                "My_Clip_2024_segment_02.mov",
                "My_Clip_2024_segment_03.mov",
            ]

        assert client.get("/api/engine").json()["files"] == []

    assert engine.closed


def test_zero_segment_length_is_rejected(settings):
    engine = FakeEngine(outputs=["out_00.mp4"])
    with build_client(settings, engine) as client:
        client.post("/api/engine/load")
        client.post("/api/selection", files={"file": ("clip.mp4", b"x", "video/mp4")})

        resp = client.post("/api/runs", json={"segment_length": 0})

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Segment length must be greater than 0."
        assert client.get("/api/runs/current").json()["phase"] == "idle"
    assert engine.exec_calls == []


def test_run_without_selection_is_rejected(settings):
    with build_client(settings, FakeEngine()) as client:
        client.post("/api/engine/load")
        assert client.get("/api/selection").status_code == 404
        assert client.post("/api/runs", json={}).status_code == 400


def test_unsupported_upload_is_rejected(settings):
    with build_client(settings, FakeEngine()) as client:
        resp = client.post("/api/selection", files={"file": ("notes.txt", b"hello", "text/plain")})
        assert resp.status_code == 400
        assert "Unsupported file format" in resp.json()["detail"]
        assert client.get("/api/selection").status_code == 404


def test_oversized_upload_is_rejected(settings):
    settings.max_upload_mb = 1
    with build_client(settings, FakeEngine()) as client:
        data = b"\0" * (2 * 1024 * 1024)
        resp = client.post("/api/selection", files={"file": ("big.mp4", data, "video/mp4")})
        assert resp.status_code == 413
        assert client.get("/api/selection").status_code == 404
    assert not any(settings.upload_dir.glob("*"))


def test_clear_selection_removes_staged_file(settings):
    with build_client(settings, FakeEngine()) as client:
        client.post("/api/selection", files={"file": ("clip.mp3", b"x", "")})
        assert len(list(settings.upload_dir.iterdir())) == 1

        assert client.delete("/api/selection").json() == {"cleared": True}
        assert list(settings.upload_dir.iterdir()) == []


def test_failed_run_reports_error(settings):
    engine = FakeEngine(outputs=[])
    with build_client(settings, engine) as client:
        client.post("/api/engine/load")
        client.post("/api/selection", files={"file": ("short.wav", b"x", "audio/wav")})
        client.post("/api/runs", json={"segment_length": 10})

        run = wait_for_terminal(client)

        assert run["phase"] == "failed"
        assert run["error"]["kind"] == "NoSegmentsProduced"
        assert client.get("/api/engine").json()["files"] == []
        assert client.get(f"/api/downloads/{run['id']}").status_code == 404


def test_engine_unavailable(settings):
    with build_client(settings, BrokenEngine()) as client:
        resp = client.post("/api/engine/load")
        assert resp.status_code == 503
        assert "engine missing" in resp.json()["detail"]

        status = client.get("/api/engine").json()
        assert status["loaded"] is False
        assert status["error"]

        client.post("/api/selection", files={"file": ("clip.mp4", b"x", "video/mp4")})
        resp = client.post("/api/runs", json={"segment_length": 30})
        assert resp.status_code == 400


def test_websocket_sends_snapshots(settings):
    with build_client(settings, FakeEngine()) as client:
        with client.websocket_connect("/api/ws") as ws:
            msg = ws.receive_json()
            assert msg["type"] == "run_progress"
            assert msg["run"]["phase"] == "idle"

            ws.send_text('{"action": "snapshot"}')
            assert ws.receive_json()["run"]["phase"] == "idle"
