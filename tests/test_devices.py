"""
Tests for device status routes
"""
import json
import threading
import time

from lanplayer.api.app import _compaction_loop


def _report(client, device_id="dev1", **extra):
    body = {"deviceId": device_id, "songId": "s1", "isPlaying": True,
            "title": "Song", "artist": "Artist"}
    body.update(extra)
    return client.post("/api/status", json=body)


def test_report_then_list(client):
    response = _report(client)
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    devices = client.get("/api/devices").json()
    assert len(devices) == 1
    d = devices[0]
    assert d["deviceId"] == "dev1"
    assert d["isPlaying"] is True
    assert d["song"] == {"id": "s1", "title": "Song", "artist": "Artist"}
    assert d["userAgent"] == "testclient"
    assert isinstance(d["updatedAt"], int)


def test_report_without_song(client):
    _report(client, songId=None, isPlaying=False, title=None, artist=None)

    d = client.get("/api/devices").json()[0]
    assert d["song"] is None
    assert d["isPlaying"] is False


def test_report_missing_device_id(client, tmp_path):
    assert client.post("/api/status", json={"isPlaying": True}).status_code == 400
    assert client.post("/api/status", json={"deviceId": ""}).status_code == 400
    assert client.post("/api/status").status_code == 400
    assert json.loads((tmp_path / "devices.server.json").read_text()) == {}


def test_report_overwrites_previous_entry(client):
    _report(client)
    _report(client, songId=None, isPlaying=False)

    devices = client.get("/api/devices").json()
    assert len(devices) == 1
    assert devices[0]["song"] is None
    assert devices[0]["isPlaying"] is False


def test_stale_devices_hidden_but_kept(client, tmp_path, clock):
    """Past the TTL a device drops out of the listing but stays in storage."""
    _report(client, "dev1")
    clock.advance(5 * 60)
    _report(client, "dev2")

    clock.advance(5 * 60 + 1)
    ids = [d["deviceId"] for d in client.get("/api/devices").json()]
    assert ids == ["dev2"]

    stored = json.loads((tmp_path / "devices.server.json").read_text())
    assert set(stored) == {"dev1", "dev2"}


def test_heartbeat_keeps_device_listed(client, clock):
    _report(client, "dev1")
    for _ in range(70):
        clock.advance(10)
        _report(client, "dev1")
    assert [d["deviceId"] for d in client.get("/api/devices").json()] == ["dev1"]


def test_ip_from_forwarded_header(client):
    _report(client)
    client.post(
        "/api/status",
        json={"deviceId": "dev2", "isPlaying": False},
        headers={"X-Forwarded-For": "::ffff:192.168.1.20, 10.0.0.1"},
    )
    by_id = {d["deviceId"]: d for d in client.get("/api/devices").json()}
    assert by_id["dev2"]["ip"] == "192.168.1.20"
    assert by_id["dev1"]["ip"] == "testclient"


def test_report_numeric_device_id(client):
    response = client.post("/api/status", json={"deviceId": 12345, "isPlaying": True})
    assert response.status_code == 200

    devices = client.get("/api/devices").json()
    assert [d["deviceId"] for d in devices] == ["12345"]
    assert devices[0]["song"] is None


def test_report_malformed_body(client, tmp_path):
    response = client.post(
        "/api/status",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert json.loads((tmp_path / "devices.server.json").read_text()) == {}


def _run_compaction(state, calls_needed):
    stop = threading.Event()
    thread = threading.Thread(target=_compaction_loop, args=(state, 0.01, stop), daemon=True)
    thread.start()
    try:
        deadline = time.monotonic() + 2.0
        while calls_needed() and time.monotonic() < deadline:
            time.sleep(0.005)
    finally:
        stop.set()
        thread.join(timeout=2.0)
    assert not thread.is_alive()


def test_compaction_loop_drops_stale_entries(client, state, clock, tmp_path):
    _report(client, "old")
    clock.advance(11 * 60)
    _report(client, "new")
    path = tmp_path / "devices.server.json"

    _run_compaction(state, lambda: "old" in json.loads(path.read_text()))
    assert list(json.loads(path.read_text())) == ["new"]
    assert [d["deviceId"] for d in client.get("/api/devices").json()] == ["new"]


def test_compaction_loop_keeps_running_after_errors(state):
    calls = []

    def failing_compact():
        calls.append(1)
        raise RuntimeError("disk gone")

    state.devices.compact = failing_compact
    _run_compaction(state, lambda: len(calls) < 3)
    assert len(calls) >= 3
