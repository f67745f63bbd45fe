"""Shared fixtures: app state in a temp dir, a settable clock, a recording status client."""
import random

import pytest
from fastapi.testclient import TestClient

from lanplayer.api.app import app
from lanplayer.api.state import AppState, get_state
from lanplayer.client.audio import SimulatedAudio
from lanplayer.client.capabilities import DESKTOP
from lanplayer.client.player import PlayerController
from lanplayer.client.status import StatusClient
from lanplayer.client.storage import LocalStore
from lanplayer.models.song import Song


class FakeClock:
    """time.time stand-in that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingStatusClient(StatusClient):
    """Keeps every fire-and-forget request instead of sending it."""

    def __init__(self, devices=None) -> None:
        super().__init__(http=None)
        self.sent = []
        self.devices = list(devices or [])

    def _fire(self, what, path, payload):
        self.sent.append((path, payload))

    def list_devices(self):
        return list(self.devices)

    def statuses(self):
        return [p for path, p in self.sent if path == "/api/status"]

    def plays(self):
        return [p["id"] for path, p in self.sent if path == "/api/play"]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def state(tmp_path, clock):
    s = AppState(
        play_counts_path=tmp_path / "playcounts.server.json",
        devices_path=tmp_path / "devices.server.json",
        clock=clock,
    )
    s.ensure_storage()
    return s


@pytest.fixture
def client(state):
    app.dependency_overrides[get_state] = lambda: state
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def recorder():
    return RecordingStatusClient()


@pytest.fixture
def songs():
    return [
        Song(id="a", title="Alpha", artist="Ann", album="First", duration=200, url="a.mp3"),
        Song(id="b", title="Bravo", artist="Bob", album="First", duration=20, url="b.mp3"),
        Song(id="c", title="Charlie", artist="Cat", album="Second", duration=180, url="c.mp3"),
        Song(id="d", title="Delta", artist="Dee", album="Second", duration=240, url="d.mp3"),
    ]


@pytest.fixture
def player_factory(songs):
    """Build a player on simulated audio; without a client it records requests."""

    def make(client=None, capabilities=DESKTOP):
        status = client if client is not None else RecordingStatusClient()
        audio = SimulatedAudio(durations={s.url: s.duration for s in songs})
        player = PlayerController(audio, status, LocalStore(), capabilities, rng=random.Random(1))
        if client is None:
            player.set_catalog(songs)
        return player, status

    return make
