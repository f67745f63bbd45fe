"""Talking to the status service: status reports, play counts, layout, roster, catalog."""
import logging
from concurrent.futures import Executor
from typing import Callable, List, Optional, Tuple

import httpx

from lanplayer.client.timers import IntervalTimer
from lanplayer.config import CATALOG_PATH, HEARTBEAT_INTERVAL_SEC
from lanplayer.models.device import DeviceStatus
from lanplayer.models.song import Song, parse_catalog

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """A request whose result the player needs (roster, catalog) failed."""


class StatusClient:
    """HTTP calls to the status service.

    post_status, record_play and set_layout are fire-and-forget: failures are
    logged and dropped, never retried. With an executor they are sent off the
    caller's thread.
    """

    def __init__(self, http: httpx.Client, executor: Optional[Executor] = None) -> None:
        self._http = http
        self._executor = executor

    @classmethod
    def connect(cls, base_url: str, timeout: float = 5.0, executor: Optional[Executor] = None) -> "StatusClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout), executor=executor)

    def close(self) -> None:
        self._http.close()

    def _fire(self, what: str, path: str, payload: dict) -> None:
        def _send() -> None:
            try:
                res = self._http.post(path, json=payload)
                res.raise_for_status()
            except httpx.HTTPError as e:
                logger.warning("%s failed: %s", what, e)

        if self._executor is None:
            _send()
        else:
            self._executor.submit(_send)

    def post_status(self, device_id: str, song: Optional[Song], is_playing: bool) -> None:
        self._fire(
            "postStatus",
            "/api/status",
            {
                "deviceId": device_id,
                "songId": song.id if song else None,
                "isPlaying": bool(is_playing),
                "title": song.title if song else None,
                "artist": song.artist if song else None,
            },
        )

    def record_play(self, song_id: str) -> None:
        self._fire("recordPlay", "/api/play", {"id": song_id})

    def set_layout(self, layout: str) -> None:
        self._fire("setLayout", "/api/layout", {"layout": layout})

    def list_devices(self) -> List[DeviceStatus]:
        try:
            res = self._http.get("/api/devices")
            res.raise_for_status()
            data = res.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ClientError(f"Device poll failed: {e}") from e
        if not isinstance(data, list):
            return []
        out = []
        for item in data:
            try:
                out.append(DeviceStatus.from_dict(item))
            except (KeyError, TypeError, ValueError):
                continue
        return out

    def top_played(self) -> Tuple[Optional[str], int]:
        try:
            res = self._http.get("/api/top")
            res.raise_for_status()
            data = res.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ClientError(f"Top played failed: {e}") from e
        return data.get("id"), int(data.get("count") or 0)

    def fetch_catalog(self, path: str = CATALOG_PATH) -> List[Song]:
        try:
            res = self._http.get(path if path.startswith("/") else f"/{path}")
            res.raise_for_status()
            data = res.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ClientError(f"Failed to load {path}: {e}") from e
        return parse_catalog(data)


class Heartbeat:
    """Re-sends the current status every interval so the device stays listed."""

    def __init__(
        self,
        client: StatusClient,
        device_id: str,
        current: Callable[[], Tuple[Optional[Song], bool]],
        interval_sec: float = HEARTBEAT_INTERVAL_SEC,
    ) -> None:
        self._client = client
        self._device_id = device_id
        self._current = current
        self._timer = IntervalTimer(interval_sec, self.beat, name="heartbeat")

    @property
    def running(self) -> bool:
        return self._timer.running

    def beat(self) -> None:
        song, is_playing = self._current()
        self._client.post_status(self._device_id, song, is_playing)

    def start(self) -> None:
        """Ping now, then every interval."""
        self._timer.start()
        self.beat()

    def stop(self) -> None:
        self._timer.stop()
