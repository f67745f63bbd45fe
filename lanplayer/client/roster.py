"""Live device roster: polling the registry and keeping the row list current."""
import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from lanplayer.client.status import ClientError, StatusClient
from lanplayer.client.timers import IntervalTimer
from lanplayer.config import ROSTER_POLL_INTERVAL_SEC
from lanplayer.models.device import DeviceStatus

logger = logging.getLogger(__name__)


@dataclass
class RosterRow:
    """One rendered roster line."""
    device_id: str
    index: int  # 1-based position
    ip: str
    song_text: str
    status_text: str


def _row_for(device: DeviceStatus, index: int) -> RosterRow:
    song = device.song
    return RosterRow(
        device_id=device.device_id,
        index=index,
        ip=device.ip or "—",
        song_text=f"{song.title} — {song.artist}" if song else "—",
        status_text="Playing" if device.is_playing else "Paused",
    )


class RosterView:
    """Rows for the device roster.

    With diff=True rows are kept by device id: existing rows are updated in
    place, new devices appended, missing ones removed. Otherwise every render
    rebuilds the list.
    """

    def __init__(self, diff: bool = True) -> None:
        self.diff = diff
        self.rows: List[RosterRow] = []
        self._lock = threading.Lock()

    def snapshot(self) -> List[RosterRow]:
        """Copies of the current rows, safe to read while a poll renders."""
        with self._lock:
            return [replace(r) for r in self.rows]

    def render(self, devices: List[DeviceStatus]) -> Tuple[int, int, int]:
        """Apply a poll result. Returns (added, updated, removed) row counts."""
        with self._lock:
            return self._apply(devices)

    def _apply(self, devices: List[DeviceStatus]) -> Tuple[int, int, int]:
        if not self.diff:
            removed = len(self.rows)
            self.rows = [_row_for(d, i + 1) for i, d in enumerate(devices)]
            return len(self.rows), 0, removed

        present = {d.device_id for d in devices}
        before = len(self.rows)
        self.rows = [r for r in self.rows if r.device_id in present]
        removed = before - len(self.rows)

        by_id = {r.device_id: r for r in self.rows}
        added = updated = 0
        for i, device in enumerate(devices):
            fresh = _row_for(device, i + 1)
            row = by_id.get(device.device_id)
            if row is None:
                self.rows.append(fresh)
                by_id[device.device_id] = fresh
                added += 1
            elif row != fresh:
                row.index = fresh.index
                row.ip = fresh.ip
                row.song_text = fresh.song_text
                row.status_text = fresh.status_text
                updated += 1
        return added, updated, removed


class DevicePoller:
    """Polls /api/devices while the roster view is open."""

    def __init__(
        self,
        client: StatusClient,
        view: RosterView,
        on_update: Optional[Callable[[List[DeviceStatus]], None]] = None,
        interval_sec: float = ROSTER_POLL_INTERVAL_SEC,
    ) -> None:
        self._client = client
        self.view = view
        self._on_update = on_update
        self.devices: List[DeviceStatus] = []
        self.active = False
        self._timer = IntervalTimer(interval_sec, self.poll_once, name="device-poll")

    @property
    def running(self) -> bool:
        return self._timer.running

    def poll_once(self) -> None:
        try:
            devices = self._client.list_devices()
        except ClientError as e:
            logger.warning("%s", e)
            return
        self.devices = devices
        if self._on_update is not None:
            self._on_update(devices)
        if self.active:
            self.view.render(devices)

    def start(self) -> None:
        """Poll now, then every interval."""
        self.active = True
        self._timer.start()
        self.poll_once()

    def stop(self) -> None:
        self.active = False
        self._timer.stop()
