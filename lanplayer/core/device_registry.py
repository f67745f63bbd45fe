"""Device registry: last reported status per device, hidden after a TTL."""
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from lanplayer.core.json_document import JsonDocument
from lanplayer.models.device import DeviceStatus, SongRef

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Device statuses keyed by deviceId in one JSON document.

    Entries are overwritten on every report and filtered out of listings once
    older than ttl_sec. Listing never deletes anything; compact() does.
    """

    def __init__(
        self,
        path: Path,
        ttl_sec: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._doc = JsonDocument(path)
        self._ttl_ms = int(ttl_sec * 1000)
        self._clock = clock

    def ensure(self) -> None:
        self._doc.ensure()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def report(
        self,
        device_id: str,
        *,
        ip: str,
        is_playing: bool,
        song: Optional[SongRef],
        user_agent: str,
    ) -> DeviceStatus:
        """Store a fresh status for device_id, replacing any previous one."""
        status = DeviceStatus(
            device_id=device_id,
            ip=ip,
            is_playing=is_playing,
            song=song,
            updated_at=self._now_ms(),
            user_agent=user_agent,
        )
        with self._doc.update() as data:
            data[device_id] = status.to_dict()
        return status

    def _is_fresh(self, item: dict, now_ms: int) -> bool:
        try:
            updated_at = int(item.get("updatedAt") or 0)
        except (TypeError, ValueError):
            return False
        return now_ms - updated_at < self._ttl_ms

    def list_active(self) -> List[DeviceStatus]:
        """Return devices that reported within the TTL window."""
        now_ms = self._now_ms()
        out = []
        for item in self._doc.read().values():
            if not isinstance(item, dict) or not item.get("deviceId"):
                continue
            if self._is_fresh(item, now_ms):
                out.append(DeviceStatus.from_dict(item))
        return out

    def compact(self) -> int:
        """Delete stale entries from storage. Returns how many were removed."""
        now_ms = self._now_ms()
        with self._doc.update() as data:
            stale = [
                k for k, v in data.items()
                if not isinstance(v, dict) or not self._is_fresh(v, now_ms)
            ]
            for k in stale:
                del data[k]
        if stale:
            logger.info("Registry: compacted %d stale device(s)", len(stale))
        return len(stale)
