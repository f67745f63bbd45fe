"""Shared application state (injected into routes)."""
import time
from pathlib import Path
from typing import Callable

from lanplayer.config import (
    DEVICE_TTL_SEC,
    DEVICES_PATH,
    PLAY_COUNTS_PATH,
    TRUST_PROXY,
)
from lanplayer.core.device_registry import DeviceRegistry
from lanplayer.core.play_counts import PlayCountStore


class AppState:
    def __init__(
        self,
        *,
        play_counts_path: Path = PLAY_COUNTS_PATH,
        devices_path: Path = DEVICES_PATH,
        device_ttl_sec: float = DEVICE_TTL_SEC,
        trust_proxy: bool = TRUST_PROXY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.play_counts = PlayCountStore(play_counts_path)
        self.devices = DeviceRegistry(devices_path, ttl_sec=device_ttl_sec, clock=clock)
        self.trust_proxy = trust_proxy

    def ensure_storage(self) -> None:
        """Create both JSON documents if missing."""
        self.play_counts.ensure()
        self.devices.ensure()


_state = AppState()


def get_state() -> AppState:
    return _state
