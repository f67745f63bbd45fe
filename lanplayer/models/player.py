"""Client-side playback state."""
from dataclasses import dataclass, field
from typing import List, Optional, Set

from lanplayer.models.device import DeviceStatus
from lanplayer.models.song import Song

REPEAT_MODES = ("off", "all", "one")


@dataclass
class PlaybackState:
    """One device's player state. current_index is -1 or a valid queue index."""
    songs: List[Song] = field(default_factory=list)
    queue: List[Song] = field(default_factory=list)
    current_index: int = -1
    is_playing: bool = False
    is_shuffled: bool = False
    repeat_mode: str = "off"  # "off" | "all" | "one"
    volume: float = 0.8
    favorites: Set[str] = field(default_factory=set)
    view_mode: str = "songs"  # "songs" | "devices"
    device_list: List[DeviceStatus] = field(default_factory=list)

    @property
    def current_song(self) -> Optional[Song]:
        if 0 <= self.current_index < len(self.queue):
            return self.queue[self.current_index]
        return None


@dataclass
class SavedPlayerState:
    """What survives a reload (stored under `musicPlayerState`)."""
    volume: float
    repeat_mode: str
    is_shuffled: bool
    favorites: List[str]
    current_song: Optional[str]

    def to_dict(self) -> dict:
        return {
            "volume": self.volume,
            "repeatMode": self.repeat_mode,
            "isShuffled": self.is_shuffled,
            "favorites": self.favorites,
            "currentSong": self.current_song,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SavedPlayerState":
        repeat_mode = data.get("repeatMode") or "off"
        if repeat_mode not in REPEAT_MODES:
            repeat_mode = "off"
        volume = data.get("volume")
        return cls(
            volume=float(volume) if isinstance(volume, (int, float)) else 0.8,
            repeat_mode=repeat_mode,
            is_shuffled=bool(data.get("isShuffled")),
            favorites=list(data.get("favorites") or []),
            current_song=data.get("currentSong"),
        )
