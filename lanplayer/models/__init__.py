"""Data models for songs, devices, and player state."""
from lanplayer.models.device import DeviceStatus, SongRef
from lanplayer.models.player import PlaybackState, SavedPlayerState
from lanplayer.models.song import Song

__all__ = [
    "DeviceStatus",
    "PlaybackState",
    "SavedPlayerState",
    "Song",
    "SongRef",
]
