"""Device registry entries (now-playing status per player)."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SongRef:
    """Song as reported by a device: just enough to show in a roster."""
    id: str
    title: Optional[str]
    artist: Optional[str]


@dataclass(frozen=True)
class DeviceStatus:
    """Last status reported by one device."""
    device_id: str
    ip: str
    is_playing: bool
    song: Optional[SongRef]
    updated_at: int  # ms since epoch
    user_agent: str

    def to_dict(self) -> dict:
        return {
            "deviceId": self.device_id,
            "ip": self.ip,
            "isPlaying": self.is_playing,
            "song": (
                {"id": self.song.id, "title": self.song.title, "artist": self.song.artist}
                if self.song
                else None
            ),
            "updatedAt": self.updated_at,
            "userAgent": self.user_agent,
        }

    @classmethod
    def from_dict(cls, item: dict) -> "DeviceStatus":
        song = item.get("song")
        return cls(
            device_id=item["deviceId"],
            ip=item.get("ip") or "",
            is_playing=bool(item.get("isPlaying")),
            song=(
                SongRef(id=song["id"], title=song.get("title"), artist=song.get("artist"))
                if isinstance(song, dict) and song.get("id")
                else None
            ),
            updated_at=int(item.get("updatedAt") or 0),
            user_agent=item.get("userAgent") or "",
        )
