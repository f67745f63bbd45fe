"""Catalog song entries."""
from dataclasses import dataclass
from typing import Any, List, Optional


@dataclass(frozen=True)
class Song:
    """Immutable catalog entry; identity is `id`."""
    id: str
    title: str
    artist: str
    url: str
    duration: float = 0.0  # seconds
    album: Optional[str] = None
    cover: Optional[str] = None

    @classmethod
    def from_dict(cls, item: dict) -> "Song":
        return cls(
            id=str(item["id"]),
            title=item.get("title") or "",
            artist=item.get("artist") or "",
            url=item.get("url") or "",
            duration=float(item.get("duration") or 0),
            album=item.get("album"),
            cover=item.get("cover"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "duration": self.duration,
            "url": self.url,
            "cover": self.cover,
        }


def parse_catalog(data: Any) -> List[Song]:
    """Build the catalog from a songs.json document.

    Non-list documents give an empty catalog. Entries without an id or with
    unusable fields are skipped; the first entry wins for duplicate ids.
    """
    if not isinstance(data, list):
        return []
    out: List[Song] = []
    seen = set()
    for item in data:
        if not isinstance(item, dict) or not item.get("id"):
            continue
        try:
            song = Song.from_dict(item)
        except (TypeError, ValueError):
            continue
        if song.id in seen:
            continue
        seen.add(song.id)
        out.append(song)
    return out
