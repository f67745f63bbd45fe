"""Shared play counts: song id -> number of counted plays."""
from pathlib import Path
from typing import Dict, Optional, Tuple

from lanplayer.core.json_document import JsonDocument


class PlayCountStore:
    """Play counts kept in one JSON document. Counts only ever go up."""

    def __init__(self, path: Path) -> None:
        self._doc = JsonDocument(path)

    def ensure(self) -> None:
        self._doc.ensure()

    def record_play(self, song_id: str) -> int:
        """Increment the count for song_id and return the new value."""
        with self._doc.update() as data:
            count = _as_count(data.get(song_id)) + 1
            data[song_id] = count
        return count

    def counts(self) -> Dict[str, int]:
        return {k: _as_count(v) for k, v in self._doc.read().items()}

    def top_played(self) -> Tuple[Optional[str], int]:
        """Return (id, count) of a most-played song, or (None, 0) when empty.

        Ties keep document order (stable sort); callers should treat any
        maximum-count entry as valid.
        """
        entries = sorted(self.counts().items(), key=lambda kv: kv[1], reverse=True)
        if not entries:
            return None, 0
        return entries[0]


def _as_count(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0
