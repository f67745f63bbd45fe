"""Player controller: one device's queue, transport, play counting and status reports."""
import logging
import math
import random
from typing import Callable, Dict, List, Optional, Tuple

from lanplayer.client.audio import AudioBackend, PlaybackError
from lanplayer.client.capabilities import DESKTOP, PlayerCapabilities
from lanplayer.client.roster import DevicePoller, RosterView
from lanplayer.client.status import ClientError, Heartbeat, StatusClient
from lanplayer.client.storage import LocalStore, get_device_id
from lanplayer.config import (
    DEFAULT_VOLUME,
    LAYOUTS,
    MAX_LISTEN_STEP_SEC,
    PLAY_COUNT_THRESHOLD_SEC,
)
from lanplayer.models.device import DeviceStatus
from lanplayer.models.player import REPEAT_MODES, PlaybackState, SavedPlayerState
from lanplayer.models.song import Song

logger = logging.getLogger(__name__)


def format_time(seconds: float = 0) -> str:
    """Seconds as m:ss."""
    try:
        s = max(0, int(math.floor(seconds)))
    except (TypeError, ValueError, OverflowError):
        s = 0
    return f"{s // 60}:{s % 60:02d}"


class PlayerController:
    """Drives an AudioBackend from a PlaybackState and keeps the service informed.

    Layout differences (search, roster, badge, prev behaviour) come from
    `capabilities`. Listeners registered with subscribe() are called after
    every visible state change.
    """

    def __init__(
        self,
        audio: AudioBackend,
        client: StatusClient,
        store: LocalStore,
        capabilities: PlayerCapabilities = DESKTOP,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.audio = audio
        self.client = client
        self.store = store
        self.capabilities = capabilities
        self._rng = rng or random.Random()
        self.device_id = get_device_id(store)

        self.state = PlaybackState(volume=self._stored_volume())
        self.play_counts: Dict[str, int] = dict(store.get("playCounts") or {})
        self._shuffled: List[Song] = []
        self._listeners: List[Callable[[PlaybackState], None]] = []

        # Per-load play counting
        self._counted = False
        self._listened = 0.0
        self._last_position = 0.0

        self.heartbeat = Heartbeat(client, device_id=self.device_id, current=self.current_status)
        self.roster: Optional[DevicePoller] = None
        if capabilities.device_roster:
            self.roster = DevicePoller(
                client,
                RosterView(diff=capabilities.diff_roster),
                on_update=self._on_devices,
            )

        audio.volume = self.state.volume
        audio.add_listener("timeupdate", self.on_time_update)
        audio.add_listener("ended", self.on_ended)

    # Lifecycle

    def subscribe(self, callback: Callable[[PlaybackState], None]) -> None:
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self.state)

    def load_catalog(self) -> List[Song]:
        """Fetch songs.json from the service; an unreachable catalog means no songs."""
        try:
            songs = self.client.fetch_catalog()
        except ClientError as e:
            logger.warning("%s", e)
            songs = []
        self.set_catalog(songs)
        return songs

    def set_catalog(self, songs: List[Song]) -> None:
        self.state.songs = list(songs)
        self._shuffled = []
        self.state.queue = list(songs)
        self.state.current_index = -1
        self._notify()

    def start(self) -> None:
        """Restore saved state, push the layout, and begin the heartbeat."""
        self.restore_state()
        self.sync_preferred_layout()
        self.heartbeat.start()

    def on_visibility_change(self) -> None:
        song, is_playing = self.current_status()
        self.client.post_status(self.device_id, song, is_playing)

    def shutdown(self) -> None:
        """Stop timers and tell the service this device is gone."""
        self.heartbeat.stop()
        if self.roster is not None:
            self.roster.stop()
        self.client.post_status(self.device_id, None, False)

    def current_status(self) -> Tuple[Optional[Song], bool]:
        return self.state.current_song, self.state.is_playing

    # Transport

    def play(self, index: int) -> bool:
        """Load queue[index] from the start and play it. Returns True when playback began."""
        if index < 0 or index >= len(self.state.queue):
            return False

        self.state.current_index = index
        song = self.state.queue[index]
        if not song.url:
            return False
        self._load(song)

        try:
            self.audio.play()
        except PlaybackError as e:
            logger.error("Playback failed: %s", e)
            self.state.is_playing = False
            self._notify()
            return False

        self.state.is_playing = True
        self._notify()
        self.persist_state()
        self.client.post_status(self.device_id, song, True)
        return True

    def toggle_play_pause(self) -> None:
        if self.state.current_index == -1 and self.state.queue:
            self.play(0)
            return

        song = self.state.current_song
        if self.audio.paused:
            if song is None:
                return
            try:
                self.audio.play()
            except PlaybackError as e:
                logger.error("Playback failed: %s", e)
                return
            self.state.is_playing = True
            self._notify()
            self.client.post_status(self.device_id, song, True)
        else:
            self.audio.pause()
            self.state.is_playing = False
            self._notify()
            if song is not None:
                self.client.post_status(self.device_id, song, False)

    def next(self) -> None:
        queue = self.state.queue
        if not queue:
            return
        next_idx = self.state.current_index + 1
        if next_idx > len(queue) - 1:
            if self.state.repeat_mode == "all":
                next_idx = 0
            else:
                self._stop()
                return
        self.play(next_idx)

    def prev(self) -> None:
        queue = self.state.queue
        if not queue:
            return
        threshold = self.capabilities.restart_threshold_sec
        if (
            threshold is not None
            and self.state.current_song is not None
            and self.audio.current_time > threshold
        ):
            self.audio.current_time = 0
            return
        prev_idx = self.state.current_index - 1
        if prev_idx < 0:
            prev_idx = len(queue) - 1 if self.state.repeat_mode == "all" else 0
        self.play(prev_idx)

    def seek(self, percent: float) -> None:
        duration = self.audio.duration
        if not duration or not math.isfinite(duration):
            return
        self.audio.current_time = (float(percent) / 100) * duration

    def set_volume(self, value) -> float:
        try:
            v = float(value)
        except (TypeError, ValueError):
            v = math.nan
        if math.isnan(v):
            v = DEFAULT_VOLUME
        v = max(0.0, min(1.0, v))
        self.audio.volume = v
        self.state.volume = v
        self.store.set("volume", v)
        return v

    def _load(self, song: Song) -> None:
        self.audio.load(song.url)
        self._counted = False
        self._listened = 0.0
        self._last_position = 0.0

    def _stop(self) -> None:
        self.audio.pause()
        self.state.is_playing = False
        self._notify()
        song = self.state.current_song
        if song is not None:
            self.client.post_status(self.device_id, song, False)

    # Audio events

    def on_time_update(self) -> None:
        position = self.audio.current_time
        step = position - self._last_position
        self._last_position = position
        # Seeks jump further than one update apart and are not listening time
        if 0 < step <= MAX_LISTEN_STEP_SEC:
            self._listened += step
        if not self._counted and self._listened >= PLAY_COUNT_THRESHOLD_SEC:
            self._count_current()

    def on_ended(self) -> None:
        song = self.state.current_song
        if song is None:
            return
        # Short tracks and scrubbed-through tracks count at the end
        if not self._counted:
            self._count_current()
        self.client.post_status(self.device_id, song, False)

        if self.state.repeat_mode == "one":
            self.audio.current_time = 0
            try:
                self.audio.play()
            except PlaybackError as e:
                logger.error("Playback failed: %s", e)
                self.state.is_playing = False
                self._notify()
                return
            self.client.post_status(self.device_id, song, True)
        else:
            self.next()

    # Play counts

    def _count_current(self) -> None:
        song = self.state.current_song
        if song is None:
            return
        self._counted = True
        self.increment_play_count(song.id)

    def increment_play_count(self, song_id: str) -> None:
        self.play_counts[song_id] = self.play_counts.get(song_id, 0) + 1
        self.store.set("playCounts", self.play_counts)
        self._notify()
        self.client.record_play(song_id)

    def most_played_text(self) -> Optional[str]:
        """Badge text for the most played song on this device, or a dash.

        None on layouts without a most-played badge.
        """
        if not self.capabilities.most_played_badge:
            return None
        if not self.play_counts:
            return "—"
        top_id, count = sorted(self.play_counts.items(), key=lambda kv: kv[1], reverse=True)[0]
        song = next((s for s in self.state.songs if s.id == top_id), None)
        return f"{song.title} — {song.artist} ({count})" if song else "—"

    # Queue

    def _set_queue(self, queue: List[Song]) -> None:
        """Swap the queue, keeping the current song selected when it is still in it."""
        current = self.state.current_song
        self.state.queue = queue
        if current is not None:
            self.state.current_index = self._index_of(current.id)

    def _index_of(self, song_id: str) -> int:
        for i, s in enumerate(self.state.queue):
            if s.id == song_id:
                return i
        return -1

    def _shuffle_catalog(self) -> List[Song]:
        arr = list(self.state.songs)
        self._rng.shuffle(arr)
        return arr

    def _base_queue(self) -> List[Song]:
        if self.state.is_shuffled and self._shuffled:
            return list(self._shuffled)
        return list(self.state.songs)

    def toggle_shuffle(self) -> None:
        self.state.is_shuffled = not self.state.is_shuffled
        if self.state.is_shuffled:
            self._shuffled = self._shuffle_catalog()
        else:
            self._shuffled = []
        self._set_queue(self._base_queue())
        self._notify()
        self.persist_state()

    def toggle_repeat(self) -> str:
        i = REPEAT_MODES.index(self.state.repeat_mode)
        self.state.repeat_mode = REPEAT_MODES[(i + 1) % len(REPEAT_MODES)]
        self._notify()
        self.persist_state()
        return self.state.repeat_mode

    def toggle_favorite(self, song_id: str) -> bool:
        favorites = self.state.favorites
        if song_id in favorites:
            favorites.discard(song_id)
        else:
            favorites.add(song_id)
        self._notify()
        self.persist_state()
        return song_id in favorites

    def search(self, query: str) -> List[Song]:
        """Narrow the queue to songs whose title, artist or album contains query.

        Layouts without search keep the queue as it is.
        """
        if not self.capabilities.search:
            return self.state.queue
        term = (query or "").lower()
        self._set_queue([
            s for s in self.state.songs
            if term in (s.title or "").lower()
            or term in (s.artist or "").lower()
            or term in (s.album or "").lower()
        ])
        self._notify()
        return self.state.queue

    def filter(self, name: str) -> None:
        """Switch the list view: "all", "favorites", or "devices"."""
        if name == "devices":
            if self.roster is None:
                return
            self.state.view_mode = "devices"
            self.roster.start()
            self._notify()
            return

        self.state.view_mode = "songs"
        if self.roster is not None:
            self.roster.stop()
        if name == "favorites":
            self._set_queue([s for s in self.state.songs if s.id in self.state.favorites])
        else:
            self._set_queue(self._base_queue())
        self._notify()

    def _on_devices(self, devices: List[DeviceStatus]) -> None:
        self.state.device_list = devices

    # Local persistence

    def _stored_volume(self) -> float:
        v = self.store.get("volume", DEFAULT_VOLUME)
        try:
            return max(0.0, min(1.0, float(v)))
        except (TypeError, ValueError):
            return DEFAULT_VOLUME

    def persist_state(self) -> None:
        current = self.state.current_song
        saved = SavedPlayerState(
            volume=self.state.volume,
            repeat_mode=self.state.repeat_mode,
            is_shuffled=self.state.is_shuffled,
            favorites=sorted(self.state.favorites),
            current_song=current.id if current else None,
        )
        self.store.set("musicPlayerState", saved.to_dict())

    def restore_state(self) -> None:
        """Bring back repeat, shuffle, favorites and the last song (loaded, not playing)."""
        data = self.store.get("musicPlayerState")
        if not isinstance(data, dict):
            return
        saved = SavedPlayerState.from_dict(data)
        self.state.repeat_mode = saved.repeat_mode
        self.state.is_shuffled = saved.is_shuffled
        self.state.favorites = set(saved.favorites)
        if saved.is_shuffled:
            self._shuffled = self._shuffle_catalog()
            self.state.queue = list(self._shuffled)

        if saved.current_song:
            idx = self._index_of(saved.current_song)
            if idx != -1:
                self.state.current_index = idx
                self._load(self.state.queue[idx])
        self._notify()

    # Layout preference

    def preferred_layout(self) -> str:
        return self.store.get("preferredLayout") or "desktop"

    def set_preferred_layout(self, layout: str) -> None:
        if layout not in LAYOUTS:
            return
        self.store.set("preferredLayout", layout)
        self.client.set_layout(layout)

    def sync_preferred_layout(self) -> None:
        """Record the running layout as preferred when it differs from the stored one."""
        current = self.capabilities.layout
        if self.preferred_layout() != current:
            self.set_preferred_layout(current)
