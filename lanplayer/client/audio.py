"""Audio output: the player's view of a media element, plus a simulated one."""
import logging
import math
from collections import defaultdict
from typing import Callable, DefaultDict, List, Optional

logger = logging.getLogger(__name__)

# Events fired by a backend: "timeupdate" (position moved), "ended" (natural end)
EVENTS = ("timeupdate", "ended")


class PlaybackError(Exception):
    """The track could not be loaded or started."""


class AudioBackend:
    """Media element interface. Subclasses implement the transport; listeners live here."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Callable[[], None]]] = defaultdict(list)

    def add_listener(self, event: str, callback: Callable[[], None]) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown audio event: {event}")
        self._listeners[event].append(callback)

    def _emit(self, event: str) -> None:
        for callback in list(self._listeners[event]):
            callback()

    # Transport

    def load(self, url: str) -> None:
        """Set the source; position goes back to 0 and playback is paused."""
        raise NotImplementedError

    def play(self) -> None:
        """Start or resume. Raises PlaybackError when the source cannot play."""
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    @property
    def src(self) -> Optional[str]:
        raise NotImplementedError

    @property
    def paused(self) -> bool:
        raise NotImplementedError

    @property
    def current_time(self) -> float:
        raise NotImplementedError

    @current_time.setter
    def current_time(self, value: float) -> None:
        raise NotImplementedError

    @property
    def duration(self) -> float:
        """Track length in seconds; NaN until known."""
        raise NotImplementedError

    @property
    def volume(self) -> float:
        raise NotImplementedError

    @volume.setter
    def volume(self, value: float) -> None:
        raise NotImplementedError


class SimulatedAudio(AudioBackend):
    """In-process media element for headless runs and tests.

    Time only moves through advance(). Durations come from durations[url]
    (falling back to default_duration); URLs in failing never play.
    """

    def __init__(
        self,
        durations: Optional[dict] = None,
        default_duration: float = 180.0,
        step_sec: float = 0.25,
    ) -> None:
        super().__init__()
        self.durations = dict(durations or {})
        self.default_duration = default_duration
        self.failing: set = set()
        self._step = step_sec
        self._src: Optional[str] = None
        self._paused = True
        self._time = 0.0
        self._volume = 1.0

    def load(self, url: str) -> None:
        self._src = url
        self._paused = True
        self._time = 0.0

    def play(self) -> None:
        if not self._src:
            raise PlaybackError("no source")
        if self._src in self.failing:
            raise PlaybackError(f"cannot play {self._src}")
        self._paused = False

    def pause(self) -> None:
        self._paused = True

    @property
    def src(self) -> Optional[str]:
        return self._src

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def current_time(self) -> float:
        return self._time

    @current_time.setter
    def current_time(self, value: float) -> None:
        dur = self.duration
        value = max(0.0, float(value))
        self._time = min(value, dur) if math.isfinite(dur) else value
        self._emit("timeupdate")

    @property
    def duration(self) -> float:
        if not self._src:
            return math.nan
        return float(self.durations.get(self._src, self.default_duration))

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = float(value)

    def advance(self, seconds: float) -> None:
        """Play forward up to `seconds`, firing timeupdate per step and ended at the end."""
        remaining = seconds
        while remaining > 0 and not self._paused:
            step = min(self._step, remaining)
            remaining -= step
            self._time = min(self._time + step, self.duration)
            self._emit("timeupdate")
            if self._time >= self.duration:
                self._paused = True
                self._emit("ended")
                return
