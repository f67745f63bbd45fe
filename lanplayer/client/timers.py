"""Repeating background timer (setInterval for the player's timers)."""
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class IntervalTimer:
    """Calls `callback` every `interval_sec` on a daemon thread until stopped."""

    def __init__(self, interval_sec: float, callback: Callable[[], None], name: str = "timer") -> None:
        self.interval_sec = interval_sec
        self._callback = callback
        self._name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None

    def start(self) -> None:
        self.stop()
        self._stop = threading.Event()
        stop = self._stop

        def _loop() -> None:
            while not stop.wait(timeout=self.interval_sec):
                try:
                    self._callback()
                except Exception as e:
                    logger.warning("%s: %s", self._name, e)

        self._thread = threading.Thread(target=_loop, name=self._name, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join(timeout=2.0)
            self._thread = None
