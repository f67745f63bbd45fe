"""Run a headless player against a status service.

    python -m lanplayer.client --server http://192.168.1.10:8000 --play 0 --roster
"""
import argparse
import logging
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from lanplayer.client.audio import SimulatedAudio
from lanplayer.client.capabilities import for_layout
from lanplayer.client.player import PlayerController, format_time
from lanplayer.client.status import StatusClient
from lanplayer.client.storage import LocalStore
from lanplayer.config import API_PORT, LAYOUTS

logger = logging.getLogger("lanplayer.client")


class NowPlayingLog:
    """Player listener that logs when the current song or play state changes."""

    def __init__(self) -> None:
        self._last = None

    def __call__(self, state) -> None:
        song = state.current_song
        now = (song.id if song else None, state.is_playing)
        if now == self._last:
            return
        self._last = now
        if song:
            logger.info("%s %s — %s [%s]",
                        "Playing" if state.is_playing else "Paused",
                        song.title, song.artist, format_time(song.duration))
        else:
            logger.info("Stopped")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Headless lanplayer client")
    parser.add_argument("--server", default=f"http://localhost:{API_PORT}",
                        help="Status service base URL")
    parser.add_argument("--layout", choices=LAYOUTS, default="desktop")
    parser.add_argument("--state-file", type=Path, default=Path.home() / ".lanplayer.json",
                        help="Local store for device id, volume and player state")
    parser.add_argument("--play", type=int, default=None, metavar="INDEX",
                        help="Start playing this queue index")
    parser.add_argument("--shuffle", action="store_true")
    parser.add_argument("--repeat", choices=("off", "all", "one"), default=None)
    parser.add_argument("--roster", action="store_true", help="Poll and log the device roster")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")

    executor = ThreadPoolExecutor(max_workers=1)
    client = StatusClient.connect(args.server, executor=executor)
    audio = SimulatedAudio()
    player = PlayerController(audio, client, LocalStore(args.state_file), for_layout(args.layout))
    player.subscribe(NowPlayingLog())

    songs = player.load_catalog()
    audio.durations = {s.url: s.duration for s in songs if s.duration}
    if not songs:
        logger.warning("Empty catalog, nothing to play")
    player.start()
    logger.info("Device %s (%s), %d songs", player.device_id, args.layout, len(songs))

    if args.shuffle and not player.state.is_shuffled:
        player.toggle_shuffle()
    if args.repeat:
        while player.state.repeat_mode != args.repeat:
            player.toggle_repeat()
    if args.roster:
        if player.roster is None:
            logger.warning("Layout %s has no device roster", args.layout)
        else:
            player.filter("devices")
    if args.play is not None:
        player.play(args.play)

    try:
        while True:
            time.sleep(1.0)
            audio.advance(1.0)
            if player.roster is not None and player.roster.active:
                for row in player.roster.view.snapshot():
                    logger.debug("%d %s %s %s %s", row.index, row.ip, row.device_id,
                                 row.song_text, row.status_text)
    except KeyboardInterrupt:
        pass
    finally:
        player.shutdown()
        executor.shutdown(wait=True)
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
