"""What each player layout offers, so one controller serves desktop, mobile and tv."""
from dataclasses import dataclass
from typing import Optional

from lanplayer.config import LAYOUTS


@dataclass(frozen=True)
class PlayerCapabilities:
    layout: str  # "desktop" | "mobile" | "tv"
    search: bool = False
    device_roster: bool = False
    most_played_badge: bool = False
    diff_roster: bool = False
    # prev() restarts the current track when past this position (None = always go back)
    restart_threshold_sec: Optional[float] = None


DESKTOP = PlayerCapabilities(
    layout="desktop",
    search=True,
    device_roster=True,
    most_played_badge=True,
    diff_roster=True,
    restart_threshold_sec=3.0,
)
MOBILE = PlayerCapabilities(layout="mobile", device_roster=True)
TV = PlayerCapabilities(layout="tv", restart_threshold_sec=3.0)

PRESETS = {c.layout: c for c in (DESKTOP, MOBILE, TV)}


def for_layout(layout: str) -> PlayerCapabilities:
    """Capabilities for a layout name; unknown names get desktop."""
    if layout not in LAYOUTS:
        return DESKTOP
    return PRESETS[layout]
