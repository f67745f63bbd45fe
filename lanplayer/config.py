"""Configuration: env, data/web paths, registry TTL, client timing."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of lanplayer package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so LANPLAYER_* overrides are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv("LANPLAYER_DATA_DIR", str(BASE_DIR / "data")))
PLAY_COUNTS_PATH = DATA_DIR / "playcounts.server.json"
DEVICES_PATH = DATA_DIR / "devices.server.json"

# Static web root: index.html, json/songs.json, media
WEB_ROOT = Path(os.getenv("LANPLAYER_WEB_ROOT", str(BASE_DIR / "web")))
CATALOG_PATH = "json/songs.json"

# API
API_HOST = os.getenv("LANPLAYER_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("LANPLAYER_API_PORT", "8000"))
# Take the caller IP from X-Forwarded-For (reverse proxy in front of uvicorn)
TRUST_PROXY = os.getenv("LANPLAYER_TRUST_PROXY", "1").lower() in ("1", "true", "yes")

# Device registry: hide entries older than this from /api/devices
DEVICE_TTL_SEC = float(os.getenv("LANPLAYER_DEVICE_TTL_SEC", str(10 * 60)))
# Delete stale registry entries from disk every N seconds (0 = never)
COMPACT_INTERVAL_SEC = float(os.getenv("LANPLAYER_COMPACT_INTERVAL_SEC", "0"))

# Layout preference cookie
LAYOUTS = ("desktop", "mobile", "tv")
LAYOUT_COOKIE = "layout"
LAYOUT_COOKIE_MAX_AGE = 60 * 60 * 24 * 365

# Client timing
HEARTBEAT_INTERVAL_SEC = 10.0
ROSTER_POLL_INTERVAL_SEC = 5.0
PLAY_COUNT_THRESHOLD_SEC = 30.0
# Gaps between time updates larger than this are seeks, not listening
MAX_LISTEN_STEP_SEC = 2.0
DEFAULT_VOLUME = 0.8


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
