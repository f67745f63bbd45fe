"""Per-device key-value store (the player's local storage)."""
import json
import logging
import secrets
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class LocalStore:
    """String keys to JSON values, written to one file on every change.

    Without a path the store lives in memory only.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path else None
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Local store %s unreadable, starting empty: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self) -> None:
        if self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Local store %s not saved: %s", self._path, e)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()



def get_device_id(store: LocalStore) -> str:
    """Return this device's id, creating and storing a random one the first time."""
    existing = store.get("deviceId")
    if existing:
        return existing
    device_id = f"dev-{secrets.randbits(32)}-{secrets.randbits(32)}"
    store.set("deviceId", device_id)
    return device_id
