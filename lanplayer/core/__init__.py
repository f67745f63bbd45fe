"""Core services: JSON documents, play counts, device registry."""
from lanplayer.core.device_registry import DeviceRegistry
from lanplayer.core.json_document import JsonDocument, StorageError
from lanplayer.core.play_counts import PlayCountStore

__all__ = ["DeviceRegistry", "JsonDocument", "PlayCountStore", "StorageError"]
