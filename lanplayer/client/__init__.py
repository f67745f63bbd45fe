"""Headless player: controller, audio backend, status reporting, device roster."""
from lanplayer.client.audio import AudioBackend, PlaybackError, SimulatedAudio
from lanplayer.client.capabilities import PlayerCapabilities, for_layout
from lanplayer.client.player import PlayerController
from lanplayer.client.status import ClientError, StatusClient

__all__ = [
    "AudioBackend",
    "ClientError",
    "PlaybackError",
    "PlayerCapabilities",
    "PlayerController",
    "SimulatedAudio",
    "StatusClient",
    "for_layout",
]
