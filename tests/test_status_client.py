"""
Tests for the HTTP status client against the service
"""
import httpx

from lanplayer.client.status import ClientError, StatusClient
from lanplayer.models.song import Song

SONG = Song(id="s1", title="Song", artist="Artist", url="s1.mp3")


def _offline_client():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    return StatusClient(httpx.Client(base_url="http://player.invalid", transport=httpx.MockTransport(handler)))


def test_status_reaches_registry(client):
    status = StatusClient(client)
    status.post_status("dev-1", SONG, True)

    (device,) = status.list_devices()
    assert device.device_id == "dev-1"
    assert device.is_playing is True
    assert device.song.title == "Song"


def test_play_counts_reach_service(client):
    status = StatusClient(client)
    status.record_play("s1")
    status.record_play("s1")
    assert status.top_played() == ("s1", 2)


def test_layout_post(client):
    status = StatusClient(client)
    status.set_layout("mobile")
    assert client.cookies.get("layout") == "mobile"


def test_fetch_catalog_from_web_root(client):
    songs = StatusClient(client).fetch_catalog()
    assert songs
    assert len({s.id for s in songs}) == len(songs)


def test_fire_and_forget_swallows_errors():
    status = _offline_client()
    status.post_status("dev-1", None, False)
    status.record_play("s1")
    status.set_layout("tv")


def test_rejected_report_is_swallowed(client):
    StatusClient(client).post_status("", SONG, True)
    assert client.get("/api/devices").json() == []


def test_reads_raise_client_error():
    status = _offline_client()
    for call in (status.list_devices, status.fetch_catalog, status.top_played):
        try:
            call()
        except ClientError:
            continue
        raise AssertionError(f"{call.__name__} did not raise")


def test_player_falls_back_to_empty_catalog(player_factory):
    player, _ = player_factory(client=_offline_client())
    assert player.load_catalog() == []
    assert player.state.queue == []
    player.toggle_play_pause()
    assert player.state.current_index == -1
