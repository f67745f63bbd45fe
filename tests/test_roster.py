"""
Tests for the device roster view and poller
"""
from lanplayer.client.roster import DevicePoller, RosterView
from lanplayer.client.status import ClientError
from lanplayer.models.device import DeviceStatus, SongRef


def _device(device_id, playing=True, song=("s1", "Song", "Artist"), ip="10.0.0.2"):
    return DeviceStatus(
        device_id=device_id,
        ip=ip,
        is_playing=playing,
        song=SongRef(*song) if song else None,
        updated_at=0,
        user_agent="ua",
    )


def test_diff_updates_in_place_appends_and_removes():
    view = RosterView(diff=True)
    assert view.render([_device("a"), _device("b")]) == (2, 0, 0)
    row_b = view.rows[1]

    added, updated, removed = view.render([_device("b", playing=False), _device("c")])
    assert (added, updated, removed) == (1, 1, 1)
    assert [r.device_id for r in view.rows] == ["b", "c"]
    assert view.rows[0] is row_b
    assert row_b.status_text == "Paused"
    assert row_b.index == 1


def test_diff_unchanged_poll_touches_nothing():
    view = RosterView(diff=True)
    view.render([_device("a")])
    assert view.render([_device("a")]) == (0, 0, 0)


def test_rebuild_replaces_rows():
    view = RosterView(diff=False)
    view.render([_device("a")])
    first = view.rows[0]
    view.render([_device("a"), _device("b", song=None)])
    assert view.rows[0] is not first
    assert view.rows[1].song_text == "—"
    assert view.rows[0].song_text == "Song — Artist"


def test_poller_renders_only_while_active(recorder):
    recorder.devices = [_device("a")]
    view = RosterView()
    seen = []
    poller = DevicePoller(recorder, view, on_update=seen.append, interval_sec=60)

    poller.poll_once()
    assert view.rows == []
    assert len(seen) == 1

    poller.start()
    try:
        assert poller.running
        assert [r.device_id for r in view.rows] == ["a"]
    finally:
        poller.stop()
    assert not poller.running
    assert not poller.active


def test_poller_keeps_last_list_on_failure(recorder):
    recorder.devices = [_device("a")]
    view = RosterView()
    poller = DevicePoller(recorder, view, interval_sec=60)
    poller.active = True
    poller.poll_once()

    def broken():
        raise ClientError("Device poll failed: down")

    recorder.list_devices = broken
    poller.poll_once()
    assert [d.device_id for d in poller.devices] == ["a"]
    assert [r.device_id for r in view.rows] == ["a"]


def test_player_devices_view_starts_and_stops_polling(player_factory):
    player, recorder = player_factory()
    recorder.devices = [_device("other")]
    player.filter("devices")
    try:
        assert player.state.view_mode == "devices"
        assert player.roster.running
        assert [d.device_id for d in player.state.device_list] == ["other"]
    finally:
        player.filter("all")
    assert player.state.view_mode == "songs"
    assert not player.roster.running


def test_snapshot_is_a_copy():
    view = RosterView(diff=True)
    view.render([_device("a"), _device("b")])
    rows = view.snapshot()
    assert rows == view.rows

    view.render([_device("a", playing=False)])
    assert [r.device_id for r in rows] == ["a", "b"]
    assert rows[0].status_text == "Playing"
    assert view.rows[0].status_text == "Paused"
