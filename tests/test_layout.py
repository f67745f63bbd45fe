"""
Tests for layout cookie and static routes
"""
import pytest

from lanplayer.config import WEB_ROOT


@pytest.mark.parametrize("layout", ["desktop", "mobile", "tv"])
def test_set_layout(client, layout):
    response = client.post("/api/layout", json={"layout": layout})
    assert response.status_code == 200
    assert response.json() == {"ok": True, "layout": layout}
    cookie = response.headers["set-cookie"]
    assert f"layout={layout}" in cookie
    assert "Max-Age=31536000" in cookie
    assert "Path=/" in cookie


def test_set_layout_invalid(client):
    """Unknown layouts are rejected and no cookie is set."""
    for body in ({"layout": "watch"}, {"layout": 5}, {"layout": ["tv"]}, {}, None):
        response = client.post("/api/layout", json=body)
        assert response.status_code == 400
        assert "set-cookie" not in response.headers


def test_clear_layout(client):
    response = client.get("/clear-layout", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("layout=")
    assert "Max-Age=0" in cookie


def test_index_served(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "preferredLayout" in response.text


def test_static_catalog_served(client):
    response = client.get("/json/songs.json")
    assert response.status_code == 200
    songs = response.json()
    assert isinstance(songs, list)
    assert all("id" in s and "url" in s for s in songs)


def test_missing_static_file(client):
    assert client.get("/nope.txt").status_code == 404


def test_set_layout_malformed_body(client):
    response = client.post(
        "/api/layout",
        content="layout=tv",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "set-cookie" not in response.headers


@pytest.mark.parametrize("layout", ["desktop", "mobile", "tv"])
def test_layout_pages_served(client, layout):
    """The entry page redirects to index.<layout>.html; each one exists."""
    assert f'"{layout}"' in client.get("/").text
    response = client.get(f"/index.{layout}.html")
    assert response.status_code == 200
    assert f'class="device-{layout}"' in response.text


def test_index_and_static_share_web_root(client):
    assert client.get("/").text == (WEB_ROOT / "index.html").read_text()
    assert client.get("/index.html").text == client.get("/").text
