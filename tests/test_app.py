import dataclasses

import pytest

import app as service
from conftest import GatedResolver, StubResolver
from app import app

THUMB = "https://s1.dmcdn.net/v/k2x9/x240"


@pytest.fixture
def resolver():
    stub = StubResolver(THUMB)
    previous = app.config["THUMBNAIL_RESOLVER"]
    app.config["THUMBNAIL_RESOLVER"] = stub
    yield stub
    app.config["THUMBNAIL_RESOLVER"] = previous


@pytest.fixture
def client(resolver):
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_youtube_state(client, resolver):
    response = client.get("/api/embed", query_string={"url": "https://youtu.be/abc123"})
    assert response.status_code == 200
    data = response.get_json()
    assert data["classification"] == {"provider": "youtube", "id": "abc123"}
    assert data["embeddable_target"] == "https://www.youtube-nocookie.com/embed/abc123?rel=0&modestbranding=1"
    assert data["activation_state"] == "dormant"
    assert data["thumbnail_url"] == "https://i.ytimg.com/vi/abc123/hqdefault.jpg"
    assert resolver.calls == []


def test_dailymotion_state_resolves_thumbnail(client, resolver):
    response = client.get("/api/embed", query_string={"url": "https://dai.ly/k2x9"})
    data = response.get_json()
    assert data["classification"] == {"provider": "dailymotion", "id": "k2x9"}
    assert data["thumbnail_state"] == "resolved"
    assert data["thumbnail_url"] == THUMB
    assert data["policy"]["mode"] == "click"
    assert resolver.calls == [("dailymotion", "k2x9")]


def test_unknown_url_passes_through(client):
    data = client.get("/api/embed", query_string={"url": "not a url"}).get_json()
    assert data["classification"] == {"provider": "other", "id": None}
    assert data["embeddable_target"] == "not a url"
    assert data["activation_state"] == "activated"


def test_audio_kind(client):
    data = client.get(
        "/api/embed", query_string={"url": "https://soundcloud.com/a/b", "kind": "audio"}
    ).get_json()
    assert data["kind"] == "audio"
    assert data["embeddable_target"].startswith("https://w.soundcloud.com/player/?url=")


@pytest.mark.parametrize("query", [{}, {"url": "  "}, {"url": "https://youtu.be/a", "kind": "image"}])
def test_bad_parameters(client, query):
    response = client.get("/api/embed", query_string=query)
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_html_fragment(client):
    response = client.get("/api/embed/html", query_string={"url": "https://dai.ly/k2x9", "title": "Session"})
    assert response.status_code == 200
    assert response.mimetype == "text/html"
    body = response.get_data(as_text=True)
    assert body.startswith('<figure class="portfolio-embed" data-provider="dailymotion"')
    assert f'src="{THUMB}"' in body
    assert 'alt="Session thumbnail"' in body


def test_stalled_lookup_answers_without_thumbnail(client, monkeypatch):
    gated = GatedResolver(THUMB)
    monkeypatch.setitem(app.config, "THUMBNAIL_RESOLVER", gated)
    settings = dataclasses.replace(app.config["EMBED_SETTINGS"], thumbnail_deadline=0.05)
    monkeypatch.setitem(app.config, "EMBED_SETTINGS", settings)

    response = client.get("/api/embed", query_string={"url": "https://dai.ly/k2x9"})
    assert response.status_code == 200
    data = response.get_json()
    assert gated.calls == [("dailymotion", "k2x9")]
    assert (data["thumbnail_state"], data["thumbnail_url"]) == ("unknown", None)


class RecordingResolver(StubResolver):
    created = []

    def __init__(self, timeout=None):
        super().__init__(THUMB)
        self.timeout = timeout
        self.closed = False
        RecordingResolver.created.append(self)

    def close(self):
        self.closed = True


def test_each_request_gets_its_own_resolver(monkeypatch):
    RecordingResolver.created = []
    monkeypatch.setattr(service, "ThumbnailResolver", RecordingResolver)
    monkeypatch.setitem(app.config, "THUMBNAIL_RESOLVER", None)
    client = app.test_client()

    for _ in range(2):
        response = client.get("/api/embed", query_string={"url": "https://dai.ly/k2x9"})
        assert response.get_json()["thumbnail_url"] == THUMB

    first, second = RecordingResolver.created
    assert first is not second
    assert first.closed and second.closed
    assert first.timeout == app.config["EMBED_SETTINGS"].request_timeout
    assert app.config["THUMBNAIL_RESOLVER"] is None
