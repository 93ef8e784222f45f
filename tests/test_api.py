import asyncio
import json
from http import client
from pathlib import Path
from urllib import error

import pytest

from channel_guide import api
from channel_guide.api import ChannelLoadError, extract_channel_entries, fetch_channels
from channel_guide.favorites import FavoritesStore, LocalStorage
from channel_guide.guide import ChannelGuide


def test_fetch_channels(monkeypatch):
    def fake_fetch(url: str, timeout: float, *, user_agent=None):
        assert url == "https://example.com/channel/all.json"
        assert timeout == 30.0
        return {
            "response": [
                {"id": 1, "title": "News One", "stbNumber": "501"},
                {"id": 2, "title": "Sports Two", "stbNumber": "802"},
            ]
        }

    monkeypatch.setattr(api, "_fetch_payload", fake_fetch)

    channels = asyncio.run(fetch_channels("https://example.com/channel/all.json"))
    assert [channel.title for channel in channels] == ["News One", "Sports Two"]


def test_missing_response_is_empty(monkeypatch):
    monkeypatch.setattr(api, "_fetch_payload", lambda url, timeout, user_agent=None: {})

    assert asyncio.run(fetch_channels("https://example.com")) == []


@pytest.mark.parametrize(
    "payload",
    [[], "text", None, {"response": None}, {"response": {"id": 1}}],
)
def test_extract_channel_entries_tolerates_odd_payloads(payload):
    assert extract_channel_entries(payload) == []


@pytest.mark.parametrize(
    "failure",
    [
        error.URLError("unreachable"),
        TimeoutError("timed out"),
        json.JSONDecodeError("Expecting value", "", 0),
    ],
)
def test_fetch_failures_raise_channel_load_error(monkeypatch, failure):
    def failing_fetch(url: str, timeout: float, *, user_agent=None):
        raise failure

    monkeypatch.setattr(api, "_fetch_payload", failing_fetch)

    with pytest.raises(ChannelLoadError):
        asyncio.run(fetch_channels("https://example.com"))


def test_fetch_channels_over_http(directory_server):
    channels = asyncio.run(fetch_channels(f"{directory_server}/all.json", timeout=5))
    assert [(channel.id, channel.stb_number) for channel in channels] == [(1, "501"), (2, "802")]


def test_fetch_channels_decodes_latin1_body(directory_server):
    channels = asyncio.run(fetch_channels(f"{directory_server}/latin1.json", timeout=5))
    assert [channel.title for channel in channels] == ["Télé Sept"]


@pytest.mark.parametrize("path", ["/truncated.json", "/error.json"])
def test_http_failures_raise_channel_load_error(directory_server, path):
    with pytest.raises(ChannelLoadError):
        asyncio.run(fetch_channels(f"{directory_server}{path}", timeout=5))


def test_invalid_port_raises_channel_load_error():
    with pytest.raises(ChannelLoadError):
        asyncio.run(fetch_channels("http://127.0.0.1:abc/all.json", timeout=5))


@pytest.mark.parametrize(
    "failure",
    [client.IncompleteRead(b"{}", 10), client.BadStatusLine("garbage")],
)
def test_http_protocol_errors_raise_channel_load_error(monkeypatch, failure):
    def failing_fetch(url: str, timeout: float, *, user_agent=None):
        raise failure

    monkeypatch.setattr(api, "_fetch_payload", failing_fetch)

    with pytest.raises(ChannelLoadError):
        asyncio.run(fetch_channels("https://example.com"))


@pytest.mark.parametrize("path", ["/truncated.json", "/error.json"])
def test_guide_load_over_failing_http_leaves_guide_empty(tmp_path: Path, directory_server, path):
    store = FavoritesStore.load(LocalStorage(tmp_path / "storage.json"))
    guide = ChannelGuide(store, api_url=f"{directory_server}{path}", timeout=5)

    assert asyncio.run(guide.load()) == []
    assert guide.channels == ()
    assert guide.view == []
    assert guide.loading is False
    assert guide.load_error


def test_guide_load_over_http(tmp_path: Path, directory_server):
    store = FavoritesStore.load(LocalStorage(tmp_path / "storage.json"))
    guide = ChannelGuide(store, api_url=f"{directory_server}/all.json", timeout=5)

    assert [channel.id for channel in asyncio.run(guide.load())] == [1, 2]
    assert guide.category_options() == ["All", "News", "Sports"]
    assert guide.load_error is None
