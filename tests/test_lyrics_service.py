"""Tests for lyrics fetching and provider fallback."""

import json
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError, URLError

import pytest
from ytmdeck.config import LyricsConfig
from ytmdeck.exceptions import NetworkError, ResponseParseError
from ytmdeck.models.domain import Song
from ytmdeck.models.lyrics import Lyrics
from ytmdeck.services.lyrics import LRCLibProvider, LyricsService

from conftest import MockMusicClient
from factories import make_song

URLOPEN = "ytmdeck.services.lyrics.urllib.request.urlopen"


def mock_response(body: bytes) -> MagicMock:
    response = MagicMock()
    response.__enter__.return_value.read.return_value = body
    return response


class StubProvider:
    """Primary provider returning a fixed result or raising."""

    def __init__(self, result: Lyrics | None = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.requested: list[str] = []

    async def fetch(self, song: Song) -> Lyrics | None:
        self.requested.append(song.video_id)
        if self.error is not None:
            raise self.error
        return self.result


class TestLRCLibProvider:
    """Tests for the LRCLib lookup."""

    def test_build_url_uses_primary_artist_and_whole_seconds(self) -> None:
        song = make_song(1, title="Hello World", duration=215.7)
        provider = LRCLibProvider(LyricsConfig(lrclib_url="https://lrc.test/api"))

        url = provider.build_url(song)

        assert url == (
            "https://lrc.test/api/get?track_name=Hello+World&artist_name=Artist+1&duration=215"
        )

    def test_build_url_without_artist_or_duration(self) -> None:
        song = Song(video_id="video000001", title="Solo")
        assert LRCLibProvider().build_url(song).endswith("/get?track_name=Solo")

    def test_fetch_returns_synced_lyrics(self) -> None:
        body = json.dumps(
            {"plainLyrics": "Hello\nWorld", "syncedLyrics": "[00:01.50]Hello\n[00:03.00]World"}
        ).encode()

        with patch(URLOPEN, return_value=mock_response(body)) as urlopen:
            lyrics = LRCLibProvider().fetch_sync(make_song(1))

        assert lyrics is not None
        assert lyrics.has_timed_lyrics
        assert [line.start_time for line in lyrics.timed_lines] == [1.5, 3.0]
        request = urlopen.call_args.args[0]
        assert request.get_header("User-agent").startswith("ytmdeck/")

    def test_fetch_not_found_is_no_match(self) -> None:
        error = HTTPError("https://lrclib.net/api/get", 404, "Not Found", None, None)
        with patch(URLOPEN, side_effect=error):
            assert LRCLibProvider().fetch_sync(make_song(1)) is None

    def test_fetch_connection_failure_raises_network_error(self) -> None:
        with (
            patch(URLOPEN, side_effect=URLError("no route")),
            pytest.raises(NetworkError),
        ):
            LRCLibProvider().fetch_sync(make_song(1))

    def test_fetch_invalid_json_raises_parse_error(self) -> None:
        with (
            patch(URLOPEN, return_value=mock_response(b"<html>")),
            pytest.raises(ResponseParseError),
        ):
            LRCLibProvider().fetch_sync(make_song(1))

    @pytest.mark.asyncio
    async def test_async_fetch_runs_blocking_lookup(self) -> None:
        body = json.dumps({"plainLyrics": "Only words"}).encode()
        with patch(URLOPEN, return_value=mock_response(body)):
            lyrics = await LRCLibProvider().fetch(make_song(1))

        assert lyrics == Lyrics(text="Only words", source="LRClib")


class TestLyricsService:
    """Tests for provider fallback."""

    @pytest.mark.asyncio
    async def test_primary_result_wins(self, client: MockMusicClient) -> None:
        lyrics = Lyrics(text="from lrclib", source="LRClib")
        service = LyricsService(client, primary=StubProvider(result=lyrics))

        assert await service.get_lyrics(make_song(1)) == lyrics
        assert client.call_count("get_lyrics") == 0

    @pytest.mark.asyncio
    async def test_falls_back_when_primary_has_no_match(self, client: MockMusicClient) -> None:
        song = make_song(1)
        fallback = Lyrics(text="from youtube", source="Source: Musixmatch")
        client.lyrics[song.video_id] = fallback
        service = LyricsService(client, primary=StubProvider())

        assert await service.get_lyrics(song) == fallback

    @pytest.mark.asyncio
    async def test_falls_back_when_primary_fails(self, client: MockMusicClient) -> None:
        song = make_song(1)
        client.lyrics[song.video_id] = Lyrics(text="from youtube")
        service = LyricsService(client, primary=StubProvider(error=NetworkError("offline")))

        lyrics = await service.get_lyrics(song)

        assert lyrics.text == "from youtube"

    @pytest.mark.asyncio
    async def test_unavailable_when_both_empty(self, client: MockMusicClient) -> None:
        service = LyricsService(client, primary=StubProvider())

        lyrics = await service.get_lyrics(make_song(1))

        assert not lyrics.is_available

    @pytest.mark.asyncio
    async def test_fallback_failure_is_unavailable(self, client: MockMusicClient) -> None:
        client.error = NetworkError("offline")
        service = LyricsService(client, primary=StubProvider())

        lyrics = await service.get_lyrics(make_song(1))

        assert lyrics == Lyrics.unavailable()

    @pytest.mark.asyncio
    async def test_fallback_can_be_disabled(self, client: MockMusicClient) -> None:
        config = LyricsConfig(use_youtube_fallback=False)
        service = LyricsService(client, config=config, primary=StubProvider())

        await service.get_lyrics(make_song(1))

        assert client.call_count("get_lyrics") == 0
