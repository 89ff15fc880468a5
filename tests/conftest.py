"""Test fixtures and configuration.

This module provides shared fixtures organized into:
- Test doubles: MockMusicClient and FakeWebPlayer
- Service fixtures: Player and caches wired to the doubles
"""

from __future__ import annotations

import asyncio
import random

import pytest
from ytmdeck.exceptions import NotFoundError, YTDeckError
from ytmdeck.models.domain import (
    AlbumDetail,
    ArtistDetail,
    HomeResponse,
    Playlist,
    PlaylistDetail,
    SearchResponse,
    Song,
)
from ytmdeck.models.enums import LikeStatus
from ytmdeck.models.lyrics import Lyrics
from ytmdeck.services.like_status import LikeStatusCache
from ytmdeck.services.player import PlayerService
from ytmdeck.services.settings import MemorySettingsStore

# =============================================================================
# Test Doubles
# =============================================================================


class MockMusicClient:
    """In-memory MusicClientProtocol implementation.

    Responses are configured through the public attributes. ``error`` is
    raised by every call; the ``*_error`` attributes only by one operation.
    The ``*_gate`` events, when set, hold the call until the test releases
    them, to simulate a slow network.
    """

    def __init__(self) -> None:
        self.songs: dict[str, Song] = {}
        self.playlists: dict[str, PlaylistDetail] = {}
        self.radio: dict[str, list[Song]] = {}
        self.lyrics: dict[str, Lyrics] = {}
        self.library_playlists: list[Playlist] = []
        self.home_response = HomeResponse()
        self.charts_response = HomeResponse()
        self.continuations: dict[str, HomeResponse] = {}
        self.search_response = SearchResponse()
        self.artists: dict[str, ArtistDetail] = {}
        self.albums: dict[str, AlbumDetail] = {}

        self.error: YTDeckError | None = None
        self.radio_error: YTDeckError | None = None
        self.rate_error: YTDeckError | None = None
        self.library_error: YTDeckError | None = None
        self.radio_gate: asyncio.Event | None = None
        self.rate_gate: asyncio.Event | None = None

        self.calls: list[tuple[str, tuple[object, ...]]] = []

    def _record(self, name: str, *args: object) -> None:
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error

    def call_count(self, name: str) -> int:
        return sum(1 for call_name, _ in self.calls if call_name == name)

    def calls_to(self, name: str) -> list[tuple[object, ...]]:
        return [args for call_name, args in self.calls if call_name == name]

    async def get_song(self, video_id: str) -> Song:
        self._record("get_song", video_id)
        if video_id not in self.songs:
            raise NotFoundError(f"Track not found: {video_id}")
        return self.songs[video_id]

    async def get_playlist(self, playlist_id: str) -> PlaylistDetail:
        self._record("get_playlist", playlist_id)
        if playlist_id not in self.playlists:
            raise NotFoundError(f"Playlist not found: {playlist_id}")
        return self.playlists[playlist_id]

    async def get_radio_queue(self, video_id: str) -> list[Song]:
        self._record("get_radio_queue", video_id)
        if self.radio_gate is not None:
            await self.radio_gate.wait()
        if self.radio_error is not None:
            raise self.radio_error
        return list(self.radio.get(video_id, []))

    async def rate_song(self, video_id: str, rating: LikeStatus) -> None:
        self._record("rate_song", video_id, rating)
        if self.rate_gate is not None:
            await self.rate_gate.wait()
        if self.rate_error is not None:
            raise self.rate_error

    async def edit_song_library_status(self, feedback_tokens: list[str]) -> None:
        self._record("edit_song_library_status", list(feedback_tokens))
        if self.library_error is not None:
            raise self.library_error

    async def get_lyrics(self, video_id: str) -> Lyrics:
        self._record("get_lyrics", video_id)
        return self.lyrics.get(video_id, Lyrics.unavailable())

    async def get_library_playlists(self) -> list[Playlist]:
        self._record("get_library_playlists")
        return list(self.library_playlists)

    async def get_home(self) -> HomeResponse:
        self._record("get_home")
        return self.home_response

    async def get_charts(self) -> HomeResponse:
        self._record("get_charts")
        return self.charts_response

    async def get_home_continuation(self, token: str, offset: int = 0) -> HomeResponse:
        self._record("get_home_continuation", token, offset)
        return self.continuations.get(token, HomeResponse())

    async def search(self, query: str) -> SearchResponse:
        self._record("search", query)
        return self.search_response

    async def get_artist(self, channel_id: str) -> ArtistDetail:
        self._record("get_artist", channel_id)
        if channel_id not in self.artists:
            raise NotFoundError(f"Artist not found: {channel_id}")
        return self.artists[channel_id]

    async def get_album(self, browse_id: str) -> AlbumDetail:
        self._record("get_album", browse_id)
        if browse_id not in self.albums:
            raise NotFoundError(f"Album not found: {browse_id}")
        return self.albums[browse_id]


class FakeWebPlayer:
    """WebPlayerProtocol double recording every command."""

    def __init__(self) -> None:
        self.commands: list[tuple[object, ...]] = []

    def play(self) -> None:
        self.commands.append(("play",))

    def pause(self) -> None:
        self.commands.append(("pause",))

    def seek(self, seconds: float) -> None:
        self.commands.append(("seek", seconds))

    def set_volume(self, volume: float) -> None:
        self.commands.append(("set_volume", volume))

    def next(self) -> None:
        self.commands.append(("next",))

    def previous(self) -> None:
        self.commands.append(("previous",))

    def load_video(self, video_id: str) -> None:
        self.commands.append(("load_video", video_id))

    @property
    def loaded(self) -> list[object]:
        """Video IDs passed to load_video, in order."""
        return [command[1] for command in self.commands if command[0] == "load_video"]


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def client() -> MockMusicClient:
    return MockMusicClient()


@pytest.fixture
def web_player() -> FakeWebPlayer:
    return FakeWebPlayer()


@pytest.fixture
def settings_store() -> MemorySettingsStore:
    return MemorySettingsStore()


@pytest.fixture
def like_cache(client: MockMusicClient) -> LikeStatusCache:
    return LikeStatusCache(client)


@pytest.fixture
def player(
    web_player: FakeWebPlayer,
    client: MockMusicClient,
    settings_store: MemorySettingsStore,
) -> PlayerService:
    """Player with a seeded random source, so shuffle is reproducible."""
    return PlayerService(
        web_player,
        client,
        settings_store=settings_store,
        rng=random.Random(1234),
    )
