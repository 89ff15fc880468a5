"""Tests for the catalog loaders."""

import asyncio

import pytest
from ytmdeck.exceptions import AuthenticationRequiredError, NetworkError
from ytmdeck.models.domain import HomeResponse, HomeSection, Playlist, PlaylistDetail
from ytmdeck.models.enums import LoadingStatus
from ytmdeck.services.catalog import PlaylistDetailLoader, SectionFeedLoader

from conftest import MockMusicClient
from factories import make_song, make_songs


def section(n: int) -> HomeSection:
    return HomeSection(id=f"section-{n}", title=f"Section {n}", items=[make_song(n)])


class TestPlaylistDetailLoader:
    @pytest.mark.asyncio
    async def test_load_merges_stub_header(self, client: MockMusicClient) -> None:
        stub = Playlist(id="VLPL123", title="Road Trip", thumbnail_url="https://img/stub.jpg")
        client.playlists["VLPL123"] = PlaylistDetail(
            playlist=Playlist(id="VLPL123"), tracks=make_songs(2)
        )
        loader = PlaylistDetailLoader(stub, client)

        await loader.load()

        assert loader.loading_state.status == LoadingStatus.LOADED
        assert loader.detail is not None
        assert loader.detail.title == "Road Trip"
        assert loader.detail.thumbnail_url == "https://img/stub.jpg"
        assert len(loader.detail.tracks) == 2

    @pytest.mark.asyncio
    async def test_failure_sets_error_state(self, client: MockMusicClient) -> None:
        loader = PlaylistDetailLoader(Playlist(id="VLPLmissing"), client)

        await loader.load()

        state = loader.loading_state
        assert state.status == LoadingStatus.ERROR
        assert state.error is not None
        assert "VLPLmissing" in state.error.message
        assert loader.detail is None

    @pytest.mark.asyncio
    async def test_auth_failure_is_not_retryable(self, client: MockMusicClient) -> None:
        client.error = AuthenticationRequiredError("Sign in required")
        loader = PlaylistDetailLoader(Playlist(id="VLPL123"), client)

        await loader.load()

        assert loader.loading_state.error is not None
        assert loader.loading_state.error.is_retryable is False

    @pytest.mark.asyncio
    async def test_load_while_loading_is_ignored(self, client: MockMusicClient) -> None:
        gate = asyncio.Event()
        requested: list[str] = []

        async def slow_get_playlist(playlist_id: str) -> PlaylistDetail:
            requested.append(playlist_id)
            await gate.wait()
            return PlaylistDetail(playlist=Playlist(id=playlist_id, title="T"))

        client.get_playlist = slow_get_playlist  # type: ignore[method-assign]
        loader = PlaylistDetailLoader(Playlist(id="VLPL123"), client)

        first = asyncio.create_task(loader.load())
        await asyncio.sleep(0)
        await loader.load()
        gate.set()
        await first

        assert requested == ["VLPL123"]
        assert loader.loading_state.status == LoadingStatus.LOADED

    @pytest.mark.asyncio
    async def test_cancelled_load_returns_to_idle(self, client: MockMusicClient) -> None:
        gate = asyncio.Event()

        async def slow_get_playlist(playlist_id: str) -> PlaylistDetail:
            await gate.wait()
            raise AssertionError("unreachable")

        client.get_playlist = slow_get_playlist  # type: ignore[method-assign]
        loader = PlaylistDetailLoader(Playlist(id="VLPL123"), client)

        task = asyncio.create_task(loader.load())
        await asyncio.sleep(0)
        assert loader.loading_state.is_loading
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert loader.loading_state.status == LoadingStatus.IDLE

    @pytest.mark.asyncio
    async def test_refresh_reloads(self, client: MockMusicClient) -> None:
        client.playlists["VLPL123"] = PlaylistDetail(playlist=Playlist(id="VLPL123", title="T"))
        loader = PlaylistDetailLoader(Playlist(id="VLPL123"), client)

        await loader.load()
        await loader.refresh()

        assert client.call_count("get_playlist") == 2
        assert loader.loading_state.status == LoadingStatus.LOADED


class TestSectionFeedLoader:
    @pytest.mark.asyncio
    async def test_load_home(self, client: MockMusicClient) -> None:
        client.home_response = HomeResponse(sections=[section(1)], continuation="page-2")
        loader = SectionFeedLoader(client)

        await loader.load()

        assert loader.loading_state.status == LoadingStatus.LOADED
        assert [s.id for s in loader.sections] == ["section-1"]
        assert loader.has_more

    @pytest.mark.asyncio
    async def test_load_charts(self, client: MockMusicClient) -> None:
        client.charts_response = HomeResponse(sections=[section(1)])
        loader = SectionFeedLoader(client, charts=True)

        await loader.load()

        assert client.call_count("get_charts") == 1
        assert client.call_count("get_home") == 0
        assert not loader.has_more

    @pytest.mark.asyncio
    async def test_load_more_appends_pages(self, client: MockMusicClient) -> None:
        client.home_response = HomeResponse(sections=[section(1)], continuation="page-2")
        client.continuations["page-2"] = HomeResponse(sections=[section(2)], continuation="page-3")
        client.continuations["page-3"] = HomeResponse()
        loader = SectionFeedLoader(client)
        await loader.load()

        assert await loader.load_more() is True
        assert await loader.load_more() is False

        assert [s.id for s in loader.sections] == ["section-1", "section-2"]
        assert not loader.has_more
        assert client.calls_to("get_home_continuation") == [("page-2", 1), ("page-3", 2)]

    @pytest.mark.asyncio
    async def test_load_more_without_continuation(self, client: MockMusicClient) -> None:
        loader = SectionFeedLoader(client)
        await loader.load()

        assert await loader.load_more() is False
        assert client.call_count("get_home_continuation") == 0

    @pytest.mark.asyncio
    async def test_load_more_failure_keeps_sections(self, client: MockMusicClient) -> None:
        client.home_response = HomeResponse(sections=[section(1)], continuation="page-2")
        loader = SectionFeedLoader(client)
        await loader.load()
        client.error = NetworkError("offline")

        assert await loader.load_more() is False

        assert len(loader.sections) == 1
        assert loader.continuation == "page-2"

    @pytest.mark.asyncio
    async def test_failed_first_page(self, client: MockMusicClient) -> None:
        client.error = NetworkError("offline")
        loader = SectionFeedLoader(client)

        await loader.load()

        assert loader.loading_state.status == LoadingStatus.ERROR
        assert loader.loading_state.error is not None
        assert loader.loading_state.error.is_retryable
