"""Tests for YTMusicClient request building, parsing and error translation."""

from unittest.mock import MagicMock

import pytest
import requests
from ytmdeck.client import YTMusicClient, translate_error
from ytmdeck.config import APIConfig
from ytmdeck.exceptions import (
    APIError,
    AuthenticationRequiredError,
    NetworkError,
    NotFoundError,
)
from ytmdeck.models.domain import SearchResponse
from ytmdeck.models.enums import LikeStatus
from ytmusicapi.exceptions import YTMusicServerError, YTMusicUserError

from factories import panel_video, playlist_page, single_column, track_row, watch_next


def make_client(response: object = None, **config: int) -> tuple[YTMusicClient, MagicMock]:
    mock_ytm = MagicMock()
    mock_ytm._send_request.return_value = response if response is not None else {}
    return YTMusicClient(ytmusic=mock_ytm, config=APIConfig(**config)), mock_ytm


def sent(mock_ytm: MagicMock) -> tuple[str, dict, str]:
    endpoint, body, additional_params = mock_ytm._send_request.call_args.args
    return endpoint, body, additional_params


class TestTranslateError:
    """Tests for mapping library exceptions to ytmdeck exceptions."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (YTMusicServerError("HTTP 401: Unauthorized"), AuthenticationRequiredError),
            (YTMusicServerError("HTTP 403: Forbidden"), AuthenticationRequiredError),
            (YTMusicServerError("Server returned HTTP 404: Not Found.\n"), NotFoundError),
            (YTMusicServerError("Server returned HTTP 500: Internal.\n"), APIError),
            (
                YTMusicUserError("Please provide authentication before using this function"),
                AuthenticationRequiredError,
            ),
            (YTMusicUserError("Invalid rating provided"), APIError),
            (requests.ConnectionError("refused"), NetworkError),
            (requests.Timeout("slow"), NetworkError),
            (requests.HTTPError("bad"), APIError),
        ],
    )
    def test_maps_exception_types(self, error: Exception, expected: type) -> None:
        assert type(translate_error(error, "fetch playlist")) is expected

    def test_message_names_action(self) -> None:
        error = translate_error(requests.ConnectionError("refused"), "fetch playlist")
        assert error.message.startswith("Failed to fetch playlist")

    def test_server_errors_are_retryable_auth_errors_are_not(self) -> None:
        server = translate_error(YTMusicServerError("HTTP 500"), "x")
        auth = translate_error(YTMusicServerError("HTTP 401"), "x")
        assert server.retryable is True
        assert auth.retryable is False


class TestRequests:
    """Tests for the raw requests issued per operation."""

    @pytest.mark.asyncio
    async def test_get_playlist_adds_browse_prefix(self) -> None:
        client, mock_ytm = make_client()

        detail = await client.get_playlist("PL123")

        endpoint, body, _ = sent(mock_ytm)
        assert endpoint == "browse"
        assert body == {"browseId": "VLPL123"}
        assert detail.id == "VLPL123"

    @pytest.mark.asyncio
    async def test_get_playlist_keeps_existing_prefix(self) -> None:
        client, mock_ytm = make_client()
        await client.get_playlist("VLPL123")
        assert sent(mock_ytm)[1] == {"browseId": "VLPL123"}

    @pytest.mark.asyncio
    async def test_get_playlist_parses_tracks(self) -> None:
        rows = [track_row("abcdefghijk", "First"), track_row("bcdefghijkl", "Second")]
        page = playlist_page(rows)
        client, _ = make_client(page)

        detail = await client.get_playlist("PL123")

        assert [t.title for t in detail.tracks] == ["First", "Second"]

    @pytest.mark.asyncio
    async def test_radio_queue_uses_radio_playlist(self) -> None:
        items = [panel_video(f"video{n:06d}", f"Song {n}") for n in range(5)]
        client, mock_ytm = make_client(watch_next(items), radio_limit=3)

        songs = await client.get_radio_queue("video000000")

        endpoint, body, _ = sent(mock_ytm)
        assert endpoint == "next"
        assert body["videoId"] == "video000000"
        assert body["playlistId"] == "RDAMVMvideo000000"
        assert [s.video_id for s in songs] == ["video000000", "video000001", "video000002"]

    @pytest.mark.asyncio
    async def test_home_continuation_sends_token_as_params(self) -> None:
        client, mock_ytm = make_client()

        response = await client.get_home_continuation("tok123", offset=4)

        endpoint, body, params = sent(mock_ytm)
        assert endpoint == "browse"
        assert body == {}
        assert params == "&ctoken=tok123&continuation=tok123"
        assert response.is_empty

    @pytest.mark.asyncio
    async def test_empty_search_skips_request(self) -> None:
        client, mock_ytm = make_client()

        assert await client.search("   ") == SearchResponse()
        mock_ytm._send_request.assert_not_called()

    @pytest.mark.asyncio
    async def test_rate_song_sends_rating_string(self) -> None:
        client, mock_ytm = make_client()

        await client.rate_song("abcdefghijk", LikeStatus.DISLIKE)

        mock_ytm.rate_song.assert_called_once_with("abcdefghijk", "DISLIKE")

    @pytest.mark.asyncio
    async def test_edit_library_passes_tokens(self) -> None:
        client, mock_ytm = make_client()

        await client.edit_song_library_status(["token-1"])

        mock_ytm.edit_song_library_status.assert_called_once_with(["token-1"])

    @pytest.mark.asyncio
    async def test_edit_library_requires_tokens(self) -> None:
        client, _ = make_client()
        with pytest.raises(ValueError, match="feedback_tokens cannot be empty"):
            await client.edit_song_library_status([])

    @pytest.mark.parametrize(
        "method", ["get_song", "get_radio_queue", "get_lyrics", "get_artist", "get_album"]
    )
    @pytest.mark.asyncio
    async def test_empty_id_rejected(self, method: str) -> None:
        client, mock_ytm = make_client()
        with pytest.raises(ValueError, match="cannot be empty"):
            await getattr(client, method)("")
        mock_ytm._send_request.assert_not_called()


class TestGetSong:
    """Tests for YTMusicClient.get_song()."""

    @pytest.mark.asyncio
    async def test_uses_watch_panel_entry(self) -> None:
        video = panel_video("abcdefghijk", "Panel Title", like_status="LIKE", in_library=True)
        data = watch_next([video])
        client, mock_ytm = make_client(data)

        song = await client.get_song("abcdefghijk")

        assert song.title == "Panel Title"
        assert song.duration == 225
        assert song.like_status == LikeStatus.LIKE
        assert song.is_in_library is True
        assert song.feedback_tokens is not None
        mock_ytm.get_song.assert_not_called()

    @pytest.mark.asyncio
    async def test_player_response_fills_missing_duration(self) -> None:
        data = watch_next([panel_video("abcdefghijk", "Panel Title", length=None)])
        client, mock_ytm = make_client(data)
        mock_ytm.get_song.return_value = {
            "videoDetails": {
                "videoId": "abcdefghijk",
                "title": "Player Title",
                "author": "Player Artist",
                "lengthSeconds": "200",
            }
        }

        song = await client.get_song("abcdefghijk")

        assert song.title == "Panel Title"
        assert song.duration == 200
        mock_ytm.get_song.assert_called_once_with("abcdefghijk")

    @pytest.mark.asyncio
    async def test_raises_not_found_when_nothing_describes_track(self) -> None:
        client, mock_ytm = make_client()
        mock_ytm.get_song.return_value = {}

        with pytest.raises(NotFoundError):
            await client.get_song("abcdefghijk")


class TestGetLyrics:
    @pytest.mark.asyncio
    async def test_follows_lyrics_tab(self) -> None:
        mock_ytm = MagicMock()
        lyrics_page = {
            "contents": {
                "sectionListRenderer": {
                    "contents": [
                        {
                            "musicDescriptionShelfRenderer": {
                                "description": {"runs": [{"text": "line one\nline two"}]},
                                "footer": {"runs": [{"text": "Source: LyricFind"}]},
                            }
                        }
                    ]
                }
            }
        }
        mock_ytm._send_request.side_effect = [
            watch_next([panel_video("abcdefghijk", "Song")], lyrics_browse_id="MPLYt_abc"),
            lyrics_page,
        ]
        client = YTMusicClient(ytmusic=mock_ytm)

        lyrics = await client.get_lyrics("abcdefghijk")

        assert lyrics.text == "line one\nline two"
        assert lyrics.source == "Source: LyricFind"
        assert mock_ytm._send_request.call_args.args[1] == {"browseId": "MPLYt_abc"}

    @pytest.mark.asyncio
    async def test_no_lyrics_tab_is_unavailable(self) -> None:
        client, mock_ytm = make_client(watch_next([panel_video("abcdefghijk", "Song")]))

        lyrics = await client.get_lyrics("abcdefghijk")

        assert not lyrics.is_available
        assert mock_ytm._send_request.call_count == 1


class TestErrorHandling:
    @pytest.mark.asyncio
    async def test_connection_error_raises_network_error(self) -> None:
        client, mock_ytm = make_client()
        mock_ytm._send_request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(NetworkError):
            await client.get_home()

    @pytest.mark.asyncio
    async def test_unauthorized_raises_auth_error(self) -> None:
        client, mock_ytm = make_client()
        mock_ytm._send_request.side_effect = YTMusicServerError(
            "Server returned HTTP 401: Unauthorized.\n"
        )

        with pytest.raises(AuthenticationRequiredError):
            await client.get_library_playlists()

    @pytest.mark.asyncio
    async def test_unexpected_shape_does_not_raise(self) -> None:
        client, _ = make_client(single_column([{"somethingNew": {}}]))

        response = await client.get_home()

        assert response.is_empty
