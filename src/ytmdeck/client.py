"""YouTube Music API client wrapper.

ytmusicapi is synchronous; every call runs in a worker thread so the event
loop that owns the player stays responsive. Raw responses are parsed by
``ytmdeck.parsers`` rather than by ytmusicapi's own parsers, which only
understand one response shape per endpoint.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Any, Protocol

import requests
from ytmusicapi import YTMusic
from ytmusicapi.exceptions import YTMusicError, YTMusicServerError, YTMusicUserError

from ytmdeck.config import APIConfig
from ytmdeck.exceptions import (
    APIError,
    AuthenticationRequiredError,
    NetworkError,
    NotFoundError,
    YTDeckError,
)
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
from ytmdeck.parsers import (
    parse_album_detail,
    parse_artist_detail,
    parse_home_continuation,
    parse_home_sections,
    parse_library_playlists,
    parse_lyrics_browse,
    parse_lyrics_browse_id,
    parse_playlist_detail,
    parse_search_results,
    parse_song,
    parse_watch_playlist,
)
from ytmdeck.utils.cookies import cookies_to_ytmusic_auth

logger = logging.getLogger(__name__)

HOME_BROWSE_ID = "FEmusic_home"
CHARTS_BROWSE_ID = "FEmusic_charts"
LIBRARY_PLAYLISTS_BROWSE_ID = "FEmusic_liked_playlists"
RADIO_PLAYLIST_PREFIX = "RDAMVM"

_HTTP_STATUS = re.compile(r"HTTP (\d{3})")


class MusicClientProtocol(Protocol):
    """Protocol for YouTube Music API clients.

    This protocol enables dependency injection and testing.
    Implement this protocol to create mock clients for testing.
    All methods raise ``YTDeckError`` subclasses on failure.
    """

    async def get_song(self, video_id: str) -> Song:
        """Fetch a single song with rating, library state and feedback tokens."""
        ...

    async def get_playlist(self, playlist_id: str) -> PlaylistDetail:
        """Fetch a playlist with its tracks."""
        ...

    async def get_radio_queue(self, video_id: str) -> list[Song]:
        """Fetch the radio queue seeded from a track."""
        ...

    async def rate_song(self, video_id: str, rating: LikeStatus) -> None:
        """Set the user's rating of a track."""
        ...

    async def edit_song_library_status(self, feedback_tokens: list[str]) -> None:
        """Add or remove tracks from the library using feedback tokens."""
        ...

    async def get_lyrics(self, video_id: str) -> Lyrics:
        """Fetch YouTube Music lyrics of a track."""
        ...

    async def get_library_playlists(self) -> list[Playlist]:
        """Fetch the playlists saved in the user's library."""
        ...

    async def get_home(self) -> HomeResponse:
        """Fetch the first page of the home feed."""
        ...

    async def get_charts(self) -> HomeResponse:
        """Fetch the charts page."""
        ...

    async def get_home_continuation(self, token: str, offset: int = 0) -> HomeResponse:
        """Fetch the next page of a feed."""
        ...

    async def search(self, query: str) -> SearchResponse:
        """Search songs, albums, artists and playlists."""
        ...

    async def get_artist(self, channel_id: str) -> ArtistDetail:
        """Fetch an artist page."""
        ...

    async def get_album(self, browse_id: str) -> AlbumDetail:
        """Fetch an album page."""
        ...


def _require_id(value: str, name: str) -> None:
    if not value or not value.strip():
        raise ValueError(f"{name} cannot be empty")


def translate_error(error: Exception, action: str) -> YTDeckError:
    """Map ytmusicapi and requests exceptions to ytmdeck exceptions.

    Args:
        error: Exception raised while talking to YouTube Music.
        action: Short description for the message (e.g. "fetch playlist").
    """
    message = f"Failed to {action}: {error}"

    if isinstance(error, YTMusicUserError):
        if "authentication" in str(error).lower():
            return AuthenticationRequiredError(
                f"Failed to {action}: sign in required. "
                "Export your YouTube Music cookies while logged in."
            )
        return APIError(message)

    if isinstance(error, YTMusicServerError):
        match = _HTTP_STATUS.search(str(error))
        status = int(match.group(1)) if match else None
        if status in (401, 403):
            return AuthenticationRequiredError(
                f"Failed to {action}: session expired or not authorized. "
                "Re-export your cookies while logged into YouTube Music."
            )
        if status == 404:
            return NotFoundError(message)
        return APIError(message)

    if isinstance(error, YTMusicError):
        return APIError(message)

    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return NetworkError(message)

    if isinstance(error, requests.RequestException):
        return APIError(message)

    if isinstance(error, YTDeckError):
        return error

    return APIError(message)


class YTMusicClient:
    """Production YouTube Music API client.

    Wraps ytmusicapi with consistent error handling and response parsing.
    Implements MusicClientProtocol for type safety.
    """

    def __init__(
        self,
        ytmusic: YTMusic | None = None,
        config: APIConfig | None = None,
        cookies_path: Path | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            ytmusic: Optional YTMusic instance. Creates one if not provided.
            config: Optional API configuration. Uses defaults if not provided.
            cookies_path: Optional path to cookies.txt for authentication.
                         Required for ratings, library edits and the library.
        """
        self._ytm = ytmusic or self._create_ytmusic(cookies_path)
        self._config = config or APIConfig()

    def _create_ytmusic(self, cookies_path: Path | None) -> YTMusic:
        if cookies_path:
            auth = cookies_to_ytmusic_auth(cookies_path)
            if auth:
                logger.info("Using cookies for ytmusicapi requests")
                return YTMusic(auth=auth)
            logger.info("No valid cookies for ytmusicapi requests (missing SAPISID)")
            return YTMusic()

        logger.info("No cookies configured for ytmusicapi requests")
        return YTMusic()

    # ------------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------------

    async def _call(self, action: str, func: Any, *args: Any) -> Any:
        """Run a blocking ytmusicapi call in a thread, translating errors."""
        try:
            return await asyncio.to_thread(func, *args)
        except (YTMusicError, requests.RequestException) as e:
            error = translate_error(e, action)
            logger.warning("%s: %s", type(error).__name__, error.message)
            raise error from e

    async def _request(
        self,
        action: str,
        endpoint: str,
        body: dict[str, Any],
        additional_params: str = "",
    ) -> dict[str, Any]:
        logger.debug("POST %s %s", endpoint, body or additional_params)
        return await self._call(
            action, self._ytm._send_request, endpoint, body, additional_params
        )

    async def _browse(self, action: str, browse_id: str) -> dict[str, Any]:
        return await self._request(action, "browse", {"browseId": browse_id})

    async def _next(self, action: str, video_id: str, radio: bool = False) -> dict[str, Any]:
        body: dict[str, Any] = {
            "videoId": video_id,
            "isAudioOnly": True,
            "enablePersistentPlaylistPanel": True,
            "tunerSettingValue": "AUTOMIX_SETTING_NORMAL",
        }
        if radio:
            body["playlistId"] = f"{RADIO_PLAYLIST_PREFIX}{video_id}"
        return await self._request(action, "next", body)

    # ------------------------------------------------------------------------
    # Songs and queues
    # ------------------------------------------------------------------------

    async def get_song(self, video_id: str) -> Song:
        """Fetch a single song.

        The watch panel entry carries rating, library state and feedback
        tokens. The player response is only requested when the panel entry is
        missing or lacks a duration.

        Raises:
            ValueError: If video_id is empty.
            NotFoundError: If neither response describes the track.
            APIError: If the API request fails.
        """
        _require_id(video_id, "video_id")
        next_data = await self._next("fetch song", video_id)
        song = parse_song(video_id, next_data)

        if song is None or song.duration is None:
            player_data = await self._call("fetch song", self._ytm.get_song, video_id)
            song = parse_song(video_id, next_data, player_data)

        if song is None:
            raise NotFoundError(f"Track not found: {video_id}")
        return song

    async def get_radio_queue(self, video_id: str) -> list[Song]:
        """Fetch the radio queue seeded from ``video_id``, capped at ``radio_limit``."""
        _require_id(video_id, "video_id")
        data = await self._next("fetch radio queue", video_id, radio=True)
        songs = parse_watch_playlist(data)[: self._config.radio_limit]
        logger.debug("Fetched radio queue for %s: %d tracks", video_id, len(songs))
        return songs

    async def rate_song(self, video_id: str, rating: LikeStatus) -> None:
        """Set the rating of a track (requires authentication)."""
        _require_id(video_id, "video_id")
        logger.debug("Rating %s as %s", video_id, rating)
        await self._call("rate song", self._ytm.rate_song, video_id, rating.value)

    async def edit_song_library_status(self, feedback_tokens: list[str]) -> None:
        """Add or remove tracks from the library (requires authentication)."""
        if not feedback_tokens:
            raise ValueError("feedback_tokens cannot be empty")
        await self._call(
            "edit library", self._ytm.edit_song_library_status, feedback_tokens
        )

    async def get_lyrics(self, video_id: str) -> Lyrics:
        """Fetch lyrics from the track's lyrics tab.

        Returns:
            The lyrics, or ``Lyrics.unavailable()`` when the track has none.
        """
        _require_id(video_id, "video_id")
        next_data = await self._next("fetch lyrics", video_id)
        browse_id = parse_lyrics_browse_id(next_data)
        if browse_id is None:
            logger.debug("No lyrics tab for %s", video_id)
            return Lyrics.unavailable()

        data = await self._browse("fetch lyrics", browse_id)
        return parse_lyrics_browse(data) or Lyrics.unavailable()

    # ------------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------------

    async def get_playlist(self, playlist_id: str) -> PlaylistDetail:
        """Fetch a playlist by ID.

        Args:
            playlist_id: Playlist ID, with or without the ``VL`` browse prefix.

        Raises:
            ValueError: If playlist_id is empty.
            AuthenticationRequiredError: If the playlist is private.
            APIError: If the API request fails.
        """
        _require_id(playlist_id, "playlist_id")
        browse_id = playlist_id if playlist_id.startswith("VL") else f"VL{playlist_id}"
        data = await self._browse("fetch playlist", browse_id)
        return parse_playlist_detail(data, browse_id)

    async def get_library_playlists(self) -> list[Playlist]:
        data = await self._browse("fetch library playlists", LIBRARY_PLAYLISTS_BROWSE_ID)
        return parse_library_playlists(data)

    async def get_home(self) -> HomeResponse:
        data = await self._browse("fetch home", HOME_BROWSE_ID)
        return parse_home_sections(data)

    async def get_charts(self) -> HomeResponse:
        data = await self._browse("fetch charts", CHARTS_BROWSE_ID)
        return parse_home_sections(data, is_chart=True)

    async def get_home_continuation(self, token: str, offset: int = 0) -> HomeResponse:
        """Fetch the feed page following ``token``.

        Args:
            token: Continuation token of the previous page.
            offset: Number of sections already loaded.
        """
        _require_id(token, "token")
        data = await self._request(
            "fetch more sections",
            "browse",
            {},
            f"&ctoken={token}&continuation={token}",
        )
        return parse_home_continuation(data, offset=offset)

    async def search(self, query: str) -> SearchResponse:
        if not query or not query.strip():
            return SearchResponse()
        data = await self._request("search", "search", {"query": query.strip()})
        return parse_search_results(data, limit=self._config.search_limit)

    async def get_artist(self, channel_id: str) -> ArtistDetail:
        _require_id(channel_id, "channel_id")
        data = await self._browse("fetch artist", channel_id)
        return parse_artist_detail(data, channel_id)

    async def get_album(self, browse_id: str) -> AlbumDetail:
        _require_id(browse_id, "browse_id")
        data = await self._browse("fetch album", browse_id)
        return parse_album_detail(data, browse_id)
