"""ytmdeck - YouTube Music client core.

This library turns raw YouTube Music responses into typed models and keeps
the playback state of a queue-driven player in sync with a web player
transport that may advance on its own.

Designed for use as a library in desktop or terminal front ends, with a CLI
for debugging and development.

Examples:
    Fetch a playlist:
    ```python
    from ytmdeck import create_client

    client = create_client()
    detail = await client.get_playlist("PL...")
    for track in detail.tracks:
        print(f"{track.artists_display} - {track.title}")
    ```

    Drive playback:
    ```python
    from ytmdeck import create_player

    player = create_player(web_player, settings_path=Path("player.json"))
    await player.play_with_radio(song)
    ```
"""

from pathlib import Path

from ytmdeck.client import MusicClientProtocol, YTMusicClient
from ytmdeck.config import APIConfig, LyricsConfig, PlayerConfig
from ytmdeck.exceptions import (
    APIError,
    AuthenticationRequiredError,
    InvalidIdentifierError,
    NetworkError,
    NotFoundError,
    ResponseParseError,
    YTDeckError,
)
from ytmdeck.models import (
    Album,
    AlbumDetail,
    Artist,
    ArtistDetail,
    FeedbackTokens,
    HomeResponse,
    HomeSection,
    LikeStatus,
    LoadingError,
    LoadingState,
    LoadingStatus,
    Lyrics,
    PlaybackState,
    PlaybackStatus,
    Playlist,
    PlaylistDetail,
    RepeatMode,
    SearchResponse,
    Song,
    TimedLyricLine,
)
from ytmdeck.services import (
    JsonSettingsStore,
    LikeStatusCache,
    LyricsService,
    PlayerService,
    PlaylistDetailLoader,
    SectionFeedLoader,
    WebPlayerProtocol,
)


def create_client(
    config: APIConfig | None = None,
    cookies_path: Path | None = None,
) -> YTMusicClient:
    """Create a configured YouTube Music client.

    Args:
        config: Optional API configuration. Uses defaults if not provided.
        cookies_path: Optional path to cookies.txt for YouTube Music authentication.
                     Required for ratings, library edits and library playlists.

    Returns:
        A configured YTMusicClient instance.

    Examples:
        Anonymous access:
        ```python
        client = create_client()
        songs = await client.get_radio_queue("dQw4w9WgXcQ")
        ```

        With authentication:
        ```python
        client = create_client(cookies_path=Path("cookies.txt"))
        playlists = await client.get_library_playlists()
        ```
    """
    return YTMusicClient(config=config, cookies_path=cookies_path)


def create_player(
    web_player: WebPlayerProtocol,
    client: MusicClientProtocol | None = None,
    settings_path: Path | None = None,
    config: PlayerConfig | None = None,
    like_cache: LikeStatusCache | None = None,
    cookies_path: Path | None = None,
) -> PlayerService:
    """Create the playback state machine.

    Only one player should exist per process, since it owns the single
    web player transport.

    Args:
        web_player: Transport receiving playback commands.
        client: Client for metadata, radio and ratings. Created from
               ``cookies_path`` if not provided.
        settings_path: Optional JSON file persisting volume, shuffle and
                      repeat. Settings are kept in memory when omitted.
        config: Optional player thresholds.
        like_cache: Optional shared rating overlay.
        cookies_path: Optional path to cookies.txt, used only when
                     ``client`` is not provided.

    Returns:
        A configured PlayerService instance.

    Examples:
        Persisted settings:
        ```python
        player = create_player(web_player, settings_path=Path("player.json"))
        ```

        Sharing ratings with list views:
        ```python
        client = create_client(cookies_path=Path("cookies.txt"))
        likes = LikeStatusCache(client)
        player = create_player(web_player, client=client, like_cache=likes)
        ```
    """
    client = client or create_client(cookies_path=cookies_path)
    store = JsonSettingsStore(settings_path) if settings_path else None
    return PlayerService(
        web_player,
        client,
        settings_store=store,
        config=config,
        like_cache=like_cache,
    )


def create_lyrics_service(
    client: MusicClientProtocol | None = None,
    config: LyricsConfig | None = None,
    cookies_path: Path | None = None,
) -> LyricsService:
    """Create a lyrics service (LRCLib first, YouTube Music as fallback).

    Args:
        client: Client used for the YouTube Music fallback. Created from
               ``cookies_path`` if not provided.
        config: Optional lyrics configuration.
        cookies_path: Optional path to cookies.txt, used only when
                     ``client`` is not provided.

    Returns:
        A configured LyricsService instance.

    Examples:
        ```python
        lyrics = await create_lyrics_service().get_lyrics(song)
        if lyrics.has_timed_lyrics:
            line = lyrics.line_at(player.progress)
        ```
    """
    client = client or create_client(cookies_path=cookies_path)
    return LyricsService(client, config=config)


__all__ = [
    "APIConfig",
    "APIError",
    "Album",
    "AlbumDetail",
    "Artist",
    "ArtistDetail",
    "AuthenticationRequiredError",
    "FeedbackTokens",
    "HomeResponse",
    "HomeSection",
    "InvalidIdentifierError",
    "LikeStatus",
    "LikeStatusCache",
    "LoadingError",
    "LoadingState",
    "LoadingStatus",
    "Lyrics",
    "LyricsConfig",
    "LyricsService",
    "MusicClientProtocol",
    "NetworkError",
    "NotFoundError",
    "PlaybackState",
    "PlaybackStatus",
    "PlayerConfig",
    "PlayerService",
    "Playlist",
    "PlaylistDetail",
    "PlaylistDetailLoader",
    "RepeatMode",
    "ResponseParseError",
    "SearchResponse",
    "SectionFeedLoader",
    "Song",
    "TimedLyricLine",
    "WebPlayerProtocol",
    "YTDeckError",
    "YTMusicClient",
    "create_client",
    "create_lyrics_service",
    "create_player",
]
