"""Lyrics fetching: LRCLib first, YouTube Music as fallback."""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.request
from importlib.metadata import version
from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode

from ytmdeck.client import MusicClientProtocol
from ytmdeck.config import LyricsConfig
from ytmdeck.exceptions import NetworkError, ResponseParseError, YTDeckError
from ytmdeck.models.domain import Song
from ytmdeck.models.lyrics import Lyrics
from ytmdeck.parsers.lyrics import parse_lrclib_response

logger = logging.getLogger(__name__)

# Get version from package metadata for User-Agent
_VERSION = version("ytmdeck")


class LyricsProviderProtocol(Protocol):
    """A lyrics source. Returns None for "no match", raises on failure."""

    async def fetch(self, song: Song) -> Lyrics | None: ...


class LRCLibProvider:
    """lrclib.net lookup by artist, title and duration."""

    def __init__(self, config: LyricsConfig | None = None) -> None:
        self._config = config or LyricsConfig()

    def build_url(self, song: Song) -> str:
        params: dict[str, str | int] = {"track_name": song.title}
        # Primary artist only, joined artists reduce the match rate
        if song.artists:
            params["artist_name"] = song.artists[0].name
        if song.duration:
            params["duration"] = int(song.duration)
        return f"{self._config.lrclib_url}/get?{urlencode(params)}"

    def fetch_sync(self, song: Song) -> Lyrics | None:
        """Blocking lookup.

        Raises:
            NetworkError: If lrclib.net could not be reached.
            ResponseParseError: If the response body is not JSON.
        """
        url = self.build_url(song)
        request = urllib.request.Request(
            url,
            headers={"User-Agent": f"ytmdeck/{_VERSION}", "Accept": "application/json"},
        )
        try:
            with urllib.request.urlopen(request, timeout=self._config.timeout) as response:
                body = response.read()
        except HTTPError as e:
            # 404 is the documented "no match"; other statuses are treated alike
            if e.code != 404:
                logger.debug("LRCLib answered HTTP %d for %s", e.code, song.video_id)
            return None
        except (URLError, OSError, TimeoutError) as e:
            raise NetworkError(f"Failed to reach LRCLib: {e}") from e

        try:
            payload = json.loads(body)
        except ValueError as e:
            raise ResponseParseError(f"Invalid LRCLib response: {e}") from e
        return parse_lrclib_response(payload)

    async def fetch(self, song: Song) -> Lyrics | None:
        return await asyncio.to_thread(self.fetch_sync, song)


class LyricsService:
    """Lyrics with provider fallback.

    LRCLib is asked first since it usually has synced lyrics. If it has no
    match or fails, the YouTube Music lyrics tab is used. When both come up
    empty the result is ``Lyrics.unavailable()``, never an error.
    """

    def __init__(
        self,
        client: MusicClientProtocol,
        config: LyricsConfig | None = None,
        primary: LyricsProviderProtocol | None = None,
    ) -> None:
        self._client = client
        self._config = config or LyricsConfig()
        self._primary = primary or LRCLibProvider(self._config)

    async def get_lyrics(self, song: Song) -> Lyrics:
        try:
            lyrics = await self._primary.fetch(song)
        except YTDeckError as e:
            logger.warning("Primary lyrics provider failed for %s: %s", song.video_id, e.message)
            lyrics = None

        if lyrics is not None and lyrics.is_available:
            logger.debug("Lyrics for %s from %s", song.video_id, lyrics.source)
            return lyrics

        if not self._config.use_youtube_fallback:
            return Lyrics.unavailable()

        try:
            lyrics = await self._client.get_lyrics(song.video_id)
        except YTDeckError as e:
            logger.warning("YouTube Music lyrics failed for %s: %s", song.video_id, e.message)
            return Lyrics.unavailable()

        return lyrics if lyrics.is_available else Lyrics.unavailable()
