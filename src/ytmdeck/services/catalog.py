"""Catalog loaders with observable loading state.

Each loader wraps one client call, exposes a ``LoadingState`` and ignores a
``load()`` issued while another is in flight.
"""

import asyncio
import logging

from ytmdeck.client import MusicClientProtocol
from ytmdeck.exceptions import YTDeckError
from ytmdeck.models.domain import HomeResponse, HomeSection, Playlist, PlaylistDetail
from ytmdeck.models.enums import LoadingStatus
from ytmdeck.models.state import LoadingState

logger = logging.getLogger(__name__)

_LOADING = LoadingState(status=LoadingStatus.LOADING)
_LOADED = LoadingState(status=LoadingStatus.LOADED)


class PlaylistDetailLoader:
    """Loads a playlist page for a playlist reference.

    The reference (usually from a library or home listing) fills in the
    title and thumbnail when the parsed header only has placeholders.
    """

    def __init__(self, playlist: Playlist, client: MusicClientProtocol) -> None:
        self._playlist = playlist
        self._client = client
        self.loading_state = LoadingState()
        self.detail: PlaylistDetail | None = None

    @property
    def playlist(self) -> Playlist:
        return self._playlist

    async def load(self) -> None:
        if self.loading_state.is_loading:
            return

        self.loading_state = _LOADING
        logger.info("Loading playlist: %s", self._playlist.title)
        try:
            detail = await self._client.get_playlist(self._playlist.id)
        except asyncio.CancelledError:
            logger.debug("Playlist load cancelled")
            self.loading_state = LoadingState()
            raise
        except YTDeckError as e:
            logger.error("Failed to load playlist %s: %s", self._playlist.id, e.message)
            self.loading_state = LoadingState.failed(e)
            return

        self.detail = detail.merge_with_stub(self._playlist)
        self.loading_state = _LOADED
        logger.info("Playlist loaded: %d tracks", len(self.detail.tracks))

    async def refresh(self) -> None:
        self.detail = None
        await self.load()


class SectionFeedLoader:
    """Home or charts feed with continuation paging."""

    def __init__(self, client: MusicClientProtocol, charts: bool = False) -> None:
        self._client = client
        self._charts = charts
        self.loading_state = LoadingState()
        self.sections: list[HomeSection] = []
        self.continuation: str | None = None
        self._loading_more = False

    @property
    def has_more(self) -> bool:
        return self.continuation is not None

    async def _fetch_first_page(self) -> HomeResponse:
        if self._charts:
            return await self._client.get_charts()
        return await self._client.get_home()

    async def load(self) -> None:
        if self.loading_state.is_loading:
            return

        self.loading_state = _LOADING
        feed = "charts" if self._charts else "home"
        try:
            response = await self._fetch_first_page()
        except asyncio.CancelledError:
            self.loading_state = LoadingState()
            raise
        except YTDeckError as e:
            logger.error("Failed to load %s feed: %s", feed, e.message)
            self.loading_state = LoadingState.failed(e)
            return

        self.sections = list(response.sections)
        self.continuation = response.continuation
        self.loading_state = _LOADED
        logger.info("Loaded %s feed: %d sections", feed, len(self.sections))

    async def load_more(self) -> bool:
        """Append the next page. Returns False when nothing was added.

        Failures are logged and leave the loaded sections untouched.
        """
        if self.continuation is None or self._loading_more or self.loading_state.is_loading:
            return False

        self._loading_more = True
        try:
            response = await self._client.get_home_continuation(
                self.continuation, offset=len(self.sections)
            )
        except YTDeckError as e:
            logger.warning("Failed to load more sections: %s", e.message)
            return False
        finally:
            self._loading_more = False

        self.sections.extend(response.sections)
        self.continuation = response.continuation
        return not response.is_empty

    async def refresh(self) -> None:
        self.sections = []
        self.continuation = None
        await self.load()
