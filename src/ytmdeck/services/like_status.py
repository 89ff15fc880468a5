"""Like status cache with optimistic rating updates."""

import logging

from ytmdeck.client import MusicClientProtocol
from ytmdeck.models.domain import Song
from ytmdeck.models.enums import LikeStatus
from ytmdeck.services.optimistic import MappingSlot, perform_optimistic

logger = logging.getLogger(__name__)


class LikeStatusCache:
    """In-memory overlay of track ratings keyed by video ID.

    The cache wins over the ``like_status`` carried on ``Song`` values, so a
    rating made on one screen shows up everywhere the track is listed, even
    in lists fetched before the rating. Construct one per application and
    pass it to whoever needs it.
    """

    def __init__(self, client: MusicClientProtocol) -> None:
        self._client = client
        self._statuses: dict[str, LikeStatus] = {}

    def status(self, video_id: str, song: Song | None = None) -> LikeStatus | None:
        """Cached status, else the status embedded in ``song``, else None."""
        cached = self._statuses.get(video_id)
        if cached is not None:
            return cached
        if song is not None and song.video_id == video_id:
            return song.like_status
        return None

    def status_for_song(self, song: Song) -> LikeStatus | None:
        return self.status(song.video_id, song)

    def is_liked(self, song: Song) -> bool:
        return self.status_for_song(song) == LikeStatus.LIKE

    def is_disliked(self, song: Song) -> bool:
        return self.status_for_song(song) == LikeStatus.DISLIKE

    def set_status(self, video_id: str, status: LikeStatus) -> None:
        self._statuses[video_id] = status

    def clear_cache(self) -> None:
        self._statuses.clear()

    def __contains__(self, video_id: str) -> bool:
        return video_id in self._statuses

    def __len__(self) -> int:
        return len(self._statuses)

    async def _rate(self, video_id: str, status: LikeStatus) -> bool:
        return await perform_optimistic(
            MappingSlot(self._statuses, video_id),
            status,
            lambda: self._client.rate_song(video_id, status),
            description=f"rate {video_id} as {status}",
        )

    async def like(self, song: Song) -> bool:
        """Rate a track as liked. Returns False if the rating was reverted."""
        return await self._rate(song.video_id, LikeStatus.LIKE)

    async def unlike(self, song: Song) -> bool:
        return await self._rate(song.video_id, LikeStatus.INDIFFERENT)

    async def dislike(self, song: Song) -> bool:
        return await self._rate(song.video_id, LikeStatus.DISLIKE)

    async def undislike(self, song: Song) -> bool:
        return await self._rate(song.video_id, LikeStatus.INDIFFERENT)
