"""Enumerations for ytmdeck domain models."""

from enum import StrEnum


class LikeStatus(StrEnum):
    """User rating of a track.

    Values match the upstream API's rating strings, so they can be sent
    as-is to the rating endpoint.
    """

    LIKE = "LIKE"
    DISLIKE = "DISLIKE"
    INDIFFERENT = "INDIFFERENT"


class RepeatMode(StrEnum):
    """Repeat mode for playback."""

    OFF = "off"
    ALL = "all"
    ONE = "one"

    def cycled(self) -> "RepeatMode":
        """Next mode in the off -> all -> one -> off cycle."""
        match self:
            case RepeatMode.OFF:
                return RepeatMode.ALL
            case RepeatMode.ALL:
                return RepeatMode.ONE
            case RepeatMode.ONE:
                return RepeatMode.OFF


class PlaybackStatus(StrEnum):
    """Coarse state of the playback state machine."""

    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    BUFFERING = "buffering"
    ENDED = "ended"
    ERROR = "error"


class LoadingStatus(StrEnum):
    """State of a catalog load (playlist detail, home feed, ...)."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class PageType(StrEnum):
    """Upstream page types found in browse endpoint configs."""

    ARTIST = "MUSIC_PAGE_TYPE_ARTIST"
    ALBUM = "MUSIC_PAGE_TYPE_ALBUM"
    PLAYLIST = "MUSIC_PAGE_TYPE_PLAYLIST"
    USER_CHANNEL = "MUSIC_PAGE_TYPE_USER_CHANNEL"
