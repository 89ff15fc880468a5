"""Data models for ytmdeck.

Public API:
    Song, Artist, Album, Playlist - Core entities
    PlaylistDetail, ArtistDetail, AlbumDetail - Page aggregates
    HomeSection, HomeResponse, SearchResponse - Feed and search results
    Lyrics, TimedLyricLine - Plain and synced lyrics
    PlaybackState, LoadingState, LoadingError - Observable service state
"""

from ytmdeck.models.domain import (
    Album,
    AlbumDetail,
    Artist,
    ArtistDetail,
    FeedbackTokens,
    HomeResponse,
    HomeSection,
    Playlist,
    PlaylistDetail,
    SearchResponse,
    Song,
)
from ytmdeck.models.enums import LikeStatus, LoadingStatus, PlaybackStatus, RepeatMode
from ytmdeck.models.lyrics import Lyrics, TimedLyricLine
from ytmdeck.models.state import LoadingError, LoadingState, PlaybackState

__all__ = [
    "Album",
    "AlbumDetail",
    "Artist",
    "ArtistDetail",
    "FeedbackTokens",
    "HomeResponse",
    "HomeSection",
    "LikeStatus",
    "LoadingError",
    "LoadingState",
    "LoadingStatus",
    "Lyrics",
    "PlaybackState",
    "PlaybackStatus",
    "Playlist",
    "PlaylistDetail",
    "RepeatMode",
    "SearchResponse",
    "Song",
    "TimedLyricLine",
]
