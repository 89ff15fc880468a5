"""Stateful services for ytmdeck.

Public API:
    PlayerService - Queue-driven playback state machine
    LikeStatusCache - Shared rating overlay with optimistic updates
    LyricsService - LRCLib lyrics with YouTube Music fallback
    PlaylistDetailLoader, SectionFeedLoader - Catalog loads with loading state
    JsonSettingsStore, MemorySettingsStore - Player settings persistence

Protocols (for dependency injection):
    WebPlayerProtocol - Media transport abstraction
    LyricsProviderProtocol - Lyrics source abstraction
    SettingsStoreProtocol - Settings storage abstraction

Internal (not exported):
    perform_optimistic, MappingSlot - Optimistic update helper
    LRCLibProvider - lrclib.net client
"""

from ytmdeck.services.catalog import PlaylistDetailLoader, SectionFeedLoader
from ytmdeck.services.like_status import LikeStatusCache
from ytmdeck.services.lyrics import LyricsProviderProtocol, LyricsService
from ytmdeck.services.player import PlayerService, WebPlayerProtocol
from ytmdeck.services.settings import (
    JsonSettingsStore,
    MemorySettingsStore,
    PlayerSettings,
    SettingsStoreProtocol,
)

__all__ = [
    "JsonSettingsStore",
    "LikeStatusCache",
    "LyricsProviderProtocol",
    "LyricsService",
    "MemorySettingsStore",
    "PlayerService",
    "PlayerSettings",
    "PlaylistDetailLoader",
    "SectionFeedLoader",
    "SettingsStoreProtocol",
    "WebPlayerProtocol",
]
