"""Parsers for raw YouTube Music API responses.

Every parser is a pure function over untyped JSON and never raises: content
that cannot be found degrades to an empty list or placeholder fields.

Public API:
    parse_playlist_detail, parse_library_playlists, parse_track_item
    parse_watch_playlist, parse_song
    parse_artist_detail, parse_album_detail
    parse_search_results, parse_home_sections, parse_home_continuation
    parse_lrc, parse_lrclib_response, parse_lyrics_browse

Internal (not exported):
    navigation.py - Safe accessors over nested dicts and lists
    helpers.py - Shape-tolerant field extractors shared by the parsers
    items.py - Entity classification of mixed shelf items
"""

from ytmdeck.parsers.album import parse_album_detail
from ytmdeck.parsers.artist import parse_artist_detail
from ytmdeck.parsers.home import parse_home_continuation, parse_home_sections
from ytmdeck.parsers.lyrics import parse_lrc, parse_lrclib_response, parse_lyrics_browse
from ytmdeck.parsers.playlist import (
    parse_library_playlists,
    parse_playlist_detail,
    parse_track_item,
)
from ytmdeck.parsers.search import parse_search_results
from ytmdeck.parsers.song import parse_lyrics_browse_id, parse_song, parse_watch_playlist

__all__ = [
    "parse_album_detail",
    "parse_artist_detail",
    "parse_home_continuation",
    "parse_home_sections",
    "parse_library_playlists",
    "parse_lrc",
    "parse_lrclib_response",
    "parse_lyrics_browse",
    "parse_lyrics_browse_id",
    "parse_playlist_detail",
    "parse_search_results",
    "parse_song",
    "parse_track_item",
    "parse_watch_playlist",
]
