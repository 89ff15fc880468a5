"""Watch-next parsing: radio queues, single songs and the lyrics tab.

The ``next`` endpoint answers with a queue panel of
``playlistPanelVideoRenderer`` items. The first item is the requested track,
which carries the richest per-track data (rating, library state, feedback
tokens), so a single song is parsed from it too.
"""

from __future__ import annotations

import logging
from typing import Any

from ytmdeck.models.domain import UNKNOWN_TITLE, Artist, Song
from ytmdeck.parsers.helpers import (
    album_from_run,
    artists_from_runs,
    best_thumbnail,
    extract_library_state,
    extract_like_status,
    parse_duration_text,
)
from ytmdeck.parsers.navigation import (
    JsonDict,
    as_dict,
    as_str,
    dicts,
    nav,
    runs,
    runs_text,
    walk_dicts,
)

logger = logging.getLogger(__name__)

LYRICS_BROWSE_PREFIX = "MPLY"

_WATCH_TABS_PATH = (
    "contents",
    "singleColumnMusicWatchNextResultsRenderer",
    "tabbedRenderer",
    "watchNextTabbedResultsRenderer",
    "tabs",
)

_PANEL_PATH = (
    *_WATCH_TABS_PATH,
    0,
    "tabRenderer",
    "content",
    "musicQueueRenderer",
    "content",
    "playlistPanelRenderer",
    "contents",
)


def _panel_renderer(item: JsonDict) -> JsonDict | None:
    if renderer := as_dict(item.get("playlistPanelVideoRenderer")):
        return renderer
    wrapped = nav(item, "playlistPanelVideoWrapperRenderer", "primaryRenderer")
    return as_dict(nav(wrapped, "playlistPanelVideoRenderer"))


def _panel_items(data: Any) -> list[JsonDict]:
    items = dicts(nav(data, *_PANEL_PATH))
    if items:
        return items
    for node, _depth in walk_dicts(data):
        contents = dicts(nav(node, "playlistPanelRenderer", "contents"))
        if contents:
            logger.debug("Found queue panel via recursive search")
            return contents
    return []


def parse_panel_video(renderer: JsonDict) -> Song | None:
    """Parse one ``playlistPanelVideoRenderer`` into a song."""
    video_id = as_str(renderer.get("videoId")) or as_str(
        nav(renderer, "navigationEndpoint", "watchEndpoint", "videoId")
    )
    if not video_id:
        return None

    byline = runs(renderer.get("longBylineText")) or runs(renderer.get("shortBylineText"))
    album = next((album for run in byline if (album := album_from_run(run))), None)
    is_in_library, tokens = extract_library_state(renderer)

    return Song(
        video_id=video_id,
        title=runs_text(renderer.get("title")) or UNKNOWN_TITLE,
        artists=artists_from_runs(byline),
        album=album,
        duration=parse_duration_text(runs_text(renderer.get("lengthText"))),
        thumbnail_url=best_thumbnail(renderer),
        like_status=extract_like_status(renderer),
        is_in_library=is_in_library,
        feedback_tokens=tokens,
    )


def parse_watch_playlist(data: Any) -> list[Song]:
    """Parse the queue panel of a ``next`` response (radio or watch queue)."""
    songs = [
        song
        for item in _panel_items(data)
        if (renderer := _panel_renderer(item)) and (song := parse_panel_video(renderer))
    ]
    logger.debug("Parsed %d queue items", len(songs))
    return songs


def _song_from_player(video_id: str, player_data: Any) -> Song | None:
    details = as_dict(nav(player_data, "videoDetails"))
    if details is None or details.get("videoId") not in (None, video_id):
        return None

    author = as_str(details.get("author"))
    channel_id = as_str(details.get("channelId"))
    artists: list[Artist] = []
    if author:
        artists = [Artist(id=channel_id, name=author) if channel_id else Artist(name=author)]
    try:
        duration = float(details["lengthSeconds"])
    except (KeyError, TypeError, ValueError):
        duration = None

    return Song(
        video_id=video_id,
        title=as_str(details.get("title")) or UNKNOWN_TITLE,
        artists=artists,
        duration=duration,
        thumbnail_url=best_thumbnail(details),
    )


def parse_song(video_id: str, next_data: Any, player_data: Any = None) -> Song | None:
    """Parse a single song.

    The queue panel entry for ``video_id`` is preferred. Player
    ``videoDetails`` fill what the panel lacks, or stand in for it entirely
    when the panel is missing.

    Returns:
        The song, or None when neither response describes it.
    """
    panel_songs = parse_watch_playlist(next_data) if next_data is not None else []
    panel_song = next((song for song in panel_songs if song.video_id == video_id), None)
    player_song = _song_from_player(video_id, player_data) if player_data is not None else None

    if panel_song and player_song:
        return player_song.merged_with(panel_song)
    return panel_song or player_song


def parse_lyrics_browse_id(next_data: Any) -> str | None:
    """Browse ID of the lyrics tab of a ``next`` response, if the track has lyrics."""
    for tab in dicts(nav(next_data, *_WATCH_TABS_PATH)):
        browse_id = as_str(nav(tab, "tabRenderer", "endpoint", "browseEndpoint", "browseId"))
        if browse_id and browse_id.startswith(LYRICS_BROWSE_PREFIX):
            return browse_id
    return None
