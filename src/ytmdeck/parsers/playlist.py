"""Playlist parsing: library listings, playlist pages and track rows.

Playlist pages come in several header shapes depending on the surface
(owned vs. public playlists, mixes, podcasts). Shapes are applied in a fixed
order; later shapes only fill fields the earlier ones left empty.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ytmdeck.models.domain import (
    UNKNOWN_PLAYLIST_TITLE,
    UNKNOWN_TITLE,
    Playlist,
    PlaylistDetail,
    Song,
    is_playlist_browse_id,
)
from ytmdeck.parsers.helpers import (
    best_thumbnail,
    extract_album_from_flex_columns,
    extract_artists_from_flex_columns,
    extract_browse_id,
    extract_description,
    extract_duration_from_flex_columns,
    extract_like_status,
    extract_subtitle,
    extract_subtitle_from_flex_columns,
    extract_title,
    extract_title_from_flex_columns,
    extract_video_id,
)
from ytmdeck.parsers.navigation import (
    MAX_SEARCH_DEPTH,
    JsonDict,
    as_dict,
    as_str,
    dicts,
    nav,
    runs,
    runs_text,
)

logger = logging.getLogger(__name__)

_SECTION_LIST_PATHS: tuple[tuple[str | int, ...], ...] = (
    (
        "contents",
        "singleColumnBrowseResultsRenderer",
        "tabs",
        0,
        "tabRenderer",
        "content",
        "sectionListRenderer",
        "contents",
    ),
    (
        "contents",
        "twoColumnBrowseResultsRenderer",
        "secondaryContents",
        "sectionListRenderer",
        "contents",
    ),
    (
        "contents",
        "twoColumnBrowseResultsRenderer",
        "tabs",
        0,
        "tabRenderer",
        "content",
        "sectionListRenderer",
        "contents",
    ),
)

_SHELF_KEYS = ("musicShelfRenderer", "musicPlaylistShelfRenderer")


# ============================================================================
# TRACKS
# ============================================================================


def parse_track_item(item: Any, fallback_thumbnail_url: str | None = None) -> Song | None:
    """Parse a track row (``musicResponsiveListItemRenderer``).

    Args:
        item: Shelf entry wrapping the renderer.
        fallback_thumbnail_url: Used when the row has no artwork of its own
            (album and some playlist pages only carry header artwork).

    Returns:
        The song, or None when the entry is not a track row or has no
        resolvable video ID.
    """
    renderer = as_dict(nav(item, "musicResponsiveListItemRenderer"))
    if renderer is None:
        return None

    video_id = extract_video_id(renderer)
    if not video_id:
        return None

    return Song(
        video_id=video_id,
        title=extract_title_from_flex_columns(renderer) or UNKNOWN_TITLE,
        artists=extract_artists_from_flex_columns(renderer),
        album=extract_album_from_flex_columns(renderer),
        duration=extract_duration_from_flex_columns(renderer),
        thumbnail_url=best_thumbnail(renderer) or fallback_thumbnail_url,
        like_status=extract_like_status(renderer),
    )


def parse_track_items(items: Any, fallback_thumbnail_url: str | None = None) -> list[Song]:
    """Parse every track row in a list, skipping entries that are not tracks."""
    return [
        song
        for item in dicts(items)
        if (song := parse_track_item(item, fallback_thumbnail_url)) is not None
    ]


def _tracks_from_sections(sections: list[JsonDict], fallback: str | None) -> list[Song]:
    tracks: list[Song] = []
    for section in sections:
        for key in _SHELF_KEYS:
            tracks.extend(parse_track_items(nav(section, key, "contents"), fallback))
    return tracks


def _find_tracks(node: JsonDict, depth: int, fallback: str | None) -> list[Song]:
    if depth >= MAX_SEARCH_DEPTH:
        return []

    tracks = parse_track_items(node.get("contents"), fallback)
    if tracks:
        return tracks

    for value in node.values():
        children = [value] if isinstance(value, dict) else dicts(value)
        for child in children:
            tracks = _find_tracks(child, depth + 1, fallback)
            if tracks:
                return tracks
    return []


def extract_tracks(data: Any, fallback_thumbnail_url: str | None = None) -> list[Song]:
    """Track rows of a browse page (playlist or album).

    Known section-list locations are tried in order and the first one
    yielding tracks wins. If none does, the ``contents`` tree is searched
    recursively for the first list of parseable track rows.
    """
    for path in _SECTION_LIST_PATHS:
        tracks = _tracks_from_sections(dicts(nav(data, *path)), fallback_thumbnail_url)
        if tracks:
            return tracks

    contents = as_dict(nav(data, "contents")) or {}
    for value in contents.values():
        if isinstance(value, dict):
            tracks = _find_tracks(value, 0, fallback_thumbnail_url)
            if tracks:
                logger.debug("Found %d tracks via recursive search", len(tracks))
                return tracks
    return []


# ============================================================================
# HEADER
# ============================================================================


def _first_run_text(node: Any) -> str | None:
    return next((text for run in runs(node) if (text := as_str(run.get("text")))), None)


def _detail_header(renderer: JsonDict) -> JsonDict:
    return {
        "title": extract_title(renderer),
        "description": runs_text(nav(renderer, "description")),
        "thumbnail_url": best_thumbnail(renderer),
        "author": _first_run_text(nav(renderer, "subtitle")),
        "duration": runs_text(nav(renderer, "secondSubtitle")),
    }


def _immersive_header(renderer: JsonDict) -> JsonDict:
    return {
        "title": extract_title(renderer),
        "thumbnail_url": best_thumbnail(renderer),
        "description": runs_text(nav(renderer, "description")),
        "author": _first_run_text(nav(renderer, "subtitle")),
    }


def _visual_header(renderer: JsonDict) -> JsonDict:
    return {"title": extract_title(renderer), "thumbnail_url": best_thumbnail(renderer)}


def _editable_header(renderer: JsonDict) -> JsonDict:
    return {
        "title": extract_title(renderer),
        "thumbnail_url": best_thumbnail(renderer),
        "author": _first_run_text(nav(renderer, "subtitle")),
    }


def _responsive_header(renderer: JsonDict) -> JsonDict:
    return {
        "title": extract_title(renderer),
        "description": extract_description(renderer),
        "thumbnail_url": best_thumbnail(renderer),
        "author": runs_text(nav(renderer, "straplineTextOne")),
        "duration": runs_text(nav(renderer, "secondSubtitle")),
    }


# (path to renderer, field extractor), in order of preference
_HEADER_SHAPES: tuple[tuple[tuple[str | int, ...], Callable[[JsonDict], JsonDict]], ...] = (
    (("header", "musicDetailHeaderRenderer"), _detail_header),
    (("header", "musicImmersiveHeaderRenderer"), _immersive_header),
    (("header", "musicVisualHeaderRenderer"), _visual_header),
    (
        (
            "header",
            "musicEditablePlaylistDetailHeaderRenderer",
            "header",
            "musicDetailHeaderRenderer",
        ),
        _editable_header,
    ),
    (
        (
            "contents",
            "twoColumnBrowseResultsRenderer",
            "tabs",
            0,
            "tabRenderer",
            "content",
            "sectionListRenderer",
            "contents",
            0,
            "musicResponsiveHeaderRenderer",
        ),
        _responsive_header,
    ),
)


def parse_header_fields(data: Any) -> JsonDict:
    """Merge header fields across all known header shapes.

    A later shape only fills fields that earlier shapes left empty.
    """
    header: JsonDict = {}
    for path, extract in _HEADER_SHAPES:
        renderer = as_dict(nav(data, *path))
        if renderer is None:
            continue
        for field, value in extract(renderer).items():
            if value is not None and header.get(field) is None:
                header[field] = value
    return header


# ============================================================================
# PLAYLISTS
# ============================================================================


def parse_playlist_detail(data: Any, playlist_id: str) -> PlaylistDetail:
    """Parse a playlist browse page.

    Never raises: a page without a recognizable header yields the
    ``"Unknown Playlist"`` placeholder title, and a page without track rows
    yields an empty track list.
    """
    header = parse_header_fields(data)
    thumbnail_url = header.get("thumbnail_url")
    tracks = extract_tracks(data, thumbnail_url)

    playlist = Playlist(
        id=playlist_id,
        title=header.get("title") or UNKNOWN_PLAYLIST_TITLE,
        description=header.get("description"),
        thumbnail_url=thumbnail_url,
        track_count=len(tracks),
        author=header.get("author"),
    )
    logger.debug("Parsed playlist %s: %d tracks", playlist_id, len(tracks))
    return PlaylistDetail(playlist=playlist, tracks=tracks, duration=header.get("duration"))


def parse_two_row_playlist(renderer: JsonDict) -> Playlist | None:
    """Playlist card (``musicTwoRowItemRenderer``) from a grid or carousel."""
    browse_id = as_str(nav(renderer, "navigationEndpoint", "browseEndpoint", "browseId"))
    if not browse_id:
        return None
    return Playlist(
        id=browse_id,
        title=extract_title(renderer) or UNKNOWN_PLAYLIST_TITLE,
        thumbnail_url=best_thumbnail(renderer),
        author=extract_subtitle(renderer),
    )


def parse_list_item_playlist(renderer: JsonDict) -> Playlist | None:
    """Playlist row (``musicResponsiveListItemRenderer``); VL/PL browse IDs only."""
    browse_id = extract_browse_id(renderer)
    if not is_playlist_browse_id(browse_id):
        return None
    return Playlist(
        id=browse_id,
        title=extract_title_from_flex_columns(renderer) or UNKNOWN_PLAYLIST_TITLE,
        thumbnail_url=best_thumbnail(renderer),
        author=extract_subtitle_from_flex_columns(renderer),
    )


def parse_library_playlists(data: Any) -> list[Playlist]:
    """Parse the library playlists page.

    Handles the grid shape (``gridRenderer`` of two-row cards) and the list
    shape (``itemSectionRenderer`` > ``musicShelfRenderer`` rows).
    """
    sections = dicts(nav(data, *_SECTION_LIST_PATHS[0]))
    playlists: list[Playlist] = []

    for section in sections:
        for item in dicts(nav(section, "gridRenderer", "items")):
            renderer = as_dict(item.get("musicTwoRowItemRenderer"))
            if renderer and (playlist := parse_two_row_playlist(renderer)):
                playlists.append(playlist)

        for entry in dicts(nav(section, "itemSectionRenderer", "contents")):
            for item in dicts(nav(entry, "musicShelfRenderer", "contents")):
                renderer = as_dict(item.get("musicResponsiveListItemRenderer"))
                if renderer and (playlist := parse_list_item_playlist(renderer)):
                    playlists.append(playlist)

    logger.debug("Parsed %d library playlists", len(playlists))
    return playlists
