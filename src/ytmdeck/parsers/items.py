"""Classification of mixed feed items (songs, albums, playlists, artists).

Home, charts, search and artist pages mix entity types in the same shelf.
The type of an item is read from its browse endpoint page type, falling back
to the browse ID prefix.
"""

from __future__ import annotations

from typing import Any

from ytmdeck.models.domain import (
    UNKNOWN_ARTIST_ID,
    UNKNOWN_TITLE,
    Album,
    Artist,
    HomeSectionItem,
    Song,
    is_playlist_browse_id,
)
from ytmdeck.models.enums import PageType
from ytmdeck.parsers.album import parse_album_item, year_from_runs
from ytmdeck.parsers.helpers import (
    ALBUM_BROWSE_PREFIX,
    ARTIST_BROWSE_PREFIX,
    album_from_run,
    artists_from_runs,
    best_thumbnail,
    browse_endpoint,
    extract_browse_id,
    extract_title,
    extract_title_from_flex_columns,
    extract_video_id,
    flex_column_runs,
    page_type,
)
from ytmdeck.parsers.navigation import JsonDict, as_dict, runs
from ytmdeck.parsers.playlist import (
    parse_list_item_playlist,
    parse_track_item,
    parse_two_row_playlist,
)

_PAGE_TYPES = frozenset(kind.value for kind in PageType)


def item_kind(node: Any) -> PageType | None:
    """Entity type a renderer navigates to, or None for playable items."""
    kind = page_type(browse_endpoint(node))
    if kind in _PAGE_TYPES:
        return PageType(kind)

    browse_id = extract_browse_id(node) or ""
    if browse_id.startswith(ARTIST_BROWSE_PREFIX):
        return PageType.ARTIST
    if browse_id.startswith(ALBUM_BROWSE_PREFIX):
        return PageType.ALBUM
    if is_playlist_browse_id(browse_id):
        return PageType.PLAYLIST
    return None


def _artist(node: JsonDict, name: str | None) -> Artist:
    return Artist(
        id=extract_browse_id(node) or UNKNOWN_ARTIST_ID,
        name=name or UNKNOWN_TITLE,
        thumbnail_url=best_thumbnail(node),
    )


def parse_two_row_item(renderer: JsonDict) -> HomeSectionItem | None:
    """Parse a ``musicTwoRowItemRenderer`` card into its entity type."""
    match item_kind(renderer):
        case PageType.ALBUM:
            return parse_album_item(renderer)
        case PageType.PLAYLIST:
            return parse_two_row_playlist(renderer)
        case PageType.ARTIST | PageType.USER_CHANNEL:
            return _artist(renderer, extract_title(renderer))

    video_id = extract_video_id(renderer)
    if not video_id:
        return None
    subtitle = runs(renderer.get("subtitle"))
    return Song(
        video_id=video_id,
        title=extract_title(renderer) or UNKNOWN_TITLE,
        artists=artists_from_runs(subtitle),
        album=next((album for run in subtitle if (album := album_from_run(run))), None),
        thumbnail_url=best_thumbnail(renderer),
    )


def _list_item_album(renderer: JsonDict) -> Album | None:
    browse_id = extract_browse_id(renderer)
    if not browse_id:
        return None
    subtitle = flex_column_runs(renderer, 1)
    return Album(
        id=browse_id,
        title=extract_title_from_flex_columns(renderer) or UNKNOWN_TITLE,
        artists=artists_from_runs(subtitle) or None,
        thumbnail_url=best_thumbnail(renderer),
        year=year_from_runs(subtitle),
    )


def parse_list_item(renderer: JsonDict) -> HomeSectionItem | None:
    """Parse a ``musicResponsiveListItemRenderer`` row into its entity type.

    Rows that navigate to a browse page are albums, playlists or artists;
    everything else with a video ID is a track.
    """
    kind = item_kind(renderer) if as_dict(renderer.get("navigationEndpoint")) else None
    match kind:
        case PageType.ALBUM:
            return _list_item_album(renderer)
        case PageType.PLAYLIST:
            return parse_list_item_playlist(renderer)
        case PageType.ARTIST | PageType.USER_CHANNEL:
            return _artist(renderer, extract_title_from_flex_columns(renderer))
    return parse_track_item({"musicResponsiveListItemRenderer": renderer})


def parse_shelf_item(item: JsonDict) -> HomeSectionItem | None:
    """Parse any supported shelf entry wrapper."""
    if renderer := as_dict(item.get("musicTwoRowItemRenderer")):
        return parse_two_row_item(renderer)
    if renderer := as_dict(item.get("musicResponsiveListItemRenderer")):
        return parse_list_item(renderer)
    return None
