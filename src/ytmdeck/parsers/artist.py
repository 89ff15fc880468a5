"""Artist page parsing."""

from __future__ import annotations

import logging
from typing import Any

from ytmdeck.models.domain import UNKNOWN_TITLE, Album, Artist, ArtistDetail, Song
from ytmdeck.parsers.helpers import best_thumbnail, extract_description, extract_title
from ytmdeck.parsers.items import parse_shelf_item
from ytmdeck.parsers.navigation import JsonDict, as_dict, as_str, dicts, nav, runs_text, walk_dicts
from ytmdeck.parsers.playlist import parse_track_items

logger = logging.getLogger(__name__)

_SECTIONS_PATH = (
    "contents",
    "singleColumnBrowseResultsRenderer",
    "tabs",
    0,
    "tabRenderer",
    "content",
    "sectionListRenderer",
    "contents",
)

_HEADER_KEYS = ("musicImmersiveHeaderRenderer", "musicVisualHeaderRenderer", "musicHeaderRenderer")


def _header(data: Any) -> JsonDict:
    fields: JsonDict = {}
    for key in _HEADER_KEYS:
        renderer = as_dict(nav(data, "header", key))
        if renderer is None:
            continue
        subscribe = nav(renderer, "subscriptionButton", "subscribeButtonRenderer")
        candidates = {
            "name": extract_title(renderer),
            "description": extract_description(renderer),
            "thumbnail_url": best_thumbnail(renderer),
            "channel_id": as_str(nav(subscribe, "channelId")),
            "subscriber_count": runs_text(nav(subscribe, "subscriberCountText"))
            or runs_text(nav(subscribe, "longSubscriberCountText")),
            "is_subscribed": nav(subscribe, "subscribed"),
        }
        for field, value in candidates.items():
            if value is not None and fields.get(field) is None:
                fields[field] = value
    return fields


def _shelf_browse_id(shelf: JsonDict) -> str | None:
    return as_str(nav(shelf, "bottomEndpoint", "browseEndpoint", "browseId")) or as_str(
        nav(shelf, "title", "runs", 0, "navigationEndpoint", "browseEndpoint", "browseId")
    )


def _sections(data: Any) -> list[JsonDict]:
    sections = dicts(nav(data, *_SECTIONS_PATH))
    if sections:
        return sections
    for node, _depth in walk_dicts(nav(data, "contents")):
        if contents := dicts(nav(node, "sectionListRenderer", "contents")):
            return contents
    return []


def parse_artist_detail(data: Any, channel_id: str) -> ArtistDetail:
    """Parse an artist browse page.

    Top songs come from the first song shelf; albums and singles from the
    carousels whose cards link to album pages.
    """
    header = _header(data)
    songs: list[Song] = []
    albums: list[Album] = []
    songs_browse_id: str | None = None
    description = header.get("description")

    for section in _sections(data):
        if shelf := as_dict(section.get("musicShelfRenderer")):
            if not songs:
                songs = parse_track_items(shelf.get("contents"))
                songs_browse_id = _shelf_browse_id(shelf)
        elif carousel := as_dict(section.get("musicCarouselShelfRenderer")):
            albums.extend(
                item
                for entry in dicts(carousel.get("contents"))
                if isinstance(item := parse_shelf_item(entry), Album)
            )
        elif shelf := as_dict(section.get("musicDescriptionShelfRenderer")):
            description = description or runs_text(shelf.get("description"))

    artist = Artist(
        id=channel_id,
        name=header.get("name") or UNKNOWN_TITLE,
        thumbnail_url=header.get("thumbnail_url"),
    )
    logger.debug("Parsed artist %s: %d songs, %d albums", channel_id, len(songs), len(albums))
    return ArtistDetail(
        artist=artist,
        description=description,
        subscriber_count=header.get("subscriber_count"),
        channel_id=header.get("channel_id") or channel_id,
        is_subscribed=header.get("is_subscribed") is True,
        songs=songs,
        albums=albums,
        songs_browse_id=songs_browse_id,
    )
