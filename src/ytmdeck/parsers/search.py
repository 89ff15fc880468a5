"""Search results parsing."""

from __future__ import annotations

import logging
from typing import Any

from ytmdeck.models.domain import Album, Artist, HomeSectionItem, Playlist, SearchResponse, Song
from ytmdeck.parsers.items import parse_shelf_item, parse_two_row_item
from ytmdeck.parsers.navigation import JsonDict, as_dict, dicts, nav, walk_dicts

logger = logging.getLogger(__name__)

_SECTIONS_PATH = (
    "contents",
    "tabbedSearchResultsRenderer",
    "tabs",
    0,
    "tabRenderer",
    "content",
    "sectionListRenderer",
    "contents",
)


def _sections(data: Any) -> list[JsonDict]:
    sections = dicts(nav(data, *_SECTIONS_PATH))
    if sections:
        return sections
    # Filtered searches and continuations drop the tabbed wrapper
    for node, _depth in walk_dicts(data):
        if contents := dicts(nav(node, "sectionListRenderer", "contents")):
            return contents
    return []


def _section_items(section: JsonDict) -> list[HomeSectionItem]:
    items: list[HomeSectionItem] = []

    if card := as_dict(section.get("musicCardShelfRenderer")):
        if top := parse_two_row_item(card):
            items.append(top)
        items.extend(
            item for entry in dicts(card.get("contents")) if (item := parse_shelf_item(entry))
        )

    shelves = [as_dict(section.get("musicShelfRenderer"))]
    shelves += [
        as_dict(entry.get("musicShelfRenderer"))
        for entry in dicts(nav(section, "itemSectionRenderer", "contents"))
    ]
    for shelf in shelves:
        if shelf is None:
            continue
        items.extend(
            item for entry in dicts(shelf.get("contents")) if (item := parse_shelf_item(entry))
        )
    return items


def parse_search_results(data: Any, limit: int | None = None) -> SearchResponse:
    """Parse a search response into results grouped by entity type.

    Results keep upstream order within each group. Duplicates (the top
    result usually reappears in its shelf) are dropped by ID.

    Args:
        data: Raw ``search`` response.
        limit: Maximum results kept per group, or None for all.
    """
    groups: dict[type, list[Any]] = {Song: [], Album: [], Artist: [], Playlist: []}
    seen: set[tuple[type, str]] = set()

    for section in _sections(data):
        for item in _section_items(section):
            key = (type(item), item.id)
            bucket = groups[type(item)]
            if key in seen or (limit is not None and len(bucket) >= limit):
                continue
            seen.add(key)
            bucket.append(item)

    response = SearchResponse(
        songs=groups[Song],
        albums=groups[Album],
        artists=groups[Artist],
        playlists=groups[Playlist],
    )
    logger.debug(
        "Parsed search: %d songs, %d albums, %d artists, %d playlists",
        len(response.songs),
        len(response.albums),
        len(response.artists),
        len(response.playlists),
    )
    return response
