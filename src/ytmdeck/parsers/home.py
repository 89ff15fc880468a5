"""Home, explore and charts feed parsing.

Feeds are a section list of carousels and shelves. The first page comes
from a ``browse`` call; later pages are fetched with the continuation token
of the previous page.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from ytmdeck.models.domain import HomeResponse, HomeSection
from ytmdeck.parsers.items import parse_shelf_item
from ytmdeck.parsers.navigation import JsonDict, as_dict, as_str, dicts, nav, runs_text

logger = logging.getLogger(__name__)

_SECTION_LIST_PATH = (
    "contents",
    "singleColumnBrowseResultsRenderer",
    "tabs",
    0,
    "tabRenderer",
    "content",
    "sectionListRenderer",
)

_SHELF_KEYS = (
    "musicCarouselShelfRenderer",
    "musicImmersiveCarouselShelfRenderer",
    "musicShelfRenderer",
    "gridRenderer",
)

_SLUG = re.compile(r"[^a-z0-9]+")

_HEADER_KEYS = (
    "musicCarouselShelfBasicHeaderRenderer",
    "musicImmersiveCarouselShelfBasicHeaderRenderer",
    "gridHeaderRenderer",
)


def _shelf_title(shelf: JsonDict) -> str | None:
    for key in _HEADER_KEYS:
        if title := runs_text(nav(shelf, "header", key, "title")):
            return title
    return runs_text(shelf.get("title"))


def _section_id(title: str, position: int) -> str:
    slug = _SLUG.sub("-", title.lower()).strip("-") or "section"
    return f"{slug}-{position}"


def parse_section(section: JsonDict, position: int, is_chart: bool = False) -> HomeSection | None:
    """Parse one feed section; None for unsupported or empty sections."""
    for key in _SHELF_KEYS:
        shelf = as_dict(section.get(key))
        if shelf is None:
            continue
        entries = dicts(shelf.get("contents")) or dicts(shelf.get("items"))
        items = [item for entry in entries if (item := parse_shelf_item(entry))]
        if not items:
            return None
        title = _shelf_title(shelf) or ""
        return HomeSection(
            id=_section_id(title, position),
            title=title,
            items=items,
            is_chart=is_chart,
        )
    return None


def _continuation_token(node: Any) -> str | None:
    return as_str(nav(node, "continuations", 0, "nextContinuationData", "continuation"))


def _parse_sections(sections: list[JsonDict], is_chart: bool, offset: int = 0) -> list[HomeSection]:
    return [
        parsed
        for position, section in enumerate(sections, start=offset)
        if (parsed := parse_section(section, position, is_chart))
    ]


def parse_home_sections(data: Any, is_chart: bool = False) -> HomeResponse:
    """Parse the first page of a feed.

    Args:
        data: Raw ``browse`` response (``FEmusic_home``, ``FEmusic_charts``...).
        is_chart: Mark the sections as chart sections.
    """
    section_list = as_dict(nav(data, *_SECTION_LIST_PATH)) or {}
    sections = _parse_sections(dicts(section_list.get("contents")), is_chart)
    token = _continuation_token(section_list)
    logger.debug("Parsed %d feed sections (continuation: %s)", len(sections), token is not None)
    return HomeResponse(sections=sections, continuation=token)


def parse_home_continuation(data: Any, is_chart: bool = False, offset: int = 0) -> HomeResponse:
    """Parse a continuation page of a feed.

    Supports the legacy ``continuationContents`` shape and the newer
    ``appendContinuationItemsAction`` shape.

    Args:
        data: Raw continuation response.
        is_chart: Mark the sections as chart sections.
        offset: Number of sections already loaded, keeps section IDs unique
            across pages.
    """
    legacy = as_dict(nav(data, "continuationContents", "sectionListContinuation"))
    if legacy is not None:
        sections = _parse_sections(dicts(legacy.get("contents")), is_chart, offset)
        return HomeResponse(sections=sections, continuation=_continuation_token(legacy))

    action = nav(data, "onResponseReceivedActions", 0, "appendContinuationItemsAction")
    items = dicts(nav(action, "continuationItems"))
    token = next(
        (
            as_str(nav(item, "continuationEndpoint", "continuationCommand", "token"))
            for entry in items
            if (item := as_dict(entry.get("continuationItemRenderer")))
        ),
        None,
    )
    sections = _parse_sections(items, is_chart, offset)
    return HomeResponse(sections=sections, continuation=token)
