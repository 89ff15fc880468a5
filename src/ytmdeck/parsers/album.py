"""Album parsing: album cards and album pages."""

from __future__ import annotations

import logging
import re
from typing import Any

from ytmdeck.models.domain import UNKNOWN_TITLE, Album, AlbumDetail, Artist, Song
from ytmdeck.parsers.helpers import (
    artists_from_runs,
    best_thumbnail,
    extract_browse_id,
    extract_description,
    extract_title,
    split_runs,
)
from ytmdeck.parsers.navigation import JsonDict, as_dict, as_str, nav, runs, runs_text
from ytmdeck.parsers.playlist import extract_tracks

logger = logging.getLogger(__name__)

_YEAR = re.compile(r"^\d{4}$")

_RESPONSIVE_HEADER_PATH: tuple[str | int, ...] = (
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
)


def year_from_runs(run_list: list[JsonDict]) -> str | None:
    """Four-digit release year among ``•``-separated subtitle segments."""
    for segment in split_runs(run_list):
        text = "".join(as_str(run.get("text")) or "" for run in segment).strip()
        if _YEAR.match(text):
            return text
    return None


def parse_album_item(renderer: JsonDict) -> Album | None:
    """Album card (``musicTwoRowItemRenderer``) from a carousel or grid."""
    browse_id = extract_browse_id(renderer)
    if not browse_id:
        return None
    subtitle = runs(renderer.get("subtitle"))
    return Album(
        id=browse_id,
        title=extract_title(renderer) or UNKNOWN_TITLE,
        artists=artists_from_runs(subtitle) or None,
        thumbnail_url=best_thumbnail(renderer),
        year=year_from_runs(subtitle),
    )


def _header(data: Any) -> JsonDict:
    """Header fields from the legacy detail header or the responsive header."""
    fields: JsonDict = {}

    if detail := as_dict(nav(data, "header", "musicDetailHeaderRenderer")):
        subtitle = runs(detail.get("subtitle"))
        fields = {
            "title": extract_title(detail),
            "artists": artists_from_runs(subtitle),
            "year": year_from_runs(subtitle),
            "thumbnail_url": best_thumbnail(detail),
            "description": extract_description(detail),
            "duration": runs_text(detail.get("secondSubtitle")),
        }

    if responsive := as_dict(nav(data, *_RESPONSIVE_HEADER_PATH)):
        candidates = {
            "title": extract_title(responsive),
            "artists": artists_from_runs(runs(responsive.get("straplineTextOne"))),
            "year": year_from_runs(runs(responsive.get("subtitle"))),
            "thumbnail_url": best_thumbnail(responsive),
            "description": extract_description(responsive),
            "duration": runs_text(responsive.get("secondSubtitle")),
        }
        for field, value in candidates.items():
            if value and not fields.get(field):
                fields[field] = value

    return fields


def _complete_track(track: Song, album: Album) -> Song:
    """Album rows often omit artists and album; take them from the header."""
    update: dict[str, Any] = {}
    if not track.artists and album.artists:
        update["artists"] = album.artists
    if track.album is None:
        update["album"] = Album(id=album.id, title=album.title)
    return track.model_copy(update=update) if update else track


def parse_album_detail(data: Any, browse_id: str) -> AlbumDetail:
    """Parse an album browse page (``MPRE...`` browse ID)."""
    header = _header(data)
    thumbnail_url = header.get("thumbnail_url")
    artists: list[Artist] = header.get("artists") or []

    tracks = extract_tracks(data, thumbnail_url)
    album = Album(
        id=browse_id,
        title=header.get("title") or UNKNOWN_TITLE,
        artists=artists or None,
        thumbnail_url=thumbnail_url,
        year=header.get("year"),
        track_count=len(tracks),
    )
    tracks = [_complete_track(track, album) for track in tracks]

    logger.debug("Parsed album %s: %d tracks", browse_id, len(tracks))
    return AlbumDetail(
        album=album,
        tracks=tracks,
        duration=header.get("duration"),
        description=header.get("description"),
    )
