"""Shape-tolerant extractors shared by all response parsers.

Every function here is pure and total: a missing field is data, not an
error, so absence is reported as None or an empty list.
"""

from __future__ import annotations

import re
from typing import Any

from ytmdeck.models.domain import UNKNOWN_ARTIST_ID, Album, Artist, FeedbackTokens
from ytmdeck.models.enums import LikeStatus, PageType
from ytmdeck.parsers.navigation import JsonDict, as_dict, as_str, dicts, nav, runs, runs_text

ARTIST_BROWSE_PREFIX = "UC"
ALBUM_BROWSE_PREFIX = "MPRE"

_DURATION_PATTERN = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{2})$")

# Keys that may hold the title-bearing text node of a renderer
_TITLE_KEYS = ("title", "headline")

# Thumbnail containers, most specific first
_THUMBNAIL_PATHS: tuple[tuple[str, ...], ...] = (
    ("thumbnail", "musicThumbnailRenderer", "thumbnail", "thumbnails"),
    ("thumbnail", "croppedSquareThumbnailRenderer", "thumbnail", "thumbnails"),
    ("thumbnailRenderer", "musicThumbnailRenderer", "thumbnail", "thumbnails"),
    ("thumbnailRenderer", "croppedSquareThumbnailRenderer", "thumbnail", "thumbnails"),
    ("foregroundThumbnail", "musicThumbnailRenderer", "thumbnail", "thumbnails"),
    ("thumbnail", "thumbnails"),
    ("thumbnails",),
)

# Run texts in the subtitle column that describe the item type, not an artist
_TYPE_LABELS = frozenset(
    {"Song", "Video", "Album", "Single", "EP", "Playlist", "Artist", "Episode"}
)


# ============================================================================
# TEXT
# ============================================================================


def extract_title(node: Any) -> str | None:
    """Title text of a renderer, concatenating styled runs."""
    for key in _TITLE_KEYS:
        if (text := runs_text(nav(node, key))) is not None:
            return text
    return None


def extract_subtitle(node: Any) -> str | None:
    """Full subtitle text of a renderer (e.g. ``"Playlist • Author"``)."""
    return runs_text(nav(node, "subtitle"))


def extract_description(node: Any) -> str | None:
    """Description text, either inline or inside a description shelf."""
    return runs_text(nav(node, "description")) or runs_text(
        nav(node, "description", "musicDescriptionShelfRenderer", "description")
    )


def split_runs(run_list: list[JsonDict]) -> list[list[JsonDict]]:
    """Split runs into segments separated by ``•`` runs."""
    segments: list[list[JsonDict]] = [[]]
    for run in run_list:
        if (as_str(run.get("text")) or "").strip() == "•":
            segments.append([])
        else:
            segments[-1].append(run)
    return [segment for segment in segments if segment]


# ============================================================================
# THUMBNAILS
# ============================================================================


def _normalize_url(url: str) -> str:
    return f"https:{url}" if url.startswith("//") else url


def extract_thumbnails(node: Any) -> list[str]:
    """Thumbnail URLs ordered ascending by resolution.

    The caller takes the last entry for the highest resolution. Entries are
    sorted by width when every entry carries one; otherwise upstream order
    (already ascending in practice) is kept.
    """
    for path in _THUMBNAIL_PATHS:
        entries = [entry for entry in dicts(nav(node, *path)) if as_str(entry.get("url"))]
        if not entries:
            continue
        if all(isinstance(entry.get("width"), int) for entry in entries):
            entries = sorted(entries, key=lambda entry: entry["width"])
        return [_normalize_url(entry["url"]) for entry in entries]
    return []


def best_thumbnail(node: Any) -> str | None:
    """Highest resolution thumbnail URL (last of the ascending list)."""
    thumbnails = extract_thumbnails(node)
    return thumbnails[-1] if thumbnails else None


# ============================================================================
# IDENTIFIERS
# ============================================================================


def extract_video_id(node: Any) -> str | None:
    """Video ID from the play/watch navigation endpoints of a renderer."""
    candidates = (
        nav(node, "playlistItemData", "videoId"),
        nav(
            node,
            "overlay",
            "musicItemThumbnailOverlayRenderer",
            "content",
            "musicPlayButtonRenderer",
            "playNavigationEndpoint",
            "watchEndpoint",
            "videoId",
        ),
        nav(node, "navigationEndpoint", "watchEndpoint", "videoId"),
        nav(node, "onTap", "watchEndpoint", "videoId"),
        nav(
            node,
            "flexColumns",
            0,
            "musicResponsiveListItemFlexColumnRenderer",
            "text",
            "runs",
            0,
            "navigationEndpoint",
            "watchEndpoint",
            "videoId",
        ),
        nav(node, "title", "runs", 0, "navigationEndpoint", "watchEndpoint", "videoId"),
        nav(node, "videoId"),
    )
    return next((value for value in candidates if as_str(value)), None)


def browse_endpoint(node: Any) -> JsonDict | None:
    """The browse endpoint of a renderer or of its title run."""
    return nav(node, "navigationEndpoint", "browseEndpoint") or nav(
        node, "title", "runs", 0, "navigationEndpoint", "browseEndpoint"
    )


def extract_browse_id(node: Any) -> str | None:
    """Browse ID a renderer navigates to, if any."""
    return as_str(nav(browse_endpoint(node), "browseId"))


def page_type(endpoint: Any) -> str | None:
    """Upstream page type of a browse endpoint."""
    return as_str(
        nav(
            endpoint,
            "browseEndpointContextSupportedConfigs",
            "browseEndpointContextMusicConfig",
            "pageType",
        )
    )


def _run_browse_endpoint(run: JsonDict) -> JsonDict | None:
    return nav(run, "navigationEndpoint", "browseEndpoint")


def is_artist_run(run: JsonDict) -> bool:
    endpoint = _run_browse_endpoint(run)
    browse_id = as_str(nav(endpoint, "browseId")) or ""
    kind = page_type(endpoint)
    return browse_id.startswith(ARTIST_BROWSE_PREFIX) or kind in (
        PageType.ARTIST,
        PageType.USER_CHANNEL,
    )


def is_album_run(run: JsonDict) -> bool:
    endpoint = _run_browse_endpoint(run)
    browse_id = as_str(nav(endpoint, "browseId")) or ""
    return browse_id.startswith(ALBUM_BROWSE_PREFIX) or page_type(endpoint) == PageType.ALBUM


def album_from_run(run: JsonDict) -> Album | None:
    """Album reference from a run linking to an album page."""
    browse_id = as_str(nav(_run_browse_endpoint(run), "browseId"))
    title = as_str(run.get("text"))
    if not (browse_id and title and is_album_run(run)):
        return None
    return Album(id=browse_id, title=title)


# ============================================================================
# MENU
# ============================================================================

# Icons shown on the library toggle while the track is already saved
_IN_LIBRARY_ICONS = frozenset({"LIBRARY_SAVED", "LIBRARY_REMOVE"})
_NOT_IN_LIBRARY_ICONS = frozenset({"LIBRARY_ADD"})

_LIKE_VALUES = frozenset(status.value for status in LikeStatus)


def extract_like_status(node: Any) -> LikeStatus | None:
    """Rating from a ``likeStatus`` field or the menu's like button."""
    candidates = [nav(node, "likeStatus")]
    candidates += [
        nav(button, "likeButtonRenderer", "likeStatus")
        for button in dicts(nav(node, "menu", "menuRenderer", "topLevelButtons"))
    ]
    for value in candidates:
        if isinstance(value, str) and value in _LIKE_VALUES:
            return LikeStatus(value)
    return None


def _feedback_token(endpoint: Any) -> str | None:
    return as_str(nav(endpoint, "feedbackEndpoint", "feedbackToken"))


def extract_library_state(node: Any) -> tuple[bool | None, FeedbackTokens | None]:
    """Library membership and feedback tokens from a track's menu.

    The toggle's default endpoint acts on the current state and the toggled
    endpoint undoes it, so which token adds and which removes depends on the
    icon currently shown.

    Returns:
        ``(is_in_library, tokens)``; both None when the menu has no toggle.
    """
    for item in dicts(nav(node, "menu", "menuRenderer", "items")):
        toggle = as_dict(item.get("toggleMenuServiceItemRenderer"))
        if toggle is None:
            continue
        icon = as_str(nav(toggle, "defaultIcon", "iconType"))
        default = _feedback_token(toggle.get("defaultServiceEndpoint"))
        toggled = _feedback_token(toggle.get("toggledServiceEndpoint"))
        if icon in _NOT_IN_LIBRARY_ICONS:
            return False, FeedbackTokens(add=default, remove=toggled)
        if icon in _IN_LIBRARY_ICONS:
            return True, FeedbackTokens(add=toggled, remove=default)
    return None, None


# ============================================================================
# DURATIONS
# ============================================================================


def parse_duration_text(text: str | None) -> float | None:
    """Parse ``m:ss`` or ``h:mm:ss`` into seconds; None if not a duration."""
    if not text:
        return None
    match = _DURATION_PATTERN.match(text.strip())
    if not match:
        return None
    hours, minutes, seconds = match.groups()
    return float(int(hours or 0) * 3600 + int(minutes) * 60 + int(seconds))


# ============================================================================
# ARTISTS
# ============================================================================


def artists_from_runs(run_list: list[JsonDict]) -> list[Artist]:
    """Artists linked from a list of runs.

    Falls back to the first unlinked text segment (an artist name without a
    channel page) when no run links to an artist.
    """
    linked = [
        Artist(
            id=as_str(nav(_run_browse_endpoint(run), "browseId")) or UNKNOWN_ARTIST_ID,
            name=run["text"],
        )
        for run in run_list
        if is_artist_run(run) and as_str(run.get("text"))
    ]
    if linked:
        return linked

    for segment in split_runs(run_list):
        text = "".join(as_str(run.get("text")) or "" for run in segment).strip()
        if not text or text in _TYPE_LABELS or parse_duration_text(text) is not None:
            continue
        if any(is_album_run(run) for run in segment):
            continue
        return [Artist(name=text)]
    return []


# ============================================================================
# FLEX COLUMNS
# ============================================================================


def flex_column_runs(node: Any, index: int) -> list[JsonDict]:
    """Runs of the flex column at ``index``."""
    return runs(
        nav(node, "flexColumns", index, "musicResponsiveListItemFlexColumnRenderer", "text")
    )


def _flex_column_count(node: Any) -> int:
    return len(dicts(nav(node, "flexColumns")))


def extract_title_from_flex_columns(node: Any) -> str | None:
    """Title text, always the first flex column."""
    return runs_text({"runs": flex_column_runs(node, 0)})


def extract_subtitle_from_flex_columns(node: Any) -> str | None:
    """Text of the second flex column (artist/author line)."""
    return runs_text({"runs": flex_column_runs(node, 1)})


def extract_artists_from_flex_columns(node: Any) -> list[Artist]:
    """Artists found in the non-title flex columns.

    Linked artist runs anywhere after the title column win; otherwise the
    second column's first plain segment is used.
    """
    trailing = [
        run for index in range(1, _flex_column_count(node)) for run in flex_column_runs(node, index)
    ]
    linked = [run for run in trailing if is_artist_run(run)]
    if linked:
        return artists_from_runs(linked)
    return artists_from_runs(flex_column_runs(node, 1))


def extract_album_from_flex_columns(node: Any) -> Album | None:
    """Album linked from any non-title flex column."""
    for index in range(1, _flex_column_count(node)):
        for run in flex_column_runs(node, index):
            if album := album_from_run(run):
                return album
    return None


def extract_duration_from_flex_columns(node: Any) -> float | None:
    """Duration in seconds from fixed columns, then any flex column run."""
    texts = [
        runs_text(nav(column, "musicResponsiveListItemFixedColumnRenderer", "text"))
        for column in dicts(nav(node, "fixedColumns"))
    ]
    texts += [
        as_str(run.get("text"))
        for index in range(1, _flex_column_count(node))
        for run in flex_column_runs(node, index)
    ]
    for text in texts:
        if (seconds := parse_duration_text(text)) is not None:
            return seconds
    return None
