"""Resolve user input (URLs or bare IDs) into API identifiers."""

import re
from urllib.parse import parse_qs, urlparse

from ytmdeck.exceptions import InvalidIdentifierError

VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")
_ID_CHARS = re.compile(r"^[A-Za-z0-9_-]+$")

# Path-based video ID patterns (youtu.be, shorts, live, embed)
_PATH_VIDEO_ID_PATTERN = re.compile(r"^/(?:shorts|live|embed|e|v|vi)/([A-Za-z0-9_-]+)")
_BROWSE_PATH_PATTERN = re.compile(r"^/(?:browse|channel)/([A-Za-z0-9_-]+)")

_URL_PREFIXES = ("youtu.be/", "music.youtube.com/", "www.youtube.com/")

_YOUTUBE_HOSTS = {
    "youtube.com",
    "www.youtube.com",
    "m.youtube.com",
    "music.youtube.com",
    "youtube-nocookie.com",
    "www.youtube-nocookie.com",
}

# Maximum URL length to prevent potential abuse (standard browser limit)
MAX_URL_LENGTH = 2048


def _is_url(value: str) -> bool:
    return "://" in value or value.startswith(_URL_PREFIXES)


def _parse(value: str):
    return urlparse(value if "://" in value else f"https://{value}")


def parse_video_id(value: str) -> str | None:
    """Extract a video ID from a watch URL, a short URL or a bare ID.

    Unlike playlist resolution, a ``list=`` parameter does not hide the
    video: ``watch?v=X&list=Y`` resolves to ``X``.

    Returns:
        The video ID, or None if the input does not contain one.
    """
    value = (value or "").strip()
    if not value or len(value) > MAX_URL_LENGTH:
        return None
    if not _is_url(value):
        return value if VIDEO_ID_PATTERN.match(value) else None

    parsed = _parse(value)
    host = parsed.hostname or ""
    path = parsed.path or ""

    if host == "youtu.be" and len(path) > 1:
        video_id = path.split("/")[1]
        return video_id if _ID_CHARS.match(video_id) else None

    if host not in _YOUTUBE_HOSTS:
        return None
    if video_ids := parse_qs(parsed.query).get("v"):
        return video_ids[0] if _ID_CHARS.match(video_ids[0]) else None
    if match := _PATH_VIDEO_ID_PATTERN.match(path):
        return match.group(1)
    return None


def parse_playlist_browse_id(value: str) -> str:
    """Resolve a playlist URL or ID into a ``VL``-prefixed browse ID.

    Examples:
        >>> parse_playlist_browse_id("https://music.youtube.com/playlist?list=PLabc")
        'VLPLabc'
        >>> parse_playlist_browse_id("VLPLabc")
        'VLPLabc'

    Raises:
        InvalidIdentifierError: If no playlist ID can be extracted.
    """
    value = (value or "").strip()
    if not value or len(value) > MAX_URL_LENGTH:
        raise InvalidIdentifierError(f"Could not extract playlist ID from: {value}")

    playlist_id: str | None = None
    if _is_url(value):
        parsed = _parse(value)
        if ids := parse_qs(parsed.query).get("list"):
            playlist_id = ids[0]
        elif match := _BROWSE_PATH_PATTERN.match(parsed.path or ""):
            playlist_id = match.group(1)
    elif _ID_CHARS.match(value):
        playlist_id = value

    if not playlist_id or not _ID_CHARS.match(playlist_id):
        raise InvalidIdentifierError(f"Could not extract playlist ID from: {value}")
    return playlist_id if playlist_id.startswith("VL") else f"VL{playlist_id}"


def parse_browse_id(value: str) -> str:
    """Resolve an artist/album URL (``/channel/``, ``/browse/``) or a bare browse ID.

    Raises:
        InvalidIdentifierError: If no browse ID can be extracted.
    """
    value = (value or "").strip()
    if value and len(value) <= MAX_URL_LENGTH:
        if not _is_url(value):
            if _ID_CHARS.match(value):
                return value
        elif match := _BROWSE_PATH_PATTERN.match(_parse(value).path or ""):
            return match.group(1)
    raise InvalidIdentifierError(f"Could not extract browse ID from: {value}")
