"""Lyrics parsing: LRC timing text, LRCLib payloads and the lyrics browse page."""

from __future__ import annotations

import re
from typing import Any

from ytmdeck.models.lyrics import Lyrics, TimedLyricLine
from ytmdeck.parsers.navigation import as_str, nav, runs_text

LRCLIB_SOURCE = "LRClib"

# [mm:ss] or [mm:ss.f] .. [mm:ss.fff], lyric text after the tag
_LRC_LINE = re.compile(r"\[(\d{1,2}):(\d{2})(?:\.(\d{1,3}))?\]\s*(.*)")


def _fraction(digits: str | None) -> float:
    if not digits:
        return 0.0
    return int(digits) / 10 ** len(digits)


def parse_lrc(text: str) -> list[TimedLyricLine]:
    """Parse LRC text into timed lines sorted by start time.

    Lines without a timestamp tag are skipped. ``index`` is the line's
    position in the input, not in the sorted output. Text after the tag is
    stripped and may be empty (an instrumental gap).

    Example:
        >>> parse_lrc("[00:01.50]Hello\\n[00:03.00]World")
        [TimedLyricLine(index=0, text='Hello', start_time=1.5), ...]
    """
    lines: list[TimedLyricLine] = []
    for index, raw in enumerate(text.splitlines()):
        match = _LRC_LINE.match(raw.strip())
        if not match:
            continue
        minutes, seconds, fraction, lyric = match.groups()
        start_time = int(minutes) * 60 + int(seconds) + _fraction(fraction)
        lines.append(TimedLyricLine(index=index, text=lyric.strip(), start_time=start_time))
    # sorted() is stable, equal timestamps keep input order
    return sorted(lines, key=lambda line: line.start_time)


def parse_lrclib_response(payload: Any) -> Lyrics | None:
    """Build lyrics from an LRCLib ``/api/get`` JSON payload.

    Synced lyrics win when non-empty. The plain text then comes from
    ``plainLyrics`` or, if that is missing, from the timed line texts.

    Returns:
        Lyrics, or None when the payload carries no lyrics at all.
    """
    synced = as_str(nav(payload, "syncedLyrics"))
    plain = as_str(nav(payload, "plainLyrics"))

    if synced and synced.strip():
        timed_lines = parse_lrc(synced)
        if timed_lines:
            if not (plain and plain.strip()):
                plain = "\n".join(line.text for line in timed_lines)
            return Lyrics(text=plain, source=LRCLIB_SOURCE, timed_lines=timed_lines)

    if plain and plain.strip():
        return Lyrics(text=plain, source=LRCLIB_SOURCE)
    return None


def parse_lyrics_browse(data: Any) -> Lyrics | None:
    """Parse the YouTube Music lyrics page (``MPLY`` browse ID)."""
    shelf = nav(
        data,
        "contents",
        "sectionListRenderer",
        "contents",
        0,
        "musicDescriptionShelfRenderer",
    )
    text = runs_text(nav(shelf, "description"))
    if not text or not text.strip():
        return None
    return Lyrics(text=text, source=runs_text(nav(shelf, "footer")))
