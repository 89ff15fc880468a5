"""Lyrics models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TimedLyricLine(BaseModel):
    """A single lyric line with its start time.

    Attributes:
        index: Position of the line in the original LRC text. Stable
            identity used for highlighting and seeking.
        text: Lyric text, possibly empty (instrumental gap).
        start_time: Start time in seconds.
    """

    model_config = ConfigDict(frozen=True)

    index: int
    text: str
    start_time: float


class Lyrics(BaseModel):
    """Lyrics for a song, optionally with timed lines.

    Attributes:
        text: Full lyric block, lines separated by newlines.
        source: Attribution string (e.g. "LRClib").
        timed_lines: Lines sorted ascending by start time, or None when only
            plain lyrics are known.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    source: str | None = None
    timed_lines: list[TimedLyricLine] | None = None

    @classmethod
    def unavailable(cls) -> Lyrics:
        """Empty lyrics for songs without any."""
        return cls(text="")

    @property
    def is_available(self) -> bool:
        return bool(self.text)

    @property
    def has_timed_lyrics(self) -> bool:
        return bool(self.timed_lines)

    @property
    def lines(self) -> list[str]:
        """Plain text split into display lines."""
        return self.text.split("\n")

    def line_at(self, position: float) -> TimedLyricLine | None:
        """Timed line active at a playback position, if any."""
        current: TimedLyricLine | None = None
        for line in self.timed_lines or []:
            if line.start_time > position:
                break
            current = line
        return current
