"""Configuration for ytmdeck."""

from dataclasses import dataclass


@dataclass(frozen=True)
class APIConfig:
    """YouTube Music API configuration.

    Attributes:
        radio_limit: Maximum number of tracks requested for a radio queue.
        search_limit: Maximum number of results kept per search category.
    """

    radio_limit: int = 50
    search_limit: int = 20


@dataclass(frozen=True)
class PlayerConfig:
    """Playback state machine configuration.

    Attributes:
        near_end_window: Seconds before the end of a track at which a
            following track change is treated as natural progression.
        restart_threshold: Seconds into a track after which previous()
            restarts the track instead of going back.
        default_volume: Volume used when nothing has been persisted yet.
    """

    near_end_window: float = 2.0
    restart_threshold: float = 3.0
    default_volume: float = 1.0


@dataclass(frozen=True)
class LyricsConfig:
    """Lyrics provider configuration.

    Attributes:
        lrclib_url: Base URL of the LRCLib API.
        timeout: Request timeout in seconds.
        use_youtube_fallback: Whether to ask YouTube Music when LRCLib
            has no match.
    """

    lrclib_url: str = "https://lrclib.net/api"
    timeout: float = 10.0
    use_youtube_fallback: bool = True
