"""Utility functions for ytmdeck.

Available via `from ytmdeck.utils import ...`.
Not re-exported at the top-level `ytmdeck` package.
"""

from ytmdeck.utils.cookies import cookies_to_ytmusic_auth, is_authenticated_cookies
from ytmdeck.utils.url import parse_browse_id, parse_playlist_browse_id, parse_video_id

__all__ = [
    "cookies_to_ytmusic_auth",
    "is_authenticated_cookies",
    "parse_browse_id",
    "parse_playlist_browse_id",
    "parse_video_id",
]
