"""Session cookies for authenticated YouTube Music requests.

Reads a Netscape ``cookies.txt`` exported from a signed-in browser and turns
it into the request headers ytmusicapi expects.
"""

import hashlib
import logging
import time
from pathlib import Path

logger = logging.getLogger(__name__)

# Origin for SAPISIDHASH calculation
YTM_ORIGIN = "https://music.youtube.com"

# curl/yt-dlp exports mark HttpOnly cookies with this prefix on the domain
_HTTP_ONLY_PREFIX = "#HttpOnly_"

_COOKIE_DOMAINS = ("youtube.com", "google.com")


def parse_netscape_cookies(cookies_path: Path, now: float | None = None) -> dict[str, str]:
    """Parse the YouTube/Google cookies of a Netscape ``cookies.txt``.

    HttpOnly cookies are kept, cookies of other domains and expired cookies
    (non-zero expiry in the past) are dropped.

    Args:
        cookies_path: Path to cookies.txt file.
        now: Reference time for expiry checks, defaults to the current time.

    Returns:
        Dict mapping cookie name to value.
    """
    cookies: dict[str, str] = {}
    now = time.time() if now is None else now

    try:
        content = cookies_path.read_text()
    except OSError as e:
        logger.warning("Failed to read cookies file: %s", e)
        return cookies

    for line in content.splitlines():
        line = line.strip()
        if line.startswith(_HTTP_ONLY_PREFIX):
            line = line.removeprefix(_HTTP_ONLY_PREFIX)
        elif not line or line.startswith("#"):
            continue

        # Netscape format: domain, flag, path, secure, expiry, name, value
        parts = line.split("\t")
        if len(parts) < 7:
            continue
        domain, expiry, name, value = parts[0], parts[4], parts[5], parts[6]

        if not domain.lstrip(".").endswith(_COOKIE_DOMAINS):
            continue
        if expiry.isdigit() and 0 < int(expiry) < now:
            logger.debug("Skipping expired cookie: %s", name)
            continue
        cookies[name] = value

    return cookies


def get_sapisid(cookies: dict[str, str]) -> str | None:
    """SAPISID value, preferring ``__Secure-3PAPISID`` over ``SAPISID``."""
    return cookies.get("__Secure-3PAPISID") or cookies.get("SAPISID")


def generate_sapisidhash(
    sapisid: str, origin: str = YTM_ORIGIN, timestamp: int | None = None
) -> str:
    """Generate the ``SAPISIDHASH`` authorization value.

    See: https://stackoverflow.com/a/32065323/5726546
    """
    timestamp = int(time.time()) if timestamp is None else timestamp
    digest = hashlib.sha1(f"{timestamp} {sapisid} {origin}".encode()).hexdigest()
    return f"SAPISIDHASH {timestamp}_{digest}"


def build_auth_headers(cookies: dict[str, str]) -> dict[str, str] | None:
    """Request headers for an authenticated session, None without SAPISID."""
    sapisid = get_sapisid(cookies)
    if not sapisid:
        return None
    return {
        "Accept": "*/*",
        "Authorization": generate_sapisidhash(sapisid),
        "Content-Type": "application/json",
        "X-Goog-AuthUser": "0",
        "x-origin": YTM_ORIGIN,
        "Cookie": "; ".join(f"{name}={value}" for name, value in cookies.items()),
    }


def cookies_to_ytmusic_auth(cookies_path: Path) -> dict[str, str] | None:
    """Convert cookies.txt to ytmusicapi authentication headers.

    Returns:
        Headers that can be passed to the ``YTMusic`` constructor, or None
        when the file is missing or holds no usable session.
    """
    if not cookies_path.exists():
        logger.debug("Cookies file not found: %s", cookies_path)
        return None

    cookies = parse_netscape_cookies(cookies_path)
    if not cookies:
        logger.debug("No YouTube cookies parsed from %s", cookies_path)
        return None

    headers = build_auth_headers(cookies)
    if headers is None:
        logger.warning("No SAPISID cookie found - authentication not possible")
    return headers


def is_authenticated_cookies(cookies_path: Path) -> bool:
    """Whether a cookies file holds a usable YouTube Music session."""
    return cookies_path.exists() and get_sapisid(parse_netscape_cookies(cookies_path)) is not None
