#!/usr/bin/env python3
"""Command-line interface for ytmdeck.

This CLI is primarily for debugging and development.
For production use, import ytmdeck as a library.
"""

import asyncio
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from pydantic import BaseModel
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ytmdeck.client import YTMusicClient
from ytmdeck.exceptions import InvalidIdentifierError, YTDeckError
from ytmdeck.models.domain import Song
from ytmdeck.models.lyrics import Lyrics, TimedLyricLine
from ytmdeck.parsers import (
    parse_album_detail,
    parse_artist_detail,
    parse_home_sections,
    parse_library_playlists,
    parse_lrc,
    parse_lyrics_browse,
    parse_playlist_detail,
    parse_search_results,
    parse_watch_playlist,
)
from ytmdeck.services import LyricsService
from ytmdeck.utils.url import parse_playlist_browse_id, parse_video_id

logger = logging.getLogger("ytmdeck")

# Parsers runnable over a saved raw response; the second argument is the ID
# the response was fetched for, ignored by parsers that do not need it.
RESPONSE_PARSERS: dict[str, Callable[[Any, str], Any]] = {
    "playlist": parse_playlist_detail,
    "album": parse_album_detail,
    "artist": parse_artist_detail,
    "watch": lambda data, _id: parse_watch_playlist(data),
    "search": lambda data, _id: parse_search_results(data),
    "home": lambda data, _id: parse_home_sections(data),
    "charts": lambda data, _id: parse_home_sections(data, is_chart=True),
    "library": lambda data, _id: parse_library_playlists(data),
    "lyrics": lambda data, _id: parse_lyrics_browse(data),
}


def setup_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Configure logging with Rich handler.

    Clears existing handlers first, so it can be called again to switch
    consoles.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise WARNING.
        console: Optional Console instance to use for RichHandler.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = RichHandler(
        rich_tracebacks=True,
        show_path=False,
        console=console,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)


def format_duration(seconds: float | None) -> str:
    """Format seconds as m:ss, or h:mm:ss for an hour or more."""
    if seconds is None:
        return "-"
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def dump_json(value: Any) -> None:
    """Write models (or lists of models) to stdout as JSON."""
    if isinstance(value, BaseModel):
        data: Any = value.model_dump(mode="json")
    elif isinstance(value, list):
        data = [v.model_dump(mode="json") if isinstance(v, BaseModel) else v for v in value]
    else:
        data = value
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False, default=str)
    sys.stdout.write("\n")


def print_section_header(console: Console, title: str, subtitle: str = "") -> None:
    header = f"  {title.upper()}"
    if subtitle:
        header += f"  [dim]│[/dim]  {subtitle}"
    console.print()
    console.rule(style="dim")
    console.print(header)
    console.rule(style="dim")


def print_song_table(console: Console, songs: list[Song]) -> None:
    """Print songs as one table row each."""
    table = Table(show_header=True, header_style="bold cyan", padding=(0, 1))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", overflow="fold")
    table.add_column("Artist", overflow="fold")
    table.add_column("Album", overflow="fold")
    table.add_column("Length", justify="right")
    table.add_column("Video ID", style="dim")

    for i, song in enumerate(songs, 1):
        table.add_row(
            str(i),
            song.title,
            song.artists_display or "-",
            song.album.title if song.album else "-",
            format_duration(song.duration),
            song.video_id,
        )
    console.print(table)


def print_song_card(console: Console, song: Song) -> None:
    """Print a single song as a vertical card."""
    table = Table(
        show_header=False,
        padding=(0, 1),
        title=f"[bold yellow]{song.title}[/bold yellow]",
        title_justify="left",
    )
    table.add_column("Field", style="bold cyan", width=12)
    table.add_column("Value", overflow="fold")

    table.add_row("Video ID", song.video_id)
    table.add_row("Artist", song.artists_display or "-")
    if song.album:
        table.add_row("Album", song.album.title)
    table.add_row("Length", format_duration(song.duration))
    if song.like_status:
        table.add_row("Rating", song.like_status.value)
    if song.is_in_library is not None:
        table.add_row("In library", "yes" if song.is_in_library else "no")
    if song.thumbnail_url:
        table.add_row("Cover", song.thumbnail_url)

    console.print()
    console.print(table)


def print_timed_lines(console: Console, lines: list[TimedLyricLine]) -> None:
    for line in lines:
        stamp = format_duration(line.start_time)
        console.print(f"[dim]{stamp:>7}[/dim]  {line.text or '♪'}")


def print_lyrics(console: Console, lyrics: Lyrics) -> None:
    if not lyrics.is_available:
        console.print("[yellow]No lyrics available[/yellow]")
        return
    print_section_header(console, "Lyrics", lyrics.source or "")
    if lyrics.timed_lines:
        print_timed_lines(console, lyrics.timed_lines)
    else:
        console.print(lyrics.text)


def require_video_id(value: str) -> str:
    video_id = parse_video_id(value)
    if video_id is None:
        raise InvalidIdentifierError(f"Not a video ID or watch URL: {value}")
    return video_id


def run(coro: Any) -> Any:
    """Run a coroutine, turning library errors into click errors."""
    try:
        return asyncio.run(coro)
    except YTDeckError as e:
        logger.error(e.message)
        raise click.ClickException(e.message) from e
    except Exception as e:
        logger.exception("Unexpected error")
        raise click.ClickException(f"Unexpected error: {e}") from e


cookies_option = click.option(
    "--cookies",
    type=click.Path(exists=True, path_type=Path),
    help="Path to cookies.txt for YouTube Music authentication.",
)
json_option = click.option("--json", "as_json", is_flag=True, help="Output as JSON.")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Inspect YouTube Music playlists, songs, radio queues and lyrics."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose=verbose)


@main.command(name="playlist")
@click.argument("playlist", metavar="URL_OR_ID")
@json_option
@cookies_option
def playlist_cmd(playlist: str, as_json: bool, cookies: Path | None) -> None:
    """Show the tracks of a playlist.

    \b
    Examples:
      ytmdeck playlist "https://music.youtube.com/playlist?list=PLxxx"
      ytmdeck playlist VLPLxxx
    """
    console = Console()

    async def fetch() -> Any:
        client = YTMusicClient(cookies_path=cookies)
        return await client.get_playlist(parse_playlist_browse_id(playlist))

    detail = run(fetch())
    if as_json:
        dump_json(detail)
        return
    subtitle = detail.title if not detail.author else f"{detail.title} by {detail.author}"
    print_section_header(console, "Playlist", subtitle)
    print_song_table(console, detail.tracks)
    console.print(f"\n{len(detail.tracks)} track(s)")


@main.command(name="radio")
@click.argument("video", metavar="URL_OR_VIDEO_ID")
@json_option
@cookies_option
def radio_cmd(video: str, as_json: bool, cookies: Path | None) -> None:
    """Show the radio queue seeded by a song."""
    console = Console()

    async def fetch() -> list[Song]:
        client = YTMusicClient(cookies_path=cookies)
        return await client.get_radio_queue(require_video_id(video))

    songs = run(fetch())
    if as_json:
        dump_json(songs)
        return
    print_section_header(console, "Radio", f"{len(songs)} track(s)")
    print_song_table(console, songs)


@main.command(name="song")
@click.argument("video", metavar="URL_OR_VIDEO_ID")
@json_option
@cookies_option
def song_cmd(video: str, as_json: bool, cookies: Path | None) -> None:
    """Show a single song with its rating and library state."""
    console = Console()

    async def fetch() -> Song:
        client = YTMusicClient(cookies_path=cookies)
        return await client.get_song(require_video_id(video))

    song = run(fetch())
    if as_json:
        dump_json(song)
    else:
        print_song_card(console, song)


@main.command(name="lyrics")
@click.argument("video", metavar="URL_OR_VIDEO_ID")
@json_option
@cookies_option
def lyrics_cmd(video: str, as_json: bool, cookies: Path | None) -> None:
    """Fetch lyrics for a song (LRCLib, then YouTube Music)."""
    console = Console()

    async def fetch() -> Lyrics:
        client = YTMusicClient(cookies_path=cookies)
        song = await client.get_song(require_video_id(video))
        return await LyricsService(client).get_lyrics(song)

    lyrics = run(fetch())
    if as_json:
        dump_json(lyrics)
    else:
        print_lyrics(console, lyrics)


@main.command(name="lrc")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@json_option
def lrc_cmd(file: Path, as_json: bool) -> None:
    """Parse a local LRC file and print its timed lines."""
    console = Console()
    lines = parse_lrc(file.read_text(encoding="utf-8"))
    if as_json:
        dump_json(lines)
        return
    if not lines:
        console.print("[yellow]No timed lines found[/yellow]")
        return
    print_timed_lines(console, lines)


@main.command(name="parse")
@click.argument("kind", type=click.Choice(sorted(RESPONSE_PARSERS)))
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--id", "entity_id", default="", help="ID the response was fetched for.")
def parse_cmd(kind: str, file: Path, entity_id: str) -> None:
    """Run a parser over a saved raw API response and print the result as JSON.

    \b
    Examples:
      ytmdeck parse playlist browse.json --id VLPLxxx
      ytmdeck parse watch next.json
    """
    try:
        data = json.loads(file.read_text(encoding="utf-8"))
    except ValueError as e:
        raise click.ClickException(f"{file} is not valid JSON: {e}") from e
    dump_json(RESPONSE_PARSERS[kind](data, entity_id))


if __name__ == "__main__":
    main()
