"""Domain models for ytmdeck.

These are the public models produced by the parsers and consumed by the
playback services. All of them are immutable; services hold updated copies
made with ``model_copy(update=...)``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ytmdeck.models.enums import LikeStatus

UNKNOWN_ARTIST_ID = "unknown"
UNKNOWN_PLAYLIST_TITLE = "Unknown Playlist"
UNKNOWN_TITLE = "Unknown"

PLAYLIST_BROWSE_PREFIXES = ("VL", "PL")


class DomainModel(BaseModel):
    """Base model for ytmdeck entities."""

    model_config = ConfigDict(frozen=True)


class Artist(DomainModel):
    """Artist reference. ``id`` is the sentinel ``"unknown"`` when unresolved."""

    id: str = UNKNOWN_ARTIST_ID
    name: str
    thumbnail_url: str | None = None


class Album(DomainModel):
    """Album reference or header."""

    id: str
    title: str
    artists: list[Artist] | None = None
    thumbnail_url: str | None = None
    year: str | None = None
    track_count: int | None = None


class FeedbackTokens(DomainModel):
    """Opaque token pair used to add/remove a track from the library."""

    add: str | None = None
    remove: str | None = None

    def token_for(self, *, in_library: bool) -> str | None:
        """Token that flips the current library state."""
        return self.remove if in_library else self.add


class Song(DomainModel):
    """A playable track, keyed by its video ID.

    Two songs with the same ``video_id`` are the same track even if other
    fields differ between fetches.
    """

    video_id: str
    title: str
    artists: list[Artist] = Field(default_factory=list)
    album: Album | None = None
    duration: float | None = None
    thumbnail_url: str | None = None
    like_status: LikeStatus | None = None
    is_in_library: bool | None = None
    feedback_tokens: FeedbackTokens | None = None

    @property
    def id(self) -> str:
        """Canonical entity key (same as the video ID)."""
        return self.video_id

    @property
    def artists_display(self) -> str:
        """Artist names joined for display."""
        return ", ".join(a.name for a in self.artists if a.name)

    def is_same_track(self, other: Song | None) -> bool:
        """Identity comparison by video ID."""
        return other is not None and other.video_id == self.video_id

    def merged_with(self, fresher: Song) -> Song:
        """Merge a fresher fetch of the same track into this one.

        Fields present on ``fresher`` win; absent ones keep this song's value.
        """
        update = {
            name: value
            for name, value in fresher
            if name != "video_id" and value is not None and value != []
        }
        return self.model_copy(update=update)


class Playlist(DomainModel):
    """Playlist reference or header. ``id`` is a browse ID."""

    id: str
    title: str = UNKNOWN_PLAYLIST_TITLE
    description: str | None = None
    thumbnail_url: str | None = None
    track_count: int | None = None
    author: str | None = None

    @property
    def has_placeholder_title(self) -> bool:
        return self.title == UNKNOWN_PLAYLIST_TITLE


def is_playlist_browse_id(browse_id: str | None) -> bool:
    """Whether a browse ID addresses a playlist (``VL``/``PL`` prefix)."""
    return bool(browse_id) and browse_id.startswith(PLAYLIST_BROWSE_PREFIXES)


class PlaylistDetail(DomainModel):
    """A playlist header with its ordered tracks."""

    playlist: Playlist
    tracks: list[Song] = Field(default_factory=list)
    duration: str | None = None

    @property
    def id(self) -> str:
        return self.playlist.id

    @property
    def title(self) -> str:
        return self.playlist.title

    @property
    def description(self) -> str | None:
        return self.playlist.description

    @property
    def thumbnail_url(self) -> str | None:
        return self.playlist.thumbnail_url

    @property
    def author(self) -> str | None:
        return self.playlist.author

    def merge_with_stub(self, stub: Playlist) -> PlaylistDetail:
        """Fill placeholder header fields from the playlist the caller opened.

        The parsed header wins wherever it has real data. A placeholder
        title is replaced by the stub's title, and a missing thumbnail falls
        back to the stub's thumbnail, then to the first track's thumbnail.

        Args:
            stub: Playlist reference the detail was requested for (typically
                from a library or home listing).

        Returns:
            This detail unchanged when nothing needed merging, otherwise a
            new detail with the merged header.
        """
        resolved_thumbnail = (
            self.thumbnail_url
            or stub.thumbnail_url
            or next((t.thumbnail_url for t in self.tracks if t.thumbnail_url), None)
        )
        needs_title = self.playlist.has_placeholder_title and not stub.has_placeholder_title
        thumbnail_missing = self.thumbnail_url is None and resolved_thumbnail is not None

        if not (needs_title or thumbnail_missing):
            return self

        merged = Playlist(
            id=stub.id,
            title=stub.title if needs_title else self.title,
            description=self.description or stub.description,
            thumbnail_url=resolved_thumbnail,
            track_count=len(self.tracks),
            author=self.author or stub.author,
        )
        return self.model_copy(update={"playlist": merged})


class ArtistDetail(DomainModel):
    """Artist page: header plus top songs and albums."""

    artist: Artist
    description: str | None = None
    subscriber_count: str | None = None
    channel_id: str | None = None
    is_subscribed: bool = False
    songs: list[Song] = Field(default_factory=list)
    albums: list[Album] = Field(default_factory=list)
    songs_browse_id: str | None = None

    @property
    def name(self) -> str:
        return self.artist.name

    @property
    def thumbnail_url(self) -> str | None:
        return self.artist.thumbnail_url


class AlbumDetail(DomainModel):
    """Album page: header plus ordered tracks."""

    album: Album
    tracks: list[Song] = Field(default_factory=list)
    duration: str | None = None
    description: str | None = None

    @property
    def title(self) -> str:
        return self.album.title


HomeSectionItem = Song | Album | Playlist | Artist


class HomeSection(DomainModel):
    """A titled shelf of mixed items on the home, explore or charts pages."""

    id: str
    title: str
    items: list[HomeSectionItem] = Field(default_factory=list)
    is_chart: bool = False

    @property
    def songs(self) -> list[Song]:
        return [item for item in self.items if isinstance(item, Song)]


class HomeResponse(DomainModel):
    """Sections of a browse feed plus the token for the next page."""

    sections: list[HomeSection] = Field(default_factory=list)
    continuation: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.sections


class SearchResponse(DomainModel):
    """Search results grouped by entity type."""

    songs: list[Song] = Field(default_factory=list)
    albums: list[Album] = Field(default_factory=list)
    artists: list[Artist] = Field(default_factory=list)
    playlists: list[Playlist] = Field(default_factory=list)

    @property
    def all_items(self) -> list[HomeSectionItem]:
        return [*self.songs, *self.albums, *self.artists, *self.playlists]

    @property
    def is_empty(self) -> bool:
        return not self.all_items
