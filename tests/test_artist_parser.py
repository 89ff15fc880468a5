"""Tests for artist page parsing."""

from ytmdeck.models.domain import Album
from ytmdeck.parsers import parse_artist_detail

from factories import (
    ALBUM_PAGE,
    PLAYLIST_PAGE,
    carousel,
    music_thumbnail,
    single_column,
    text,
    track_row,
    two_row,
)


def artist_page(sections: list[dict], header: dict | None = None) -> dict:
    page = single_column(sections)
    if header is not None:
        page["header"] = {"musicImmersiveHeaderRenderer": header}
    return page


class TestParseArtistDetail:
    """Tests for parse_artist_detail()."""

    def test_full_page(self) -> None:
        header = {
            "title": text("Band"),
            "description": text("Formed in a garage."),
            "thumbnail": music_thumbnail("https://img/b60.jpg", "https://img/b900.jpg"),
            "subscriptionButton": {
                "subscribeButtonRenderer": {
                    "channelId": "UCband_channel",
                    "subscriberCountText": text("1.2M"),
                    "subscribed": True,
                }
            },
        }
        sections = [
            {
                "musicShelfRenderer": {
                    "contents": [
                        track_row("abcdefghijk", "Hit", artist="Band", artist_id="UCband"),
                        track_row("bcdefghijkl", "B-Side", artist="Band", artist_id="UCband"),
                    ],
                    "bottomEndpoint": {"browseEndpoint": {"browseId": "VLOLAK5uy_songs"}},
                }
            },
            carousel(
                "Albums",
                [
                    two_row("Debut", "MPREb_debut", ALBUM_PAGE),
                    two_row("Fan Mix", "VLPLmix", PLAYLIST_PAGE),
                ],
            ),
            carousel("Singles", [two_row("Single", "MPREb_single", ALBUM_PAGE)]),
        ]

        detail = parse_artist_detail(artist_page(sections, header), "UCband")

        assert detail.name == "Band"
        assert detail.description == "Formed in a garage."
        assert detail.thumbnail_url == "https://img/b900.jpg"
        assert detail.channel_id == "UCband_channel"
        assert detail.subscriber_count == "1.2M"
        assert detail.is_subscribed is True
        assert [s.title for s in detail.songs] == ["Hit", "B-Side"]
        assert detail.songs_browse_id == "VLOLAK5uy_songs"
        assert [a.id for a in detail.albums] == ["MPREb_debut", "MPREb_single"]
        assert all(isinstance(a, Album) for a in detail.albums)

    def test_description_from_shelf(self) -> None:
        sections = [{"musicDescriptionShelfRenderer": {"description": text("About us")}}]

        detail = parse_artist_detail(artist_page(sections, {"title": text("Band")}), "UCband")

        assert detail.description == "About us"

    def test_only_first_song_shelf_is_used(self) -> None:
        sections = [
            {"musicShelfRenderer": {"contents": [track_row("abcdefghijk", "First")]}},
            {"musicShelfRenderer": {"contents": [track_row("bcdefghijkl", "Videos")]}},
        ]

        detail = parse_artist_detail(artist_page(sections), "UCband")

        assert [s.title for s in detail.songs] == ["First"]

    def test_empty_page(self) -> None:
        detail = parse_artist_detail({}, "UCband")

        assert detail.name == "Unknown"
        assert detail.artist.id == "UCband"
        assert detail.channel_id == "UCband"
        assert detail.is_subscribed is False
        assert detail.songs == []
        assert detail.albums == []
