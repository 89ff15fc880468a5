"""Tests for the shared field extractors."""

import pytest
from ytmdeck.models.domain import Album, Artist, FeedbackTokens
from ytmdeck.models.enums import LikeStatus
from ytmdeck.parsers.helpers import (
    album_from_run,
    artists_from_runs,
    best_thumbnail,
    extract_library_state,
    extract_like_status,
    extract_thumbnails,
    extract_video_id,
    parse_duration_text,
    split_runs,
)

from factories import album_run, artist_run, library_toggle, music_thumbnail, separator


class TestParseDurationText:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("3:45", 225.0),
            ("0:07", 7.0),
            ("1:02:03", 3723.0),
            (" 4:05 ", 245.0),
        ],
    )
    def test_valid(self, text: str, expected: float) -> None:
        assert parse_duration_text(text) == expected

    @pytest.mark.parametrize("text", ["", None, "45", "Song", "3:5", "1:2:3:4", "2020"])
    def test_invalid(self, text: str | None) -> None:
        assert parse_duration_text(text) is None


class TestSplitRuns:
    def test_splits_on_bullets(self) -> None:
        runs = [{"text": "A"}, separator(), {"text": "B"}, {"text": " & "}, {"text": "C"}]
        assert split_runs(runs) == [
            [{"text": "A"}],
            [{"text": "B"}, {"text": " & "}, {"text": "C"}],
        ]

    def test_drops_empty_segments(self) -> None:
        assert split_runs([separator(), {"text": "A"}, separator()]) == [[{"text": "A"}]]


class TestThumbnails:
    def test_sorted_by_width_best_last(self) -> None:
        node = {
            "thumbnail": {
                "thumbnails": [
                    {"url": "https://img/big.jpg", "width": 544},
                    {"url": "https://img/small.jpg", "width": 60},
                ]
            }
        }
        assert extract_thumbnails(node) == ["https://img/small.jpg", "https://img/big.jpg"]
        assert best_thumbnail(node) == "https://img/big.jpg"

    def test_upstream_order_kept_without_widths(self) -> None:
        node = {"thumbnails": [{"url": "https://img/a.jpg"}, {"url": "https://img/b.jpg"}]}
        assert best_thumbnail(node) == "https://img/b.jpg"

    def test_protocol_relative_urls(self) -> None:
        node = {"thumbnails": [{"url": "//lh3.example.com/x.jpg"}]}
        assert best_thumbnail(node) == "https://lh3.example.com/x.jpg"

    def test_music_thumbnail_renderer(self) -> None:
        node = {"thumbnail": music_thumbnail("https://img/1.jpg", "https://img/2.jpg")}
        assert best_thumbnail(node) == "https://img/2.jpg"

    def test_missing(self) -> None:
        assert best_thumbnail({"thumbnail": {}}) is None


class TestIdentifiers:
    def test_video_id_from_watch_endpoint(self) -> None:
        node = {"navigationEndpoint": {"watchEndpoint": {"videoId": "abcdefghijk"}}}
        assert extract_video_id(node) == "abcdefghijk"

    def test_video_id_from_play_overlay(self) -> None:
        node = {
            "overlay": {
                "musicItemThumbnailOverlayRenderer": {
                    "content": {
                        "musicPlayButtonRenderer": {
                            "playNavigationEndpoint": {"watchEndpoint": {"videoId": "abcdefghijk"}}
                        }
                    }
                }
            }
        }
        assert extract_video_id(node) == "abcdefghijk"

    def test_no_video_id(self) -> None:
        assert extract_video_id({"title": {"runs": [{"text": "x"}]}}) is None

    def test_album_from_run(self) -> None:
        assert album_from_run(album_run("Debut", "MPREb_1")) == Album(id="MPREb_1", title="Debut")
        assert album_from_run(artist_run("Band", "UCband")) is None
        assert album_from_run({"text": "Plain"}) is None


class TestArtistsFromRuns:
    def test_linked_artists(self) -> None:
        runs = [artist_run("A", "UCa"), {"text": " & "}, artist_run("B", "UCb")]
        assert artists_from_runs(runs) == [Artist(id="UCa", name="A"), Artist(id="UCb", name="B")]

    def test_unlinked_name_skips_type_label_and_duration(self) -> None:
        runs = [{"text": "Song"}, separator(), {"text": "Someone"}, separator(), {"text": "3:10"}]
        assert artists_from_runs(runs) == [Artist(name="Someone")]

    def test_album_segment_is_not_an_artist(self) -> None:
        runs = [album_run("Record"), separator(), {"text": "Someone"}]
        assert artists_from_runs(runs) == [Artist(name="Someone")]

    def test_nothing_usable(self) -> None:
        assert artists_from_runs([{"text": "Video"}, separator(), {"text": "1:00"}]) == []


class TestMenu:
    @pytest.mark.parametrize(
        ("node", "expected"),
        [
            ({"likeStatus": "LIKE"}, LikeStatus.LIKE),
            (
                {
                    "menu": {
                        "menuRenderer": {
                            "topLevelButtons": [
                                {"likeButtonRenderer": {"likeStatus": "DISLIKE"}}
                            ]
                        }
                    }
                },
                LikeStatus.DISLIKE,
            ),
            ({"likeStatus": "MAYBE"}, None),
            ({}, None),
        ],
    )
    def test_like_status(self, node: dict, expected: LikeStatus | None) -> None:
        assert extract_like_status(node) == expected

    def test_library_state_not_saved(self) -> None:
        node = {"menu": {"menuRenderer": {"items": [library_toggle(False, "add-1", "remove-1")]}}}
        assert extract_library_state(node) == (
            False,
            FeedbackTokens(add="add-1", remove="remove-1"),
        )

    def test_library_state_saved(self) -> None:
        """Should swap token roles when the track is already in the library."""
        node = {"menu": {"menuRenderer": {"items": [library_toggle(True, "add-1", "remove-1")]}}}
        in_library, tokens = extract_library_state(node)
        assert in_library is True
        assert tokens == FeedbackTokens(add="add-1", remove="remove-1")
        assert tokens.token_for(in_library=True) == "remove-1"

    def test_no_toggle(self) -> None:
        node = {"menu": {"menuRenderer": {"items": [{"menuNavigationItemRenderer": {}}]}}}
        assert extract_library_state(node) == (None, None)
