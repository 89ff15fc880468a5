"""Playback state machine.

``PlayerService`` owns the local queue and the current track and drives a web
player transport. The transport can advance on its own (autoplay), so the
service reconciles the tracks it reports against the local queue.

Every transition to a new current track bumps a generation counter.
Background work (metadata refetch, radio queue fetch, optimistic ratings)
captures the generation when it starts and only applies its result if the
generation and the video ID still match.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Coroutine, Iterable
from typing import Any, Protocol

from ytmdeck.client import MusicClientProtocol
from ytmdeck.config import PlayerConfig
from ytmdeck.exceptions import YTDeckError
from ytmdeck.models.domain import UNKNOWN_ARTIST_ID, Artist, FeedbackTokens, Song
from ytmdeck.models.enums import LikeStatus, PlaybackStatus, RepeatMode
from ytmdeck.models.lyrics import Lyrics, TimedLyricLine
from ytmdeck.models.state import PlaybackState
from ytmdeck.services.like_status import LikeStatusCache
from ytmdeck.services.optimistic import perform_optimistic
from ytmdeck.services.settings import (
    MemorySettingsStore,
    PlayerSettings,
    SettingsStoreProtocol,
    clamp_volume,
)

logger = logging.getLogger(__name__)

LOADING_TITLE = "Loading..."
UNKNOWN_VIDEO_ID = "unknown"


class WebPlayerProtocol(Protocol):
    """Media transport commands.

    Commands are fire-and-forget. The transport reports back through
    ``PlayerService.update_playback_state``, ``update_track_metadata``,
    ``handle_song_ended`` and ``handle_playback_error``.
    """

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, seconds: float) -> None: ...

    def set_volume(self, volume: float) -> None: ...

    def next(self) -> None: ...

    def previous(self) -> None: ...

    def load_video(self, video_id: str) -> None: ...


class _TrackSlot:
    """Optimistic slot over one per-track attribute of the player.

    Bound to the generation it was created in. Once the current track
    changes, reads return None and writes are ignored, so a late revert
    never lands on the next track.
    """

    def __init__(self, player: PlayerService, attribute: str, reset_value: Any) -> None:
        self._player = player
        self._attribute = attribute
        self._reset_value = reset_value
        self._generation = player.track_generation

    def _stale(self) -> bool:
        return self._player.track_generation != self._generation

    def get(self) -> Any:
        if self._stale():
            return None
        return getattr(self._player, self._attribute)

    def set(self, value: Any) -> None:
        if not self._stale():
            setattr(self._player, self._attribute, value)

    def clear(self) -> None:
        self.set(self._reset_value)


class PlayerService:
    """Queue-driven playback state machine.

    All state lives on one event loop; callers must not share an instance
    across loops. Network work started by a command runs as a tracked
    background task and never blocks the command itself.

    Args:
        web_player: Transport receiving playback commands.
        client: YouTube Music client for metadata, radio and ratings.
        settings_store: Where volume, shuffle and repeat are persisted.
        config: Thresholds for near-end detection and scrub-back.
        like_cache: Optional shared rating overlay, kept in sync with
            ratings made through the player.
        rng: Random source for shuffle.
    """

    def __init__(
        self,
        web_player: WebPlayerProtocol,
        client: MusicClientProtocol,
        settings_store: SettingsStoreProtocol | None = None,
        config: PlayerConfig | None = None,
        like_cache: LikeStatusCache | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._web_player = web_player
        self._client = client
        self._config = config or PlayerConfig()
        self._settings_store = settings_store or MemorySettingsStore(
            PlayerSettings(volume=self._config.default_volume)
        )
        self._like_cache = like_cache
        self._rng = rng or random.Random()

        self.state = PlaybackState()
        self.current_track: Song | None = None
        self.progress = 0.0
        self.duration = 0.0
        self.queue: list[Song] = []
        self.current_index = 0
        self.pending_play_video_id: str | None = None

        self.current_track_like_status = LikeStatus.INDIFFERENT
        self.current_track_in_library = False
        self.current_track_feedback_tokens: FeedbackTokens | None = None

        self._track_generation = 0
        self._song_nearing_end = False
        self._cached_lyrics: Lyrics | None = None
        self._cached_lyrics_video_id: str | None = None

        # Track background tasks to prevent GC during execution
        self._background_tasks: set[asyncio.Task[Any]] = set()

        settings = self._settings_store.load()
        self.volume = clamp_volume(settings.volume)
        if settings.volume_before_mute > 0:
            self.volume_before_mute = settings.volume_before_mute
        else:
            self.volume_before_mute = self.volume if self.volume > 0 else 1.0
        self.shuffle_enabled = settings.shuffle_enabled
        self.repeat_mode = settings.repeat_mode
        logger.debug(
            "Restored player settings: volume=%.2f, shuffle=%s, repeat=%s",
            self.volume,
            self.shuffle_enabled,
            self.repeat_mode,
        )

    # -- Derived state ---------------------------------------------------------

    @property
    def is_playing(self) -> bool:
        return self.state.is_playing

    @property
    def is_muted(self) -> bool:
        return self.volume == 0

    @property
    def track_generation(self) -> int:
        """Token identifying the current track transition."""
        return self._track_generation

    @property
    def song_nearing_end(self) -> bool:
        return self._song_nearing_end

    # -- Background work -------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def join_background_tasks(self) -> None:
        """Wait until all background work, including work it spawns, is done."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks))

    def _is_current(self, video_id: str, generation: int) -> bool:
        return (
            generation == self._track_generation
            and self.current_track is not None
            and self.current_track.video_id == video_id
        )

    # -- Track transitions -----------------------------------------------------

    def _reset_track_status(self) -> None:
        self.current_track_like_status = LikeStatus.INDIFFERENT
        self.current_track_in_library = False
        self.current_track_feedback_tokens = None

    def _apply_song_status(self, song: Song) -> None:
        self._reset_track_status()
        status = (
            self._like_cache.status_for_song(song)
            if self._like_cache is not None
            else song.like_status
        )
        if status is not None:
            self.current_track_like_status = status
        if song.feedback_tokens is not None:
            self.current_track_feedback_tokens = song.feedback_tokens
            self.current_track_in_library = bool(song.is_in_library)

    def _begin_track(self, song: Song) -> None:
        self._track_generation += 1
        self.state = PlaybackState(status=PlaybackStatus.LOADING)
        self.current_track = song
        self.pending_play_video_id = song.video_id
        self.progress = 0.0
        self.duration = song.duration or 0.0
        self._song_nearing_end = False
        if self._cached_lyrics_video_id != song.video_id:
            self.clear_lyrics_cache()
        self._apply_song_status(song)

    async def play(self, song: Song) -> None:
        """Load and play a song.

        Metadata (feedback tokens, library state) is refetched in the
        background when the song does not carry feedback tokens.
        """
        logger.info("Playing song: %s", song.title)
        self._begin_track(song)
        self._web_player.load_video(song.video_id)
        if song.feedback_tokens is None:
            self._spawn(self._fetch_song_metadata(song.video_id, self._track_generation))

    async def play_video_id(self, video_id: str) -> None:
        """Play a track known only by video ID.

        The current track shows a placeholder title until the transport or
        the metadata refetch reports the real one.
        """
        logger.info("Playing video: %s", video_id)
        self._begin_track(Song(video_id=video_id, title=LOADING_TITLE))
        self._web_player.load_video(video_id)
        self._spawn(self._fetch_song_metadata(video_id, self._track_generation))

    async def _fetch_song_metadata(self, video_id: str, generation: int) -> None:
        try:
            song = await self._client.get_song(video_id)
        except YTDeckError as e:
            logger.warning("Failed to fetch song metadata for %s: %s", video_id, e.message)
            return

        if not self._is_current(video_id, generation):
            logger.debug("Track changed, discarding metadata for %s", video_id)
            return

        current = self.current_track
        assert current is not None
        # Titles and artists reported by the transport win over the API's
        title = song.title if current.title == LOADING_TITLE else current.title
        artists = current.artists or song.artists
        self.current_track = current.model_copy(
            update={
                "title": title,
                "artists": artists,
                "album": song.album or current.album,
                "duration": song.duration or current.duration,
                "thumbnail_url": song.thumbnail_url or current.thumbnail_url,
                "like_status": song.like_status,
                "is_in_library": song.is_in_library,
                "feedback_tokens": song.feedback_tokens,
            }
        )
        if song.like_status is not None:
            self.current_track_like_status = song.like_status
        self.current_track_in_library = bool(song.is_in_library)
        self.current_track_feedback_tokens = song.feedback_tokens
        logger.info(
            "Updated track metadata - in_library: %s, has_tokens: %s",
            self.current_track_in_library,
            self.current_track_feedback_tokens is not None,
        )

    # -- Transport events ------------------------------------------------------

    def update_playback_state(self, is_playing: bool, progress: float, duration: float) -> None:
        """Progress tick from the transport."""
        previous_progress = self.progress
        self.progress = progress
        self.duration = duration
        if is_playing:
            self.state = PlaybackState(status=PlaybackStatus.PLAYING)
        elif self.state.status == PlaybackStatus.PLAYING:
            self.state = PlaybackState(status=PlaybackStatus.PAUSED)

        threshold = duration - self._config.near_end_window
        if duration > 0 and progress >= threshold and previous_progress < threshold:
            self._song_nearing_end = True

    def update_track_metadata(self, title: str, artist: str, thumbnail_url: str) -> None:
        """Track metadata reported by the transport.

        An event matching the current title and artists is ignored. The
        transport formats artist lines its own way, so an event for the video
        already loaded is merged into the current track without starting a
        new one. If the previous track was about to end, the event is a real
        transition: with the local queue active the reported track is
        compared with the next queue entry by title. On a match the index
        just advances, otherwise the transport's autoplay pick is overridden
        by playing the queue entry.
        """
        current = self.current_track
        if current is not None and current.title == title and current.artists_display == artist:
            return

        video_id = self.pending_play_video_id or (
            current.video_id if current is not None else UNKNOWN_VIDEO_ID
        )
        reported = Song(
            video_id=video_id,
            title=title,
            artists=[Artist(id=UNKNOWN_ARTIST_ID, name=artist)] if artist else [],
            duration=self.duration if self.duration > 0 else None,
            thumbnail_url=thumbnail_url or None,
        )
        nearing_end = self._song_nearing_end
        self._song_nearing_end = False

        if current is not None and current.is_same_track(reported) and not nearing_end:
            logger.debug("Metadata updated for current track: %s by %s", title, artist)
            self.current_track = current.merged_with(reported)
            return

        logger.info("Track changed to: %s by %s", title, artist)
        self._track_generation += 1
        self.current_track = reported
        self._reset_track_status()
        self.clear_lyrics_cache()

        if not self.queue or not nearing_end:
            return

        expected_index = self.current_index + 1
        if expected_index >= len(self.queue):
            return
        expected = self.queue[expected_index]
        self.current_index = expected_index

        if title == expected.title:
            logger.info("Track advanced to queue index %d", expected_index)
            self.current_track = expected
            self.pending_play_video_id = expected.video_id
            self._apply_song_status(expected)
            if expected.feedback_tokens is None:
                self._spawn(self._fetch_song_metadata(expected.video_id, self._track_generation))
        else:
            logger.info("Autoplay diverged from queue, switching to %s", expected.title)
            self._spawn(self.play(expected))

    async def handle_song_ended(self) -> None:
        """Track finished naturally. Continue with the local queue if any."""
        logger.info("Song ended naturally")
        self.state = PlaybackState(status=PlaybackStatus.ENDED)
        if not self.queue:
            return
        if self.current_index < len(self.queue) - 1:
            await self.next()
        elif self.repeat_mode == RepeatMode.ALL:
            self.current_index = 0
            await self.play(self.queue[0])
        elif self.repeat_mode == RepeatMode.ONE and self.current_index < len(self.queue):
            await self.play(self.queue[self.current_index])

    def update_like_status(self, status: LikeStatus) -> None:
        """Rating observed on the transport."""
        self.current_track_like_status = status

    def handle_playback_error(self, message: str) -> None:
        """The transport failed to play the current track.

        The error state holds until the next ``play`` or a playing tick.
        """
        logger.warning("Playback error: %s", message)
        self.state = PlaybackState.error(message)

    # -- Transport commands ----------------------------------------------------

    async def play_pause(self) -> None:
        if self.is_playing:
            await self.pause()
        else:
            await self.resume()

    async def pause(self) -> None:
        logger.debug("Pausing playback")
        self._web_player.pause()

    async def resume(self) -> None:
        logger.debug("Resuming playback")
        self._web_player.play()

    async def seek(self, seconds: float) -> None:
        logger.debug("Seeking to %.1f", seconds)
        self._web_player.seek(seconds)
        self.progress = seconds

    async def stop(self) -> None:
        logger.debug("Stopping playback")
        self._web_player.pause()
        self._track_generation += 1
        self.state = PlaybackState()
        self.current_track = None
        self.progress = 0.0
        self.duration = 0.0
        self._song_nearing_end = False

    async def next(self) -> None:
        """Skip forward.

        Shuffle picks a random queue entry (the current one included),
        repeat-one restarts the current track, otherwise the index advances,
        wrapping to the start on repeat-all. At the end of the queue with
        repeat off nothing happens.
        """
        if not self.queue:
            if self.pending_play_video_id is not None:
                self._web_player.next()
            return

        if self.shuffle_enabled:
            self.current_index = self._rng.randrange(len(self.queue))
            await self.play(self.queue[self.current_index])
            return

        if self.repeat_mode == RepeatMode.ONE:
            await self.seek(0)
            await self.resume()
            return

        if self.current_index < len(self.queue) - 1:
            self.current_index += 1
            await self.play(self.queue[self.current_index])
        elif self.repeat_mode == RepeatMode.ALL:
            self.current_index = 0
            await self.play(self.queue[0])
        else:
            logger.debug("End of queue reached")

    async def previous(self) -> None:
        """Restart the track if past the scrub-back threshold, else go back."""
        restart = self.progress > self._config.restart_threshold

        if not self.queue:
            if self.pending_play_video_id is None:
                return
            if restart:
                await self.seek(0)
            else:
                self._web_player.previous()
            return

        if restart or self.current_index <= 0:
            await self.seek(0)
        else:
            self.current_index -= 1
            await self.play(self.queue[self.current_index])

    # -- Volume, shuffle, repeat -----------------------------------------------

    def _save_settings(self) -> None:
        self._settings_store.save(
            PlayerSettings(
                volume=self.volume,
                volume_before_mute=self.volume_before_mute,
                shuffle_enabled=self.shuffle_enabled,
                repeat_mode=self.repeat_mode,
            )
        )

    async def set_volume(self, value: float) -> None:
        self.volume = clamp_volume(value)
        logger.debug("Setting volume to %.2f", self.volume)
        self._save_settings()
        self._web_player.set_volume(self.volume)

    async def toggle_mute(self) -> None:
        """Mute, remembering the volume, or restore it (1.0 if it was 0)."""
        if self.is_muted:
            restored = self.volume_before_mute if self.volume_before_mute > 0 else 1.0
            await self.set_volume(restored)
            logger.info("Unmuted, volume restored to %.2f", restored)
        else:
            self.volume_before_mute = self.volume
            await self.set_volume(0)
            logger.info("Muted")

    def toggle_shuffle(self) -> None:
        self.shuffle_enabled = not self.shuffle_enabled
        self._save_settings()
        logger.info("Shuffle mode: %s", "enabled" if self.shuffle_enabled else "disabled")

    def cycle_repeat_mode(self) -> None:
        self.repeat_mode = self.repeat_mode.cycled()
        self._save_settings()
        logger.info("Repeat mode: %s", self.repeat_mode)

    # -- Queue -----------------------------------------------------------------

    async def play_queue(self, songs: Iterable[Song], start_index: int = 0) -> None:
        """Replace the queue and start playing at ``start_index`` (clamped)."""
        songs = list(songs)
        if not songs:
            return
        self.queue = songs
        self.current_index = max(0, min(start_index, len(songs) - 1))
        await self.play(songs[self.current_index])

    async def play_from_queue(self, index: int) -> None:
        if not 0 <= index < len(self.queue):
            return
        self.current_index = index
        await self.play(self.queue[index])

    async def play_with_radio(self, song: Song) -> None:
        """Play ``song`` now and fill the queue with its radio in the background."""
        logger.info("Playing with radio: %s", song.title)
        self.queue = [song]
        self.current_index = 0
        await self.play(song)
        self._spawn(self._fetch_and_apply_radio_queue(song.video_id, self._track_generation))

    async def _fetch_and_apply_radio_queue(self, video_id: str, generation: int) -> None:
        try:
            radio = await self._client.get_radio_queue(video_id)
        except YTDeckError as e:
            logger.warning("Failed to fetch radio queue: %s", e.message)
            return

        if not radio:
            logger.info("No radio songs returned")
            return
        if not self._is_current(video_id, generation):
            logger.info("Track changed, discarding radio queue for %s", video_id)
            return

        current = self.current_track
        assert current is not None
        seed_index = next((i for i, s in enumerate(radio) if s.video_id == video_id), None)
        if seed_index is None:
            rest = radio
        else:
            rest = radio[:seed_index] + radio[seed_index + 1 :]
        self.queue = [current, *rest]
        self.current_index = 0
        logger.info("Radio queue updated with %d songs", len(self.queue))

    def _seed_queue_with_current(self) -> None:
        if not self.queue and self.current_track is not None:
            self.queue.append(self.current_track)
            self.current_index = 0
            logger.info("Initialized queue with current track: %s", self.current_track.title)

    def add_to_queue(self, song: Song) -> None:
        self._seed_queue_with_current()
        self.queue.append(song)
        logger.info("Added to queue: %s. Queue now has %d songs", song.title, len(self.queue))

    def append_to_queue(self, songs: Iterable[Song]) -> None:
        songs = list(songs)
        if not songs:
            return
        self.queue.extend(songs)
        logger.info("Appended %d songs to queue", len(songs))

    def insert_next_in_queue(self, songs: Iterable[Song]) -> None:
        """Insert songs right after the current track."""
        songs = list(songs)
        if not songs:
            return
        self._seed_queue_with_current()
        position = min(self.current_index + 1, len(self.queue))
        self.queue[position:position] = songs
        logger.info("Inserted %d songs at position %d", len(songs), position)

    def _relocate_current(self) -> bool:
        if self.current_track is None:
            return False
        for i, song in enumerate(self.queue):
            if song.is_same_track(self.current_track):
                self.current_index = i
                return True
        return False

    def remove_from_queue(self, video_ids: Iterable[str]) -> None:
        ids = set(video_ids)
        before = len(self.queue)
        self.queue = [s for s in self.queue if s.video_id not in ids]
        if not self._relocate_current():
            self.current_index = min(self.current_index, max(len(self.queue) - 1, 0))
        logger.info("Removed %d songs from queue", before - len(self.queue))

    def reorder_queue(self, video_ids: Iterable[str]) -> None:
        """Rebuild the queue in the given order. Unknown IDs are dropped."""
        by_id = {song.video_id: song for song in self.queue}
        self.queue = [by_id[vid] for vid in video_ids if vid in by_id]
        self._relocate_current()
        logger.info("Queue reordered with %d songs", len(self.queue))

    def shuffle_queue(self) -> None:
        """Shuffle the queue, keeping the current track first."""
        if len(self.queue) <= 1:
            return
        if 0 <= self.current_index < len(self.queue):
            current = self.queue.pop(self.current_index)
            self._rng.shuffle(self.queue)
            self.queue.insert(0, current)
        else:
            self._rng.shuffle(self.queue)
        self.current_index = 0
        logger.info("Queue shuffled")

    def clear_queue(self) -> None:
        """Drop everything but the current track."""
        self.queue = [self.current_track] if self.current_track is not None else []
        self.current_index = 0
        logger.info("Queue cleared")

    # -- Lyrics cache ----------------------------------------------------------

    def cache_lyrics(self, lyrics: Lyrics, video_id: str) -> None:
        self._cached_lyrics = lyrics
        self._cached_lyrics_video_id = video_id

    def get_cached_lyrics(self, video_id: str) -> Lyrics | None:
        if self._cached_lyrics_video_id == video_id:
            return self._cached_lyrics
        return None

    def clear_lyrics_cache(self) -> None:
        self._cached_lyrics = None
        self._cached_lyrics_video_id = None

    def current_lyric_line(self) -> TimedLyricLine | None:
        """Timed line of the cached lyrics at the current progress."""
        if self.current_track is None:
            return None
        lyrics = self.get_cached_lyrics(self.current_track.video_id)
        return lyrics.line_at(self.progress) if lyrics is not None else None

    # -- Rating and library ----------------------------------------------------

    async def _rate_current_track(self, rating: LikeStatus) -> bool:
        track = self.current_track
        if track is None:
            return False
        # Same rating twice clears it
        status = LikeStatus.INDIFFERENT if self.current_track_like_status == rating else rating
        logger.info("Rating current track %s as %s", track.video_id, status)

        confirmed = await perform_optimistic(
            _TrackSlot(self, "current_track_like_status", LikeStatus.INDIFFERENT),
            status,
            lambda: self._client.rate_song(track.video_id, status),
            description=f"rate {track.video_id} as {status}",
        )
        if confirmed and self._like_cache is not None:
            self._like_cache.set_status(track.video_id, status)
        return confirmed

    async def like_current_track(self) -> bool:
        """Toggle a like on the current track. Returns False if reverted."""
        return await self._rate_current_track(LikeStatus.LIKE)

    async def dislike_current_track(self) -> bool:
        """Toggle a dislike on the current track. Returns False if reverted."""
        return await self._rate_current_track(LikeStatus.DISLIKE)

    async def toggle_library_status(self) -> bool:
        """Add the current track to the library or remove it.

        Needs feedback tokens from the metadata fetch. After a confirmed
        toggle the metadata is refetched, since the tokens swap roles.
        """
        track = self.current_track
        if track is None:
            return False
        tokens = self.current_track_feedback_tokens
        in_library = self.current_track_in_library
        token = tokens.token_for(in_library=in_library) if tokens is not None else None
        if token is None:
            logger.warning("No feedback token available for library toggle")
            return False

        generation = self._track_generation
        confirmed = await perform_optimistic(
            _TrackSlot(self, "current_track_in_library", False),
            not in_library,
            lambda: self._client.edit_song_library_status([token]),
            description=f"{'remove' if in_library else 'add'} {track.video_id} in library",
        )
        if confirmed:
            logger.info("Successfully %s library", "removed from" if in_library else "added to")
            await self._fetch_song_metadata(track.video_id, generation)
        return confirmed
