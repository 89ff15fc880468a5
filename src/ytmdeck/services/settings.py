"""Persisted playback settings (volume, mute, shuffle, repeat)."""

import logging
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ytmdeck.models.enums import RepeatMode

logger = logging.getLogger(__name__)


def clamp_volume(value: float) -> float:
    """Clamp a volume to [0, 1]."""
    return min(max(float(value), 0.0), 1.0)


class PlayerSettings(BaseModel):
    """Settings that survive a restart.

    Attributes:
        volume: Current volume, 0 when muted.
        volume_before_mute: Volume to restore on unmute.
        shuffle_enabled: Whether next() picks a random track.
        repeat_mode: Repeat mode.
    """

    model_config = ConfigDict(frozen=True)

    volume: float = 1.0
    volume_before_mute: float = 1.0
    shuffle_enabled: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF

    @field_validator("volume", "volume_before_mute", mode="after")
    @classmethod
    def _clamp(cls, value: float) -> float:
        return clamp_volume(value)


class SettingsStoreProtocol(Protocol):
    """Storage backend for PlayerSettings."""

    def load(self) -> PlayerSettings: ...

    def save(self, settings: PlayerSettings) -> None: ...


class MemorySettingsStore:
    """Keeps settings in memory only."""

    def __init__(self, settings: PlayerSettings | None = None) -> None:
        self.settings = settings or PlayerSettings()
        self.save_count = 0

    def load(self) -> PlayerSettings:
        return self.settings

    def save(self, settings: PlayerSettings) -> None:
        self.settings = settings
        self.save_count += 1


class JsonSettingsStore:
    """Settings persisted to a JSON file, rewritten on every change.

    A missing or unreadable file yields the defaults. Write failures are
    logged and otherwise ignored; playback keeps working with the in-memory
    value.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> PlayerSettings:
        if not self._path.exists():
            logger.debug("No settings file at %s, using defaults", self._path)
            return PlayerSettings()
        try:
            return PlayerSettings.model_validate_json(self._path.read_text())
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self._path, e)
            return PlayerSettings()

    def save(self, settings: PlayerSettings) -> None:
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(settings.model_dump_json(indent=2))
            tmp_path.replace(self._path)
        except OSError as e:
            logger.warning("Failed to save settings to %s: %s", self._path, e)
