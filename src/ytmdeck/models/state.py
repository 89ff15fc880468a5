"""Observable state models for the playback and catalog services."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ytmdeck.exceptions import YTDeckError
from ytmdeck.models.enums import LoadingStatus, PlaybackStatus


class PlaybackState(BaseModel):
    """Current state of the playback state machine.

    ``message`` is only set for the error state.
    """

    model_config = ConfigDict(frozen=True)

    status: PlaybackStatus = PlaybackStatus.IDLE
    message: str | None = None

    @classmethod
    def error(cls, message: str) -> PlaybackState:
        return cls(status=PlaybackStatus.ERROR, message=message)

    @property
    def is_playing(self) -> bool:
        return self.status == PlaybackStatus.PLAYING


class LoadingError(BaseModel):
    """User-facing description of a failed load.

    Attributes:
        message: Human readable message.
        is_retryable: Whether the UI should offer a retry. Network and
            upstream failures are retryable; expired sessions are not.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    is_retryable: bool = True

    @classmethod
    def from_exception(cls, error: Exception) -> LoadingError:
        if isinstance(error, YTDeckError):
            return cls(message=error.message, is_retryable=error.retryable)
        return cls(message=str(error) or type(error).__name__, is_retryable=True)


class LoadingState(BaseModel):
    """Loading state of a catalog view."""

    model_config = ConfigDict(frozen=True)

    status: LoadingStatus = LoadingStatus.IDLE
    error: LoadingError | None = None

    @classmethod
    def failed(cls, error: Exception) -> LoadingState:
        return cls(status=LoadingStatus.ERROR, error=LoadingError.from_exception(error))

    @property
    def is_loading(self) -> bool:
        return self.status == LoadingStatus.LOADING
