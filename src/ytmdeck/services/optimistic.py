"""Optimistic updates with revert on remote failure.

Ratings and library toggles show the new state immediately and only then ask
YouTube Music to persist it. If the remote call fails, the previous state is
restored: the prior value if there was one, otherwise the slot is cleared.
"""

import logging
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Generic, Protocol, TypeVar

from ytmdeck.exceptions import YTDeckError

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K")


class OptimisticSlot(Protocol[T]):
    """A single piece of state that can be read, overwritten and cleared."""

    def get(self) -> T | None: ...

    def set(self, value: T) -> None: ...

    def clear(self) -> None: ...


class MappingSlot(Generic[K, T]):
    """Slot backed by one key of a mutable mapping."""

    def __init__(self, mapping: MutableMapping[K, T], key: K) -> None:
        self._mapping = mapping
        self._key = key

    def get(self) -> T | None:
        return self._mapping.get(self._key)

    def set(self, value: T) -> None:
        self._mapping[self._key] = value

    def clear(self) -> None:
        self._mapping.pop(self._key, None)


async def perform_optimistic(
    slot: OptimisticSlot[T],
    value: T,
    remote: Callable[[], Awaitable[object]],
    description: str = "update",
) -> bool:
    """Apply ``value`` to ``slot`` now, confirm it remotely, revert on failure.

    The revert is skipped when the slot no longer holds ``value``, since a
    later command has already replaced it.

    Args:
        slot: State to update.
        value: New value, applied before the remote call starts.
        remote: Zero-argument coroutine function persisting the change.
        description: Used in log messages.

    Returns:
        True if the remote call succeeded, False if the update was reverted.
    """
    prior = slot.get()
    slot.set(value)

    try:
        await remote()
    except YTDeckError as e:
        logger.warning("Could not %s, reverting: %s", description, e.message)
        if slot.get() != value:
            logger.debug("Skipping revert of %s, state changed meanwhile", description)
        elif prior is None:
            slot.clear()
        else:
            slot.set(prior)
        return False

    logger.debug("Confirmed %s", description)
    return True
