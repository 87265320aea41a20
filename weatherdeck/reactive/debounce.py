"""Quiet-window debouncer for bursty input on an asyncio event loop."""

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()


class Debouncer(Generic[T]):
    """Emit only the last value of a burst once ``delay`` seconds pass quietly.

    Consecutive emissions of an equal value are suppressed.
    """

    def __init__(
        self,
        callback: Callable[[T], None],
        delay: float,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.callback = callback
        self.delay = delay
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._pending: object = _UNSET
        self._last_emitted: object = _UNSET

    @property
    def has_pending(self) -> bool:
        return self._pending is not _UNSET

    def push(self, value: T) -> None:
        """Record a new value and restart the quiet window."""
        loop = self._loop or asyncio.get_running_loop()
        self._pending = value
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire)

    def flush(self) -> None:
        """Emit the pending value now instead of waiting for the window."""
        if self._handle is not None:
            self._handle.cancel()
        self._fire()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = _UNSET

    def _fire(self) -> None:
        self._handle = None
        value, self._pending = self._pending, _UNSET
        if value is _UNSET:
            return
        if value == self._last_emitted:
            logger.debug("Suppressing unchanged value %r", value)
            return
        self._last_emitted = value
        self.callback(value)
