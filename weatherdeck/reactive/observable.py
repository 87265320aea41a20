"""Observable state cells and event channels.

A ``StateCell`` holds exactly one current value and notifies subscribers
when it is replaced. An ``EventChannel`` carries fire-and-forget events with
no held value. Subscriber exceptions are logged and never interrupt fan-out.
"""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Handler = Callable[[T], None]


class Subscription:
    """Handle returned by ``subscribe``; call ``unsubscribe`` to detach."""

    def __init__(self, source: "EventChannel", handler: Callable) -> None:
        self._source = source
        self._handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._source._remove(self._handler)
            self.active = False


class EventChannel(Generic[T]):
    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: list[Handler] = []

    def subscribe(self, handler: Handler) -> Subscription:
        self._handlers.append(handler)
        logger.debug("Subscribed handler to %s", self.name)
        return Subscription(self, handler)

    def emit(self, value: T) -> None:
        # Copy so handlers may unsubscribe while being notified
        for handler in list(self._handlers):
            try:
                handler(value)
            except Exception:
                logger.exception("Handler for %s failed", self.name)

    def clear(self) -> None:
        self._handlers.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def _remove(self, handler: Handler) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            logger.warning("Handler not found on %s", self.name)


class StateCell(EventChannel[T]):
    """Single authoritative value with subscribe/notify.

    ``subscribe`` replays the current value immediately. ``set`` notifies only
    when the new value differs from the held one.
    """

    def __init__(self, name: str, initial: T) -> None:
        super().__init__(name)
        self._value = initial

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, handler: Handler, replay: bool = True) -> Subscription:
        subscription = super().subscribe(handler)
        if replay:
            try:
                handler(self._value)
            except Exception:
                logger.exception("Handler for %s failed on replay", self.name)
        return subscription

    def set(self, value: T) -> bool:
        """Replace the held value. Returns True if subscribers were notified."""
        if value == self._value:
            return False
        self._value = value
        self.emit(value)
        return True
