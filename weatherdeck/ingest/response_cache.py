"""Short-lived replay cache for identical provider queries.

Concurrent callers with the same key share one in-flight fetch. A settled
result is replayed until its TTL expires. Failures are evicted immediately so
the next caller retries.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from typing import Any

logger = logging.getLogger(__name__)

COORD_PRECISION = 4


def coordinate_key(kind: str, lat: float, lon: float) -> tuple[str, float, float]:
    return (kind, round(lat, COORD_PRECISION), round(lon, COORD_PRECISION))


class ResponseCache:
    def __init__(
        self,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, asyncio.Future]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get_or_fetch(
        self, key: Hashable, fetch: Callable[[], Awaitable[Any]]
    ) -> Any:
        """Return the cached result for ``key`` or run ``fetch`` once to fill it."""
        if self.ttl_seconds <= 0:
            return await fetch()

        now = self._clock()
        entry = self._entries.get(key)
        if entry is not None and entry[0] > now:
            logger.debug("Replay cache hit for %s", key)
            future = entry[1]
        else:
            future = asyncio.ensure_future(fetch())
            self._entries[key] = (now + self.ttl_seconds, future)
            future.add_done_callback(lambda f, k=key: self._evict_failed(k, f))

        # Shield so one cancelled waiter does not cancel the shared fetch
        return await asyncio.shield(future)

    def clear(self) -> None:
        for _, future in self._entries.values():
            if not future.done():
                future.cancel()
        self._entries.clear()

    def _evict_failed(self, key: Hashable, future: asyncio.Future) -> None:
        if future.cancelled() or future.exception() is not None:
            entry = self._entries.get(key)
            if entry is not None and entry[1] is future:
                del self._entries[key]
