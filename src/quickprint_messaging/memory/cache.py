"""InMemoryCacheService — process-local ICacheService with expiry and a size bound."""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import TYPE_CHECKING, Any

from quickprint_core.ports.cache import ICacheService

if TYPE_CHECKING:
    from collections.abc import Callable


class InMemoryCacheService(ICacheService):
    """
    Dict-backed cache whose entries expire after their TTL.

    Holds at most *max_entries*; when full, the oldest entry is evicted.
    Expired entries are dropped on read; writes also sweep expired entries
    from the oldest end.
    """

    def __init__(
        self,
        *,
        default_ttl: int | None = None,
        max_entries: int = 100_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        now = self._clock()
        self._entries.pop(key, None)
        self._entries[key] = (value, now + ttl if ttl is not None else None)
        self._purge(now)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def _purge(self, now: float) -> None:
        while self._entries:
            key, (_, expires_at) = next(iter(self._entries.items()))
            if expires_at is None or expires_at > now:
                break
            del self._entries[key]
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
