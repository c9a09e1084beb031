from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ICacheService(Protocol):
    """
    Minimal key/value port with TTL, e.g. backed by Redis.

    Used for cross-process deduplication markers.
    """

    async def get(self, key: str) -> Any | None:
        """Return the stored value or ``None``."""
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value* under *key*, expiring after *ttl* seconds if given."""
        ...
