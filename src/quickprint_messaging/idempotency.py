"""IdempotencyFilter — deduplicate by key using an ICacheService."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .memory.cache import InMemoryCacheService

if TYPE_CHECKING:
    from quickprint_core.ports.cache import ICacheService


class IdempotencyFilter:
    """Remember processed keys to prevent double-execution on redelivery.

    Keys are envelope ``message_id`` values in the consumer runtime and
    per-channel dedup keys in the notification handler. Every key expires
    after *ttl_seconds*. Without a shared cache (e.g. Redis) the markers live
    in a bounded ``InMemoryCacheService`` and only protect a single process.
    """

    def __init__(
        self,
        cache: ICacheService | None = None,
        *,
        key_prefix: str = "idempotency:",
        ttl_seconds: int = 86400,
    ) -> None:
        """Configure the filter.

        Args:
            cache: Cache holding the markers; defaults to a process-local
                ``InMemoryCacheService``.
            key_prefix: Prefix for cache keys.
            ttl_seconds: Lifetime of each marker.
        """
        self._cache: ICacheService = cache if cache is not None else InMemoryCacheService()
        self._key_prefix = key_prefix
        self._ttl_seconds = ttl_seconds

    @property
    def cache(self) -> ICacheService:
        return self._cache

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    async def is_duplicate(self, key: str) -> bool:
        """Return True if *key* has already been processed."""
        return await self._cache.get(self._key(key)) is not None

    async def mark_processed(self, key: str) -> None:
        """Record that *key* has been processed."""
        await self._cache.set(self._key(key), "1", ttl=self._ttl_seconds)

    def clear_memory(self) -> None:
        """Forget every marker held in process (for testing)."""
        if isinstance(self._cache, InMemoryCacheService):
            self._cache.clear()
