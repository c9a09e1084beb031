"""RetryPolicy — bounded attempts with capped exponential backoff."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Iterator
from dataclasses import dataclass

DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True, kw_only=True)
class RetryPolicy:
    """How often, and how far apart, a failed attempt is repeated.

    Attempts are 1-based and travel on the envelope (``EventEnvelope.attempt``),
    so the limit holds across redeliveries and worker restarts. The connection
    manager reuses the same policy for its connect attempts.

    Args:
        max_attempts: Total attempts including the first.
        base_delay: Seconds before the second attempt.
        max_delay: Cap on any single delay.
        jitter: Scale each delay by a random factor in [0.5, 1.5].
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = 1.0
    max_delay: float = 60.0
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("base_delay and max_delay must be >= 0")
        if self.base_delay > self.max_delay:
            raise ValueError("base_delay must be <= max_delay")

    @classmethod
    def immediate(cls, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> RetryPolicy:
        """Same limit, no waiting (tests and the in-memory transport)."""
        return cls(max_attempts=max_attempts, base_delay=0.0, max_delay=0.0, jitter=False)

    def should_retry(self, attempt: int) -> bool:
        """True while *attempt* failed and is not the last one allowed."""
        return 1 <= attempt < self.max_attempts

    def remaining(self, attempt: int) -> int:
        return max(0, self.max_attempts - max(attempt, 0))

    def delay_for_attempt(self, attempt: int) -> float:
        """Seconds to wait after *attempt* fails: ``base * 2^(attempt-1)``, jittered.

        The result never exceeds ``max_delay``, jitter included.
        """
        if attempt < 1:
            return 0.0
        delay = self.base_delay * 2 ** min(attempt - 1, 62)
        if self.jitter:
            delay *= 0.5 + random.random()  # noqa: S311
        return max(0.0, min(float(delay), self.max_delay))

    def schedule(self) -> Iterator[float]:
        """Delays between consecutive attempts (``max_attempts - 1`` values)."""
        for attempt in range(1, self.max_attempts):
            yield self.delay_for_attempt(attempt)

    async def wait_before_retry(self, attempt: int) -> None:
        delay = self.delay_for_attempt(attempt)
        if delay > 0:
            await asyncio.sleep(delay)
