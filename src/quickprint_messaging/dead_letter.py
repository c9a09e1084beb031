"""DeadLetterHandler — observe envelopes that are discarded."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from .envelope import EventEnvelope

logger = logging.getLogger(__name__)


class DeadLetterHandler:
    """Hook invoked before a discarded delivery is rejected.

    The broker itself moves the rejected message to ``<queue>.dlq``; the hook
    lets callers record it elsewhere (metrics, alerting, an audit table).
    Errors raised by the hook are logged and never block the rejection.
    """

    def __init__(
        self,
        on_dead_letter: (
            Callable[
                [EventEnvelope, str, BaseException | None], Coroutine[Any, Any, None]
            ]
            | None
        ) = None,
    ) -> None:
        """Configure dead-letter handling.

        Args:
            on_dead_letter: Async callable (envelope, reason, exception) -> None.
        """
        self._on_dead_letter = on_dead_letter

    async def route(
        self,
        envelope: EventEnvelope,
        reason: str,
        exception: BaseException | None = None,
    ) -> None:
        """Log the discard and call ``on_dead_letter`` if set."""
        logger.warning(
            "Dead-lettering %s (%s) after attempt %d: %s",
            envelope.message_id,
            envelope.kind_name,
            envelope.attempt,
            reason,
        )
        if self._on_dead_letter is None:
            return
        try:
            await self._on_dead_letter(envelope, reason, exception)
        except Exception:
            logger.exception("Dead-letter hook failed for %s", envelope.message_id)
