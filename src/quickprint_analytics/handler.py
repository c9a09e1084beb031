"""AnalyticsHandler — best-effort usage recording."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .signal import UsageSignal
from .sinks import LoggingAnalyticsSink

if TYPE_CHECKING:
    from quickprint_messaging.envelope import EventEnvelope

    from .sinks import IAnalyticsSink

logger = logging.getLogger(__name__)


class AnalyticsHandler:
    """
    Records a ``UsageSignal`` per envelope.

    Analytics must never hold up the queue: every failure is logged and the
    envelope is acknowledged. Unknown kinds are recorded under their raw name.
    """

    def __init__(self, sink: IAnalyticsSink | None = None) -> None:
        self.sink = sink or LoggingAnalyticsSink()

    async def record(self, envelope: EventEnvelope) -> UsageSignal | None:
        """Write a signal for *envelope*; ``None`` if the sink failed."""
        try:
            signal = UsageSignal(
                kind=envelope.kind_name,
                produced_at=envelope.produced_at,
                correlation_id=envelope.correlation_id,
                identifiers=UsageSignal.extract_identifiers(envelope.payload),
            )
            await self.sink.write(signal)
        except Exception:
            logger.exception(
                "Analytics recording failed for %s (%s)",
                envelope.kind_name,
                envelope.message_id,
            )
            return None
        return signal

    async def handle(self, envelope: EventEnvelope) -> None:
        await self.record(envelope)
