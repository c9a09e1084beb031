"""Analytics sinks — where usage signals go."""

from __future__ import annotations

import json
import logging
from collections import Counter
from typing import Protocol, runtime_checkable

from .signal import UsageSignal

_log = logging.getLogger("quickprint.analytics")


@runtime_checkable
class IAnalyticsSink(Protocol):
    """Accepts usage signals. Implementations may raise; callers swallow."""

    async def write(self, signal: UsageSignal) -> None: ...


class InMemoryAnalyticsSink(IAnalyticsSink):
    """Keeps signals and per-kind counters (tests, local dashboards)."""

    def __init__(self) -> None:
        self.signals: list[UsageSignal] = []
        self._counts: Counter[str] = Counter()

    async def write(self, signal: UsageSignal) -> None:
        self.signals.append(signal)
        self._counts[signal.kind] += 1

    def counts(self) -> dict[str, int]:
        """Signals recorded per event kind."""
        return dict(self._counts)

    def clear(self) -> None:
        self.signals.clear()
        self._counts.clear()


class LoggingAnalyticsSink(IAnalyticsSink):
    """Emits one JSON log entry per signal on ``quickprint.analytics``."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or _log

    async def write(self, signal: UsageSignal) -> None:
        self._log.info(json.dumps(signal.to_dict()))
