"""QuickPrint analytics — best-effort usage signals from lifecycle events."""

from __future__ import annotations

from .handler import AnalyticsHandler
from .signal import UsageSignal
from .sinks import IAnalyticsSink, InMemoryAnalyticsSink, LoggingAnalyticsSink

__all__ = [
    "AnalyticsHandler",
    "IAnalyticsSink",
    "InMemoryAnalyticsSink",
    "LoggingAnalyticsSink",
    "UsageSignal",
]
