"""QuickPrint background worker — notifications and analytics consumers."""

from __future__ import annotations

from .app import NotificationWorker
from .log_config import configure_logging
from .providers import build_channel_providers, build_recipient_directory
from .settings import WorkerSettings

__all__ = [
    "NotificationWorker",
    "WorkerSettings",
    "build_channel_providers",
    "build_recipient_directory",
    "configure_logging",
]
