"""Memory adapters for testing and development."""

from __future__ import annotations

from .fake import InMemorySender, SentMessage
from .mock import MockSender

__all__ = ["InMemorySender", "MockSender", "SentMessage"]
