"""In-memory transport for tests and local runs."""

from __future__ import annotations

from .broker import InMemoryBroker, InMemoryDelivery
from .cache import InMemoryCacheService
from .consumer import InMemoryConsumer
from .publisher import InMemoryPublisher

__all__ = [
    "InMemoryBroker",
    "InMemoryCacheService",
    "InMemoryConsumer",
    "InMemoryDelivery",
    "InMemoryPublisher",
]
