"""Ports (protocols) implemented by infrastructure packages."""

from __future__ import annotations

from .background_worker import IBackgroundWorker
from .cache import ICacheService
from .messaging import IBrokerConnection, IDelivery, IMessageConsumer, IMessagePublisher

__all__ = [
    "IBackgroundWorker",
    "IBrokerConnection",
    "ICacheService",
    "IDelivery",
    "IMessageConsumer",
    "IMessagePublisher",
]
