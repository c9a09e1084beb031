"""RabbitMQ transport adapter (aio-pika)."""

from __future__ import annotations

from .connection import ConnectionState, RabbitMQConnectionManager, mask_url
from .consumer import RabbitMQConsumer, RabbitMQDelivery
from .publisher import RabbitMQPublisher

__all__ = [
    "ConnectionState",
    "RabbitMQConnectionManager",
    "RabbitMQConsumer",
    "RabbitMQDelivery",
    "RabbitMQPublisher",
    "mask_url",
]
