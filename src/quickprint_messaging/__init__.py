"""QuickPrint messaging — envelope, event bus, consumer runtime, and transports."""

from __future__ import annotations

from .bus import EventBus
from .consumer import EventConsumer
from .dead_letter import DeadLetterHandler
from .envelope import EventEnvelope
from .exceptions import (
    MessagingConnectionError,
    MessagingError,
    MessagingSerializationError,
    NotConnectedError,
    PublishError,
)
from .idempotency import IdempotencyFilter
from .outcome import Outcome, classify_failure
from .publishers import OrderEventPublisher, PaymentEventPublisher, ShopEventPublisher
from .retry import RetryPolicy
from .routing import (
    ANALYTICS_QUEUE,
    DEFAULT_EXCHANGE,
    NOTIFICATIONS_QUEUE,
    QueueBinding,
    RoutingTable,
    dead_letter_queue,
    default_routing,
)
from .serialization import EnvelopeSerializer

__all__ = [
    "ANALYTICS_QUEUE",
    "DEFAULT_EXCHANGE",
    "NOTIFICATIONS_QUEUE",
    "DeadLetterHandler",
    "EnvelopeSerializer",
    "EventBus",
    "EventConsumer",
    "EventEnvelope",
    "IdempotencyFilter",
    "MessagingConnectionError",
    "MessagingError",
    "MessagingSerializationError",
    "NotConnectedError",
    "OrderEventPublisher",
    "Outcome",
    "PaymentEventPublisher",
    "PublishError",
    "QueueBinding",
    "RetryPolicy",
    "RoutingTable",
    "ShopEventPublisher",
    "classify_failure",
    "dead_letter_queue",
    "default_routing",
]
