"""RabbitMQPublisher — IMessagePublisher with a direct exchange and publisher confirms."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import aio_pika
from aio_pika.exceptions import AMQPError, ChannelInvalidStateError

from quickprint_core.ports.messaging import IMessagePublisher

from ..envelope import EventEnvelope
from ..exceptions import MessagingSerializationError, PublishError
from ..serialization import EnvelopeSerializer

if TYPE_CHECKING:
    from .connection import RabbitMQConnectionManager


class RabbitMQPublisher(IMessagePublisher):
    """RabbitMQ adapter implementing IMessagePublisher.

    The routing key is the event kind. Messages are persistent and published
    mandatory on the confirm-mode channel, so ``publish`` resolves only after
    the broker has routed and accepted the message. Never waits for a
    reconnect: a lost connection raises ``NotConnectedError`` immediately.
    """

    def __init__(
        self,
        connection: RabbitMQConnectionManager,
        *,
        serializer: EnvelopeSerializer | None = None,
        publish_timeout: float | None = 10.0,
    ) -> None:
        """Configure publisher.

        Args:
            connection: Shared connection manager.
            serializer: Used to serialize envelopes; default EnvelopeSerializer().
            publish_timeout: Seconds to wait for the broker confirm.
        """
        self._connection = connection
        self._serializer = serializer or EnvelopeSerializer()
        self._publish_timeout = publish_timeout

    def _build_message(self, envelope: EventEnvelope) -> aio_pika.Message:
        try:
            body = self._serializer.serialize(envelope)
        except MessagingSerializationError as e:
            raise PublishError(f"Cannot serialize {envelope.message_id}: {e}") from e
        return aio_pika.Message(
            body=body,
            content_type=self._serializer.content_type,
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
            message_id=envelope.message_id,
            correlation_id=envelope.correlation_id,
            timestamp=envelope.produced_at,
            type=envelope.kind_name,
            headers={k: v for k, v in envelope.headers.items() if v is not None},
        )

    async def publish(self, envelope: Any) -> None:
        """Publish *envelope* to the exchange with its kind as routing key.

        Raises:
            NotConnectedError: The connection is not CONNECTED.
            PublishError: Serialization failed, the message was returned or
                nacked, or the channel failed while publishing.
        """
        if not isinstance(envelope, EventEnvelope):
            raise PublishError(f"Expected EventEnvelope, got {type(envelope).__name__}")
        exchange = self._connection.exchange
        message = self._build_message(envelope)
        try:
            await exchange.publish(
                message,
                routing_key=envelope.kind_name,
                mandatory=True,
                timeout=self._publish_timeout,
            )
        except (
            AMQPError,
            ChannelInvalidStateError,
            ConnectionError,
            OSError,
            asyncio.TimeoutError,
        ) as e:
            raise PublishError(
                f"Broker did not accept {envelope.kind_name} ({envelope.message_id}): {e}"
            ) from e

    async def health_check(self) -> bool:
        """Return True if the connection is healthy."""
        return await self._connection.health_check()
