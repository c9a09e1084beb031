"""RabbitMQConsumer — IMessageConsumer with manual settlement and re-subscribe."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import aio_pika
from aio_pika.exceptions import AMQPError, ChannelInvalidStateError

from quickprint_core.ports.messaging import IMessageConsumer

from ..exceptions import MessagingConnectionError, MessagingError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aio_pika.abc import AbstractIncomingMessage, AbstractQueue

    from quickprint_core.ports.messaging import IDelivery

    from .connection import RabbitMQConnectionManager

logger = logging.getLogger(__name__)

_CHANNEL_ERRORS = (
    AMQPError,
    ChannelInvalidStateError,
    ConnectionError,
    OSError,
    asyncio.TimeoutError,
)


class RabbitMQDelivery:
    """IDelivery over an ``aio_pika`` incoming message."""

    def __init__(
        self,
        message: AbstractIncomingMessage,
        queue: str,
        connection: RabbitMQConnectionManager,
    ) -> None:
        self._message = message
        self._queue = queue
        self._connection = connection
        self.body: bytes = message.body
        self.redelivered: bool = bool(message.redelivered)

    async def ack(self) -> None:
        try:
            await self._message.ack()
        except _CHANNEL_ERRORS as e:
            raise MessagingConnectionError(f"ack failed: {e}") from e

    async def retry(self, body: bytes) -> None:
        """Republish *body* to the same queue, then ack the original.

        Falls back to ``nack(requeue=True)`` (same attempt number) when the
        republish fails.

        Raises:
            MessagingConnectionError: The channel the message arrived on is
                closed. Nothing is republished; the broker redelivers the
                original.
        """
        original = self._message
        if original.channel.is_closed:
            raise MessagingConnectionError(
                f"Channel closed before retry of {original.message_id} on {self._queue}"
            )
        try:
            await self._connection.publish_channel.default_exchange.publish(
                aio_pika.Message(
                    body=body,
                    content_type=original.content_type,
                    delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
                    message_id=original.message_id,
                    correlation_id=original.correlation_id,
                    type=original.type,
                    headers=dict(original.headers or {}),
                ),
                routing_key=self._queue,
            )
        except (MessagingError, *_CHANNEL_ERRORS) as e:
            logger.warning(
                "Republish to %s failed, requeueing original: %s", self._queue, e
            )
            try:
                await original.nack(requeue=True)
            except _CHANNEL_ERRORS as nack_error:
                raise MessagingConnectionError(
                    f"nack failed: {nack_error}"
                ) from nack_error
            return
        await self.ack()

    async def reject(self) -> None:
        try:
            await self._message.nack(requeue=False)
        except _CHANNEL_ERRORS as e:
            raise MessagingConnectionError(f"reject failed: {e}") from e


class RabbitMQConsumer(IMessageConsumer):
    """RabbitMQ adapter implementing IMessageConsumer.

    Queues are declared by the connection manager; this adapter only checks
    they exist (passive declare) and starts ``basic.consume`` with manual
    acknowledgement. Every subscription is re-issued after a reconnect.
    """

    def __init__(self, connection: RabbitMQConnectionManager) -> None:
        self._connection = connection
        self._subscriptions: dict[str, Callable[[IDelivery], Awaitable[None]]] = {}
        self._consumers: dict[str, tuple[AbstractQueue, str]] = {}
        connection.add_connected_listener(self._resubscribe)

    @property
    def consumer_tags(self) -> dict[str, str]:
        return {name: tag for name, (_, tag) in self._consumers.items()}

    async def consume(
        self,
        queue_name: str,
        callback: Callable[[IDelivery], Awaitable[None]],
    ) -> None:
        """Start consuming *queue_name*; raises if the broker is not CONNECTED."""
        self._subscriptions[queue_name] = callback
        await self._start(queue_name, callback)

    async def _start(
        self, queue_name: str, callback: Callable[[IDelivery], Awaitable[None]]
    ) -> None:
        channel = self._connection.consume_channel
        try:
            queue = await channel.declare_queue(queue_name, passive=True)

            async def on_message(message: AbstractIncomingMessage) -> None:
                await callback(RabbitMQDelivery(message, queue_name, self._connection))

            tag = await queue.consume(on_message, no_ack=False)
        except _CHANNEL_ERRORS as e:
            raise MessagingConnectionError(
                f"Cannot consume from {queue_name}: {e}"
            ) from e
        self._consumers[queue_name] = (queue, tag)
        logger.info("Subscribed to %s (tag=%s)", queue_name, tag)

    async def _resubscribe(self) -> None:
        self._consumers.clear()
        for queue_name, callback in list(self._subscriptions.items()):
            try:
                await self._start(queue_name, callback)
            except MessagingError:
                logger.exception("Re-subscribe to %s failed", queue_name)

    async def cancel_all(self) -> None:
        """Cancel every consumer; no re-subscribe after this."""
        self._subscriptions.clear()
        consumers, self._consumers = self._consumers, {}
        if not self._connection.is_connected:
            return
        for queue_name, (queue, tag) in consumers.items():
            try:
                await queue.cancel(tag)
            except _CHANNEL_ERRORS as e:
                logger.warning("Cancel of %s consumer failed: %s", queue_name, e)
            else:
                logger.info("Cancelled consumer on %s", queue_name)

    async def health_check(self) -> bool:
        return await self._connection.health_check()
