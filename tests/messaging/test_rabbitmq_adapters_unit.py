"""Unit tests for RabbitMQPublisher and RabbitMQConsumer with mocked channels."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aio_pika
import pytest
from aio_pika.exceptions import ChannelInvalidStateError

from quickprint_messaging.envelope import EventEnvelope
from quickprint_messaging.exceptions import (
    MessagingConnectionError,
    NotConnectedError,
    PublishError,
)
from quickprint_messaging.rabbitmq.connection import RabbitMQConnectionManager
from quickprint_messaging.rabbitmq.consumer import RabbitMQConsumer, RabbitMQDelivery
from quickprint_messaging.rabbitmq.publisher import RabbitMQPublisher


def _envelope() -> EventEnvelope:
    return EventEnvelope.create(
        "order.ready",
        {"orderId": "o-1", "userId": "u-1", "orderNumber": "QP-1"},
        correlation_id="c-1",
    )


@pytest.fixture
def mock_connection() -> MagicMock:
    conn = MagicMock()
    conn.health_check = AsyncMock(return_value=True)
    conn.exchange.publish = AsyncMock()
    conn.publish_channel.default_exchange.publish = AsyncMock()
    conn.is_connected = True
    return conn


@pytest.mark.asyncio
async def test_publish_uses_kind_as_routing_key(mock_connection: MagicMock) -> None:
    publisher = RabbitMQPublisher(mock_connection, publish_timeout=5.0)
    envelope = _envelope()
    await publisher.publish(envelope)

    mock_connection.exchange.publish.assert_awaited_once()
    call = mock_connection.exchange.publish.call_args
    message: aio_pika.Message = call.args[0]
    assert call.kwargs["routing_key"] == "order.ready"
    assert call.kwargs["mandatory"] is True
    assert call.kwargs["timeout"] == 5.0
    assert message.delivery_mode == aio_pika.DeliveryMode.PERSISTENT
    assert message.message_id == envelope.message_id
    assert message.correlation_id == "c-1"
    assert message.type == "order.ready"
    assert message.content_type == "application/json"
    assert b'"order.ready"' in message.body


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [ConnectionError("reset"), asyncio.TimeoutError()])
async def test_publish_channel_failure_raises_publish_error(
    mock_connection: MagicMock, error: BaseException
) -> None:
    mock_connection.exchange.publish.side_effect = error
    publisher = RabbitMQPublisher(mock_connection)
    with pytest.raises(PublishError) as exc_info:
        await publisher.publish(_envelope())
    assert exc_info.value.__cause__ is error


@pytest.mark.asyncio
async def test_publish_without_connection_fails_fast() -> None:
    publisher = RabbitMQPublisher(RabbitMQConnectionManager())
    with pytest.raises(NotConnectedError):
        await publisher.publish(_envelope())


@pytest.mark.asyncio
async def test_publish_rejects_non_envelope(mock_connection: MagicMock) -> None:
    with pytest.raises(PublishError):
        await RabbitMQPublisher(mock_connection).publish({"kind": "order.ready"})
    mock_connection.exchange.publish.assert_not_called()


@pytest.mark.asyncio
async def test_health_check_delegates_to_connection(mock_connection: MagicMock) -> None:
    assert await RabbitMQPublisher(mock_connection).health_check() is True


def _incoming(body: bytes = b"{}") -> MagicMock:
    message = MagicMock()
    message.body = body
    message.redelivered = False
    message.content_type = "application/json"
    message.message_id = "m-1"
    message.correlation_id = "c-1"
    message.type = "order.ready"
    message.headers = {}
    message.channel.is_closed = False
    message.ack = AsyncMock()
    message.nack = AsyncMock()
    return message


@pytest.mark.asyncio
async def test_delivery_retry_republishes_then_acks(mock_connection: MagicMock) -> None:
    message = _incoming()
    delivery = RabbitMQDelivery(message, "notifications", mock_connection)
    await delivery.retry(b'{"attempt": 2}')

    publish = mock_connection.publish_channel.default_exchange.publish
    publish.assert_awaited_once()
    assert publish.call_args.kwargs["routing_key"] == "notifications"
    assert publish.call_args.args[0].body == b'{"attempt": 2}'
    message.ack.assert_awaited_once()
    message.nack.assert_not_called()


@pytest.mark.asyncio
async def test_delivery_retry_falls_back_to_requeue(mock_connection: MagicMock) -> None:
    mock_connection.publish_channel.default_exchange.publish.side_effect = ConnectionError()
    message = _incoming()
    await RabbitMQDelivery(message, "notifications", mock_connection).retry(b"{}")
    message.nack.assert_awaited_once_with(requeue=True)
    message.ack.assert_not_called()


@pytest.mark.asyncio
async def test_delivery_retry_on_closed_channel_leaves_redelivery_to_broker(
    mock_connection: MagicMock,
) -> None:
    message = _incoming()
    message.channel.is_closed = True
    message.ack.side_effect = ChannelInvalidStateError("channel closed")
    delivery = RabbitMQDelivery(message, "notifications", mock_connection)

    with pytest.raises(MessagingConnectionError, match="Channel closed"):
        await delivery.retry(b'{"attempt": 2}')

    mock_connection.publish_channel.default_exchange.publish.assert_not_called()
    message.ack.assert_not_called()
    message.nack.assert_not_called()


@pytest.mark.asyncio
async def test_delivery_reject_does_not_requeue(mock_connection: MagicMock) -> None:
    message = _incoming()
    await RabbitMQDelivery(message, "notifications", mock_connection).reject()
    message.nack.assert_awaited_once_with(requeue=False)


@pytest.mark.asyncio
async def test_delivery_ack_on_lost_channel(mock_connection: MagicMock) -> None:
    message = _incoming()
    message.ack.side_effect = ConnectionError("closed")
    with pytest.raises(MessagingConnectionError):
        await RabbitMQDelivery(message, "notifications", mock_connection).ack()


@pytest.fixture
def consumer_connection(mock_connection: MagicMock) -> MagicMock:
    queue = MagicMock()
    queue.consume = AsyncMock(return_value="ctag-1")
    queue.cancel = AsyncMock()
    mock_connection.consume_channel.declare_queue = AsyncMock(return_value=queue)
    mock_connection.queue = queue
    return mock_connection


@pytest.mark.asyncio
async def test_consume_uses_manual_ack(consumer_connection: MagicMock) -> None:
    consumer = RabbitMQConsumer(consumer_connection)
    received: list[RabbitMQDelivery] = []

    async def callback(delivery: RabbitMQDelivery) -> None:
        received.append(delivery)

    await consumer.consume("notifications", callback)  # type: ignore[arg-type]

    consumer_connection.consume_channel.declare_queue.assert_awaited_once_with(
        "notifications", passive=True
    )
    queue = consumer_connection.queue
    assert queue.consume.call_args.kwargs["no_ack"] is False
    assert consumer.consumer_tags == {"notifications": "ctag-1"}

    on_message = queue.consume.call_args.args[0]
    await on_message(_incoming(b"payload"))
    assert received[0].body == b"payload"


@pytest.mark.asyncio
async def test_consume_missing_queue_raises(consumer_connection: MagicMock) -> None:
    consumer_connection.consume_channel.declare_queue.side_effect = ConnectionError("404")
    consumer = RabbitMQConsumer(consumer_connection)
    with pytest.raises(MessagingConnectionError, match="notifications"):
        await consumer.consume("notifications", AsyncMock())


@pytest.mark.asyncio
async def test_resubscribe_after_reconnect(consumer_connection: MagicMock) -> None:
    consumer = RabbitMQConsumer(consumer_connection)
    await consumer.consume("notifications", AsyncMock())
    listener = consumer_connection.add_connected_listener.call_args.args[0]

    await listener()
    assert consumer_connection.consume_channel.declare_queue.await_count == 2


@pytest.mark.asyncio
async def test_cancel_all_stops_consumers(consumer_connection: MagicMock) -> None:
    consumer = RabbitMQConsumer(consumer_connection)
    await consumer.consume("notifications", AsyncMock())
    await consumer.cancel_all()

    consumer_connection.queue.cancel.assert_awaited_once_with("ctag-1")
    assert consumer.consumer_tags == {}

    listener = consumer_connection.add_connected_listener.call_args.args[0]
    await listener()
    assert consumer_connection.consume_channel.declare_queue.await_count == 1
