"""Tests for NotificationHandler: policies, channel independence and dedup."""

from __future__ import annotations

import pytest

from quickprint_core.exceptions import InvalidPayloadError, PermanentError, TransientError
from quickprint_messaging.envelope import EventEnvelope
from quickprint_notifications.channel import ChannelProviders
from quickprint_notifications.delivery import DeliveryStatus, NotificationChannel
from quickprint_notifications.handler import NotificationHandler, dedup_key
from quickprint_notifications.memory.fake import InMemorySender
from quickprint_notifications.recipients import InMemoryRecipientDirectory, Recipient
from quickprint_notifications.template.registry import TemplateRegistry

SMS = NotificationChannel.SMS
EMAIL = NotificationChannel.EMAIL
PUSH = NotificationChannel.PUSH

CUSTOMER_PHONE = "+919800000001"
CUSTOMER_EMAIL = "asha@example.com"
CUSTOMER_TOKEN = "device-token-1"
OWNER_PHONE = "+919800000009"
OWNER_EMAIL = "ravi@copyhub.example"


def order_ready(correlation_id: str = "c-1") -> EventEnvelope:
    return EventEnvelope.create(
        "order.ready",
        {"orderId": "o-1", "userId": "u-1", "orderNumber": "QP-1001", "shopName": "Copy Hub"},
        correlation_id=correlation_id,
    )


@pytest.fixture
def handler(
    providers: ChannelProviders, directory: InMemoryRecipientDirectory
) -> NotificationHandler:
    return NotificationHandler(providers, directory)


@pytest.mark.asyncio
async def test_order_ready_reaches_every_channel(
    handler: NotificationHandler,
    sms: InMemorySender,
    email: InMemorySender,
    push: InMemorySender,
) -> None:
    records = await handler.notify(order_ready())

    assert {r.channel for r in records} == {SMS, EMAIL, PUSH}
    assert all(r.status is DeliveryStatus.DELIVERED for r in records)
    sms.assert_sent(CUSTOMER_PHONE)
    email.assert_sent(CUSTOMER_EMAIL)
    push.assert_sent(CUSTOMER_TOKEN)

    assert sms.sent_messages[0].content.body_text == "🎉 Order QP-1001 is ready at Copy Hub!"
    assert email.sent_messages[0].content.subject == "Order Ready - QP-1001"
    assert email.sent_messages[0].content.body_html is not None
    assert push.sent_messages[0].content.subject == "Order Ready! 🎉"


@pytest.mark.asyncio
async def test_send_metadata_carries_dedup_key(
    handler: NotificationHandler, sms: InMemorySender
) -> None:
    envelope = order_ready()
    await handler.notify(envelope)
    metadata = sms.sent_messages[0].metadata
    assert metadata is not None
    assert metadata["idempotency_key"] == "c-1:order.ready:sms:+919800000001"
    assert metadata["idempotency_key"] == dedup_key(envelope, SMS, CUSTOMER_PHONE)
    assert metadata["correlation_id"] == "c-1"
    assert metadata["message_id"] == envelope.message_id


@pytest.mark.asyncio
async def test_failing_channel_does_not_block_others(
    handler: NotificationHandler,
    sms: InMemorySender,
    email: InMemorySender,
    push: InMemorySender,
) -> None:
    sms.error = ConnectionError("twilio unreachable")
    records = await handler.notify(order_ready())

    by_channel = {r.channel: r for r in records}
    assert by_channel[SMS].status is DeliveryStatus.FAILED
    assert by_channel[SMS].retryable is True
    assert by_channel[EMAIL].status is DeliveryStatus.DELIVERED
    assert by_channel[PUSH].status is DeliveryStatus.DELIVERED


@pytest.mark.asyncio
async def test_retry_only_resends_failed_channels(
    handler: NotificationHandler,
    sms: InMemorySender,
    email: InMemorySender,
    push: InMemorySender,
) -> None:
    sms.failures = 1
    envelope = order_ready()
    with pytest.raises(TransientError, match="sms"):
        await handler.handle(envelope)

    await handler.handle(envelope.next_attempt())

    assert sms.calls == 2
    assert email.calls == 1
    assert push.calls == 1
    sms.assert_sent(CUSTOMER_PHONE)


@pytest.mark.asyncio
async def test_non_retryable_failure_is_permanent(
    handler: NotificationHandler, sms: InMemorySender, email: InMemorySender
) -> None:
    sms.failures = 1
    sms.retryable = False
    with pytest.raises(PermanentError):
        await handler.handle(order_ready())
    assert email.calls == 1


@pytest.mark.asyncio
async def test_retryable_failure_wins_over_permanent(
    handler: NotificationHandler, sms: InMemorySender, push: InMemorySender
) -> None:
    sms.failures = 1
    sms.retryable = False
    push.failures = 1
    with pytest.raises(TransientError):
        await handler.handle(order_ready())


@pytest.mark.asyncio
async def test_same_business_event_is_not_notified_twice(
    handler: NotificationHandler, sms: InMemorySender
) -> None:
    await handler.notify(order_ready("c-7"))
    # Producer retried the publish: new message id, same correlation id.
    records = await handler.notify(order_ready("c-7"))

    assert all(r.status is DeliveryStatus.SKIPPED for r in records)
    assert sms.calls == 1


@pytest.mark.asyncio
async def test_missing_recipient_notifies_nobody(
    providers: ChannelProviders, sms: InMemorySender
) -> None:
    handler = NotificationHandler(providers, InMemoryRecipientDirectory())
    assert await handler.notify(order_ready()) == []
    await handler.handle(order_ready())
    assert sms.calls == 0


@pytest.mark.asyncio
async def test_opted_out_and_missing_addresses_are_skipped(
    providers: ChannelProviders, sms: InMemorySender, email: InMemorySender, push: InMemorySender
) -> None:
    directory = InMemoryRecipientDirectory(
        {"u-1": Recipient(user_id="u-1", phone="+919800000001", opted_out=frozenset({SMS}))}
    )
    handler = NotificationHandler(providers, directory)
    assert await handler.notify(order_ready()) == []
    assert sms.calls == email.calls == push.calls == 0


@pytest.mark.asyncio
async def test_order_created_goes_to_shop_owner(
    handler: NotificationHandler, sms: InMemorySender, push: InMemorySender
) -> None:
    envelope = EventEnvelope.create(
        "order.created",
        {"orderId": "o-1", "userId": "u-1", "shopId": "s-1", "orderNumber": "QP-1001"},
    )
    records = await handler.notify(envelope)

    assert [r.channel for r in records] == [SMS]
    sms.assert_sent(OWNER_PHONE)
    assert "QP-1001" in sms.sent_messages[0].content.body_text
    assert push.calls == 0


@pytest.mark.asyncio
async def test_shop_registered_welcome_email(
    handler: NotificationHandler, email: InMemorySender
) -> None:
    envelope = EventEnvelope.create(
        "shop.registered", {"shopId": "s-1", "ownerId": "u-9", "businessName": "Copy Hub"}
    )
    await handler.handle(envelope)

    email.assert_sent(OWNER_EMAIL)
    content = email.sent_messages[0].content
    assert content.subject == "Welcome to QuickPrint!"
    assert content.body_text.startswith("Welcome, Ravi!")


@pytest.mark.asyncio
async def test_payment_success_formats_amount(
    handler: NotificationHandler, sms: InMemorySender
) -> None:
    envelope = EventEnvelope.create(
        "payment.success",
        {"orderId": "o-1", "paymentId": "pay-1", "amount": 12550, "userId": "u-1"},
    )
    await handler.handle(envelope)
    assert "₹125.50" in sms.sent_messages[0].content.body_text


@pytest.mark.asyncio
async def test_kind_without_policy_is_ignored(
    handler: NotificationHandler, sms: InMemorySender
) -> None:
    envelope = EventEnvelope.create("order.completed", {"orderId": "o-1", "totalCost": "10.00"})
    assert await handler.notify(envelope) == []


@pytest.mark.asyncio
async def test_unknown_kind_is_ignored(handler: NotificationHandler) -> None:
    envelope = EventEnvelope(kind="order.refunded", payload={"orderId": "o-1"})
    assert await handler.notify(envelope) == []


@pytest.mark.asyncio
async def test_invalid_payload_is_permanent(handler: NotificationHandler) -> None:
    envelope = EventEnvelope(kind="order.ready", payload={"orderId": "o-1"})
    with pytest.raises(InvalidPayloadError):
        await handler.handle(envelope)


@pytest.mark.asyncio
async def test_missing_template_fails_without_retry(
    providers: ChannelProviders, directory: InMemoryRecipientDirectory
) -> None:
    handler = NotificationHandler(providers, directory, templates=TemplateRegistry())
    records = await handler.notify(order_ready())
    assert all(r.is_failure and not r.retryable for r in records)
    with pytest.raises(PermanentError):
        await handler.handle(order_ready("c-2"))


@pytest.mark.asyncio
async def test_channel_without_provider_is_skipped(
    directory: InMemoryRecipientDirectory, email: InMemorySender
) -> None:
    handler = NotificationHandler(ChannelProviders([email]), directory)
    records = await handler.notify(order_ready())
    assert [r.channel for r in records] == [EMAIL]
