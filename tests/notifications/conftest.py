"""Test configuration for quickprint-notifications."""

from __future__ import annotations

import pytest

from quickprint_notifications.channel import ChannelProviders
from quickprint_notifications.delivery import NotificationChannel, RenderedNotification
from quickprint_notifications.memory.fake import InMemorySender
from quickprint_notifications.recipients import InMemoryRecipientDirectory, Recipient

CUSTOMER = Recipient(
    user_id="u-1",
    name="Asha",
    phone="+919800000001",
    email="asha@example.com",
    push_token="device-token-1",
)
OWNER = Recipient(
    user_id="u-9",
    name="Ravi",
    phone="+919800000009",
    email="ravi@copyhub.example",
)


@pytest.fixture
def directory() -> InMemoryRecipientDirectory:
    directory = InMemoryRecipientDirectory()
    directory.add_user(CUSTOMER)
    directory.add_shop("s-1", OWNER)
    return directory


@pytest.fixture
def sms() -> InMemorySender:
    return InMemorySender(NotificationChannel.SMS)


@pytest.fixture
def email() -> InMemorySender:
    return InMemorySender(NotificationChannel.EMAIL)


@pytest.fixture
def push() -> InMemorySender:
    return InMemorySender(NotificationChannel.PUSH)


@pytest.fixture
def providers(sms: InMemorySender, email: InMemorySender, push: InMemorySender) -> ChannelProviders:
    return ChannelProviders([sms, email, push])


@pytest.fixture
def notification_content() -> RenderedNotification:
    """Sample rendered notification."""
    return RenderedNotification(
        body_text="Order QP-1001 is ready",
        subject="Order Ready - QP-1001",
        body_html="<p>Order QP-1001 is ready</p>",
    )
