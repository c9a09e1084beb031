"""In-memory sender for test assertions."""

from __future__ import annotations

from dataclasses import dataclass

from quickprint_notifications.delivery import (
    DeliveryRecord,
    NotificationChannel,
    RenderedNotification,
)
from quickprint_notifications.ports.sender import INotificationSender


@dataclass
class SentMessage:
    """Record of a sent message for test assertions."""

    recipient: str
    content: RenderedNotification
    channel: NotificationChannel
    metadata: dict[str, object] | None


class InMemorySender(INotificationSender):
    """
    Test double (Fake) that stores messages in a list for assertions.

    ``failures`` makes the next N calls return FAILED records (retryable
    per ``retryable``); ``error`` makes every call raise it instead.
    """

    def __init__(
        self,
        channel: NotificationChannel,
        *,
        failures: int = 0,
        retryable: bool = True,
        error: BaseException | None = None,
    ) -> None:
        self.channel = channel
        self.failures = failures
        self.retryable = retryable
        self.error = error
        self.calls = 0
        self.closed = False
        self.sent_messages: list[SentMessage] = []

    async def send(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, object] | None = None,
    ) -> DeliveryRecord:
        self.calls += 1
        if self.error is not None:
            raise self.error
        if self.failures > 0:
            self.failures -= 1
            return DeliveryRecord.failed(
                recipient, self.channel, error="simulated failure", retryable=self.retryable
            )
        self.sent_messages.append(SentMessage(recipient, content, self.channel, metadata))
        return DeliveryRecord.delivered(recipient, self.channel, provider_id="test-id")

    async def aclose(self) -> None:
        self.closed = True

    def assert_sent(
        self,
        recipient: str,
        count: int = 1,
    ) -> None:
        """Helper for test assertions."""
        matches = [m for m in self.sent_messages if m.recipient == recipient]
        if len(matches) != count:
            raise AssertionError(
                f"Expected {count} messages to {recipient} via {self.channel.value}, "
                f"but found {len(matches)}."
            )

    def clear(self) -> None:
        """Clear all sent messages."""
        self.sent_messages.clear()
        self.calls = 0
