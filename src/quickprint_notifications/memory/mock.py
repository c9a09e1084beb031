"""Mock sender for development: logs instead of calling a provider."""

from __future__ import annotations

import itertools
import logging

from quickprint_notifications.delivery import (
    DeliveryRecord,
    NotificationChannel,
    RenderedNotification,
    is_valid_address,
)
from quickprint_notifications.ports.sender import INotificationSender
from quickprint_notifications.sanitization import MetadataSanitizer, default_sanitizer

logger = logging.getLogger(__name__)


class MockSender(INotificationSender):
    """
    Development adapter that logs notifications and never touches the network.

    Validates the recipient address like the live provider would, so a bad
    phone number fails the same way in development.
    """

    def __init__(
        self, channel: NotificationChannel, sanitizer: MetadataSanitizer | None = None
    ):
        self.channel = channel
        self.sanitizer = sanitizer or default_sanitizer
        self._ids = itertools.count(1)
        self.sent_count = 0

    async def send(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, object] | None = None,
    ) -> DeliveryRecord:
        if not is_valid_address(self.channel, recipient):
            return DeliveryRecord.failed(
                recipient, self.channel, error=f"invalid {self.channel.value} address"
            )

        masked = self.sanitizer.mask("recipient", recipient)
        output = [f"[{self.channel.value.upper()} Mock] To: {masked}"]
        if content.subject:
            output.append(f"Subject: {content.subject}")
        output.append(f"Body: {content.body_text}")
        if content.body_html:
            output.append(f"HTML: [Available: {len(content.body_html)} bytes]")
        logger.info(" | ".join(output))

        self.sent_count += 1
        return DeliveryRecord.delivered(
            recipient, self.channel, provider_id=f"mock_{self.channel.value}_{next(self._ids)}"
        )

    async def aclose(self) -> None:
        return None
