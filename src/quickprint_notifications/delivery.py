"""Delivery tracking types and channel enum."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class NotificationChannel(Enum):
    """Supported notification channels."""

    SMS = "sms"
    EMAIL = "email"
    PUSH = "push"


class DeliveryStatus(Enum):
    """Delivery status outcomes."""

    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"


_E164 = re.compile(r"^\+[1-9]\d{6,14}$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_address(channel: NotificationChannel, address: str) -> bool:
    """Check *address* has the shape *channel* needs (E.164, email, token)."""
    if channel is NotificationChannel.SMS:
        return bool(_E164.match(address))
    if channel is NotificationChannel.EMAIL:
        return bool(_EMAIL.match(address))
    return bool(address.strip())


@dataclass(frozen=True)
class DeliveryRecord:
    """Immutable record of one channel delivery attempt.

    ``retryable`` is only meaningful for FAILED records: ``True`` for
    timeouts, rate limits and provider 5xx; ``False`` for rejected input.
    """

    recipient: str
    channel: NotificationChannel
    status: DeliveryStatus
    provider_id: str | None = None
    sent_at: datetime | None = None
    error: str | None = None
    retryable: bool = False

    def __post_init__(self) -> None:
        if self.sent_at is None:
            object.__setattr__(self, "sent_at", datetime.now(timezone.utc))

    @property
    def is_failure(self) -> bool:
        return self.status is DeliveryStatus.FAILED

    @classmethod
    def delivered(
        cls,
        recipient: str,
        channel: NotificationChannel,
        provider_id: str | None = None,
    ) -> DeliveryRecord:
        """Create a successful delivery record."""
        return cls(
            recipient=recipient,
            channel=channel,
            status=DeliveryStatus.DELIVERED,
            provider_id=provider_id,
        )

    @classmethod
    def skipped(
        cls,
        recipient: str,
        channel: NotificationChannel,
        reason: str | None = None,
    ) -> DeliveryRecord:
        """Create a record for a delivery that was not attempted."""
        return cls(
            recipient=recipient,
            channel=channel,
            status=DeliveryStatus.SKIPPED,
            error=reason,
        )

    @classmethod
    def failed(
        cls,
        recipient: str,
        channel: NotificationChannel,
        error: str | None = None,
        *,
        retryable: bool = False,
    ) -> DeliveryRecord:
        """Create a failed delivery record."""
        return cls(
            recipient=recipient,
            channel=channel,
            status=DeliveryStatus.FAILED,
            error=error,
            retryable=retryable,
        )


@dataclass(frozen=True)
class RenderedNotification:
    """Immutable rendered notification ready for delivery.

    ``subject`` is the email subject or the push title.
    """

    body_text: str
    subject: str | None = None
    body_html: str | None = None
