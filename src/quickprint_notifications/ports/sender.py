"""Notification sender port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..delivery import DeliveryRecord, NotificationChannel, RenderedNotification


@runtime_checkable
class INotificationSender(Protocol):
    """
    Port for delivering a rendered notification over one channel.

    Adapters must explicitly declare: class TwilioSMSSender(INotificationSender):
    Implementations are built once per process and must be safe for
    concurrent use. Provider failures are reported as FAILED records
    (with ``retryable`` set) rather than raised.
    """

    channel: NotificationChannel

    async def send(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, object] | None = None,
    ) -> DeliveryRecord:
        """Send notification and return delivery record.

        ``metadata["idempotency_key"]`` is forwarded to providers that
        support request deduplication.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
