"""Channel provider table — one sender per channel, chosen at startup."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .delivery import NotificationChannel
from .ports.sender import INotificationSender

logger = logging.getLogger(__name__)


class ChannelProviders:
    """
    Immutable mapping of channel to sender.

    Built once per process (mock or live per channel); the notification
    handler never decides between mock and live per message.
    """

    def __init__(self, senders: Iterable[INotificationSender]):
        self._senders: dict[NotificationChannel, INotificationSender] = {}
        for sender in senders:
            if sender.channel in self._senders:
                raise ValueError(f"Duplicate provider for channel {sender.channel.value}")
            self._senders[sender.channel] = sender

    def get(self, channel: NotificationChannel) -> INotificationSender | None:
        return self._senders.get(channel)

    @property
    def channels(self) -> frozenset[NotificationChannel]:
        return frozenset(self._senders)

    def describe(self) -> dict[str, str]:
        """``{"sms": "MockSender", ...}`` for the startup log."""
        return {
            channel.value: type(sender).__name__ for channel, sender in self._senders.items()
        }

    async def aclose(self) -> None:
        """Close every sender; failures are logged, not raised."""
        for channel, sender in self._senders.items():
            try:
                await sender.aclose()
            except Exception as e:
                logger.warning(f"Closing {channel.value} provider failed: {e}")
