"""Twilio SMS implementation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.http.async_http_client import AsyncTwilioHttpClient
from twilio.rest import Client as TwilioClient

from ..delivery import (
    DeliveryRecord,
    NotificationChannel,
    RenderedNotification,
    is_valid_address,
)
from ..ports.sender import INotificationSender

logger = logging.getLogger(__name__)


def _is_retryable_status(status: int | None) -> bool:
    return status is None or status == 429 or status >= 500


class TwilioSMSSender(INotificationSender):
    """
    Twilio SMS implementation using the async HTTP client.

    One client is shared by every send; pass ``client`` to inject a
    pre-built (or fake) Twilio client.
    """

    channel = NotificationChannel.SMS

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        timeout: float = 10.0,
        client: Any | None = None,
    ):
        self.account_sid = account_sid
        self.from_number = from_number
        self.timeout = timeout
        self._http_client: AsyncTwilioHttpClient | None = None
        if client is None:
            self._http_client = AsyncTwilioHttpClient(timeout=timeout)
            client = TwilioClient(account_sid, auth_token, http_client=self._http_client)
        self._client = client

    async def send(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, object] | None = None,
    ) -> DeliveryRecord:
        if not is_valid_address(self.channel, recipient):
            return DeliveryRecord.failed(
                recipient, self.channel, error="recipient is not an E.164 phone number"
            )

        try:
            message = await self._client.messages.create_async(
                to=recipient,
                from_=self.from_number,
                body=content.body_text,
            )
        except TwilioRestException as e:
            retryable = _is_retryable_status(e.status)
            logger.error(f"Twilio API error {e.status} (code {e.code}): {e.msg}")
            return DeliveryRecord.failed(
                recipient, self.channel, error=f"twilio {e.status}: {e.msg}", retryable=retryable
            )
        except (TwilioException, asyncio.TimeoutError, OSError) as e:
            logger.error(f"Failed to send SMS via Twilio: {e}")
            return DeliveryRecord.failed(recipient, self.channel, error=str(e), retryable=True)

        logger.info(f"SMS sent via Twilio (SID: {message.sid})")
        return DeliveryRecord.delivered(recipient, self.channel, provider_id=message.sid)

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.close()
