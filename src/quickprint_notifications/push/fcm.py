"""Firebase Cloud Messaging (HTTP v1) push implementation."""

from __future__ import annotations

import logging

import httpx

from ..delivery import (
    DeliveryRecord,
    NotificationChannel,
    RenderedNotification,
    is_valid_address,
)
from ..ports.sender import INotificationSender

logger = logging.getLogger(__name__)

FCM_BASE_URL = "https://fcm.googleapis.com"


class FcmPushSender(INotificationSender):
    """
    Sends push notifications to a device token through the FCM v1 API.

    ``POST /v1/projects/{project_id}/messages:send`` with a bearer token.
    One ``httpx.AsyncClient`` is shared by every send.
    """

    channel = NotificationChannel.PUSH

    def __init__(
        self,
        project_id: str,
        access_token: str,
        timeout: float = 10.0,
        base_url: str = FCM_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.project_id = project_id
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
        )

    async def send(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, object] | None = None,
    ) -> DeliveryRecord:
        if not is_valid_address(self.channel, recipient):
            return DeliveryRecord.failed(recipient, self.channel, error="empty device token")

        data = {
            str(k): str(v)
            for k, v in (metadata or {}).items()
            if v is not None and k in ("idempotency_key", "event_type", "correlation_id")
        }
        payload = {
            "message": {
                "token": recipient,
                "notification": {
                    "title": content.subject or "QuickPrint",
                    "body": content.body_text,
                },
                "data": data,
            }
        }

        try:
            response = await self._client.post(
                f"/v1/projects/{self.project_id}/messages:send", json=payload
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            retryable = status == 429 or status >= 500
            logger.error(f"FCM HTTP error: {status} - {e.response.text}")
            return DeliveryRecord.failed(
                recipient, self.channel, error=f"HTTP {status}", retryable=retryable
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to send push via FCM: {e}")
            return DeliveryRecord.failed(recipient, self.channel, error=str(e), retryable=True)

        provider_id = None
        try:
            provider_id = response.json().get("name")
        except ValueError:
            logger.debug("FCM response was not JSON")
        logger.info(f"Push sent via FCM ({provider_id})")
        return DeliveryRecord.delivered(recipient, self.channel, provider_id=provider_id)

    async def aclose(self) -> None:
        await self._client.aclose()
