"""SMTP email implementation."""

from __future__ import annotations

import asyncio
import email.message
import email.policy
import email.utils
import logging

import aiosmtplib

from ..delivery import (
    DeliveryRecord,
    NotificationChannel,
    RenderedNotification,
    is_valid_address,
)
from ..ports.sender import INotificationSender

logger = logging.getLogger(__name__)


class SmtpEmailSender(INotificationSender):
    """
    Async SMTP email sender using aiosmtplib.

    Opens one SMTP session per message. Plain text is always sent; the HTML
    alternative is attached when the template has one.
    """

    channel = NotificationChannel.EMAIL

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
        from_email: str | None = None,
    ):
        if not from_email:
            raise ValueError("Sender email (from_email) is required.")
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self.from_email = from_email

    def build_message(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, object] | None = None,
    ) -> email.message.EmailMessage:
        message = email.message.EmailMessage(policy=email.policy.default)
        message["To"] = recipient
        message["From"] = self.from_email
        message["Subject"] = content.subject or "QuickPrint"
        message["Message-ID"] = email.utils.make_msgid(domain="quickprint")
        idempotency_key = (metadata or {}).get("idempotency_key")
        if idempotency_key:
            message["X-Idempotency-Key"] = str(idempotency_key)

        message.set_content(content.body_text, subtype="plain", charset="utf-8")
        if content.body_html:
            message.add_alternative(content.body_html, subtype="html", charset="utf-8")
        return message

    async def send(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, object] | None = None,
    ) -> DeliveryRecord:
        if not is_valid_address(self.channel, recipient):
            return DeliveryRecord.failed(
                recipient, self.channel, error="recipient is not an email address"
            )

        message = self.build_message(recipient, content, metadata)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=self.use_tls,
                timeout=self.timeout,
            )
        except aiosmtplib.SMTPRecipientsRefused as e:
            logger.error(f"SMTP server refused recipient: {e}")
            return DeliveryRecord.failed(recipient, self.channel, error=str(e))
        except aiosmtplib.SMTPResponseException as e:
            retryable = e.code < 500
            logger.error(f"SMTP error {e.code}: {e.message}")
            return DeliveryRecord.failed(
                recipient, self.channel, error=f"smtp {e.code}: {e.message}", retryable=retryable
            )
        except (aiosmtplib.SMTPException, asyncio.TimeoutError, OSError) as e:
            logger.error(f"Failed to send email via SMTP: {e}")
            return DeliveryRecord.failed(recipient, self.channel, error=str(e), retryable=True)

        logger.info(f"Email sent via SMTP ({message['Message-ID']})")
        return DeliveryRecord.delivered(
            recipient, self.channel, provider_id=str(message["Message-ID"])
        )

    async def aclose(self) -> None:
        return None
