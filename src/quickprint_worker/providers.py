"""Builds the channel provider table and recipient directory from settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from quickprint_core.exceptions import ConfigurationError
from quickprint_notifications.channel import ChannelProviders
from quickprint_notifications.delivery import NotificationChannel
from quickprint_notifications.email.smtp import SmtpEmailSender
from quickprint_notifications.memory.mock import MockSender
from quickprint_notifications.push.fcm import FcmPushSender
from quickprint_notifications.recipients import (
    HttpRecipientDirectory,
    InMemoryRecipientDirectory,
)
from quickprint_notifications.sms.twilio import TwilioSMSSender

if TYPE_CHECKING:
    from quickprint_notifications.ports.directory import IRecipientDirectory
    from quickprint_notifications.ports.sender import INotificationSender

    from .settings import WorkerSettings

logger = logging.getLogger(__name__)


def _missing(**values: object) -> list[str]:
    return [name for name, value in values.items() if not value]


def _sms_sender(settings: WorkerSettings) -> INotificationSender:
    if settings.use_mock_sms:
        return MockSender(NotificationChannel.SMS)
    missing = _missing(
        TWILIO_SID=settings.twilio_sid,
        TWILIO_AUTH_TOKEN=settings.twilio_auth_token,
        TWILIO_PHONE_NUMBER=settings.twilio_phone_number,
    )
    if missing:
        raise ConfigurationError(f"Live SMS requires {', '.join(missing)}")
    assert settings.twilio_sid and settings.twilio_auth_token and settings.twilio_phone_number
    return TwilioSMSSender(
        account_sid=settings.twilio_sid,
        auth_token=settings.twilio_auth_token.get_secret_value(),
        from_number=settings.twilio_phone_number,
    )


def _email_sender(settings: WorkerSettings) -> INotificationSender:
    if settings.use_mock_email:
        return MockSender(NotificationChannel.EMAIL)
    if not settings.smtp_host:
        raise ConfigurationError("Live email requires SMTP_HOST")
    return SmtpEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=(
            settings.smtp_password.get_secret_value() if settings.smtp_password else None
        ),
        use_tls=settings.smtp_use_tls,
        from_email=settings.email_from,
    )


def _push_sender(settings: WorkerSettings) -> INotificationSender:
    if settings.use_mock_push:
        return MockSender(NotificationChannel.PUSH)
    missing = _missing(
        FCM_PROJECT_ID=settings.fcm_project_id,
        FCM_ACCESS_TOKEN=settings.fcm_access_token,
    )
    if missing:
        raise ConfigurationError(f"Live push requires {', '.join(missing)}")
    assert settings.fcm_project_id and settings.fcm_access_token
    return FcmPushSender(
        project_id=settings.fcm_project_id,
        access_token=settings.fcm_access_token.get_secret_value(),
    )


def build_channel_providers(settings: WorkerSettings) -> ChannelProviders:
    """Choose mock or live per channel, once, for the whole process.

    Raises:
        ConfigurationError: A live channel lacks credentials.
    """
    providers = ChannelProviders(
        [_sms_sender(settings), _email_sender(settings), _push_sender(settings)]
    )
    logger.info("Channel providers: %s", providers.describe())
    return providers


def build_recipient_directory(settings: WorkerSettings) -> IRecipientDirectory:
    """HTTP directory when configured; an empty in-memory one otherwise.

    Raises:
        ConfigurationError: Production without ``CONTACT_DIRECTORY_URL``.
    """
    if settings.contact_directory_url:
        token = settings.contact_directory_token
        return HttpRecipientDirectory(
            settings.contact_directory_url,
            token=token.get_secret_value() if token else None,
        )
    if settings.is_production:
        raise ConfigurationError("CONTACT_DIRECTORY_URL is required in production")
    logger.warning("No CONTACT_DIRECTORY_URL; notifications have no recipients")
    return InMemoryRecipientDirectory()
