"""Multi-channel notifications for QuickPrint events — SMS, email, push."""

from __future__ import annotations

from .channel import ChannelProviders
from .delivery import (
    DeliveryRecord,
    DeliveryStatus,
    NotificationChannel,
    RenderedNotification,
    is_valid_address,
)
from .exceptions import NotificationError, TemplateRenderError
from .handler import NotificationHandler, dedup_key
from .memory.fake import InMemorySender
from .memory.mock import MockSender
from .policies import DEFAULT_POLICIES, Audience, NotificationPolicy, policy_table
from .ports.directory import IRecipientDirectory
from .ports.provider import ITemplateProvider
from .ports.renderer import ITemplateRenderer, NotificationTemplate
from .ports.sender import INotificationSender
from .recipients import HttpRecipientDirectory, InMemoryRecipientDirectory, Recipient
from .sanitization import MetadataSanitizer
from .template.defaults import default_template_registry
from .template.engines.jinja import JinjaTemplateRenderer
from .template.providers.memory import InMemoryTemplateProvider
from .template.registry import TemplateRegistry

__all__ = [
    "DEFAULT_POLICIES",
    "Audience",
    "ChannelProviders",
    "DeliveryRecord",
    "DeliveryStatus",
    "HttpRecipientDirectory",
    "INotificationSender",
    "IRecipientDirectory",
    "ITemplateProvider",
    "ITemplateRenderer",
    "InMemoryRecipientDirectory",
    "InMemorySender",
    "InMemoryTemplateProvider",
    "JinjaTemplateRenderer",
    "MetadataSanitizer",
    "MockSender",
    "NotificationChannel",
    "NotificationError",
    "NotificationHandler",
    "NotificationPolicy",
    "NotificationTemplate",
    "Recipient",
    "RenderedNotification",
    "TemplateRegistry",
    "TemplateRenderError",
    "default_template_registry",
    "dedup_key",
    "is_valid_address",
    "policy_table",
]
