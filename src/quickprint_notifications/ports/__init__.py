"""Port definitions for notification infrastructure."""

from __future__ import annotations

from .directory import IRecipientDirectory
from .provider import ITemplateProvider
from .renderer import ITemplateRenderer, NotificationTemplate
from .sender import INotificationSender

__all__ = [
    "INotificationSender",
    "IRecipientDirectory",
    "ITemplateProvider",
    "ITemplateRenderer",
    "NotificationTemplate",
]
