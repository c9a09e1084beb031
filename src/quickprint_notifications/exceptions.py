"""Exception hierarchy for notifications."""

from __future__ import annotations

from quickprint_core.exceptions import InfrastructureError


class NotificationError(InfrastructureError):
    """Base exception for notification infrastructure failures."""


class TemplateRenderError(NotificationError):
    """Raised when a template references a variable the context lacks."""

