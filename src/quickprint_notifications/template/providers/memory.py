"""In-memory template provider for simple use cases."""

from __future__ import annotations

from collections.abc import Iterable

from ...delivery import NotificationChannel
from ...ports.provider import ITemplateProvider
from ...ports.renderer import NotificationTemplate


class InMemoryTemplateProvider(ITemplateProvider):
    """Simple in-memory template provider for built-in and inline templates."""

    def __init__(
        self, templates: Iterable[tuple[str, NotificationTemplate]] | None = None
    ) -> None:
        # Key: (event_type, channel, locale)
        self._templates: dict[tuple[str, NotificationChannel, str], NotificationTemplate] = {}
        for event_type, template in templates or ():
            self._store(event_type, template)

    def _store(self, event_type: str, template: NotificationTemplate) -> None:
        self._templates[(event_type, template.channel, template.locale)] = template

    async def load(
        self,
        event_type: str,
        channel: NotificationChannel,
        locale: str,
    ) -> NotificationTemplate | None:
        """Load template from memory."""
        return self._templates.get((event_type, channel, locale))

    async def save(self, event_type: str, template: NotificationTemplate) -> None:
        """Save template to memory."""
        self._store(event_type, template)

    def __len__(self) -> int:
        return len(self._templates)
