"""Template registry for event/channel/locale lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .providers.memory import InMemoryTemplateProvider

if TYPE_CHECKING:
    from ..delivery import NotificationChannel
    from ..ports.provider import ITemplateProvider
    from ..ports.renderer import NotificationTemplate

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """
    Registry for notification templates with locale fallback.

    Lookups for a locale without a template fall back to
    ``fallback_locale``.
    """

    def __init__(
        self,
        provider: ITemplateProvider | None = None,
        *,
        fallback_locale: str = "en",
    ):
        self._provider = provider or InMemoryTemplateProvider()
        self._fallback_locale = fallback_locale

    async def get(
        self,
        event_type: str,
        channel: NotificationChannel,
        locale: str = "en",
    ) -> NotificationTemplate | None:
        """Get template by event type, channel, and locale."""
        template = await self._provider.load(event_type, channel, locale)
        if template is None and locale != self._fallback_locale:
            logger.debug(
                f"No {locale} template for {event_type}/{channel.value}, "
                f"using {self._fallback_locale}"
            )
            template = await self._provider.load(event_type, channel, self._fallback_locale)
        return template

    async def register(
        self,
        event_type: str,
        template: NotificationTemplate,
    ) -> None:
        """Register a template via the provider."""
        await self._provider.save(event_type, template)
