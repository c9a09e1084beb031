"""Jinja2 template renderer."""

from __future__ import annotations

import logging
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from ...delivery import RenderedNotification
from ...exceptions import TemplateRenderError
from ...ports.renderer import ITemplateRenderer, NotificationTemplate

logger = logging.getLogger(__name__)


class JinjaTemplateRenderer(ITemplateRenderer):
    """
    Renders notifications using the Jinja2 engine.

    Undefined variables raise instead of rendering as empty strings. Only
    the HTML alternative is autoescaped.
    """

    def __init__(self) -> None:
        self._text_env = Environment(undefined=StrictUndefined, autoescape=False)
        self._html_env = Environment(undefined=StrictUndefined, autoescape=True)

    async def render(
        self, template: NotificationTemplate, context: dict[str, Any]
    ) -> RenderedNotification:
        """Render template using Jinja2."""
        try:
            subject = None
            if template.subject_template:
                subject = self._text_env.from_string(template.subject_template).render(
                    **context
                )

            body = self._text_env.from_string(template.body_template).render(**context)

            body_html = None
            if template.html_template:
                body_html = self._html_env.from_string(template.html_template).render(
                    **context
                )

            return RenderedNotification(
                subject=subject.strip() if subject else subject,
                body_text=body.strip(),
                body_html=body_html,
            )
        except TemplateError as e:
            logger.error(f"Jinja2 rendering of {template.template_id} failed: {e}")
            raise TemplateRenderError(f"{template.template_id}: {e}") from e
