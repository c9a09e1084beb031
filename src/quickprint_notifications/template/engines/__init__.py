"""Template rendering engines."""

from __future__ import annotations

from .jinja import JinjaTemplateRenderer

__all__ = ["JinjaTemplateRenderer"]
