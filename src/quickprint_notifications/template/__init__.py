"""Template registry and rendering components."""

from __future__ import annotations

from .defaults import DEFAULT_TEMPLATES, default_template_registry
from .engines.jinja import JinjaTemplateRenderer
from .providers.memory import InMemoryTemplateProvider
from .registry import TemplateRegistry

__all__ = [
    "DEFAULT_TEMPLATES",
    "InMemoryTemplateProvider",
    "JinjaTemplateRenderer",
    "TemplateRegistry",
    "default_template_registry",
]
