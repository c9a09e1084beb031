"""Template provider implementations."""

from __future__ import annotations

from .memory import InMemoryTemplateProvider

__all__ = ["InMemoryTemplateProvider"]
