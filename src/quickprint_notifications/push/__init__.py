"""Push notification providers."""

from __future__ import annotations

from .fcm import FcmPushSender

__all__ = ["FcmPushSender"]
