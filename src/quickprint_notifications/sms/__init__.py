"""SMS notification providers."""

from __future__ import annotations

from .twilio import TwilioSMSSender

__all__ = ["TwilioSMSSender"]
