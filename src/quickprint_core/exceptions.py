"""Exception hierarchy shared by every QuickPrint event-pipeline package."""

from __future__ import annotations

from typing import Any


class QuickPrintError(Exception):
    """Root exception for the event pipeline."""


class ConfigurationError(QuickPrintError):
    """Raised at startup when configuration is invalid or incomplete."""


class RoutingConfigurationError(ConfigurationError):
    """Raised when an event kind has no queue binding."""

    def __init__(self, unrouted: list[str]) -> None:
        self.unrouted = unrouted
        super().__init__(f"No queue binding for event kind(s): {', '.join(unrouted)}")


class InfrastructureError(QuickPrintError):
    """Base class for transport and provider failures."""


class HandlerError(QuickPrintError):
    """Base class for errors raised by envelope handlers.

    The consumer runtime maps subclasses to delivery outcomes.
    """


class TransientError(HandlerError):
    """Failure that may succeed on a later attempt (provider timeout, 5xx)."""


class PermanentError(HandlerError):
    """Failure that will never succeed on redelivery (malformed recipient)."""


class InvalidPayloadError(PermanentError):
    """Raised when a payload does not match the schema of its event kind.

    Carries structured errors: ``[{"loc": ..., "msg": ...}, ...]``.
    """

    def __init__(self, kind: str, errors: list[dict[str, Any]] | str | None = None) -> None:
        self.kind = kind
        if isinstance(errors, str):
            self.errors: list[dict[str, Any]] = [{"loc": (), "msg": errors}]
        else:
            self.errors = errors or []
        details = "; ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ())) or '<root>'}: {e.get('msg')}"
            for e in self.errors
        )
        super().__init__(f"Invalid payload for {kind}: {details}")
