"""QuickPrint core — event kinds, payload registry, exceptions, and ports."""

from __future__ import annotations

from .correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from .event_registry import EventTypeRegistry, default_registry
from .events import PAYLOAD_SCHEMAS, EventKind, EventPayload
from .exceptions import (
    ConfigurationError,
    HandlerError,
    InfrastructureError,
    InvalidPayloadError,
    PermanentError,
    QuickPrintError,
    RoutingConfigurationError,
    TransientError,
)

__all__ = [
    "PAYLOAD_SCHEMAS",
    "ConfigurationError",
    "EventKind",
    "EventPayload",
    "EventTypeRegistry",
    "HandlerError",
    "InfrastructureError",
    "InvalidPayloadError",
    "PermanentError",
    "QuickPrintError",
    "RoutingConfigurationError",
    "TransientError",
    "correlation_scope",
    "default_registry",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]
