"""EventTypeRegistry — maps event kinds to their payload schemas."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .events import PAYLOAD_SCHEMAS, EventKind, EventPayload
from .exceptions import InvalidPayloadError


class EventTypeRegistry:
    """Registry for mapping ``EventKind`` → payload model.

    Used both for publish-time validation and consumer-time decoding.

    Usage::

        registry = EventTypeRegistry()
        registry.register(EventKind.ORDER_READY, OrderReadyPayload)
        payload = registry.validate("order.ready", {"orderId": "o-1", ...})
    """

    def __init__(self) -> None:
        self._registry: dict[EventKind, type[EventPayload]] = {}

    def register(self, kind: EventKind, payload_class: type[EventPayload]) -> None:
        """Register a payload model under *kind*."""
        self._registry[kind] = payload_class

    def get(self, kind: EventKind | str) -> type[EventPayload] | None:
        """Look up a payload model by kind (enum or wire value)."""
        resolved = self.resolve_kind(kind)
        if resolved is None:
            return None
        return self._registry.get(resolved)

    def has(self, kind: EventKind | str) -> bool:
        """Return ``True`` if *kind* is registered."""
        return self.get(kind) is not None

    @property
    def kinds(self) -> list[EventKind]:
        """Return all registered kinds."""
        return list(self._registry.keys())

    @staticmethod
    def resolve_kind(kind: EventKind | str) -> EventKind | None:
        if isinstance(kind, EventKind):
            return kind
        try:
            return EventKind(kind)
        except ValueError:
            return None

    def validate(self, kind: EventKind | str, payload: Mapping[str, Any]) -> EventPayload:
        """Validate *payload* against the schema of *kind*.

        Raises:
            InvalidPayloadError: If the kind is unregistered or the payload
                does not match its schema.
        """
        kind_name = kind.value if isinstance(kind, EventKind) else str(kind)
        payload_class = self.get(kind)
        if payload_class is None:
            raise InvalidPayloadError(kind_name, "unregistered event kind")
        if not isinstance(payload, Mapping):
            raise InvalidPayloadError(kind_name, "payload must be an object")
        try:
            return payload_class.model_validate(dict(payload))
        except ValidationError as e:
            raise InvalidPayloadError(
                kind_name,
                [{"loc": err["loc"], "msg": err["msg"]} for err in e.errors()],
            ) from e

    # Consumer-side name; same contract.
    parse = validate

    def clear(self) -> None:
        """Remove all registrations (testing utility)."""
        self._registry.clear()


def default_registry() -> EventTypeRegistry:
    """Return a registry with every QuickPrint event kind registered."""
    registry = EventTypeRegistry()
    for kind, payload_class in PAYLOAD_SCHEMAS.items():
        registry.register(kind, payload_class)
    return registry
