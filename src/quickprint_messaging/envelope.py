"""EventEnvelope — standard immutable wrapper for transport."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from quickprint_core.correlation import generate_correlation_id, get_correlation_id
from quickprint_core.event_registry import EventTypeRegistry, default_registry
from quickprint_core.events import EventKind


class EventEnvelope(BaseModel):
    """Immutable wrapper for domain events over the wire.

    Carries the event kind, its payload, tracing IDs, and retry metadata.
    ``kind`` decodes to ``EventKind`` when known; kinds added by newer
    producers stay plain strings so consumers can acknowledge them.
    """

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: EventKind | str = Field(union_mode="left_to_right")
    payload: dict[str, Any] = Field(default_factory=dict)
    produced_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: str = Field(default_factory=generate_correlation_id)
    attempt: int = Field(default=1, ge=1, description="Delivery attempt count")
    headers: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def create(
        cls,
        kind: EventKind | str,
        payload: Mapping[str, Any],
        *,
        registry: EventTypeRegistry | None = None,
        correlation_id: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> EventEnvelope:
        """Build a validated envelope.

        Raises:
            InvalidPayloadError: If *kind* is unregistered or *payload* does
                not match its schema.
        """
        registry = registry or default_registry()
        registry.validate(kind, payload)
        resolved = EventTypeRegistry.resolve_kind(kind)
        return cls(
            kind=resolved if resolved is not None else str(kind),
            payload=dict(payload),
            correlation_id=correlation_id
            or get_correlation_id()
            or generate_correlation_id(),
            headers=headers or {},
        )

    @property
    def kind_name(self) -> str:
        """Wire value of the kind (routing key)."""
        return self.kind.value if isinstance(self.kind, EventKind) else self.kind

    @property
    def is_known_kind(self) -> bool:
        return isinstance(self.kind, EventKind)

    def next_attempt(self) -> EventEnvelope:
        """Return a copy scheduled for the following delivery attempt."""
        return self.model_copy(update={"attempt": self.attempt + 1})
