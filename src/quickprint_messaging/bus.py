"""EventBus — validate, wrap and publish domain events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from quickprint_core.event_registry import EventTypeRegistry, default_registry

from .envelope import EventEnvelope
from .exceptions import MessagingError, PublishError
from .routing import RoutingTable, default_routing

if TYPE_CHECKING:
    from collections.abc import Mapping

    from quickprint_core.events import EventKind
    from quickprint_core.ports.messaging import IMessagePublisher

logger = logging.getLogger(__name__)


class EventBus:
    """Publish-side entry point used by the API process.

    The routing table is checked against the registry at construction, so a
    kind without a destination queue fails at startup rather than at the first
    publish.
    """

    def __init__(
        self,
        publisher: IMessagePublisher,
        *,
        routing: RoutingTable | None = None,
        registry: EventTypeRegistry | None = None,
    ) -> None:
        self._publisher = publisher
        self._registry = registry or default_registry()
        self._routing = routing or default_routing()
        self._routing.validate(self._registry.kinds)

    @property
    def routing(self) -> RoutingTable:
        return self._routing

    @property
    def registry(self) -> EventTypeRegistry:
        return self._registry

    async def publish(
        self,
        kind: EventKind | str,
        payload: Mapping[str, Any],
        *,
        correlation_id: str | None = None,
    ) -> EventEnvelope:
        """Validate *payload*, wrap it and hand it to the transport.

        Resolves once the transport has accepted the envelope durably.

        Raises:
            InvalidPayloadError: Unregistered kind or schema mismatch.
            PublishError: The transport did not accept the envelope.
        """
        envelope = EventEnvelope.create(
            kind,
            payload,
            registry=self._registry,
            correlation_id=correlation_id,
        )
        try:
            await self._publisher.publish(envelope)
        except PublishError:
            logger.exception(
                "Failed to publish %s (%s)", envelope.kind_name, envelope.message_id
            )
            raise
        except MessagingError as e:
            logger.exception(
                "Failed to publish %s (%s)", envelope.kind_name, envelope.message_id
            )
            raise PublishError(str(e)) from e
        logger.debug(
            "Published %s (%s) correlation=%s",
            envelope.kind_name,
            envelope.message_id,
            envelope.correlation_id,
        )
        return envelope
