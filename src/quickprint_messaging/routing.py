"""Queue bindings — which durable queues receive which event kinds."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from quickprint_core.event_registry import EventTypeRegistry
from quickprint_core.events import EventKind
from quickprint_core.exceptions import RoutingConfigurationError

NOTIFICATIONS_QUEUE = "notifications"
ANALYTICS_QUEUE = "analytics"
DEFAULT_EXCHANGE = "quickprint.events"
DEAD_LETTER_SUFFIX = ".dlq"


def dead_letter_queue(queue: str) -> str:
    """Name of the dead-letter queue paired with *queue*."""
    return f"{queue}{DEAD_LETTER_SUFFIX}"


@dataclass(frozen=True)
class QueueBinding:
    """Binds a set of event kinds to one durable queue."""

    queue: str
    kinds: frozenset[EventKind] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.queue:
            raise ValueError("queue name must not be empty")


class RoutingTable:
    """Static mapping from event kind to destination queues.

    Usage::

        routing = RoutingTable([QueueBinding("notifications", frozenset(EventKind))])
        routing.destinations(EventKind.ORDER_READY)  # ("notifications",)
    """

    def __init__(self, bindings: Iterable[QueueBinding]) -> None:
        self._bindings: tuple[QueueBinding, ...] = tuple(bindings)

    @property
    def bindings(self) -> tuple[QueueBinding, ...]:
        return self._bindings

    @property
    def queues(self) -> list[str]:
        """Distinct queue names, in binding order."""
        seen: list[str] = []
        for binding in self._bindings:
            if binding.queue not in seen:
                seen.append(binding.queue)
        return seen

    def destinations(self, kind: EventKind | str) -> tuple[str, ...]:
        """Queues that receive *kind*; empty for unknown kinds."""
        resolved = EventTypeRegistry.resolve_kind(kind)
        if resolved is None:
            return ()
        queues: list[str] = []
        for binding in self._bindings:
            if resolved in binding.kinds and binding.queue not in queues:
                queues.append(binding.queue)
        return tuple(queues)

    def kinds_for(self, queue: str) -> frozenset[EventKind]:
        """All kinds bound to *queue*."""
        kinds: set[EventKind] = set()
        for binding in self._bindings:
            if binding.queue == queue:
                kinds.update(binding.kinds)
        return frozenset(kinds)

    def validate(self, kinds: Iterable[EventKind]) -> None:
        """Raise ``RoutingConfigurationError`` if any kind has no destination."""
        unrouted = [kind.value for kind in kinds if not self.destinations(kind)]
        if unrouted:
            raise RoutingConfigurationError(unrouted)


def default_routing() -> RoutingTable:
    """Every kind to both the notifications and the analytics queue."""
    every_kind = frozenset(EventKind)
    return RoutingTable(
        [
            QueueBinding(NOTIFICATIONS_QUEUE, every_kind),
            QueueBinding(ANALYTICS_QUEUE, every_kind),
        ]
    )
