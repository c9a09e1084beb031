"""InMemoryPublisher — IMessagePublisher with assertion helpers for tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from quickprint_core.ports.messaging import IMessagePublisher

from ..envelope import EventEnvelope
from ..exceptions import PublishError
from .broker import InMemoryBroker

if TYPE_CHECKING:
    from quickprint_core.events import EventKind


class InMemoryPublisher(IMessagePublisher):
    """In-memory publisher that routes envelopes through an InMemoryBroker.

    Pass a shared InMemoryBroker to connect with InMemoryConsumer so that
    published envelopes reach subscribed handlers. get_published() and
    assert_published() support test assertions.
    """

    def __init__(self, broker: InMemoryBroker | None = None) -> None:
        """If broker is None, a new broker with the default routing is created."""
        self._broker = broker or InMemoryBroker()

    async def publish(self, envelope: Any) -> None:
        if not isinstance(envelope, EventEnvelope):
            raise PublishError(f"Expected EventEnvelope, got {type(envelope).__name__}")
        await self._broker.publish(envelope)

    def get_published(self) -> list[EventEnvelope]:
        """Return all envelopes published so far, in order."""
        return self._broker.get_published()

    def assert_published(
        self,
        kind: EventKind | str,
        count: int = 1,
        queue: str | None = None,
    ) -> None:
        """Assert that exactly `count` envelopes of this kind were published.

        Optionally restrict to kinds routed to *queue*. Raises AssertionError
        if not met.
        """
        kind_name = kind.value if hasattr(kind, "value") else str(kind)
        published = self.get_published()
        if queue is not None:
            published = [
                e for e in published if queue in self._broker.routing.destinations(e.kind)
            ]
        matching = [e for e in published if e.kind_name == kind_name]
        assert len(matching) == count, (
            f"Expected {count} envelope(s) of kind {kind_name!r}, "
            f"got {len(matching)}. Published: "
            f"{[e.kind_name for e in published]}"
        )

    @property
    def broker(self) -> InMemoryBroker:
        """Return the broker (e.g. to pass to InMemoryConsumer)."""
        return self._broker
