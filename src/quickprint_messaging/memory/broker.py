"""In-memory broker for testing — routes envelopes to asyncio queues."""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..exceptions import MessagingError, NotConnectedError
from ..routing import RoutingTable, dead_letter_queue, default_routing
from ..serialization import EnvelopeSerializer

if TYPE_CHECKING:
    from ..envelope import EventEnvelope

logger = logging.getLogger(__name__)


@dataclass
class _QueuedMessage:
    body: bytes
    redelivered: bool = False


@dataclass
class InMemoryDelivery:
    """IDelivery over an in-memory queue entry. Settles at most once."""

    broker: InMemoryBroker
    queue: str
    body: bytes
    redelivered: bool = False
    tag: int = 0
    settlement: str | None = field(default=None, init=False)

    def _settle(self, name: str) -> None:
        if not self.broker.available:
            raise NotConnectedError("In-memory broker is unavailable")
        if self.settlement is not None:
            raise MessagingError(f"Delivery {self.tag} already settled ({self.settlement})")
        self.settlement = name

    async def ack(self) -> None:
        self._settle("ack")
        self.broker._on_ack(self)

    async def retry(self, body: bytes) -> None:
        self._settle("retry")
        self.broker._on_retry(self, body)

    async def reject(self) -> None:
        self._settle("reject")
        self.broker._on_reject(self)


class InMemoryBroker:
    """Shared in-process broker with the same routing semantics as RabbitMQ.

    Publishing fans an envelope out to every queue bound to its kind.
    Rejected messages move to ``<queue>.dlq`` when dead-lettering is on.
    Setting ``available = False`` simulates a lost connection: publishing
    and settlement raise ``NotConnectedError``.
    """

    def __init__(
        self,
        routing: RoutingTable | None = None,
        *,
        dead_letter: bool = True,
        serializer: EnvelopeSerializer | None = None,
    ) -> None:
        self._routing = routing or default_routing()
        self._dead_letter = dead_letter
        self._serializer = serializer or EnvelopeSerializer()
        self._queues: dict[str, asyncio.Queue[_QueuedMessage]] = {}
        self._unsettled: dict[int, InMemoryDelivery] = {}
        self._tags = itertools.count(1)
        self._published: list[EventEnvelope] = []
        self.dead_letters: dict[str, list[bytes]] = {}
        self.acked: dict[str, list[bytes]] = {}
        self.available = True

    @property
    def routing(self) -> RoutingTable:
        return self._routing

    def queue(self, name: str) -> asyncio.Queue[_QueuedMessage]:
        """Return the queue named *name*, creating it on first use."""
        if name not in self._queues:
            self._queues[name] = asyncio.Queue()
        return self._queues[name]

    def depth(self, name: str) -> int:
        """Messages waiting in *name* (excluding unsettled deliveries)."""
        return self.queue(name).qsize()

    @property
    def unsettled(self) -> list[InMemoryDelivery]:
        return list(self._unsettled.values())

    async def publish(self, envelope: EventEnvelope) -> None:
        if not self.available:
            raise NotConnectedError("In-memory broker is unavailable")
        body = self._serializer.serialize(envelope)
        for queue_name in self._routing.destinations(envelope.kind):
            self.queue(queue_name).put_nowait(_QueuedMessage(body))
        self._published.append(envelope)

    def put_raw(self, queue: str, body: bytes) -> None:
        """Enqueue *body* without routing (e.g. a malformed message)."""
        self.queue(queue).put_nowait(_QueuedMessage(body))

    def get_published(self) -> list[EventEnvelope]:
        return list(self._published)

    async def receive(self, queue: str) -> InMemoryDelivery:
        """Wait for the next message on *queue* and track it as unsettled."""
        message = await self.queue(queue).get()
        delivery = InMemoryDelivery(
            broker=self,
            queue=queue,
            body=message.body,
            redelivered=message.redelivered,
            tag=next(self._tags),
        )
        self._unsettled[delivery.tag] = delivery
        return delivery

    def _finish(self, delivery: InMemoryDelivery) -> None:
        self._unsettled.pop(delivery.tag, None)
        self.queue(delivery.queue).task_done()

    def _on_ack(self, delivery: InMemoryDelivery) -> None:
        self.acked.setdefault(delivery.queue, []).append(delivery.body)
        self._finish(delivery)

    def _on_retry(self, delivery: InMemoryDelivery, body: bytes) -> None:
        self.queue(delivery.queue).put_nowait(_QueuedMessage(body))
        self._finish(delivery)

    def _on_reject(self, delivery: InMemoryDelivery) -> None:
        if self._dead_letter:
            dlq = dead_letter_queue(delivery.queue)
            self.dead_letters.setdefault(dlq, []).append(delivery.body)
        else:
            logger.debug("Dropping rejected message from %s", delivery.queue)
        self._finish(delivery)

    def requeue_unsettled(self) -> int:
        """Return unsettled deliveries to their queues flagged redelivered."""
        pending = list(self._unsettled.values())
        for delivery in pending:
            delivery.settlement = "requeued"
            self.queue(delivery.queue).put_nowait(
                _QueuedMessage(delivery.body, redelivered=True)
            )
            self._finish(delivery)
        return len(pending)

    async def join(self, *queues: str, timeout: float = 5.0) -> None:
        """Wait until every message on *queues* has been settled."""
        names = queues or tuple(self._queues)
        await asyncio.wait_for(
            asyncio.gather(*(self.queue(name).join() for name in names)),
            timeout,
        )

    async def connect(self) -> None:
        self.available = True

    async def disconnect(self) -> None:
        self.available = False

    async def health_check(self) -> bool:
        return self.available
