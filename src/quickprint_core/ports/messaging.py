from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@runtime_checkable
class IMessagePublisher(Protocol):
    """
    Port for durably publishing envelopes to a transport (RabbitMQ, in-memory).

    Infrastructure packages provide concrete adapters.
    """

    async def publish(self, envelope: Any) -> None:
        """
        Publish *envelope*, routed by its event kind.

        Must resolve only once the transport has accepted the message durably.
        """
        ...


@runtime_checkable
class IDelivery(Protocol):
    """One received message awaiting settlement."""

    body: bytes
    redelivered: bool

    async def ack(self) -> None:
        """Remove the message from its queue."""
        ...

    async def retry(self, body: bytes) -> None:
        """Re-enqueue *body* (the envelope with its next attempt) on the same queue."""
        ...

    async def reject(self) -> None:
        """Negative-acknowledge without requeue (dead-letter if configured)."""
        ...


@runtime_checkable
class IMessageConsumer(Protocol):
    """
    Port for pulling messages from named durable queues.

    Infrastructure packages provide concrete adapters.
    """

    async def consume(
        self,
        queue_name: str,
        callback: Callable[[IDelivery], Awaitable[None]],
    ) -> None:
        """
        Start delivering messages from *queue_name* to *callback*.

        Args:
            queue_name: Durable queue to consume from.
            callback: Async callable invoked for each delivery.
        """
        ...

    async def cancel_all(self) -> None:
        """Stop all consumers; unsettled deliveries stay with the broker."""
        ...


@runtime_checkable
class IBrokerConnection(Protocol):
    """Lifecycle of the process-wide broker connection."""

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def health_check(self) -> bool: ...
