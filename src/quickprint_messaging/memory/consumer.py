"""InMemoryConsumer — IMessageConsumer pumping InMemoryBroker queues."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

from quickprint_core.ports.messaging import IMessageConsumer

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from quickprint_core.ports.messaging import IDelivery

    from .broker import InMemoryBroker


class InMemoryConsumer(IMessageConsumer):
    """In-memory consumer: one pump task per queue feeding the callback.

    Use the same InMemoryBroker as InMemoryPublisher so that published
    envelopes reach the callback in queue order.
    """

    def __init__(self, broker: InMemoryBroker) -> None:
        """Requires a shared broker (typically from InMemoryPublisher.broker)."""
        self._broker = broker
        self._pumps: dict[str, asyncio.Task[None]] = {}

    async def consume(
        self,
        queue_name: str,
        callback: Callable[[IDelivery], Awaitable[None]],
    ) -> None:
        if queue_name in self._pumps:
            raise ValueError(f"Already consuming {queue_name!r}")
        self._pumps[queue_name] = asyncio.create_task(self._pump(queue_name, callback))

    async def _pump(
        self, queue_name: str, callback: Callable[[IDelivery], Awaitable[None]]
    ) -> None:
        while True:
            delivery = await self._broker.receive(queue_name)
            await callback(delivery)

    async def cancel_all(self) -> None:
        pumps, self._pumps = self._pumps, {}
        for task in pumps.values():
            task.cancel()
        for task in pumps.values():
            with contextlib.suppress(asyncio.CancelledError):
                await task
