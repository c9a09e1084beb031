"""EventConsumer — decode, dispatch and settle deliveries from durable queues."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import TYPE_CHECKING

from quickprint_core.correlation import correlation_scope
from quickprint_core.ports.background_worker import IBackgroundWorker

from .exceptions import MessagingError, MessagingSerializationError
from .outcome import Outcome, classify_failure
from .retry import RetryPolicy
from .serialization import EnvelopeSerializer

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from quickprint_core.ports.messaging import IDelivery, IMessageConsumer

    from .dead_letter import DeadLetterHandler
    from .envelope import EventEnvelope
    from .idempotency import IdempotencyFilter

    EnvelopeHandler = Callable[[EventEnvelope], Awaitable[Outcome | None]]

logger = logging.getLogger("quickprint.consumer")


class EventConsumer(IBackgroundWorker):
    """Runs envelope handlers for one or more queues with bounded concurrency.

    Each delivery is settled exactly once: ``ack`` on success, ``retry`` with
    the next attempt number while the retry policy allows it, otherwise
    ``reject`` so the broker dead-letters it. Deliveries that arrive after
    ``stop()`` has begun are left unsettled for redelivery.

    Usage::

        consumer = EventConsumer(transport, concurrency=4)
        consumer.subscribe("notifications", notification_handler.handle)
        await consumer.start()
        ...
        drained = await consumer.stop()
    """

    def __init__(
        self,
        transport: IMessageConsumer,
        *,
        serializer: EnvelopeSerializer | None = None,
        retry_policy: RetryPolicy | None = None,
        dead_letter: DeadLetterHandler | None = None,
        idempotency: IdempotencyFilter | None = None,
        concurrency: int = 1,
        shutdown_timeout: float = 30.0,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._transport = transport
        self._serializer = serializer or EnvelopeSerializer()
        self._retry_policy = retry_policy or RetryPolicy()
        self._dead_letter = dead_letter
        self._idempotency = idempotency
        self._concurrency = concurrency
        self._shutdown_timeout = shutdown_timeout
        self._subscriptions: dict[str, EnvelopeHandler] = {}
        self._slots = asyncio.Semaphore(concurrency)
        self._in_flight: set[asyncio.Task[None]] = set()
        self._accepting = False
        self._running = False
        self.stats: Counter[Outcome] = Counter()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def subscribe(self, queue: str, handler: EnvelopeHandler) -> None:
        """Register *handler* for *queue*. One handler per queue."""
        if queue in self._subscriptions:
            raise ValueError(f"Queue {queue!r} already has a handler")
        self._subscriptions[queue] = handler

    async def start(self) -> None:
        """Begin consuming every subscribed queue."""
        if self._running:
            return
        self._accepting = True
        self._running = True
        for queue, handler in self._subscriptions.items():
            await self._transport.consume(queue, self._callback_for(queue, handler))
            logger.info("Consuming %s (concurrency=%d)", queue, self._concurrency)

    async def stop(self) -> bool:
        """Stop accepting, cancel broker consumers and drain in-flight work.

        Returns:
            ``True`` if every in-flight delivery finished within
            ``shutdown_timeout``; ``False`` if some were cancelled (those stay
            unacknowledged and are redelivered).
        """
        if not self._running:
            return True
        self._accepting = False
        self._running = False
        try:
            await self._transport.cancel_all()
        except MessagingError as e:
            logger.warning("Could not cancel broker consumers: %s", e)

        pending = set(self._in_flight)
        if not pending:
            logger.info("Consumer stopped, nothing in flight")
            return True
        logger.info("Draining %d in-flight deliveries", len(pending))
        _, still_pending = await asyncio.wait(pending, timeout=self._shutdown_timeout)
        if not still_pending:
            logger.info("Drain complete")
            return True
        logger.warning(
            "Drain timed out after %.1fs; cancelling %d deliveries",
            self._shutdown_timeout,
            len(still_pending),
        )
        for task in still_pending:
            task.cancel()
        await asyncio.gather(*still_pending, return_exceptions=True)
        return False

    drain = stop

    def _callback_for(
        self, queue: str, handler: EnvelopeHandler
    ) -> Callable[[IDelivery], Awaitable[None]]:
        async def on_delivery(delivery: IDelivery) -> None:
            await self._dispatch(queue, handler, delivery)

        return on_delivery

    async def _dispatch(
        self, queue: str, handler: EnvelopeHandler, delivery: IDelivery
    ) -> None:
        """Wait for a free slot, then process *delivery* in its own task."""
        if not self._accepting:
            return
        await self._slots.acquire()
        if not self._accepting:
            self._slots.release()
            return
        task = asyncio.create_task(self._process(queue, handler, delivery))
        self._in_flight.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._in_flight.discard(task)
        self._slots.release()
        if not task.cancelled() and task.exception() is not None:
            logger.error("Delivery task crashed", exc_info=task.exception())

    async def _process(
        self, queue: str, handler: EnvelopeHandler, delivery: IDelivery
    ) -> None:
        try:
            envelope = self._serializer.deserialize(delivery.body)
        except MessagingSerializationError as e:
            logger.error("Discarding undecodable message on %s: %s", queue, e)
            self.stats[Outcome.DISCARD] += 1
            await self._settle(delivery.reject, queue, "reject")
            return

        with correlation_scope(envelope.correlation_id):
            error: BaseException | None = None
            try:
                if self._idempotency is not None and await self._idempotency.is_duplicate(
                    envelope.message_id
                ):
                    logger.info(
                        "Skipping duplicate %s (%s)", envelope.message_id, envelope.kind_name
                    )
                    outcome = Outcome.ACK
                else:
                    result = await handler(envelope)
                    outcome = result if isinstance(result, Outcome) else Outcome.ACK
            except Exception as e:
                error = e
                outcome = classify_failure(e)
                logger.warning(
                    "Handler for %s failed on %s attempt %d: %s",
                    envelope.kind_name,
                    queue,
                    envelope.attempt,
                    e,
                )

            if outcome is Outcome.RETRY and not self._retry_policy.should_retry(
                envelope.attempt
            ):
                logger.error(
                    "Retry limit reached for %s (%s) after %d attempts",
                    envelope.message_id,
                    envelope.kind_name,
                    envelope.attempt,
                )
                outcome = Outcome.DISCARD

            self.stats[outcome] += 1
            await self._apply(outcome, queue, envelope, delivery, error)

    async def _apply(
        self,
        outcome: Outcome,
        queue: str,
        envelope: EventEnvelope,
        delivery: IDelivery,
        error: BaseException | None,
    ) -> None:
        if outcome is Outcome.ACK:
            if await self._settle(delivery.ack, queue, "ack") and self._idempotency:
                await self._idempotency.mark_processed(envelope.message_id)
            return

        if outcome is Outcome.RETRY:
            await self._retry_policy.wait_before_retry(envelope.attempt)
            body = self._serializer.serialize(envelope.next_attempt())
            await self._settle(lambda: delivery.retry(body), queue, "retry")
            return

        if self._dead_letter is not None:
            reason = str(error) if error is not None else "discarded by handler"
            await self._dead_letter.route(envelope, reason, error)
        await self._settle(delivery.reject, queue, "reject")

    async def _settle(
        self, action: Callable[[], Awaitable[None]], queue: str, name: str
    ) -> bool:
        """Run a settlement call; a lost channel means the broker redelivers."""
        try:
            await action()
        except (MessagingError, ConnectionError, OSError) as e:
            logger.warning("Could not %s delivery on %s: %s", name, queue, e)
            return False
        return True

