"""NotificationWorker — process lifecycle for the event consumers."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import TYPE_CHECKING

from quickprint_analytics.handler import AnalyticsHandler
from quickprint_core.exceptions import QuickPrintError
from quickprint_core.ports.background_worker import IBackgroundWorker
from quickprint_messaging.consumer import EventConsumer
from quickprint_messaging.dead_letter import DeadLetterHandler
from quickprint_messaging.idempotency import IdempotencyFilter
from quickprint_messaging.memory.cache import InMemoryCacheService
from quickprint_messaging.rabbitmq.connection import RabbitMQConnectionManager
from quickprint_messaging.rabbitmq.consumer import RabbitMQConsumer
from quickprint_messaging.retry import RetryPolicy
from quickprint_messaging.routing import ANALYTICS_QUEUE, NOTIFICATIONS_QUEUE
from quickprint_notifications.handler import NotificationHandler

from .providers import build_channel_providers, build_recipient_directory

if TYPE_CHECKING:
    from quickprint_core.ports.messaging import IBrokerConnection
    from quickprint_notifications.channel import ChannelProviders
    from quickprint_notifications.ports.directory import IRecipientDirectory

    from .settings import WorkerSettings

logger = logging.getLogger("quickprint.worker")


class NotificationWorker(IBackgroundWorker):
    """
    Owns the broker connection, the consumer runtime and both handlers.

    ``notifications`` and ``analytics`` are separate subscriptions sharing
    one concurrency limit; each queue is acknowledged independently.
    """

    def __init__(
        self,
        *,
        connection: IBrokerConnection,
        consumer: EventConsumer,
        notification_handler: NotificationHandler,
        analytics_handler: AnalyticsHandler,
        providers: ChannelProviders,
        directory: IRecipientDirectory,
    ) -> None:
        self.connection = connection
        self.consumer = consumer
        self.notification_handler = notification_handler
        self.analytics_handler = analytics_handler
        self.providers = providers
        self.directory = directory
        consumer.subscribe(NOTIFICATIONS_QUEUE, notification_handler.handle)
        consumer.subscribe(ANALYTICS_QUEUE, analytics_handler.handle)

    @classmethod
    def from_settings(cls, settings: WorkerSettings) -> NotificationWorker:
        """Wire the RabbitMQ-backed worker. Call inside the running loop.

        Raises:
            ConfigurationError: Invalid provider or directory configuration.
        """
        providers = build_channel_providers(settings)
        directory = build_recipient_directory(settings)
        connection = RabbitMQConnectionManager(
            settings.rabbitmq_url,
            exchange_name=settings.exchange,
            prefetch_count=settings.concurrency,
            dead_letter=settings.dead_letter,
            connect_attempts=settings.connect_attempts,
            reconnect_max_delay=settings.reconnect_max_delay,
        )
        consumer = EventConsumer(
            RabbitMQConsumer(connection),
            retry_policy=RetryPolicy(
                max_attempts=settings.retry_limit,
                base_delay=settings.retry_base_delay,
                max_delay=settings.retry_max_delay,
            ),
            dead_letter=DeadLetterHandler(),
            concurrency=settings.concurrency,
            shutdown_timeout=settings.shutdown_timeout,
        )
        return cls(
            connection=connection,
            consumer=consumer,
            notification_handler=NotificationHandler(
                providers,
                directory,
                dedup=IdempotencyFilter(
                    InMemoryCacheService(default_ttl=settings.dedup_ttl),
                    key_prefix="notification:",
                    ttl_seconds=settings.dedup_ttl,
                ),
            ),
            analytics_handler=AnalyticsHandler(),
            providers=providers,
            directory=directory,
        )

    async def start(self) -> None:
        """Connect and begin consuming both queues."""
        await self.connection.connect()
        await self.consumer.start()
        logger.info("Worker running; listening on %s, %s", NOTIFICATIONS_QUEUE, ANALYTICS_QUEUE)

    async def stop(self) -> bool:
        """Drain in-flight work, then release providers and the connection."""
        logger.info("Worker shutting down")
        drained = await self.consumer.stop()
        await self._release()
        logger.info("Worker stopped (drained=%s)", drained)
        return drained

    async def _release(self) -> None:
        await self.providers.aclose()
        try:
            await self.directory.aclose()
        except Exception as e:
            logger.warning("Closing recipient directory failed: %s", e)
        await self.connection.disconnect()

    async def run(self, stop_event: asyncio.Event | None = None) -> int:
        """Run until SIGINT/SIGTERM (or *stop_event*); return the exit code.

        0 when every in-flight delivery drained, 1 when startup failed or the
        drain timed out.
        """
        stop_event = stop_event or asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError, RuntimeError):
                loop.add_signal_handler(sig, stop_event.set)
        try:
            try:
                await self.start()
            except QuickPrintError as e:
                logger.error("Worker failed to start: %s", e)
                await self._release()
                return 1
            await stop_event.wait()
            return 0 if await self.stop() else 1
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                with contextlib.suppress(NotImplementedError, RuntimeError):
                    loop.remove_signal_handler(sig)
