"""Notification handler — bridges event envelopes to multi-channel delivery."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from quickprint_core.event_registry import EventTypeRegistry, default_registry
from quickprint_core.events import EventKind
from quickprint_core.exceptions import PermanentError, TransientError
from quickprint_messaging.idempotency import IdempotencyFilter

from .delivery import DeliveryRecord, DeliveryStatus, NotificationChannel
from .exceptions import TemplateRenderError
from .policies import Audience, NotificationPolicy, policy_table
from .sanitization import MetadataSanitizer, default_sanitizer
from .template.defaults import default_template_registry
from .template.engines.jinja import JinjaTemplateRenderer

if TYPE_CHECKING:
    from collections.abc import Mapping

    from quickprint_core.events import EventPayload
    from quickprint_messaging.envelope import EventEnvelope

    from .channel import ChannelProviders
    from .ports.directory import IRecipientDirectory
    from .ports.renderer import ITemplateRenderer
    from .ports.sender import INotificationSender
    from .recipients import Recipient
    from .template.registry import TemplateRegistry

logger = logging.getLogger(__name__)


def dedup_key(
    envelope: EventEnvelope, channel: NotificationChannel, address: str
) -> str:
    """``correlation_id:kind:channel:address``: one delivery per business event."""
    return f"{envelope.correlation_id}:{envelope.kind_name}:{channel.value}:{address}"


class NotificationHandler:
    """
    Delivers the notifications one event calls for.

    Looks up the policy for the event kind, resolves the recipient, and
    dispatches every channel concurrently and independently. A channel that
    was already delivered for the same business event (same dedup key) is
    skipped, so a retried envelope only re-attempts the channels that failed.
    """

    def __init__(
        self,
        providers: ChannelProviders,
        directory: IRecipientDirectory,
        *,
        templates: TemplateRegistry | None = None,
        renderer: ITemplateRenderer | None = None,
        registry: EventTypeRegistry | None = None,
        policies: Mapping[EventKind, NotificationPolicy] | None = None,
        dedup: IdempotencyFilter | None = None,
        sanitizer: MetadataSanitizer | None = None,
    ):
        self.providers = providers
        self.directory = directory
        self.templates = templates or default_template_registry()
        self.renderer = renderer or JinjaTemplateRenderer()
        self.registry = registry or default_registry()
        self.policies = dict(policies) if policies is not None else policy_table()
        self.dedup = dedup or IdempotencyFilter(key_prefix="notification:")
        self.sanitizer = sanitizer or default_sanitizer

    async def handle(self, envelope: EventEnvelope) -> None:
        """
        Deliver notifications for *envelope* and classify the result.

        Raises:
            TransientError: At least one channel failed retryably.
            PermanentError: Channels failed, none retryably.
            InvalidPayloadError: The payload does not match its kind.
        """
        records = await self.notify(envelope)
        failures = [r for r in records if r.status is DeliveryStatus.FAILED]
        if not failures:
            return
        summary = ", ".join(f"{r.channel.value}: {r.error}" for r in failures)
        if any(r.retryable for r in failures):
            raise TransientError(f"{envelope.kind_name} delivery failed ({summary})")
        raise PermanentError(f"{envelope.kind_name} delivery failed ({summary})")

    async def notify(self, envelope: EventEnvelope) -> list[DeliveryRecord]:
        """Deliver notifications for *envelope*; one record per attempted channel."""
        kind = envelope.kind
        if not isinstance(kind, EventKind):
            logger.warning(f"Ignoring unknown event kind {kind!r} ({envelope.message_id})")
            return []
        policy = self.policies.get(kind)
        if policy is None:
            logger.debug(f"No notification policy for {kind.value}")
            return []

        payload = self.registry.parse(kind, envelope.payload)
        recipient = await self._resolve_recipient(policy, payload)
        if recipient is None:
            logger.warning(
                f"No {policy.audience.value} recipient for {kind.value} ({envelope.message_id})"
            )
            return []

        context = payload.notification_context()
        context["recipient_name"] = recipient.name

        targets: list[tuple[NotificationChannel, str]] = []
        tasks = []
        for channel in policy.channels:
            sender = self.providers.get(channel)
            if sender is None:
                logger.debug(f"No provider configured for {channel.value}")
                continue
            address = recipient.address_for(channel)
            if not address:
                logger.debug(f"Recipient has no {channel.value} address for {kind.value}")
                continue
            targets.append((channel, address))
            tasks.append(
                self._deliver(envelope, kind, channel, sender, address, recipient.locale, context)
            )

        # Each channel settles on its own; one failing provider never blocks the rest.
        results = await asyncio.gather(*tasks, return_exceptions=True)

        records: list[DeliveryRecord] = []
        for (channel, address), result in zip(targets, results):
            if isinstance(result, DeliveryRecord):
                records.append(result)
                continue
            logger.error(
                f"{channel.value} provider raised for {kind.value}: {result!r}",
                exc_info=result,
            )
            records.append(
                DeliveryRecord.failed(address, channel, error=str(result), retryable=True)
            )
        return records

    async def _resolve_recipient(
        self, policy: NotificationPolicy, payload: EventPayload
    ) -> Recipient | None:
        if policy.audience is Audience.CUSTOMER:
            user_id = getattr(payload, "user_id", None)
            return await self.directory.get_user(user_id) if user_id else None
        owner_id = getattr(payload, "owner_id", None)
        if owner_id:
            return await self.directory.get_user(owner_id)
        shop_id = getattr(payload, "shop_id", None)
        return await self.directory.get_shop_owner(shop_id) if shop_id else None

    async def _deliver(
        self,
        envelope: EventEnvelope,
        kind: EventKind,
        channel: NotificationChannel,
        sender: INotificationSender,
        address: str,
        locale: str,
        context: dict[str, Any],
    ) -> DeliveryRecord:
        key = dedup_key(envelope, channel, address)
        if await self.dedup.is_duplicate(key):
            logger.info(f"{channel.value} for {kind.value} already delivered, skipping")
            return DeliveryRecord.skipped(address, channel, reason="already delivered")

        template = await self.templates.get(kind.value, channel, locale)
        if template is None:
            logger.error(f"No template registered for {kind.value} on {channel.value}")
            return DeliveryRecord.failed(address, channel, error="no template")
        try:
            content = await self.renderer.render(template, context)
        except TemplateRenderError as e:
            return DeliveryRecord.failed(address, channel, error=str(e))

        metadata: dict[str, object] = {
            "idempotency_key": key,
            "event_type": kind.value,
            "correlation_id": envelope.correlation_id,
            "message_id": envelope.message_id,
        }
        record = await sender.send(address, content, metadata)

        safe = self.sanitizer.sanitize(
            {"recipient": address, "status": record.status.value, "error": record.error}
        )
        if record.status is DeliveryStatus.DELIVERED:
            await self.dedup.mark_processed(key)
            logger.info(f"{channel.value} {kind.value} delivered: {safe}")
        else:
            logger.warning(f"{channel.value} {kind.value} not delivered: {safe}")
        return record
