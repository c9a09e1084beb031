"""Who is notified of which event, and on which channels."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from quickprint_core.events import EventKind

from .delivery import NotificationChannel


class Audience(Enum):
    CUSTOMER = "customer"
    SHOP_OWNER = "shop_owner"


@dataclass(frozen=True)
class NotificationPolicy:
    """Audience and ordered channel list for one event kind."""

    kind: EventKind
    audience: Audience
    channels: tuple[NotificationChannel, ...]


_SMS = NotificationChannel.SMS
_EMAIL = NotificationChannel.EMAIL
_PUSH = NotificationChannel.PUSH

DEFAULT_POLICIES: tuple[NotificationPolicy, ...] = (
    NotificationPolicy(EventKind.ORDER_CREATED, Audience.SHOP_OWNER, (_SMS, _PUSH)),
    NotificationPolicy(EventKind.ORDER_CONFIRMED, Audience.CUSTOMER, (_SMS, _PUSH, _EMAIL)),
    NotificationPolicy(EventKind.ORDER_READY, Audience.CUSTOMER, (_SMS, _PUSH, _EMAIL)),
    NotificationPolicy(EventKind.ORDER_CANCELLED, Audience.CUSTOMER, (_SMS, _PUSH)),
    NotificationPolicy(EventKind.PAYMENT_SUCCESS, Audience.CUSTOMER, (_SMS, _EMAIL)),
    NotificationPolicy(EventKind.PAYMENT_FAILED, Audience.CUSTOMER, (_SMS, _PUSH)),
    NotificationPolicy(EventKind.SHOP_REGISTERED, Audience.SHOP_OWNER, (_EMAIL,)),
)


def policy_table(
    policies: tuple[NotificationPolicy, ...] = DEFAULT_POLICIES,
) -> dict[EventKind, NotificationPolicy]:
    """Index *policies* by kind; kinds absent from the table notify nobody."""
    return {policy.kind: policy for policy in policies}
