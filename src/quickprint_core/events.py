"""Event kinds and their payload schemas.

Payload field names are snake_case in Python; the API layer sends camelCase,
which is accepted through aliases.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EventKind(str, Enum):
    """Enumerated domain event kinds. Values are the wire/routing keys."""

    ORDER_CREATED = "order.created"
    ORDER_CONFIRMED = "order.confirmed"
    ORDER_READY = "order.ready"
    ORDER_COMPLETED = "order.completed"
    ORDER_CANCELLED = "order.cancelled"
    PAYMENT_SUCCESS = "payment.success"
    PAYMENT_FAILED = "payment.failed"
    SHOP_REGISTERED = "shop.registered"


class EventPayload(BaseModel):
    """Base class for kind-specific payloads."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def notification_context(self) -> dict[str, Any]:
        """Template variables for notification rendering."""
        return self.model_dump()


class OrderCreatedPayload(EventPayload):
    order_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    shop_id: str = Field(min_length=1)
    order_number: str = Field(min_length=1)


class OrderConfirmedPayload(EventPayload):
    order_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    order_number: str = Field(min_length=1)
    shop_name: str | None = None
    total_cost: Decimal | None = Field(default=None, ge=0)


class OrderReadyPayload(EventPayload):
    order_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    order_number: str = Field(min_length=1)
    shop_name: str | None = None


class OrderCompletedPayload(EventPayload):
    order_id: str = Field(min_length=1)
    total_cost: Decimal = Field(ge=0)
    user_id: str | None = None
    order_number: str | None = None


class OrderCancelledPayload(EventPayload):
    order_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    order_number: str = Field(min_length=1)
    reason: str | None = None


class PaymentSuccessPayload(EventPayload):
    """Amounts are in minor units (paise)."""

    order_id: str = Field(min_length=1)
    payment_id: str = Field(min_length=1)
    amount: int = Field(ge=0)
    user_id: str = Field(min_length=1)
    order_number: str | None = None

    def notification_context(self) -> dict[str, Any]:
        context = super().notification_context()
        context["amount_display"] = f"{Decimal(self.amount) / 100:.2f}"
        context["order_number"] = self.order_number or self.order_id
        return context


class PaymentFailedPayload(EventPayload):
    order_id: str = Field(min_length=1)
    reason: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    order_number: str | None = None

    def notification_context(self) -> dict[str, Any]:
        context = super().notification_context()
        context["order_number"] = self.order_number or self.order_id
        return context


class ShopRegisteredPayload(EventPayload):
    shop_id: str = Field(min_length=1)
    owner_id: str = Field(min_length=1)
    business_name: str = Field(min_length=1)


PAYLOAD_SCHEMAS: dict[EventKind, type[EventPayload]] = {
    EventKind.ORDER_CREATED: OrderCreatedPayload,
    EventKind.ORDER_CONFIRMED: OrderConfirmedPayload,
    EventKind.ORDER_READY: OrderReadyPayload,
    EventKind.ORDER_COMPLETED: OrderCompletedPayload,
    EventKind.ORDER_CANCELLED: OrderCancelledPayload,
    EventKind.PAYMENT_SUCCESS: PaymentSuccessPayload,
    EventKind.PAYMENT_FAILED: PaymentFailedPayload,
    EventKind.SHOP_REGISTERED: ShopRegisteredPayload,
}
