"""Typed per-aggregate facades over ``EventBus``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from quickprint_core.events import EventKind

if TYPE_CHECKING:
    from decimal import Decimal

    from .bus import EventBus
    from .envelope import EventEnvelope


def _compact(**fields: Any) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if v is not None}


class OrderEventPublisher:
    """Order lifecycle events."""

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus

    async def order_created(
        self, *, order_id: str, user_id: str, shop_id: str, order_number: str
    ) -> EventEnvelope:
        return await self._bus.publish(
            EventKind.ORDER_CREATED,
            {
                "order_id": order_id,
                "user_id": user_id,
                "shop_id": shop_id,
                "order_number": order_number,
            },
        )

    async def order_confirmed(
        self,
        *,
        order_id: str,
        user_id: str,
        order_number: str,
        shop_name: str | None = None,
        total_cost: Decimal | None = None,
    ) -> EventEnvelope:
        return await self._bus.publish(
            EventKind.ORDER_CONFIRMED,
            _compact(
                order_id=order_id,
                user_id=user_id,
                order_number=order_number,
                shop_name=shop_name,
                total_cost=str(total_cost) if total_cost is not None else None,
            ),
        )

    async def order_ready(
        self,
        *,
        order_id: str,
        user_id: str,
        order_number: str,
        shop_name: str | None = None,
    ) -> EventEnvelope:
        return await self._bus.publish(
            EventKind.ORDER_READY,
            _compact(
                order_id=order_id,
                user_id=user_id,
                order_number=order_number,
                shop_name=shop_name,
            ),
        )

    async def order_completed(
        self,
        *,
        order_id: str,
        total_cost: Decimal,
        user_id: str | None = None,
        order_number: str | None = None,
    ) -> EventEnvelope:
        return await self._bus.publish(
            EventKind.ORDER_COMPLETED,
            _compact(
                order_id=order_id,
                total_cost=str(total_cost),
                user_id=user_id,
                order_number=order_number,
            ),
        )

    async def order_cancelled(
        self,
        *,
        order_id: str,
        user_id: str,
        order_number: str,
        reason: str | None = None,
    ) -> EventEnvelope:
        return await self._bus.publish(
            EventKind.ORDER_CANCELLED,
            _compact(
                order_id=order_id,
                user_id=user_id,
                order_number=order_number,
                reason=reason,
            ),
        )


class PaymentEventPublisher:
    """Payment events. Amounts are in paise."""

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus

    async def payment_success(
        self,
        *,
        order_id: str,
        payment_id: str,
        amount: int,
        user_id: str,
        order_number: str | None = None,
    ) -> EventEnvelope:
        return await self._bus.publish(
            EventKind.PAYMENT_SUCCESS,
            _compact(
                order_id=order_id,
                payment_id=payment_id,
                amount=amount,
                user_id=user_id,
                order_number=order_number,
            ),
        )

    async def payment_failed(
        self,
        *,
        order_id: str,
        reason: str,
        user_id: str,
        order_number: str | None = None,
    ) -> EventEnvelope:
        return await self._bus.publish(
            EventKind.PAYMENT_FAILED,
            _compact(
                order_id=order_id,
                reason=reason,
                user_id=user_id,
                order_number=order_number,
            ),
        )


class ShopEventPublisher:
    def __init__(self, bus: EventBus) -> None:
        self._bus = bus

    async def shop_registered(
        self, *, shop_id: str, owner_id: str, business_name: str
    ) -> EventEnvelope:
        return await self._bus.publish(
            EventKind.SHOP_REGISTERED,
            {"shop_id": shop_id, "owner_id": owner_id, "business_name": business_name},
        )
