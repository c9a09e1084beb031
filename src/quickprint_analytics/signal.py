"""UsageSignal — the minimal analytics record derived from one event."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

_IDENTIFIER_FIELDS = (
    ("order_id", ("orderId", "order_id")),
    ("user_id", ("userId", "user_id")),
    ("shop_id", ("shopId", "shop_id")),
    ("payment_id", ("paymentId", "payment_id")),
)


@dataclass(frozen=True)
class UsageSignal:
    """Kind, timing, correlation and identifiers only; never contact details."""

    kind: str
    produced_at: datetime
    correlation_id: str
    identifiers: dict[str, str] = field(default_factory=dict)
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def extract_identifiers(payload: dict[str, Any]) -> dict[str, str]:
        """Pick order/user/shop/payment ids from a camelCase or snake_case payload."""
        identifiers: dict[str, str] = {}
        for name, aliases in _IDENTIFIER_FIELDS:
            for alias in aliases:
                value = payload.get(alias)
                if value:
                    identifiers[name] = str(value)
                    break
        return identifiers

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "produced_at": self.produced_at.isoformat(),
            "recorded_at": self.recorded_at.isoformat(),
            "correlation_id": self.correlation_id,
            **self.identifiers,
        }
