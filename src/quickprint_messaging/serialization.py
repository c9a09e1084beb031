"""EnvelopeSerializer — JSON roundtrip for the broker wire format."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from .envelope import EventEnvelope
from .exceptions import MessagingSerializationError

CONTENT_TYPE = "application/json"


def _json_serializer(obj: Any) -> Any:
    """Serialize datetime, Decimal and other non-JSON types."""
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    if hasattr(obj, "as_tuple"):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class EnvelopeSerializer:
    """Serialize/deserialize EventEnvelope to/from UTF-8 JSON bytes."""

    content_type = CONTENT_TYPE

    def serialize(self, envelope: EventEnvelope) -> bytes:
        """Encode envelope to JSON bytes."""
        try:
            data = envelope.model_dump(mode="python")
            data["kind"] = envelope.kind_name
            return json.dumps(data, default=_json_serializer).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise MessagingSerializationError(str(e)) from e

    def deserialize(self, raw: bytes) -> EventEnvelope:
        """Decode JSON bytes to EventEnvelope."""
        try:
            data = json.loads(raw.decode("utf-8"))
            if not isinstance(data, dict):
                raise ValueError("envelope must be a JSON object")
            return EventEnvelope.model_validate(data)
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError, ValueError) as e:
            raise MessagingSerializationError(str(e)) from e
