"""Tests for EventEnvelope and EnvelopeSerializer."""

from __future__ import annotations

import json

import pytest

from quickprint_core.correlation import correlation_scope
from quickprint_core.events import EventKind
from quickprint_core.exceptions import InvalidPayloadError
from quickprint_messaging.envelope import EventEnvelope
from quickprint_messaging.exceptions import MessagingSerializationError
from quickprint_messaging.serialization import EnvelopeSerializer

READY = {"orderId": "o-1", "userId": "u-1", "orderNumber": "QP-1001"}


def test_create_validates_and_defaults() -> None:
    envelope = EventEnvelope.create("order.ready", READY)
    assert envelope.kind is EventKind.ORDER_READY
    assert envelope.kind_name == "order.ready"
    assert envelope.attempt == 1
    assert envelope.message_id
    assert envelope.correlation_id
    assert envelope.produced_at.tzinfo is not None
    assert envelope.payload == READY


def test_create_rejects_invalid_payload() -> None:
    with pytest.raises(InvalidPayloadError):
        EventEnvelope.create(EventKind.ORDER_READY, {"orderId": "o-1"})


def test_create_rejects_unregistered_kind() -> None:
    with pytest.raises(InvalidPayloadError):
        EventEnvelope.create("order.refunded", {"orderId": "o-1"})


def test_create_uses_ambient_correlation_id() -> None:
    with correlation_scope("req-42"):
        envelope = EventEnvelope.create("order.ready", READY)
    assert envelope.correlation_id == "req-42"


def test_explicit_correlation_id_wins() -> None:
    with correlation_scope("req-42"):
        envelope = EventEnvelope.create("order.ready", READY, correlation_id="explicit")
    assert envelope.correlation_id == "explicit"


def test_envelope_is_immutable() -> None:
    envelope = EventEnvelope.create("order.ready", READY)
    with pytest.raises(Exception):  # noqa: B017
        envelope.attempt = 2  # type: ignore[misc]


def test_next_attempt_keeps_identity() -> None:
    envelope = EventEnvelope.create("order.ready", READY)
    second = envelope.next_attempt()
    assert second.attempt == 2
    assert second.message_id == envelope.message_id
    assert second.correlation_id == envelope.correlation_id
    assert envelope.attempt == 1


def test_serializer_roundtrip_preserves_fields() -> None:
    serializer = EnvelopeSerializer()
    envelope = EventEnvelope.create("order.ready", READY, headers={"source": "api"})
    decoded = serializer.deserialize(serializer.serialize(envelope))
    assert decoded == envelope
    assert decoded.kind is EventKind.ORDER_READY


def test_serializer_wire_format_uses_kind_value() -> None:
    envelope = EventEnvelope.create("payment.success", {
        "orderId": "o-1", "paymentId": "p-1", "amount": 500, "userId": "u-1",
    })
    data = json.loads(EnvelopeSerializer().serialize(envelope))
    assert data["kind"] == "payment.success"
    assert data["attempt"] == 1
    assert isinstance(data["produced_at"], str)


def test_unknown_kind_decodes_as_string() -> None:
    raw = json.dumps({"kind": "order.refunded", "payload": {"orderId": "o-1"}}).encode()
    envelope = EnvelopeSerializer().deserialize(raw)
    assert envelope.kind == "order.refunded"
    assert not envelope.is_known_kind
    assert envelope.kind_name == "order.refunded"


@pytest.mark.parametrize(
    "raw",
    [b"not json", b"[1, 2]", b"\xff\xfe", b'{"payload": {}}', b'{"kind": "order.ready", "attempt": 0}'],
)
def test_deserialize_rejects_malformed(raw: bytes) -> None:
    with pytest.raises(MessagingSerializationError):
        EnvelopeSerializer().deserialize(raw)
