"""Tests for AnalyticsHandler and its sinks."""

from __future__ import annotations

import json
import logging

import pytest

from quickprint_analytics.handler import AnalyticsHandler
from quickprint_analytics.signal import UsageSignal
from quickprint_analytics.sinks import InMemoryAnalyticsSink, LoggingAnalyticsSink
from quickprint_messaging.envelope import EventEnvelope


class BrokenSink:
    async def write(self, signal: UsageSignal) -> None:
        raise RuntimeError("warehouse offline")


def payment_success() -> EventEnvelope:
    return EventEnvelope.create(
        "payment.success",
        {"orderId": "o-1", "paymentId": "pay-1", "amount": 12550, "userId": "u-1"},
        correlation_id="c-9",
    )


@pytest.mark.asyncio
async def test_record_extracts_identifiers_only() -> None:
    sink = InMemoryAnalyticsSink()
    envelope = payment_success()

    signal = await AnalyticsHandler(sink).record(envelope)

    assert signal is not None
    assert signal.kind == "payment.success"
    assert signal.correlation_id == "c-9"
    assert signal.produced_at == envelope.produced_at
    assert signal.identifiers == {"order_id": "o-1", "user_id": "u-1", "payment_id": "pay-1"}
    assert sink.signals == [signal]


@pytest.mark.asyncio
async def test_unknown_kind_is_recorded_by_name() -> None:
    sink = InMemoryAnalyticsSink()
    envelope = EventEnvelope(kind="shop.closed", payload={"shop_id": "s-1"})

    await AnalyticsHandler(sink).handle(envelope)

    assert sink.counts() == {"shop.closed": 1}
    assert sink.signals[0].identifiers == {"shop_id": "s-1"}


@pytest.mark.asyncio
async def test_sink_failure_is_logged_and_swallowed(caplog: pytest.LogCaptureFixture) -> None:
    handler = AnalyticsHandler(BrokenSink())

    assert await handler.record(payment_success()) is None
    await handler.handle(payment_success())

    assert "Analytics recording failed for payment.success" in caplog.text


@pytest.mark.asyncio
async def test_in_memory_sink_counts_per_kind() -> None:
    sink = InMemoryAnalyticsSink()
    handler = AnalyticsHandler(sink)
    await handler.handle(payment_success())
    await handler.handle(payment_success())
    await handler.handle(
        EventEnvelope.create("order.ready", {"orderId": "o-1", "userId": "u-1", "orderNumber": "Q"})
    )

    assert sink.counts() == {"payment.success": 2, "order.ready": 1}
    sink.clear()
    assert sink.counts() == {}


@pytest.mark.asyncio
async def test_logging_sink_emits_json(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="quickprint.analytics")
    handler = AnalyticsHandler(LoggingAnalyticsSink())

    await handler.handle(payment_success())

    entries = [r for r in caplog.records if r.name == "quickprint.analytics"]
    assert len(entries) == 1
    body = json.loads(entries[0].getMessage())
    assert body["kind"] == "payment.success"
    assert body["correlation_id"] == "c-9"
    assert body["order_id"] == "o-1"
    assert "amount" not in body
