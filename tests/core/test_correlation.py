"""Tests for correlation id context helpers."""

from __future__ import annotations

import asyncio

import pytest

from quickprint_core.correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


def test_scope_restores_previous_value() -> None:
    set_correlation_id("outer")
    with correlation_scope("inner"):
        assert get_correlation_id() == "inner"
    assert get_correlation_id() == "outer"
    set_correlation_id(None)


def test_generated_ids_are_unique() -> None:
    assert generate_correlation_id() != generate_correlation_id()


@pytest.mark.asyncio
async def test_tasks_see_their_own_correlation_id() -> None:
    async def worker(cid: str) -> str | None:
        with correlation_scope(cid):
            await asyncio.sleep(0)
            return get_correlation_id()

    results = await asyncio.gather(worker("a"), worker("b"))
    assert results == ["a", "b"]
